"""
File-backed roster storage: one JSON document mapping roster name to state.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, List, Optional

from ..services.errors import RosterStoreError

logger = logging.getLogger(__name__)


class JsonRosterStore:
    """
    Stores every roster in a single JSON file.

    The whole file is read on each load and rewritten on each save; rosters
    are small and commands are infrequent.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def _read_all(self) -> Dict[str, Dict]:
        if not self.path.exists():
            return {}

        try:
            with open(self.path, "r", encoding="utf-8") as file_handle:
                data = json.load(file_handle)
        except (OSError, json.JSONDecodeError) as exc:
            raise RosterStoreError(f"Could not read roster store {self.path}: {exc}") from exc

        if not isinstance(data, dict):
            raise RosterStoreError(f"Roster store {self.path} must contain a JSON object")
        return data

    def _write_all(self, data: Dict[str, Dict]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
            with open(tmp_path, "w", encoding="utf-8") as file_handle:
                json.dump(data, file_handle, ensure_ascii=False, indent=2)
            tmp_path.replace(self.path)
        except OSError as exc:
            raise RosterStoreError(f"Could not write roster store {self.path}: {exc}") from exc

    def load(self, name: str) -> Optional[Dict]:
        return self._read_all().get(name)

    def save(self, name: str, data: Dict) -> None:
        rosters = self._read_all()
        rosters[name] = data
        self._write_all(rosters)
        logger.debug("Saved roster %s to %s", name, self.path)

    def delete(self, name: str) -> bool:
        rosters = self._read_all()
        if rosters.pop(name, None) is None:
            return False
        self._write_all(rosters)
        return True

    def names(self) -> List[str]:
        return list(self._read_all())
