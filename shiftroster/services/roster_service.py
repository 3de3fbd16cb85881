"""
Application services for managing named rosters.

The service loads a roster from a storage adapter, applies one command to
the engine and stores the result again. Keeping storage behind a small
protocol lets tests swap in an in-memory store.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Protocol, Sequence, Tuple

from ..domain.exceptions import DayOutOfBounds
from ..domain.models import HourColor, Rank, ShiftExchange
from ..domain.reports import hours_to_ranges
from ..domain.roster import Roster
from ..domain.time_range import round_to_hour
from .errors import InvalidSegmentError, RosterExistsError, RosterNotFoundError

logger = logging.getLogger(__name__)

Segment = Tuple[int, int]


class RosterStoreProtocol(Protocol):
    """Protocol describing the storage behaviour needed by the service."""

    def load(self, name: str) -> Optional[Dict]:
        """Return the stored roster data, or None when absent."""

    def save(self, name: str, data: Dict) -> None:
        """Store roster data under ``name``."""

    def delete(self, name: str) -> bool:
        """Remove a roster; return False when nothing was stored."""

    def names(self) -> List[str]:
        """Names of all stored rosters."""


@dataclass
class SegmentReport:
    """Outcome of a multi-segment command, as hour lists."""
    succeeded: List[int] = field(default_factory=list)
    failed: List[int] = field(default_factory=list)

    @property
    def succeeded_ranges(self) -> List[str]:
        return hours_to_ranges(self.succeeded)

    @property
    def failed_ranges(self) -> List[str]:
        return hours_to_ranges(self.failed)


class RosterService:
    """
    Runs roster commands as load -> mutate -> save.

    Days are 1-based at this boundary and converted before reaching the
    engine. The service holds no lock; callers must not run two commands
    against the same roster at once.
    """

    def __init__(self, store: RosterStoreProtocol, timezone: str = "Asia/Tokyo") -> None:
        self._store = store
        self._timezone = timezone

    # ------------------------------------------------------------------
    # Roster lifecycle
    # ------------------------------------------------------------------

    def create_roster(self, name: str, start_text: str, end_text: str) -> Roster:
        """Create an empty roster; both ends are rounded to the nearest hour."""
        logger.info("Creating roster %s: %s -> %s", name, start_text, end_text)
        if self._store.load(name) is not None:
            raise RosterExistsError(f"Roster '{name}' already exists")

        roster = Roster.from_compact(
            round_to_hour(start_text),
            round_to_hour(end_text),
            self._timezone,
        )
        self._save(name, roster)
        return roster

    def delete_roster(self, name: str) -> None:
        logger.info("Deleting roster %s", name)
        if not self._store.delete(name):
            raise RosterNotFoundError(f"No roster named '{name}'")

    def list_rosters(self) -> List[str]:
        return sorted(self._store.names())

    def get_roster(self, name: str) -> Roster:
        data = self._store.load(name)
        if data is None:
            raise RosterNotFoundError(f"No roster named '{name}'")
        return Roster.from_dict(data)

    def set_ending(self, name: str, end_text: str) -> Roster:
        logger.info("Moving end of roster %s to %s", name, end_text)
        roster = self.get_roster(name)
        roster.change_event_end(round_to_hour(end_text))
        self._save(name, roster)
        return roster

    # ------------------------------------------------------------------
    # Shift commands
    # ------------------------------------------------------------------

    def add_shifts(
        self,
        *,
        name: str,
        person: str,
        day: int,
        segments: Sequence[Segment],
    ) -> SegmentReport:
        """Add ``person`` for each segment; every segment succeeds or fails whole."""
        logger.info("Adding %s to roster %s day %d: %s", person, name, day, segments)
        roster = self.get_roster(name)
        index = self._day_index(roster, day)
        report = SegmentReport()

        for start, end in self._usable_segments(segments):
            hours = self._requested_hours(start, end)
            if roster.add_occupant(index, start, end, person):
                report.succeeded.extend(hours)
            else:
                report.failed.extend(hours)

        self._save(name, roster)
        return report

    def remove_shifts(
        self,
        *,
        name: str,
        person: str,
        day: int,
        segments: Sequence[Segment],
    ) -> SegmentReport:
        logger.info("Removing %s from roster %s day %d: %s", person, name, day, segments)
        roster = self.get_roster(name)
        index = self._day_index(roster, day)
        report = SegmentReport()

        for start, end in self._usable_segments(segments):
            removed = roster.remove_occupant(index, start, end, person)
            report.succeeded.extend(removed)
            report.failed.extend(
                hour for hour in self._requested_hours(start, end) if hour not in removed
            )

        self._save(name, roster)
        return report

    def exchange_shifts(
        self,
        *,
        name: str,
        old_person: str,
        new_person: str,
        day: int,
        segments: Sequence[Segment],
    ) -> SegmentReport:
        """Hand hours from ``old_person`` to ``new_person`` segment by segment."""
        logger.info(
            "Exchanging %s -> %s in roster %s day %d: %s",
            old_person, new_person, name, day, segments,
        )
        roster = self.get_roster(name)
        index = self._day_index(roster, day)
        report = SegmentReport()

        for start, end in self._usable_segments(segments):
            result = roster.exchange_occupant(index, start, end, old_person, new_person)
            report.succeeded.extend(result.succeeded)
            report.failed.extend(
                hour for hour in self._requested_hours(start, end) if hour not in result.succeeded
            )

        self._save(name, roster)
        return report

    def set_color(self, *, name: str, day: int, start: int, end: int, color: HourColor) -> List[int]:
        logger.info("Coloring roster %s day %d %d-%d %s", name, day, start, end, color)
        roster = self.get_roster(name)
        colored = roster.recolor(self._day_index(roster, day), start, end, color)
        self._save(name, roster)
        return colored

    # ------------------------------------------------------------------
    # Members
    # ------------------------------------------------------------------

    def set_runner(self, name: str, person: str, rank: Rank) -> None:
        logger.info("Setting rank of %s in roster %s to %s", person, name, rank)
        roster = self.get_roster(name)
        roster.set_ranking(person, rank)
        self._save(name, roster)

    def remove_runner(self, name: str, person: str) -> None:
        logger.info("Removing rank of %s in roster %s", person, name)
        roster = self.get_roster(name)
        roster.set_ranking(person, None)
        self._save(name, roster)

    def rename_person(self, name: str, old_name: str, new_name: str) -> int:
        logger.info("Renaming %s to %s in roster %s", old_name, new_name, name)
        roster = self.get_roster(name)
        touched = roster.rename_person(old_name, new_name)
        self._save(name, roster)
        return touched

    # ------------------------------------------------------------------
    # Reports
    # ------------------------------------------------------------------

    def missing_ranges(self, name: str, day: int) -> List[str]:
        roster = self.get_roster(name)
        return roster.missing_ranges(self._day_index(roster, day))

    def handover(self, name: str, day: int) -> List[ShiftExchange]:
        roster = self.get_roster(name)
        return roster.handover_report(self._day_index(roster, day))

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _save(self, name: str, roster: Roster) -> None:
        self._store.save(name, roster.to_dict())

    @staticmethod
    def _day_index(roster: Roster, day: int) -> int:
        """Convert a 1-based day to the engine's 0-based index."""
        if not 1 <= day <= roster.days:
            raise DayOutOfBounds(f"Day {day} out of range (1-{roster.days})")
        return day - 1

    @staticmethod
    def _usable_segments(segments: Sequence[Segment]) -> List[Segment]:
        usable = [(start, end) for start, end in segments if start < end]
        if not usable:
            raise InvalidSegmentError("No valid hour segment given (start must be before end)")
        return usable

    @staticmethod
    def _requested_hours(start: int, end: int) -> List[int]:
        """Hours a segment asks for, with the 24 -> 0 and 0 -> 24 sentinels applied."""
        if start == 24:
            start = 0
        if end == 0:
            end = 24
        return list(range(start, end))
