"""
Service layer helpers that orchestrate storage adapters and the roster engine.
"""

from .errors import InvalidSegmentError, RosterExistsError, RosterNotFoundError, RosterStoreError
from .roster_service import RosterService, RosterStoreProtocol, SegmentReport

__all__ = [
    "InvalidSegmentError",
    "RosterExistsError",
    "RosterNotFoundError",
    "RosterService",
    "RosterStoreError",
    "RosterStoreProtocol",
    "SegmentReport",
]
