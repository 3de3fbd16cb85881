"""
Domain layer - the roster engine, pure logic without I/O.
"""

from .exceptions import (
    DayOutOfBounds,
    HourOutOfBounds,
    InvalidEventWindow,
    InvalidTimeFormat,
    NormalizationError,
    RosterError,
    RosterStateError,
)
from .models import (
    EventWindow,
    ExchangeResult,
    HourColor,
    HourSlot,
    MemberRegistry,
    Rank,
    ShiftExchange,
    ShiftPhase,
)
from .roster import Roster

__all__ = [
    "DayOutOfBounds",
    "EventWindow",
    "ExchangeResult",
    "HourColor",
    "HourOutOfBounds",
    "HourSlot",
    "InvalidEventWindow",
    "InvalidTimeFormat",
    "MemberRegistry",
    "NormalizationError",
    "Rank",
    "Roster",
    "RosterError",
    "RosterStateError",
    "ShiftExchange",
    "ShiftPhase",
]
