"""
Domain models for the roster grid, member ranks and derived views.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from pendulum import DateTime

from .exceptions import InvalidEventWindow, RosterStateError

HOURS_PER_DAY = 24
SLOT_CAPACITY = 5


class HourColor(str, Enum):
    """Status of a single hour in the grid."""
    NONE = "none"
    BLACK = "black"
    GRAY = "gray"
    INVALID = "invalid"

    @property
    def is_hidden(self) -> bool:
        """Black and gray hours are administratively blocked out."""
        return self in (HourColor.BLACK, HourColor.GRAY)


class Rank(str, Enum):
    """
    Closed set of member ranks, used for display grouping only.
    """
    MAIN = "main"
    TOP10 = "10"
    TOP50 = "50"
    TOP100 = "100"
    TOP1000 = "1000"

    @property
    def symbol(self) -> str:
        """Marker printed next to a member's name in the grid."""
        if self is Rank.MAIN:
            return "★"
        if self in (Rank.TOP10, Rank.TOP50, Rank.TOP100, Rank.TOP1000):
            return " "
        raise ValueError(f"Unhandled rank: {self!r}")

    @property
    def color(self) -> str:
        """Background color of the marker cell."""
        if self is Rank.MAIN:
            return "#B6FEFD"
        if self is Rank.TOP10:
            return "#FEED55"
        if self is Rank.TOP50:
            return "#FAC467"
        if self is Rank.TOP100:
            return "#FA6767"
        if self is Rank.TOP1000:
            return "#79FA67"
        raise ValueError(f"Unhandled rank: {self!r}")

    @property
    def label(self) -> str:
        """Column heading used when grouping members by rank."""
        if self is Rank.MAIN:
            return "main runner"
        return f"{self.value} runner"


class ShiftPhase(str, Enum):
    """Where an occupant cell sits within that person's contiguous shift."""
    START = "start"
    RUNNING = "running"
    END = "end"
    SINGLE = "single"

    @property
    def color(self) -> str:
        if self is ShiftPhase.START:
            return "#BAE8FC"
        if self is ShiftPhase.RUNNING:
            return "#FFFAEE"
        if self is ShiftPhase.END:
            return "#FFD3D3"
        return "#AAFFBF"


@dataclass
class HourSlot:
    """
    One hour of one day: a status color plus exactly five occupant slots.

    Empty slots are ``None``; the list never shrinks or grows.
    """
    color: HourColor = HourColor.NONE
    occupants: List[Optional[str]] = field(
        default_factory=lambda: [None] * SLOT_CAPACITY
    )

    def names(self) -> List[str]:
        """Occupant names in slot order, without the empty slots."""
        return [person for person in self.occupants if person is not None]

    def free_slot(self) -> Optional[int]:
        """Index of the first empty slot, or None when the hour is full."""
        for idx, person in enumerate(self.occupants):
            if person is None:
                return idx
        return None

    def index_of(self, person: str) -> Optional[int]:
        for idx, occupant in enumerate(self.occupants):
            if occupant == person:
                return idx
        return None

    def to_dict(self) -> dict:
        return {"color": self.color.value, "occupants": list(self.occupants)}

    @classmethod
    def from_dict(cls, data: dict) -> "HourSlot":
        try:
            color = HourColor(data["color"])
            occupants = list(data["occupants"])
        except (KeyError, TypeError, ValueError) as exc:
            raise RosterStateError(f"Malformed hour slot: {data!r}") from exc

        if len(occupants) != SLOT_CAPACITY:
            raise RosterStateError(
                f"Hour slot must hold {SLOT_CAPACITY} occupant entries, got {len(occupants)}"
            )
        return cls(color=color, occupants=occupants)


def new_day() -> List[HourSlot]:
    """A fresh, fully schedulable day."""
    return [HourSlot() for _ in range(HOURS_PER_DAY)]


@dataclass(frozen=True)
class EventWindow:
    """
    Start and end of an event, anchored to an IANA timezone.

    Invariant: start must be before end.
    """
    start: DateTime
    end: DateTime
    timezone: str = "Asia/Tokyo"

    def __post_init__(self):
        if self.start >= self.end:
            raise InvalidEventWindow(
                f"Event start {self.start} must be before event end {self.end}"
            )

    @property
    def start_hour(self) -> int:
        return self.start.in_timezone(self.timezone).hour

    @property
    def end_hour(self) -> int:
        return self.end.in_timezone(self.timezone).hour


@dataclass
class ShiftExchange:
    """People coming on and going off duty at one hour."""
    on_duty: List[str] = field(default_factory=list)
    off_duty: List[str] = field(default_factory=list)


@dataclass
class ExchangeResult:
    """Hours where a name swap took effect, and hours where it could not."""
    succeeded: List[int] = field(default_factory=list)
    failed: List[int] = field(default_factory=list)


class MemberRegistry:
    """
    Mapping of person name to rank.

    Only rendering reads it; no scheduling rule depends on a member's rank.
    """

    def __init__(self, ranks: Optional[Dict[str, Rank]] = None):
        self._ranks: Dict[str, Rank] = dict(ranks or {})

    def set_rank(self, name: str, rank: Optional[Rank]) -> None:
        """Upsert a member's rank, or drop the entry when rank is None."""
        if not name:
            return
        if rank is None:
            self._ranks.pop(name, None)
        else:
            self._ranks[name] = Rank(rank)

    def rank_of(self, name: str) -> Optional[Rank]:
        return self._ranks.get(name)

    def symbol_for(self, name: Optional[str]) -> str:
        if not name:
            return ""
        rank = self._ranks.get(name)
        return rank.symbol if rank else ""

    def names(self, rank: Optional[Rank] = None) -> List[str]:
        """Registered names, optionally restricted to one rank."""
        return sorted(
            name for name, member_rank in self._ranks.items()
            if rank is None or member_rank is rank
        )

    def __contains__(self, name: object) -> bool:
        return name in self._ranks

    def __len__(self) -> int:
        return len(self._ranks)

    def to_dict(self) -> Dict[str, str]:
        return {name: rank.value for name, rank in self._ranks.items()}

    @classmethod
    def from_dict(cls, data: Dict[str, str]) -> "MemberRegistry":
        try:
            return cls({name: Rank(rank) for name, rank in data.items()})
        except (AttributeError, ValueError) as exc:
            raise RosterStateError(f"Malformed member registry: {data!r}") from exc
