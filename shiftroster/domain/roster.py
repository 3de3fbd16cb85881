"""
The roster engine: a days x 24 hours x 5 slots occupancy grid for one event.

A ``Roster`` is a plain in-memory value. Callers load it, mutate it through
the methods below and store ``to_dict()`` again; nothing in here performs
I/O or locking.
"""

import logging
from typing import Dict, List, Optional, Union

import pendulum
from pendulum import DateTime

from .exceptions import DayOutOfBounds, HourOutOfBounds, RosterStateError
from .models import (
    HOURS_PER_DAY,
    EventWindow,
    ExchangeResult,
    HourColor,
    HourSlot,
    MemberRegistry,
    Rank,
    ShiftExchange,
    new_day,
)
from .normalizer import normalize_all, normalize_day
from .reports import collapse_runs, handover_report, missing_counts
from .time_range import Instant, compute_day_count, mark_invalid_hours, to_instant

logger = logging.getLogger(__name__)


class Roster:
    """
    Hour-by-hour duty roster of one event.

    Days are 0-based here; converting from the 1-based days people type is
    the caller's job.
    """

    def __init__(
        self,
        window: EventWindow,
        grid: Optional[List[List[HourSlot]]] = None,
        members: Optional[MemberRegistry] = None,
    ):
        self.window = window
        self.members = members or MemberRegistry()

        if grid is None:
            grid = [new_day() for _ in range(self._expected_days())]
            mark_invalid_hours(grid, window.start_hour, window.end_hour)
        self._grid = grid

    @classmethod
    def create(cls, start: Instant, end: Instant, timezone: str = "Asia/Tokyo") -> "Roster":
        """Build an empty roster for the event between ``start`` and ``end``."""
        window = EventWindow(
            start=to_instant(start, timezone),
            end=to_instant(end, timezone),
            timezone=timezone,
        )
        return cls(window)

    @classmethod
    def from_compact(cls, start_text: str, end_text: str, timezone: str = "Asia/Tokyo") -> "Roster":
        """Build a roster from ``yyyyMMddHH`` strings read as local time."""
        return cls.create(start_text, end_text, timezone)

    # ------------------------------------------------------------------
    # Structure
    # ------------------------------------------------------------------

    @property
    def days(self) -> int:
        return len(self._grid)

    @property
    def timezone(self) -> str:
        return self.window.timezone

    def _expected_days(self) -> int:
        return compute_day_count(self.window.start, self.window.end, self.window.timezone)

    def _day(self, day: int) -> List[HourSlot]:
        if not 0 <= day < self.days:
            raise DayOutOfBounds(f"Day {day} out of range (roster has {self.days} day(s))")
        return self._grid[day]

    def _opening_hour(self, day: int) -> int:
        return self.window.start_hour if day == 0 else 0

    def _closing_hour(self, day: int) -> int:
        return self.window.end_hour if day == self.days - 1 else HOURS_PER_DAY

    def hour_slot(self, day: int, hour: int) -> HourSlot:
        hours = self._day(day)
        if not 0 <= hour < HOURS_PER_DAY:
            raise HourOutOfBounds(f"Hour {hour} out of range (0-23)")
        return hours[hour]

    def resolve_hour_range(self, day: int, start_hour: int, end_hour: int) -> List[int]:
        """
        Validate an hour range of one day, all or nothing.

        ``start_hour == 24`` means 0 and ``end_hour == 0`` means 24. The range
        is rejected outright (empty list) when it reaches outside the event
        window of that day or when any hour in it is not schedulable.
        """
        hours = self._day(day)

        if start_hour == HOURS_PER_DAY:
            start_hour = 0
        if end_hour == 0:
            end_hour = HOURS_PER_DAY

        if start_hour < self._opening_hour(day) or end_hour > self._closing_hour(day):
            return []

        requested = list(range(start_hour, end_hour))
        if any(hours[hour].color is not HourColor.NONE for hour in requested):
            return []

        return requested

    # ------------------------------------------------------------------
    # Mutators
    # ------------------------------------------------------------------

    def add_occupant(self, day: int, start_hour: int, end_hour: int, person: str) -> bool:
        """
        Put ``person`` on duty for every hour of the range, or for none.

        Fails without touching the grid when the range is rejected, when any
        hour is already full, or when the person already works any of
        those hours.
        """
        resolved = self.resolve_hour_range(day, start_hour, end_hour)
        if not resolved:
            logger.warning(
                "Rejected hours %s-%s on day %d for %s; insertion cancelled",
                start_hour, end_hour, day, person,
            )
            return False

        hours = self._grid[day]
        for hour in resolved:
            if hours[hour].free_slot() is None:
                logger.warning("Day %d hour %d is full; insertion of %s cancelled", day, hour, person)
                return False
            if hours[hour].index_of(person) is not None:
                logger.warning(
                    "%s already on duty at day %d hour %d; insertion cancelled", person, day, hour
                )
                return False

        for hour in resolved:
            hours[hour].occupants[hours[hour].free_slot()] = person

        normalize_day(hours)
        return True

    def remove_occupant(self, day: int, start_hour: int, end_hour: int, person: str) -> List[int]:
        """Take ``person`` off duty over the range; return the hours cleared."""
        hours = self._day(day)
        removed: List[int] = []

        for hour in self.resolve_hour_range(day, start_hour, end_hour):
            idx = hours[hour].index_of(person)
            if idx is not None:
                hours[hour].occupants[idx] = None
                removed.append(hour)

        return removed

    def exchange_occupant(
        self,
        day: int,
        start_hour: int,
        end_hour: int,
        old_person: str,
        new_person: str,
    ) -> ExchangeResult:
        """
        Hand ``old_person``'s hours in the range over to ``new_person``.

        The new name takes the old one's slot. An hour fails when the old
        person is not on duty there or the new person already is.
        """
        hours = self._day(day)
        result = ExchangeResult()

        for hour in self.resolve_hour_range(day, start_hour, end_hour):
            idx = hours[hour].index_of(old_person)
            if idx is None or hours[hour].index_of(new_person) is not None:
                result.failed.append(hour)
                continue
            hours[hour].occupants[idx] = new_person
            result.succeeded.append(hour)

        if result.succeeded:
            normalize_day(hours)
        return result

    def rename_person(self, old_name: str, new_name: str) -> int:
        """
        Rename a person everywhere in the roster, rank included.

        Where the new name already works the same hour, the old entry is
        dropped instead. Returns the number of hours touched.
        """
        if not old_name or not new_name or old_name == new_name:
            return 0

        touched = 0
        for hours in self._grid:
            for slot in hours:
                idx = slot.index_of(old_name)
                if idx is None:
                    continue
                slot.occupants[idx] = None if slot.index_of(new_name) is not None else new_name
                touched += 1

        rank = self.members.rank_of(old_name)
        if rank is not None:
            self.members.set_rank(old_name, None)
            if self.members.rank_of(new_name) is None:
                self.members.set_rank(new_name, rank)

        if touched:
            normalize_all(self._grid)
        return touched

    def recolor(self, day: int, start_hour: int, end_hour: int, color: Union[HourColor, str]) -> List[int]:
        """
        Set the status color of every hour in the range.

        The range must be fully schedulable, so an already colored hour
        cannot be recolored; the call is then a no-op returning [].
        """
        color = HourColor(color)
        hours = self._day(day)
        resolved = self.resolve_hour_range(day, start_hour, end_hour)

        for hour in resolved:
            hours[hour].color = color
        return resolved

    def set_ranking(self, name: str, rank: Optional[Union[Rank, str]]) -> None:
        self.members.set_rank(name, Rank(rank) if rank is not None else None)

    def change_event_end(self, new_end: Instant) -> None:
        """
        Move the event end, growing or shrinking the roster.

        Hours invalidated by the old end become schedulable again, then the
        new boundary is marked. Occupants of hours that fall outside the new
        window are cleared.
        """
        new_window = EventWindow(
            start=self.window.start,
            end=to_instant(new_end, self.timezone),
            timezone=self.timezone,
        )

        old_last = self._grid[-1]
        for hour in range(self.window.end_hour, HOURS_PER_DAY):
            if old_last[hour].color is HourColor.INVALID:
                old_last[hour].color = HourColor.NONE

        new_days = compute_day_count(new_window.start, new_window.end, self.timezone)
        if new_days < self.days:
            del self._grid[new_days:]
        while len(self._grid) < new_days:
            self._grid.append(new_day())

        self.window = new_window
        mark_invalid_hours(self._grid, new_window.start_hour, new_window.end_hour)

        for hours in self._grid:
            for slot in hours:
                if slot.color is HourColor.INVALID and slot.names():
                    logger.info("Clearing %s outside the event window", ", ".join(slot.names()))
                    slot.occupants = [None] * len(slot.occupants)

        logger.debug("Event end moved to %s; roster now spans %d day(s)", new_window.end, self.days)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def occupants_at(self, day: int, hour: int) -> List[str]:
        return self.hour_slot(day, hour).names()

    def missing_counts(self, day: int) -> List[int]:
        return missing_counts(self._day(day))

    def missing_ranges(self, day: int) -> List[str]:
        """Understaffed stretches of a day, e.g. ["14-18 @2"]."""
        return collapse_runs(self.missing_counts(day))

    def handover_report(self, day: int) -> List[ShiftExchange]:
        self._day(day)
        return handover_report(self._grid, day)

    def shift_exchange(self, day: int, hour: int) -> ShiftExchange:
        self.hour_slot(day, hour)
        return handover_report(self._grid, day)[hour]

    def export_schedule(self, day: Optional[int] = None) -> Dict[int, dict]:
        """
        Export hours as {hour: {"color", "occupants"}}, skipping invalid hours.

        With ``day`` set, returns that day only; otherwise returns
        {day: {hour: ...}} and leaves out days with nothing to show.
        """
        def export_day(index: int) -> Dict[int, dict]:
            return {
                hour: {"color": slot.color.value, "occupants": list(slot.occupants)}
                for hour, slot in enumerate(self._day(index))
                if slot.color is not HourColor.INVALID
            }

        if day is not None:
            return export_day(day)

        exported = {}
        for index in range(self.days):
            hours = export_day(index)
            if hours:
                exported[index] = hours
        return exported

    def day_date(self, day: int) -> DateTime:
        """Local start-of-day of a roster day."""
        self._day(day)
        return self.window.start.in_timezone(self.timezone).start_of("day").add(days=day)

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_dict(self) -> dict:
        """Full roster state as JSON-compatible data."""
        return {
            "timezone": self.timezone,
            "start": self.window.start.to_iso8601_string(),
            "end": self.window.end.to_iso8601_string(),
            "members": self.members.to_dict(),
            "days": [[slot.to_dict() for slot in hours] for hours in self._grid],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Roster":
        """
        Rebuild a roster from ``to_dict()`` output.

        Raises:
            RosterStateError: If the data is incomplete or inconsistent.
        """
        try:
            timezone = data["timezone"]
            window = EventWindow(
                start=pendulum.parse(data["start"]),
                end=pendulum.parse(data["end"]),
                timezone=timezone,
            )
            grid = [[HourSlot.from_dict(slot) for slot in hours] for hours in data["days"]]
            members = MemberRegistry.from_dict(data.get("members", {}))
        except (KeyError, TypeError, ValueError) as exc:
            if isinstance(exc, RosterStateError):
                raise
            raise RosterStateError(f"Cannot rebuild roster: {exc}") from exc

        if not grid or any(len(hours) != HOURS_PER_DAY for hours in grid):
            raise RosterStateError("Every roster day must hold exactly 24 hours")

        return cls(window, grid=grid, members=members)

    def __repr__(self) -> str:
        return (
            f"Roster({self.window.start.to_datetime_string()} -> "
            f"{self.window.end.to_datetime_string()} {self.timezone}, days={self.days})"
        )
