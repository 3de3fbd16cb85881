"""
Derived views over the occupancy grid.

Nothing here is stored: every view is recomputed from the grid on request,
so a view is never stale after a mutation.
"""

from typing import List, Optional, Sequence

from .models import HOURS_PER_DAY, SLOT_CAPACITY, HourColor, HourSlot, ShiftExchange, ShiftPhase


def missing_counts(hours: Sequence[HourSlot]) -> List[int]:
    """
    Number of empty slots per hour.

    Colored hours (black, gray, invalid) never count as missing staff.
    """
    return [
        SLOT_CAPACITY - len(slot.names()) if slot.color is HourColor.NONE else 0
        for slot in hours
    ]


def _unique(names: Sequence[str]) -> List[str]:
    return list(dict.fromkeys(names))


def handover_report(grid: Sequence[Sequence[HourSlot]], day: int) -> List[ShiftExchange]:
    """
    Who comes on and who goes off duty at each hour of ``day``.

    Hour 0 is compared with hour 23 of the previous day; hour 0 of the
    first day has no previous hour, so everyone present comes on duty.
    """
    hours = grid[day]
    report: List[ShiftExchange] = []

    for hour, slot in enumerate(hours):
        if hour > 0:
            previous = hours[hour - 1].names()
        elif day > 0:
            previous = grid[day - 1][HOURS_PER_DAY - 1].names()
        else:
            previous = []

        current = _unique(slot.names())
        previous = _unique(previous)

        report.append(
            ShiftExchange(
                on_duty=[name for name in current if name not in previous],
                off_duty=[name for name in previous if name not in current],
            )
        )

    return report


def collapse_runs(counts: Sequence[int]) -> List[str]:
    """
    Collapse per-hour counts into "start-end @count" ranges.

    Only positive counts produce a range, and a zero always breaks a run.

    Example: [0, 1, 1, 2, 2, 2, 0, 1] -> ["1-3 @1", "3-6 @2", "7-8 @1"]
    """
    if not counts:
        return []

    ranges: List[str] = []
    start = 0
    count: Optional[int] = counts[0]

    # One extra step past the end flushes the final run
    for hour in range(1, len(counts) + 1):
        current = counts[hour] if hour < len(counts) else None
        if current != count:
            if count is not None and count > 0:
                ranges.append(f"{start}-{hour} @{count}")
            start = hour
            count = current

    return ranges


def hours_to_ranges(hours: Sequence[int]) -> List[str]:
    """
    Turn a list of hour indices into "start-end" ranges (end exclusive).

    Example: [5, 3, 4, 9] -> ["3-6", "9-10"]
    """
    if not hours:
        return []

    ordered = sorted(set(hours))
    ranges: List[str] = []
    start = previous = ordered[0]

    for hour in ordered[1:]:
        if hour == previous + 1:
            previous = hour
            continue
        ranges.append(f"{start}-{previous + 1}")
        start = previous = hour

    ranges.append(f"{start}-{previous + 1}")
    return ranges


def _visible_names(hours: Sequence[HourSlot], hour: int) -> List[str]:
    if hour < 0 or hour >= len(hours) or hours[hour].color.is_hidden:
        return []
    return hours[hour].names()


def occupant_phase(hours: Sequence[HourSlot], hour: int, person: str) -> ShiftPhase:
    """
    Classify a person's cell by whether they also work the adjacent hours.

    A blacked or grayed-out neighbour counts as an absent one.
    """
    before = person in _visible_names(hours, hour - 1)
    after = person in _visible_names(hours, hour + 1)

    if before and after:
        return ShiftPhase.RUNNING
    if before:
        return ShiftPhase.END
    if after:
        return ShiftPhase.START
    return ShiftPhase.SINGLE
