"""
Time-range resolution: event day counts, out-of-window hours and the
compact ``yyyyMMddHH`` time strings used at the command boundary.
"""

import logging
import re
from typing import List, Union

import pendulum
from pendulum import DateTime

from .exceptions import InvalidEventWindow, InvalidTimeFormat
from .models import HOURS_PER_DAY, HourColor, HourSlot

logger = logging.getLogger(__name__)

_COMPACT_PATTERN = re.compile(r"\d{10}|\d{12}|\d{14}")
_COMPACT_FORMATS = {
    10: "YYYYMMDDHH",
    12: "YYYYMMDDHHmm",
    14: "YYYYMMDDHHmmss",
}

Instant = Union[DateTime, str]


def parse_compact(text: str, timezone: str = "UTC") -> DateTime:
    """
    Parse a compact time string as local wall-clock time in ``timezone``.

    Raises:
        InvalidTimeFormat: If the string is not 10, 12 or 14 digits or
            does not name a real point in time.
    """
    if not isinstance(text, str) or not _COMPACT_PATTERN.fullmatch(text):
        raise InvalidTimeFormat(f"Invalid time format: {text!r}")

    try:
        return pendulum.from_format(text, _COMPACT_FORMATS[len(text)], tz=timezone)
    except ValueError as exc:
        raise InvalidTimeFormat(f"Invalid time format: {text!r}") from exc


def to_instant(value: Instant, timezone: str) -> DateTime:
    """Accept either a DateTime or a compact string and return a DateTime."""
    if isinstance(value, str):
        return parse_compact(value, timezone)
    return pendulum.instance(value)


def round_to_hour(text: str) -> str:
    """
    Round a compact time string to the nearest hour.

    Rounds up when minutes > 30, or minutes == 30 and seconds >= 30;
    otherwise truncates. Rounding past 23h rolls over to 00h of the next day.

    Example: "202512112330" -> "2025121200"
    """
    moment = parse_compact(text)
    rounded = moment.start_of("hour")

    if moment.minute > 30 or (moment.minute == 30 and moment.second >= 30):
        rounded = rounded.add(hours=1)

    return rounded.format("YYYYMMDDHH")


def local_hour(instant: DateTime, timezone: str) -> int:
    return instant.in_timezone(timezone).hour


def compute_day_count(start: Instant, end: Instant, timezone: str) -> int:
    """
    Count the local calendar dates spanned by an event, inclusive.

    The count comes from the calendar-date difference in ``timezone``, not
    from elapsed time, so DST transitions and partial days cannot skew it.
    """
    start_dt = to_instant(start, timezone)
    end_dt = to_instant(end, timezone)

    if end_dt < start_dt:
        raise InvalidEventWindow(f"Event end {end_dt} is before event start {start_dt}")

    start_date = start_dt.in_timezone(timezone).date()
    end_date = end_dt.in_timezone(timezone).date()
    days = start_date.diff(end_date).in_days() + 1

    logger.debug("Event %s -> %s (%s) spans %d day(s)", start_date, end_date, timezone, days)
    return days


def mark_invalid_hours(grid: List[List[HourSlot]], start_hour: int, end_hour: int) -> None:
    """
    Mark the hours outside the event window as invalid.

    Day 0 is invalid before ``start_hour``; the last day is invalid from
    ``end_hour`` onwards.
    """
    if not grid:
        return

    for hour in range(0, start_hour):
        grid[0][hour].color = HourColor.INVALID

    for hour in range(end_hour, HOURS_PER_DAY):
        grid[-1][hour].color = HourColor.INVALID
