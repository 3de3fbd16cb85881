"""
Column continuity normalization.

Keeps a person who works consecutive hours in the same occupant slot, so a
contiguous shift reads as one unbroken column of the grid.
"""

import logging
from typing import List, Optional, Tuple

from .exceptions import NormalizationError
from .models import HOURS_PER_DAY, SLOT_CAPACITY, HourSlot

logger = logging.getLogger(__name__)

MAX_SWAPS_PER_DAY = HOURS_PER_DAY * SLOT_CAPACITY


def _find_mismatch(current: HourSlot, following: HourSlot) -> Optional[Tuple[int, int]]:
    """
    Return (track_a, track_b) for the first person sitting in slot track_a
    this hour but in a different slot track_b the next hour.
    """
    seen = set()
    for track_a, person in enumerate(current.occupants):
        if person is None or person in seen:
            continue
        seen.add(person)

        if following.occupants[track_a] == person:
            continue
        track_b = following.index_of(person)
        if track_b is not None:
            return track_a, track_b
    return None


def normalize_day(hours: List[HourSlot]) -> int:
    """
    Re-order occupant slots of one day in place and return the swap count.

    Scans adjacent hour pairs left to right. When a person changes slot
    between hour h and h+1, the two slot indices are swapped for every hour
    from h+1 to the end of the day and hour h is scanned again. Only once
    hour h is clean does the scan advance.

    Each swap fixes one person at one hour pair without disturbing the
    pairs already fixed, so at most SLOT_CAPACITY swaps happen per pair.
    """
    swaps = 0
    hour = 0

    while hour < len(hours) - 1:
        mismatch = _find_mismatch(hours[hour], hours[hour + 1])
        if mismatch is None:
            hour += 1
            continue

        track_a, track_b = mismatch
        for later in hours[hour + 1:]:
            slots = later.occupants
            slots[track_a], slots[track_b] = slots[track_b], slots[track_a]

        swaps += 1
        logger.debug("Swapped slots %d and %d from hour %d", track_a, track_b, hour + 1)
        if swaps > MAX_SWAPS_PER_DAY:
            raise NormalizationError(
                f"Column normalization exceeded {MAX_SWAPS_PER_DAY} swaps at hour {hour}"
            )

    return swaps


def normalize_all(grid: List[List[HourSlot]]) -> int:
    return sum(normalize_day(hours) for hours in grid)
