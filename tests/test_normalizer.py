"""
Tests for column continuity normalization.
"""

from shiftroster.domain.models import HourSlot, new_day
from shiftroster.domain.normalizer import MAX_SWAPS_PER_DAY, normalize_day
from shiftroster.domain.roster import Roster


def _day(*hours):
    """Build a day whose first hours hold the given occupant lists."""
    day = new_day()
    for hour, occupants in enumerate(hours):
        day[hour] = HourSlot(occupants=list(occupants) + [None] * (5 - len(occupants)))
    return day


def assert_continuous(hours):
    """Anyone working hour h and h+1 keeps the same slot index."""
    for hour in range(len(hours) - 1):
        for person in hours[hour].names():
            following = hours[hour + 1]
            if following.index_of(person) is not None:
                assert following.index_of(person) == hours[hour].index_of(person), (
                    f"{person} changes slot between hour {hour} and {hour + 1}"
                )


class TestNormalizeDay:
    """Tests for normalize_day."""

    def test_swap_moves_rest_of_day(self):
        """Test that a swap applies to every later hour, not just the next one."""
        day = _day(["A", "B"], ["B", "A"], ["B", "A"], ["B"])

        swaps = normalize_day(day)

        assert swaps == 1
        assert day[1].occupants[:2] == ["A", "B"]
        assert day[2].occupants[:2] == ["A", "B"]
        assert day[3].occupants[:2] == [None, "B"]
        assert_continuous(day)

    def test_already_continuous_day_is_untouched(self):
        """Test that a clean day needs no swaps."""
        day = _day(["A", "B"], ["A", "B"], ["A", None, "C"])

        assert normalize_day(day) == 0
        assert day[2].occupants[:3] == ["A", None, "C"]

    def test_rescan_after_swap(self):
        """Test that a swap that creates a new mismatch is resolved too."""
        day = _day(["A", "B", "C"], ["C", "A", "B"], ["C", "A", "B"])

        normalize_day(day)

        assert day[1].occupants[:3] == ["A", "B", "C"]
        assert_continuous(day)

    def test_legacy_duplicates_terminate(self):
        """Test that a name stored twice in one hour cannot make the scan cycle."""
        day = _day(["A", "A"], [None, None, "A"], [None, "A", "A"])

        swaps = normalize_day(day)

        assert swaps <= MAX_SWAPS_PER_DAY
        assert day[1].occupants[0] == "A"


class TestNormalizationThroughRoster:
    """Tests for continuity after roster mutations."""

    def test_continuity_after_overlapping_shifts(self):
        """Test the invariant over a busy day with staggered shifts."""
        roster = Roster.from_compact("2025121114", "2025121320", "Asia/Tokyo")
        assert roster.add_occupant(1, 0, 24, "Main")
        assert roster.add_occupant(1, 2, 5, "Alice")
        assert roster.add_occupant(1, 3, 6, "Bob")
        assert roster.add_occupant(1, 6, 8, "Cai")
        assert roster.add_occupant(1, 5, 7, "Dod")
        assert roster.add_occupant(1, 5, 7, "Err")
        assert roster.add_occupant(1, 5, 7, "Faa")

        hours = [roster.hour_slot(1, hour) for hour in range(24)]
        assert_continuous(hours)
        assert {slot.index_of("Main") for slot in hours} == {0}

    def test_continuity_after_gap_fill(self):
        """Test that filling a gap pulls the later stretch into one column."""
        roster = Roster.from_compact("2025121114", "2025121320", "Asia/Tokyo")
        roster.add_occupant(1, 0, 4, "Bob")
        roster.add_occupant(1, 0, 2, "Alice")
        roster.add_occupant(1, 2, 6, "Carol")
        roster.add_occupant(1, 4, 8, "Alice")

        roster.add_occupant(1, 2, 4, "Alice")

        hours = [roster.hour_slot(1, hour) for hour in range(24)]
        assert_continuous(hours)
        assert len({hours[hour].index_of("Alice") for hour in range(0, 8)}) == 1
