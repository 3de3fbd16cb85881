"""
Tests for time-range resolution.
"""

import pendulum
import pytest

from shiftroster.domain.exceptions import InvalidEventWindow, InvalidTimeFormat
from shiftroster.domain.models import HourColor, new_day
from shiftroster.domain.time_range import (
    compute_day_count,
    mark_invalid_hours,
    parse_compact,
    round_to_hour,
)


class TestComputeDayCount:
    """Tests for compute_day_count."""

    def test_multi_day_event(self):
        """Test the three-day Tokyo event."""
        start = pendulum.parse("2025-12-11 14:00", tz="Asia/Tokyo")
        end = pendulum.parse("2025-12-13 20:00", tz="Asia/Tokyo")

        assert compute_day_count(start, end, "Asia/Tokyo") == 3

    def test_compact_strings(self):
        """Test that compact strings give the same count as timestamps."""
        assert compute_day_count("2025121114", "2025121320", "Asia/Tokyo") == 3

    def test_same_day_is_one(self):
        """Test that an event within one date spans one day."""
        start = pendulum.parse("2025-12-11 09:00", tz="Asia/Tokyo")
        end = pendulum.parse("2025-12-11 17:00", tz="Asia/Tokyo")

        assert compute_day_count(start, end, "Asia/Tokyo") == 1

    def test_uses_local_dates_not_utc_dates(self):
        """Test that dates are taken in the roster timezone."""
        # 01:00 to 23:00 on 2025-12-12 in Tokyo, but two different UTC dates
        start = pendulum.datetime(2025, 12, 11, 16, tz="UTC")
        end = pendulum.datetime(2025, 12, 12, 14, tz="UTC")

        assert compute_day_count(start, end, "Asia/Tokyo") == 1
        assert compute_day_count(start, end, "UTC") == 2

    def test_dst_spring_forward(self):
        """Test that a 23-hour calendar day does not skew the count."""
        start = pendulum.parse("2024-03-30 22:00", tz="Europe/Berlin")
        end = pendulum.parse("2024-03-31 23:00", tz="Europe/Berlin")

        assert compute_day_count(start, end, "Europe/Berlin") == 2

    def test_dst_fall_back(self):
        """Test that a 25-hour calendar day does not skew the count."""
        start = pendulum.parse("2024-10-26 23:30", tz="Europe/Berlin")
        end = pendulum.parse("2024-10-27 23:00", tz="Europe/Berlin")

        assert compute_day_count(start, end, "Europe/Berlin") == 2

    def test_end_before_start_raises(self):
        """Test that a reversed window is rejected."""
        with pytest.raises(InvalidEventWindow):
            compute_day_count("2025121320", "2025121114", "Asia/Tokyo")


class TestRoundToHour:
    """Tests for round_to_hour."""

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("2025121114", "2025121114"),
            ("202512111429", "2025121114"),
            ("202512111430", "2025121114"),
            ("20251211143029", "2025121114"),
            ("20251211143030", "2025121115"),
            ("202512111431", "2025121115"),
            ("202512112345", "2025121200"),
            ("202512312331", "2026010100"),
            ("202402282345", "2024022900"),
        ],
    )
    def test_rounding(self, text, expected):
        """Test rounding to the nearest hour, including day rollover."""
        assert round_to_hour(text) == expected

    @pytest.mark.parametrize(
        "text",
        ["2025-12-11", "20251211", "2025121114300", "abcdefghij", "", "2025133114"],
    )
    def test_invalid_format_raises(self, text):
        """Test that anything but 10, 12 or 14 digits of a real date fails."""
        with pytest.raises(InvalidTimeFormat):
            round_to_hour(text)

    def test_invalid_format_is_a_value_error(self):
        """Test that callers can also catch the error as ValueError."""
        with pytest.raises(ValueError):
            round_to_hour("12")


class TestParseCompact:
    """Tests for parse_compact."""

    def test_reads_local_wall_clock(self):
        """Test that the digits are taken as local time in the timezone."""
        moment = parse_compact("2025121114", "Asia/Tokyo")

        assert moment.hour == 14
        assert moment.in_timezone("UTC").hour == 5

    def test_minute_precision(self):
        """Test that 12-digit strings keep their minutes."""
        moment = parse_compact("202512111405", "Asia/Tokyo")

        assert moment.minute == 5


class TestMarkInvalidHours:
    """Tests for mark_invalid_hours."""

    def test_marks_both_ends(self):
        """Test that hours before start and from end onwards are invalid."""
        grid = [new_day(), new_day()]

        mark_invalid_hours(grid, 3, 20)

        assert [slot.color for slot in grid[0][:3]] == [HourColor.INVALID] * 3
        assert all(slot.color is HourColor.NONE for slot in grid[0][3:])
        assert all(slot.color is HourColor.NONE for slot in grid[1][:20])
        assert [slot.color for slot in grid[1][20:]] == [HourColor.INVALID] * 4

    def test_single_day(self):
        """Test that both boundaries apply to a one-day grid."""
        grid = [new_day()]

        mark_invalid_hours(grid, 9, 17)

        schedulable = [hour for hour, slot in enumerate(grid[0]) if slot.color is HourColor.NONE]
        assert schedulable == list(range(9, 17))
