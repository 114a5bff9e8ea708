"""
Unit tests for HH:MM <-> minutes conversion and grid hour positions.

The default grid starts at 08:00, so hour_position('08:00') == 0.
"""

import unittest

from schedulr.config import GridConfig
from schedulr.timemath import (
    InvalidFormat,
    duration_hours,
    duration_minutes,
    hour_position,
    minutes_to_time,
    time_to_minutes,
)


class TestTimeToMinutes(unittest.TestCase):
    def test_parses_zero_padded_and_unpadded(self) -> None:
        self.assertEqual(time_to_minutes("09:30"), 570)
        self.assertEqual(time_to_minutes("9:30"), 570)
        self.assertEqual(time_to_minutes(" 00:00 "), 0)

    def test_hours_are_not_capped(self) -> None:
        self.assertEqual(time_to_minutes("25:00"), 1500)

    def test_invalid_formats_raise(self) -> None:
        for bad in ["", "930", "9:30:00", "ab:cd", "-1:00", "10:60", "10:5x", "1.5:00", ":30"]:
            with self.subTest(value=bad):
                with self.assertRaises(InvalidFormat):
                    time_to_minutes(bad)

    def test_invalid_format_is_a_value_error(self) -> None:
        with self.assertRaises(ValueError):
            time_to_minutes("noon")


class TestMinutesToTime(unittest.TestCase):
    def test_zero_padding(self) -> None:
        self.assertEqual(minutes_to_time(5), "00:05")
        self.assertEqual(minutes_to_time(845), "14:05")

    def test_negative_is_clamped(self) -> None:
        self.assertEqual(minutes_to_time(-30), "00:00")

    def test_no_wraparound(self) -> None:
        self.assertEqual(minutes_to_time(1500), "25:00")

    def test_round_trip_for_padded_times(self) -> None:
        for t in ["00:00", "08:00", "09:05", "12:30", "20:59", "23:59"]:
            with self.subTest(time=t):
                self.assertEqual(minutes_to_time(time_to_minutes(t)), t)


class TestGridHours(unittest.TestCase):
    def test_hour_position_relative_to_grid_start(self) -> None:
        self.assertEqual(hour_position("08:00"), 0)
        self.assertEqual(hour_position("09:30"), 1.5)
        self.assertEqual(hour_position("07:00"), -1)

    def test_hour_position_custom_grid(self) -> None:
        grid = GridConfig(day_start_hour=6, day_end_hour=22)
        self.assertEqual(hour_position("09:00", grid), 3)

    def test_durations(self) -> None:
        self.assertEqual(duration_minutes("09:00", "10:30"), 90)
        self.assertEqual(duration_hours("09:00", "10:30"), 1.5)

    def test_duration_may_be_negative(self) -> None:
        # ordering is validated at the boundary, not here
        self.assertEqual(duration_hours("11:00", "10:00"), -1)


if __name__ == "__main__":
    unittest.main()
