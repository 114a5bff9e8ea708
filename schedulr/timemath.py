"""
Time math for the week grid.

All times cross module boundaries as 'HH:MM' strings (24h). Internally we work
with minutes since midnight and with fractional hours since the first grid row.
"""

from __future__ import annotations

from schedulr.config import DEFAULT_GRID, GridConfig


class InvalidFormat(ValueError):
    """Raised when a value cannot be parsed as 'HH:MM'."""


def time_to_minutes(hhmm: str) -> int:
    """
    Convert 'HH:MM' to minutes since midnight.

    Hours are any non-negative integer, minutes must be in [0, 60).
    Raises InvalidFormat otherwise.
    """
    if not isinstance(hhmm, str):
        raise InvalidFormat(f"Invalid time format: {hhmm!r}")

    parts = hhmm.strip().split(":")
    if len(parts) != 2:
        raise InvalidFormat(f"Invalid time format: {hhmm!r}")

    h_s, m_s = parts
    # rejects signs, blanks and fractions
    if not (h_s.isdecimal() and m_s.isdecimal()):
        raise InvalidFormat(f"Invalid time format: {hhmm!r}")

    h = int(h_s)
    m = int(m_s)
    if m >= 60:
        raise InvalidFormat(f"Invalid time value: {hhmm!r}")
    return h * 60 + m


def minutes_to_time(minutes: int) -> str:
    """
    Convert minutes since midnight back to 'HH:MM'.

    Negative input is clamped to 0. There is no wraparound past midnight:
    1500 becomes '25:00'.
    """
    total = max(0, int(minutes))
    return f"{total // 60:02d}:{total % 60:02d}"


def hour_position(hhmm: str, grid: GridConfig = DEFAULT_GRID) -> float:
    """Fractional hours between the first grid row and hhmm."""
    return (time_to_minutes(hhmm) - grid.start_minutes) / 60


def duration_minutes(start: str, end: str) -> int:
    # negative when end < start; callers validate ordering beforehand
    return time_to_minutes(end) - time_to_minutes(start)


def duration_hours(start: str, end: str) -> float:
    return duration_minutes(start, end) / 60
