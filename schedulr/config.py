"""
Static configuration shared by all modules.

The grid geometry lives here so that time math, layout and dragging agree on
the same canvas:

    7 day columns (Monday..Sunday)
    hour rows from day_start_hour (inclusive) to day_end_hour (exclusive)

Paths are returned by functions instead of constants, so tests can override
them through the environment.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path


DAYS: tuple[str, ...] = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")

DEFAULT_COLORS: tuple[str, ...] = ("#4C586B", "#C1A27F", "#5F6977", "#8B5CF6", "#EF4444")

# localStorage keys of the web version, kept so exported stores stay compatible
TIMETABLE_KEY = "schedulr-timetable"
SAVED_TIMETABLES_KEY = "schedulr-saved-timetables"
THEME_KEY = "schedulr-theme"


@dataclass(frozen=True)
class GridConfig:
    """
    Geometry of the week canvas plus the drag tuning constants.
    """

    day_start_hour: int = 8
    day_end_hour: int = 21
    snap_minutes: int = 5
    drag_threshold_px: float = 3.0

    @property
    def hours(self) -> list[int]:
        return list(range(self.day_start_hour, self.day_end_hour))

    @property
    def total_hours(self) -> int:
        return self.day_end_hour - self.day_start_hour

    @property
    def start_minutes(self) -> int:
        return self.day_start_hour * 60

    @property
    def total_minutes(self) -> int:
        return self.total_hours * 60

    @property
    def day_count(self) -> int:
        return len(DAYS)


DEFAULT_GRID = GridConfig()


def default_data_dir() -> Path:
    """
    Return the directory holding the user's store file.

    SCHEDULR_HOME wins if set, otherwise ~/.schedulr is used.
    """
    env = os.environ.get("SCHEDULR_HOME", "").strip()
    if env:
        return Path(env).expanduser()
    return Path.home() / ".schedulr"


def default_store_path() -> Path:
    return default_data_dir() / "store.json"


SAMPLE_CLASSES: tuple[dict[str, str], ...] = (
    {
        "id": "1",
        "subject": "Mathematics",
        "teacher": "Dr. Smith",
        "day": "Monday",
        "startTime": "09:00",
        "endTime": "10:30",
        "color": DEFAULT_COLORS[0],
        "description": "",
    },
    {
        "id": "2",
        "subject": "Physics",
        "teacher": "Prof. Johnson",
        "day": "Monday",
        "startTime": "11:00",
        "endTime": "12:30",
        "color": DEFAULT_COLORS[1],
        "description": "",
    },
    {
        "id": "3",
        "subject": "Chemistry",
        "teacher": "Dr. Williams",
        "day": "Wednesday",
        "startTime": "09:00",
        "endTime": "10:30",
        "color": DEFAULT_COLORS[2],
        "description": "",
    },
    {
        "id": "4",
        "subject": "English Literature",
        "teacher": "Ms. Davis",
        "day": "Tuesday",
        "startTime": "14:00",
        "endTime": "15:30",
        "color": DEFAULT_COLORS[3],
        "description": "",
    },
    {
        "id": "5",
        "subject": "Computer Science",
        "teacher": "Mr. Brown",
        "day": "Thursday",
        "startTime": "10:00",
        "endTime": "11:30",
        "color": DEFAULT_COLORS[4],
        "description": "",
    },
    {
        "id": "6",
        "subject": "History",
        "teacher": "Dr. Miller",
        "day": "Friday",
        "startTime": "13:00",
        "endTime": "14:30",
        "color": DEFAULT_COLORS[0],
        "description": "",
    },
)
