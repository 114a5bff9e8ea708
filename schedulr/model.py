"""
Central data model definitions used across the project.

This module defines the canonical structure of an Event (one scheduled class)
so that:
- all modules share the same field names
- the JSON/store wire format (camelCase keys of the web version) is produced
  and parsed in exactly one place
- form-level validation happens before an event ever reaches the core
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field, replace
from typing import Any, Optional

from schedulr.config import DAYS, DEFAULT_COLORS
from schedulr.timemath import InvalidFormat, time_to_minutes


class EventValidationError(ValueError):
    """Raised when form data cannot become a valid Event."""


def new_event_id() -> str:
    return uuid.uuid4().hex


def day_index(day: str) -> int:
    """
    Column index of a weekday name (Monday = 0).
    Raises ValueError for unknown names.
    """
    try:
        return DAYS.index(day)
    except ValueError:
        raise ValueError(f"Unknown day: {day!r}") from None


@dataclass
class Event:
    """
    Represents one class on the weekly grid.

    Only day, start_time and end_time matter to the core; the remaining
    fields are carried through unchanged.
    """

    id: str
    subject: str
    day: str
    start_time: str
    end_time: str
    teacher: str = ""
    color: str = DEFAULT_COLORS[0]
    description: str = ""

    def to_dict(self) -> dict[str, str]:
        return {
            "id": self.id,
            "subject": self.subject,
            "teacher": self.teacher,
            "day": self.day,
            "startTime": self.start_time,
            "endTime": self.end_time,
            "color": self.color,
            "description": self.description,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Event":
        """
        Build an Event from a wire dict without validating it.
        Missing free-text fields become empty strings.
        """
        return cls(
            id=_safe_str(data.get("id")),
            subject=_safe_str(data.get("subject")),
            teacher=_safe_str(data.get("teacher")),
            day=_safe_str(data.get("day")),
            start_time=_safe_str(data.get("startTime")).strip(),
            end_time=_safe_str(data.get("endTime")).strip(),
            color=_safe_str(data.get("color")) or DEFAULT_COLORS[0],
            description=_safe_str(data.get("description")),
        )

    def with_id(self, event_id: Optional[str] = None) -> "Event":
        """Copy of this event under a new (or given) id."""
        return replace(self, id=event_id or new_event_id())


@dataclass(frozen=True)
class SavedTimetable:
    """
    A named snapshot of a whole timetable, created by "new timetable".
    """

    id: str
    name: str
    saved_at: str
    events: list[Event] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "savedAt": self.saved_at,
            "classes": [ev.to_dict() for ev in self.events],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SavedTimetable":
        classes = data.get("classes", [])
        if not isinstance(classes, list):
            classes = []
        return cls(
            id=_safe_str(data.get("id")),
            name=_safe_str(data.get("name")),
            saved_at=_safe_str(data.get("savedAt")),
            events=[Event.from_dict(c) for c in classes if isinstance(c, dict)],
        )


def _safe_str(x: Any) -> str:
    return "" if x is None else str(x)


def validate_event(event: Event) -> Event:
    """
    Boundary check for events coming from a form, the CLI or an import.

    The core (conflicts, layout, drag) trusts its input, so the
    start < end ordering is enforced here and only here.
    """
    if not event.subject.strip():
        raise EventValidationError("Subject is required")
    if event.day not in DAYS:
        raise EventValidationError(f"Unknown day: {event.day!r}")
    try:
        start = time_to_minutes(event.start_time)
        end = time_to_minutes(event.end_time)
    except InvalidFormat as e:
        raise EventValidationError(str(e)) from e
    if start >= end:
        raise EventValidationError(
            f"Start time {event.start_time} must be before end time {event.end_time}"
        )
    return event
