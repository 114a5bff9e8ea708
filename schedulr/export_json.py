"""
JSON export / import of a timetable.

Export writes a plain array of classes (camelCase keys, same as the store).
Import is tolerant, because files come from older versions and other tools:
- a top-level array, or an object with a "classes" or "data" array
- missing fields get sensible defaults, unknown days fall back to Monday
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterable

from schedulr.config import DAYS, DEFAULT_COLORS
from schedulr.model import Event, new_event_id


class ImportFormatError(ValueError):
    """Raised when a file does not contain any importable classes."""


def export_events_to_json(events: Iterable[Event], out_path: str | Path) -> int:
    """
    Export events to a .json file. Returns number of exported events.
    """
    out = Path(out_path)
    out.parent.mkdir(parents=True, exist_ok=True)

    payload = [ev.to_dict() for ev in events]
    out.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
    return len(payload)


def _extract_entries(raw: Any) -> list[Any]:
    if isinstance(raw, list):
        return raw
    if isinstance(raw, dict):
        for key in ("classes", "data"):
            if isinstance(raw.get(key), list):
                return raw[key]
    return []


def _normalize(item: Any, index: int) -> Event | None:
    if not isinstance(item, dict):
        return None

    def text(key: str, default: str = "") -> str:
        value = item.get(key)
        return str(value) if value not in (None, "") else default

    day = item.get("day")
    return Event(
        id=text("id") or f"{new_event_id()}{index}",
        subject=text("subject", "Untitled Class"),
        teacher=text("teacher"),
        day=day if day in DAYS else "Monday",
        start_time=text("startTime", "09:00"),
        end_time=text("endTime", "10:00"),
        color=text("color", DEFAULT_COLORS[index % len(DEFAULT_COLORS)]),
        description=text("description"),
    )


def import_events_from_json(in_path: str | Path) -> list[Event]:
    """
    Read and normalise classes from a JSON file.

    Raises ImportFormatError if the file cannot be read or holds no classes.
    Events are not validated here; Timetable.replace_all() does that.
    """
    path = Path(in_path)
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ImportFormatError(f"Error importing file: {e}") from e

    entries = _extract_entries(raw)
    if not entries:
        raise ImportFormatError("Invalid file format")

    events = [ev for ev in (_normalize(item, i) for i, item in enumerate(entries)) if ev is not None]
    if not events:
        raise ImportFormatError("No valid classes found in file")
    return events
