"""
The event collection.

Timetable owns the list of events and keeps two things in sync with it after
every mutation:
- the conflict set (recomputed from scratch, never patched)
- the persisted copy in the key/value store

It also manages saved timetables ("new timetable" archives the current one).
"""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from typing import Any, Iterable, Optional

from schedulr.config import DAYS, SAMPLE_CLASSES, SAVED_TIMETABLES_KEY, TIMETABLE_KEY
from schedulr.conflicts import detect_overlaps
from schedulr.drag import MoveUpdate
from schedulr.model import Event, EventValidationError, SavedTimetable, new_event_id, validate_event
from schedulr.storage import KeyValueStore
from schedulr.timemath import duration_minutes, minutes_to_time, time_to_minutes


logger = logging.getLogger(__name__)


class EventNotFound(KeyError):
    """Raised when an id does not exist in the timetable."""


class Timetable:
    def __init__(self, store: KeyValueStore, seed_samples: bool = True) -> None:
        self._store = store
        self._events: list[Event] = self._load_events(seed_samples)
        self._conflicts: set[str] = set()
        self._recompute()

    # ---------- reading ----------

    @property
    def events(self) -> list[Event]:
        return list(self._events)

    @property
    def conflicts(self) -> set[str]:
        return set(self._conflicts)

    def get(self, event_id: str) -> Event:
        for ev in self._events:
            if ev.id == event_id:
                return ev
        raise EventNotFound(event_id)

    def sorted_events(self) -> list[Event]:
        """Events in week order: by day column, then start time."""
        return sorted(self._events, key=lambda ev: (DAYS.index(ev.day), time_to_minutes(ev.start_time)))

    # ---------- mutations ----------

    def add(self, data: Event | dict[str, Any]) -> Event:
        """
        Add a new event. Any id in `data` is ignored; a fresh one is assigned.
        """
        ev = validate_event(_as_event(data).with_id())
        self._events.append(ev)
        logger.info("Added %s (%s %s-%s)", ev.id, ev.day, ev.start_time, ev.end_time)
        self._changed()
        return ev

    def update(self, event_id: str, data: Event | dict[str, Any]) -> Event:
        """Replace all fields of an existing event, keeping its id."""
        self._index_of(event_id)
        ev = validate_event(replace(_as_event(data), id=event_id))
        return self._replace(ev, "Updated")

    def delete(self, event_id: str) -> Event:
        idx = self._index_of(event_id)
        ev = self._events.pop(idx)
        logger.info("Deleted %s", event_id)
        self._changed()
        return ev

    def duplicate(self, event_id: str) -> Event:
        copy = self.get(event_id).with_id()
        self._events.append(copy)
        logger.info("Duplicated %s as %s", event_id, copy.id)
        self._changed()
        return copy

    def move(self, event_id: str, update: MoveUpdate) -> Event:
        """Apply a committed drag (day, start, end)."""
        ev = replace(self.get(event_id), day=update.day, start_time=update.start_time, end_time=update.end_time)
        return self._replace(validate_event(ev), "Moved")

    def reschedule(self, event_id: str, day: str, start_time: str) -> Event:
        """Move an event to day/start_time, keeping its duration."""
        ev = self.get(event_id)
        end = time_to_minutes(start_time) + duration_minutes(ev.start_time, ev.end_time)
        return self.move(event_id, MoveUpdate(day=day, start_time=start_time.strip(), end_time=minutes_to_time(end)))

    def replace_all(self, events: Iterable[Event]) -> None:
        """
        Swap in a whole new list (import, load saved timetable).

        Ids repeated within the batch are replaced with fresh ones, so every
        event stays addressable.
        """
        new_events: list[Event] = []
        seen: set[str] = set()
        for ev in events:
            ev = validate_event(ev)
            if ev.id in seen:
                fresh = ev.with_id()
                logger.warning("Duplicate id %r, assigned %s", ev.id, fresh.id)
                ev = fresh
            seen.add(ev.id)
            new_events.append(ev)
        self._events = new_events
        logger.info("Replaced timetable with %d events", len(new_events))
        self._changed()

    # ---------- saved timetables ----------

    def saved_timetables(self) -> list[SavedTimetable]:
        raw = self._store.get(SAVED_TIMETABLES_KEY, [])
        if not isinstance(raw, list):
            return []
        return [SavedTimetable.from_dict(x) for x in raw if isinstance(x, dict)]

    def new_timetable(self) -> Optional[SavedTimetable]:
        """
        Start over with an empty timetable.

        A non-empty timetable is archived first and the archive is returned;
        an empty one is simply kept empty (returns None).
        """
        if not self._events:
            self.replace_all([])
            return None

        now = datetime.now()
        saved = SavedTimetable(
            id=now.isoformat(timespec="microseconds"),
            name=f"Timetable {now.strftime('%b %d, %Y, %I:%M %p')}",
            saved_at=now.isoformat(timespec="seconds"),
            events=list(self._events),
        )
        self._write_saved(self.saved_timetables() + [saved])
        logger.info("Archived timetable as %r", saved.name)
        self.replace_all([])
        return saved

    def load_saved(self, saved_id: str) -> SavedTimetable:
        saved = self._find_saved(saved_id)
        self.replace_all(saved.events)
        return saved

    def delete_saved(self, saved_id: str) -> SavedTimetable:
        saved = self._find_saved(saved_id)
        self._write_saved([s for s in self.saved_timetables() if s.id != saved_id])
        return saved

    # ---------- internals ----------

    def _find_saved(self, saved_id: str) -> SavedTimetable:
        for s in self.saved_timetables():
            if s.id == saved_id:
                return s
        raise EventNotFound(saved_id)

    def _write_saved(self, saved: list[SavedTimetable]) -> None:
        self._store.set(SAVED_TIMETABLES_KEY, [s.to_dict() for s in saved])

    def _index_of(self, event_id: str) -> int:
        for i, ev in enumerate(self._events):
            if ev.id == event_id:
                return i
        raise EventNotFound(event_id)

    def _replace(self, ev: Event, verb: str) -> Event:
        self._events[self._index_of(ev.id)] = ev
        logger.info("%s %s (%s %s-%s)", verb, ev.id, ev.day, ev.start_time, ev.end_time)
        self._changed()
        return ev

    def _changed(self) -> None:
        self._recompute()
        self._store.set(TIMETABLE_KEY, [ev.to_dict() for ev in self._events])

    def _recompute(self) -> None:
        self._conflicts = detect_overlaps(self._events)

    def _load_events(self, seed_samples: bool) -> list[Event]:
        raw = self._store.get(TIMETABLE_KEY)
        if raw is None:
            # first run: nothing stored yet
            raw = [dict(c) for c in SAMPLE_CLASSES] if seed_samples else []
        if not isinstance(raw, list):
            logger.warning("Stored timetable is not a list, starting empty")
            return []

        events: list[Event] = []
        for item in raw:
            if not isinstance(item, dict):
                continue
            ev = Event.from_dict(item)
            try:
                events.append(validate_event(ev))
            except EventValidationError as e:
                logger.warning("Skipping stored event %r: %s", ev.id, e)
        return events


def _as_event(data: Event | dict[str, Any]) -> Event:
    return data if isinstance(data, Event) else Event.from_dict(data)
