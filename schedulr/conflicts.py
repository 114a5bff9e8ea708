"""
Conflict detection.

Given all events of the timetable, detect overlaps on the same weekday.
Overlap rule (open intervals):
    start < other_end AND end > other_start

Touching endpoints (one class ends at 10:00, the next starts at 10:00) are
not a conflict.
"""

from __future__ import annotations

from collections import defaultdict
from typing import Iterable

from schedulr.config import DAYS
from schedulr.model import Event
from schedulr.timemath import time_to_minutes


def _overlaps(a_start: int, a_end: int, b_start: int, b_end: int) -> bool:
    return a_start < b_end and a_end > b_start


def _by_day(events: Iterable[Event]) -> dict[str, list[tuple[int, int, Event]]]:
    """
    Group events by day, keeping input order, with times pre-parsed.
    """
    grouped: dict[str, list[tuple[int, int, Event]]] = defaultdict(list)
    for ev in events:
        grouped[ev.day].append((time_to_minutes(ev.start_time), time_to_minutes(ev.end_time), ev))
    return grouped


def detect_overlaps(events: Iterable[Event]) -> set[str]:
    """
    Return the ids of all events that overlap at least one other event
    on the same day.

    Pure function: the result depends only on the multiset of events, never
    on their order.
    """
    overlapping: set[str] = set()

    # O(n^2) per day is fine: a day holds a handful of classes
    for day_events in _by_day(events).values():
        for i in range(len(day_events)):
            s1, e1, ev1 = day_events[i]
            for j in range(i + 1, len(day_events)):
                s2, e2, ev2 = day_events[j]
                if _overlaps(s1, e1, s2, e2):
                    overlapping.add(ev1.id)
                    overlapping.add(ev2.id)

    return overlapping


def detect_overlaps_sweep(events: Iterable[Event]) -> set[str]:
    """
    Same result as detect_overlaps(), in O(n log n) per day.

    Events are swept by start time while keeping the set of still-open
    intervals. Every open interval that ends after the current start
    overlaps the current one.
    """
    overlapping: set[str] = set()

    for day_events in _by_day(events).values():
        active: list[tuple[int, int, Event]] = []
        for start, end, ev in sorted(day_events, key=lambda x: (x[0], x[1])):
            # drop intervals that ended at or before this start (touching is fine)
            active = [a for a in active if a[1] > start]
            if active and end > start:
                for _, _, other in active:
                    overlapping.add(other.id)
                overlapping.add(ev.id)
            active.append((start, end, ev))

    return overlapping


def find_conflicts(events: Iterable[Event]) -> list[tuple[Event, Event]]:
    """
    Find overlapping event pairs (A, B), each pair appears once.
    Pairs are ordered by day column, then by A's start time.
    """
    conflicts: list[tuple[Event, Event]] = []

    for day_events in _by_day(events).values():
        ordered = sorted(day_events, key=lambda x: (x[0], x[1]))
        for i in range(len(ordered)):
            s1, e1, ev1 = ordered[i]
            for j in range(i + 1, len(ordered)):
                s2, e2, ev2 = ordered[j]
                if s2 >= e1:
                    # sorted by start: nothing later can overlap ev1
                    break
                if _overlaps(s1, e1, s2, e2):
                    conflicts.append((ev1, ev2))

    conflicts.sort(key=lambda p: (_day_rank(p[0].day), time_to_minutes(p[0].start_time)))
    return conflicts


def _day_rank(day: str) -> int:
    return DAYS.index(day) if day in DAYS else len(DAYS)
