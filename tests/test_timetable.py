"""
Unit tests for the event collection: mutations, validation, conflict
recompute and saved timetables. All tests run against a MemoryStore.
"""

import unittest

from schedulr.config import SAMPLE_CLASSES, SAVED_TIMETABLES_KEY, TIMETABLE_KEY
from schedulr.drag import MoveUpdate
from schedulr.model import Event, EventValidationError, validate_event
from schedulr.storage import MemoryStore
from schedulr.timetable import EventNotFound, Timetable


def _data(subject: str, day: str, start: str, end: str) -> dict:
    return {"subject": subject, "day": day, "startTime": start, "endTime": end}


class TestLoading(unittest.TestCase):
    def test_first_run_seeds_samples(self) -> None:
        tt = Timetable(MemoryStore())
        self.assertEqual(len(tt.events), len(SAMPLE_CLASSES))
        self.assertEqual(tt.conflicts, set())

    def test_empty_list_stays_empty(self) -> None:
        tt = Timetable(MemoryStore({TIMETABLE_KEY: []}))
        self.assertEqual(tt.events, [])

    def test_invalid_stored_events_are_skipped(self) -> None:
        store = MemoryStore(
            {
                TIMETABLE_KEY: [
                    {"id": "ok", "subject": "A", "day": "Monday", "startTime": "09:00", "endTime": "10:00"},
                    {"id": "bad", "subject": "B", "day": "Monday", "startTime": "11:00", "endTime": "10:00"},
                    "not a dict",
                ]
            }
        )
        with self.assertLogs("schedulr.timetable", level="WARNING"):
            tt = Timetable(store)
        self.assertEqual([ev.id for ev in tt.events], ["ok"])


class TestMutations(unittest.TestCase):
    def setUp(self) -> None:
        self.store = MemoryStore()
        self.tt = Timetable(self.store, seed_samples=False)

    def test_add_assigns_new_id_and_persists(self) -> None:
        ev = self.tt.add({**_data("Maths", "Monday", "09:00", "10:00"), "id": "ignored"})
        self.assertNotEqual(ev.id, "ignored")
        stored = self.store.get(TIMETABLE_KEY)
        self.assertEqual(stored, [ev.to_dict()])

    def test_conflicts_recomputed_after_each_change(self) -> None:
        a = self.tt.add(_data("A", "Monday", "09:00", "10:30"))
        b = self.tt.add(_data("B", "Monday", "10:00", "11:00"))
        self.assertEqual(self.tt.conflicts, {a.id, b.id})

        self.tt.update(a.id, _data("A", "Monday", "09:00", "10:00"))
        self.assertEqual(self.tt.conflicts, set())

        c = self.tt.duplicate(b.id)
        self.assertEqual(self.tt.conflicts, {b.id, c.id})

        self.tt.delete(c.id)
        self.assertEqual(self.tt.conflicts, set())

    def test_update_keeps_id(self) -> None:
        ev = self.tt.add(_data("A", "Monday", "09:00", "10:00"))
        updated = self.tt.update(ev.id, _data("B", "Friday", "13:00", "14:00"))
        self.assertEqual(updated.id, ev.id)
        self.assertEqual(self.tt.get(ev.id).subject, "B")

    def test_invalid_form_rejected(self) -> None:
        with self.assertRaises(EventValidationError):
            self.tt.add(_data("A", "Monday", "10:00", "10:00"))
        with self.assertRaises(EventValidationError):
            self.tt.add(_data("A", "Funday", "09:00", "10:00"))
        with self.assertRaises(EventValidationError):
            self.tt.add(_data("", "Monday", "09:00", "10:00"))
        with self.assertRaises(EventValidationError):
            self.tt.add(_data("A", "Monday", "9h", "10:00"))
        self.assertEqual(self.tt.events, [])

    def test_unknown_id(self) -> None:
        with self.assertRaises(EventNotFound):
            self.tt.delete("nope")
        with self.assertRaises(EventNotFound):
            self.tt.move("nope", MoveUpdate(day="Monday", start_time="09:00", end_time="10:00"))

    def test_duplicate_copies_fields_with_new_id(self) -> None:
        ev = self.tt.add({**_data("A", "Monday", "09:00", "10:00"), "teacher": "Dr. Smith"})
        copy = self.tt.duplicate(ev.id)
        self.assertNotEqual(copy.id, ev.id)
        self.assertEqual(copy.teacher, "Dr. Smith")
        self.assertEqual(len(self.tt.events), 2)

    def test_move_applies_drag_commit(self) -> None:
        ev = self.tt.add({**_data("A", "Monday", "09:00", "10:30"), "description": "room 4"})
        moved = self.tt.move(ev.id, MoveUpdate(day="Tuesday", start_time="14:05", end_time="15:35"))
        self.assertEqual((moved.day, moved.start_time, moved.end_time), ("Tuesday", "14:05", "15:35"))
        self.assertEqual(moved.description, "room 4")

    def test_reschedule_keeps_duration(self) -> None:
        ev = self.tt.add(_data("A", "Monday", "09:00", "10:30"))
        moved = self.tt.reschedule(ev.id, "Thursday", "13:15")
        self.assertEqual((moved.day, moved.start_time, moved.end_time), ("Thursday", "13:15", "14:45"))

    def test_sorted_events_week_order(self) -> None:
        self.tt.add(_data("Late", "Tuesday", "15:00", "16:00"))
        self.tt.add(_data("Early", "Tuesday", "08:00", "09:00"))
        self.tt.add(_data("Mon", "Monday", "18:00", "19:00"))
        self.assertEqual([ev.subject for ev in self.tt.sorted_events()], ["Mon", "Early", "Late"])

    def test_replace_all_reassigns_repeated_ids(self) -> None:
        monday = Event(id="x", subject="A", day="Monday", start_time="09:00", end_time="10:00")
        friday = Event(id="x", subject="B", day="Friday", start_time="09:00", end_time="10:00")
        with self.assertLogs("schedulr.timetable", level="WARNING"):
            self.tt.replace_all([monday, friday])

        ids = [ev.id for ev in self.tt.events]
        self.assertEqual(ids[0], "x")
        self.assertEqual(len(set(ids)), 2)

        self.tt.delete("x")
        self.assertEqual([ev.day for ev in self.tt.events], ["Friday"])
        self.assertNotEqual(self.tt.events[0].id, "x")


class TestSavedTimetables(unittest.TestCase):
    def test_new_archives_and_clears(self) -> None:
        store = MemoryStore()
        tt = Timetable(store)
        saved = tt.new_timetable()

        self.assertIsNotNone(saved)
        self.assertTrue(saved.name.startswith("Timetable "))
        self.assertEqual(tt.events, [])
        self.assertEqual(len(store.get(SAVED_TIMETABLES_KEY)), 1)

        # reloading from the same store sees the archive
        again = Timetable(store)
        self.assertEqual(again.events, [])
        self.assertEqual([s.id for s in again.saved_timetables()], [saved.id])

    def test_new_on_empty_timetable_does_not_archive(self) -> None:
        tt = Timetable(MemoryStore(), seed_samples=False)
        self.assertIsNone(tt.new_timetable())
        self.assertEqual(tt.saved_timetables(), [])

    def test_load_and_delete_saved(self) -> None:
        tt = Timetable(MemoryStore())
        original_ids = {ev.id for ev in tt.events}
        saved = tt.new_timetable()

        tt.load_saved(saved.id)
        self.assertEqual({ev.id for ev in tt.events}, original_ids)

        tt.delete_saved(saved.id)
        self.assertEqual(tt.saved_timetables(), [])
        with self.assertRaises(EventNotFound):
            tt.load_saved(saved.id)


class TestEventModel(unittest.TestCase):
    def test_wire_round_trip(self) -> None:
        ev = Event(id="x", subject="A", day="Monday", start_time="09:00", end_time="10:00", teacher="T")
        self.assertEqual(Event.from_dict(ev.to_dict()), ev)

    def test_validate_returns_event(self) -> None:
        ev = Event(id="x", subject="A", day="Monday", start_time="09:00", end_time="10:00")
        self.assertIs(validate_event(ev), ev)


if __name__ == "__main__":
    unittest.main()
