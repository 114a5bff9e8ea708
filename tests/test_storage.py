"""
Unit tests for the key/value stores.

Store contract:
- Missing/invalid file -> behaves like an empty store
- set() persists immediately as one JSON object
"""

import json
import tempfile
import unittest
from pathlib import Path

from schedulr.storage import JsonFileStore, MemoryStore


class TestJsonFileStore(unittest.TestCase):
    def test_missing_file_returns_default(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            store = JsonFileStore(Path(d) / "missing.json")
            self.assertIsNone(store.get("schedulr-theme"))
            self.assertEqual(store.get("schedulr-timetable", []), [])

    def test_set_and_reload(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            p = Path(d) / "nested" / "store.json"
            JsonFileStore(p).set("schedulr-theme", "dark")

            self.assertEqual(JsonFileStore(p).get("schedulr-theme"), "dark")
            data = json.loads(p.read_text(encoding="utf-8"))
            self.assertEqual(data, {"schedulr-theme": "dark"})

    def test_corrupted_file_is_ignored(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            p = Path(d) / "store.json"
            p.write_text("{not json", encoding="utf-8")
            store = JsonFileStore(p)
            with self.assertLogs("schedulr.storage", level="WARNING"):
                self.assertEqual(store.get("x", "fallback"), "fallback")

            store.set("x", 1)
            self.assertEqual(json.loads(p.read_text(encoding="utf-8")), {"x": 1})

    def test_non_object_file_is_ignored(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            p = Path(d) / "store.json"
            p.write_text("[1, 2, 3]", encoding="utf-8")
            with self.assertLogs("schedulr.storage", level="WARNING"):
                self.assertIsNone(JsonFileStore(p).get("x"))


class TestMemoryStore(unittest.TestCase):
    def test_get_set(self) -> None:
        store = MemoryStore({"a": 1})
        self.assertEqual(store.get("a"), 1)
        self.assertEqual(store.get("b", 2), 2)
        store.set("b", 3)
        self.assertEqual(store.get("b"), 3)


if __name__ == "__main__":
    unittest.main()
