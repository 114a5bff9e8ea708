"""
Persistent key/value storage.

Everything the application remembers (current timetable, saved timetables,
theme) goes through a KeyValueStore with get/set semantics. The store is
injected wherever it is needed, so tests use MemoryStore and the CLI uses
JsonFileStore:

    ~/.schedulr/store.json   (or $SCHEDULR_HOME/store.json)

The file holds one JSON object: {key: value, ...}.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Optional, Protocol

from schedulr.config import default_store_path


logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    def get(self, key: str, default: Any = None) -> Any: ...

    def set(self, key: str, value: Any) -> None: ...


class MemoryStore:
    """
    In-memory store. Values are kept as JSON-compatible data, like the file store.
    """

    def __init__(self, initial: Optional[dict[str, Any]] = None) -> None:
        self._data: dict[str, Any] = dict(initial or {})

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value


class JsonFileStore:
    """
    Store backed by a single JSON file.

    Reading is deliberately defensive: a missing, unreadable or corrupted
    file behaves like an empty store (the first write replaces it).
    Writing propagates OSError, since losing the user's data silently is worse.
    """

    def __init__(self, path: str | Path | None = None) -> None:
        # Use custom path if provided (mainly for tests),
        # otherwise fall back to the default user location
        self.path = Path(path) if path is not None else default_store_path()
        self._data: Optional[dict[str, Any]] = None

    def _load(self) -> dict[str, Any]:
        if self._data is not None:
            return self._data

        data: dict[str, Any] = {}
        if self.path.exists():
            try:
                raw = json.loads(self.path.read_text(encoding="utf-8"))
                if isinstance(raw, dict):
                    data = raw
                else:
                    logger.warning("Ignoring store %s: top level is not an object", self.path)
            except (OSError, json.JSONDecodeError, UnicodeDecodeError) as e:
                logger.warning("Ignoring unreadable store %s: %s", self.path, e)

        self._data = data
        return data

    def get(self, key: str, default: Any = None) -> Any:
        return self._load().get(key, default)

    def set(self, key: str, value: Any) -> None:
        data = self._load()
        data[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
