"""
Light/dark theme preference, persisted in the key/value store.
"""

from __future__ import annotations

from schedulr.config import THEME_KEY
from schedulr.storage import KeyValueStore


THEMES = ("light", "dark")


def get_theme(store: KeyValueStore) -> str:
    # anything unexpected in the store falls back to light
    return "dark" if store.get(THEME_KEY) == "dark" else "light"


def set_theme(store: KeyValueStore, theme: str) -> str:
    theme = (theme or "").strip().lower()
    if theme not in THEMES:
        raise ValueError(f"Unknown theme: {theme!r} (expected one of {', '.join(THEMES)})")
    store.set(THEME_KEY, theme)
    return theme


def toggle_theme(store: KeyValueStore) -> str:
    return set_theme(store, "light" if get_theme(store) == "dark" else "dark")
