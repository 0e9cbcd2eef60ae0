# tests/test_preferences.py

from __future__ import annotations

from pathlib import Path

from taskpulse.preferences import PreferenceStore


def test_theme_roundtrip_persists(tmp_path: Path) -> None:
    path = tmp_path / "prefs" / "preferences.json"
    store = PreferenceStore(path)
    assert store.get_theme() == "light"

    assert store.toggle_theme() == "dark"
    assert path.exists()

    reopened = PreferenceStore(path)
    assert reopened.get_theme() == "dark"


def test_invalid_theme_is_ignored(tmp_path: Path) -> None:
    store = PreferenceStore(tmp_path / "preferences.json")
    assert store.set_theme("neon") == "light"
    assert store.get("theme") is None


def test_corrupt_file_falls_back_to_defaults(tmp_path: Path) -> None:
    path = tmp_path / "preferences.json"
    path.write_text("{not json", "utf-8")
    store = PreferenceStore(path)
    assert store.get_theme() == "light"
    store.set_theme("dark")
    assert PreferenceStore(path).get_theme() == "dark"


def test_unwritable_location_keeps_in_memory_value(tmp_path: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("a file, not a directory", "utf-8")
    store = PreferenceStore(blocker / "preferences.json")

    assert store.set_theme("dark") == "dark"
    assert store.get_theme() == "dark"
