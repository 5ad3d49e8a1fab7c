# tests/test_theme.py

from __future__ import annotations

import json
from pathlib import Path

from taskdeck.core.theme import Theme, ThemeStore


def test_missing_preference_defaults_to_light(tmp_path: Path) -> None:
    assert ThemeStore(tmp_path / "prefs.json").load() == Theme.LIGHT


def test_toggle_persists(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "prefs.json"
    store = ThemeStore(path)

    assert store.toggle() == Theme.DARK
    assert json.loads(path.read_text("utf-8")) == {"theme": "dark"}
    assert ThemeStore(path).load() == Theme.DARK

    assert store.toggle() == Theme.LIGHT
    assert ThemeStore(path).load() == Theme.LIGHT


def test_garbage_preference_reads_as_light(tmp_path: Path) -> None:
    path = tmp_path / "prefs.json"
    path.write_text("{broken", "utf-8")
    assert ThemeStore(path).load() == Theme.LIGHT

    path.write_text('{"theme": "neon"}', "utf-8")
    assert ThemeStore(path).load() == Theme.LIGHT
