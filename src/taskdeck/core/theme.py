# src/taskdeck/core/theme.py

from __future__ import annotations

import contextlib
import json
import logging
import os
from enum import StrEnum
from pathlib import Path

logger = logging.getLogger(__name__)


class Theme(StrEnum):
    LIGHT = "light"
    DARK = "dark"

    def toggled(self) -> Theme:
        return Theme.LIGHT if self is Theme.DARK else Theme.DARK


class ThemeStore:
    """
    Persisted light/dark preference: a tiny JSON file {"theme": "dark"}.

    Missing or unreadable file -> light.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    def load(self) -> Theme:
        if not self._path.exists():
            return Theme.LIGHT
        try:
            data = json.loads(self._path.read_text("utf-8"))
        except (OSError, ValueError):
            logger.warning("Failed to read theme preference from %s; using light", self._path)
            return Theme.LIGHT
        raw = data.get("theme") if isinstance(data, dict) else None
        return Theme.DARK if raw == Theme.DARK.value else Theme.LIGHT

    def save(self, theme: Theme) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_suffix(".tmp")
        tmp.write_text(json.dumps({"theme": theme.value}), "utf-8")
        os.replace(tmp, self._path)
        with contextlib.suppress(OSError):
            os.chmod(self._path, 0o600)
        logger.debug("Saved theme=%s to %s", theme.value, self._path)

    def toggle(self) -> Theme:
        theme = self.load().toggled()
        self.save(theme)
        return theme
