# src/taskpulse/preferences.py

from __future__ import annotations

import contextlib
import json
import logging
import os
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

THEME_KEY = "theme"
THEMES = ("light", "dark")


class PreferenceStore:
    """
    Small JSON key-value file for UI preferences (currently only the theme).

    Best-effort: a broken or unwritable file is logged and the in-memory value
    is still used for the rest of the session.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._values: dict[str, Any] = self._load()

    def _load(self) -> dict[str, Any]:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text("utf-8"))
            return data if isinstance(data, dict) else {}
        except Exception:
            logger.exception("Failed to load preferences from %s", self._path)
            return {}

    def _save(self) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp = self._path.with_suffix(".tmp")
            tmp.write_text(json.dumps(self._values, ensure_ascii=False, indent=2), "utf-8")
            os.replace(tmp, self._path)
        except Exception:
            logger.exception("Failed to save preferences to %s", self._path)
            with contextlib.suppress(Exception):
                self._path.with_suffix(".tmp").unlink()

    def get(self, key: str, default: Any = None) -> Any:
        return self._values.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._values[key] = value
        self._save()

    # ---- theme ----

    def get_theme(self) -> str:
        theme = self.get(THEME_KEY, "light")
        return theme if theme in THEMES else "light"

    def set_theme(self, theme: str) -> str:
        theme = (theme or "").strip().lower()
        if theme not in THEMES:
            return self.get_theme()
        self.set(THEME_KEY, theme)
        logger.info("Theme set to %s", theme)
        return theme

    def toggle_theme(self) -> str:
        return self.set_theme("dark" if self.get_theme() == "light" else "light")
