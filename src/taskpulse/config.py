# src/taskpulse/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app (normal "settings layer").
- Nothing required at import time; every value has a default.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "TASKPULSE"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    return value if value > 0 else default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Global switches ----
    console_enabled: bool
    scheduler_enabled: bool
    delivery_enabled: bool

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    preferences_path: Path

    # ---- Scheduler ticks ----
    due_now_tick_seconds: float
    overdue_tick_seconds: float
    inbox_sweep_seconds: float
    inbox_max_age_seconds: float

    # ---- Reminder policy ----
    due_window_seconds: float
    due_now_cooldown_seconds: float
    overdue_cooldown_seconds: float

    @staticmethod
    def from_env() -> "Settings":
        load_dotenv(override=False)

        app_name = _env(_k("APP_NAME"), "taskpulse").strip() or "taskpulse"
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/taskpulse"))
        preferences_path = _env_path(_k("PREFERENCES_PATH"), data_dir / "preferences.json")

        return Settings(
            app_name=app_name,
            log_level=log_level,
            console_enabled=_env_bool(_k("CONSOLE_ENABLED"), True),
            scheduler_enabled=_env_bool(_k("SCHEDULER_ENABLED"), True),
            delivery_enabled=_env_bool(_k("DELIVERY_ENABLED"), True),
            data_dir=data_dir,
            preferences_path=preferences_path,
            due_now_tick_seconds=_env_float(_k("DUE_NOW_TICK_SECONDS"), 60.0),
            overdue_tick_seconds=_env_float(_k("OVERDUE_TICK_SECONDS"), 300.0),
            inbox_sweep_seconds=_env_float(_k("INBOX_SWEEP_SECONDS"), 3600.0),
            inbox_max_age_seconds=_env_float(_k("INBOX_MAX_AGE_SECONDS"), 86400.0),
            due_window_seconds=_env_float(_k("DUE_WINDOW_SECONDS"), 60.0),
            due_now_cooldown_seconds=_env_float(_k("DUE_NOW_COOLDOWN_SECONDS"), 300.0),
            overdue_cooldown_seconds=_env_float(_k("OVERDUE_COOLDOWN_SECONDS"), 3600.0),
        )


_SETTINGS: Settings | None = None


def get_settings() -> Settings:
    global _SETTINGS
    if _SETTINGS is None:
        _SETTINGS = Settings.from_env()
    return _SETTINGS
