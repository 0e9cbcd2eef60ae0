# src/taskpulse/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires concrete implementations into AppState (store/inbox/delivery/preferences).
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.ports import NotificationDelivery
from ..core.state import AppState
from ..preferences import PreferenceStore
from ..reminders.delivery import DisabledDelivery, LoggingDelivery
from ..reminders.inbox import NotificationInbox
from ..reminders.policy import ReminderPolicy
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.preferences_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    delivery: NotificationDelivery
    if getattr(settings, "delivery_enabled", True):
        delivery = LoggingDelivery()
    else:
        delivery = DisabledDelivery()

    state = AppState(
        settings=settings,
        task_store=TaskStore(),
        inbox=NotificationInbox(),
        delivery=delivery,
        preferences=PreferenceStore(settings.preferences_path),
        policy=ReminderPolicy.from_settings(settings),
    )
    logger.info("State ready (theme=%s)", state.preferences.get_theme())
    return state
