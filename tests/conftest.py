# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from taskpulse.core.state import AppState
from taskpulse.reminders.inbox import NotificationInbox
from taskpulse.reminders.policy import ReminderPolicy
from taskpulse.tasks.task_store import TaskStore

from .fakes import FakeDelivery, FakePreferences

# Fixed reference time so due/overdue arithmetic is deterministic.
NOW = 1_760_000_000.0


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and core modules.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="taskpulse-test",
        log_level="DEBUG",
        console_enabled=False,
        scheduler_enabled=False,
        delivery_enabled=True,
        data_dir=tmp_path,
        preferences_path=tmp_path / "preferences.json",
        due_now_tick_seconds=60.0,
        overdue_tick_seconds=300.0,
        inbox_sweep_seconds=3600.0,
        inbox_max_age_seconds=86400.0,
        due_window_seconds=60.0,
        due_now_cooldown_seconds=300.0,
        overdue_cooldown_seconds=3600.0,
    )


@pytest.fixture()
def delivery() -> FakeDelivery:
    return FakeDelivery()


@pytest.fixture()
def state(settings: SimpleNamespace, delivery: FakeDelivery) -> AppState:
    """
    AppState wired with deterministic fakes.

    NOTE: the store, inbox and policy are the real implementations because
    their correctness is what we want to test.
    """
    return AppState(
        settings=settings,
        task_store=TaskStore(),
        inbox=NotificationInbox(),
        delivery=delivery,
        preferences=FakePreferences(),
        policy=ReminderPolicy.from_settings(settings),
    )


def assert_unread_invariant(state: AppState) -> None:
    assert state.inbox.unread_count == sum(1 for n in state.inbox.entries() if not n.read)
