# tests/test_task_api.py

from __future__ import annotations

from taskpulse.core.state import AppState
from taskpulse.reminders.policy import ReminderKind
from taskpulse.reminders.scheduler import ReminderScheduler
from taskpulse.tasks import task_api
from taskpulse.tasks.task_models import TaskStatus

from .conftest import NOW, assert_unread_invariant
from .fakes import FailingDelivery, FakeDelivery


def test_add_task_requests_time_anchored_deliveries(state: AppState, delivery: FakeDelivery) -> None:
    task = task_api.add_task(state, title="Dentist", due_at=NOW + 7200, now_ts=NOW)
    assert task is not None

    assert [d.deliver_at for d in delivery.scheduled] == [NOW + 3600, NOW + 7200, NOW + 10800]
    assert all(d.task_id == task.id for d in delivery.scheduled)
    assert '"Dentist"' in delivery.scheduled[0].body
    # Creation alone never writes to the inbox.
    assert len(state.inbox) == 0


def test_add_task_with_empty_title_is_ignored(state: AppState, delivery: FakeDelivery) -> None:
    assert task_api.add_task(state, title="  ", now_ts=NOW) is None
    assert state.task_store.count_tasks() == 0
    assert delivery.scheduled == []


def test_delivery_failure_is_swallowed(state: AppState) -> None:
    failing = FailingDelivery()
    state.delivery = failing

    task = task_api.add_task(state, title="Still stored", due_at=NOW + 7200, now_ts=NOW)

    assert task is not None
    assert failing.calls == 3
    assert state.task_store.get(task.id) is not None
    assert len(state.inbox) == 0


def test_status_change_on_overdue_task_fires_once_regardless_of_cooldown(state: AppState) -> None:
    task = task_api.add_task(state, title="Taxes", due_at=NOW - 600, now_ts=NOW - 7200)
    assert task is not None
    # A polled reminder just fired, so the cooldown marker is fresh.
    ReminderScheduler(state).run_all(NOW - 10)
    before = len(state.inbox)

    entry = task_api.update_task(state, task.id, status=TaskStatus.IN_PROGRESS, now_ts=NOW)

    assert entry is not None
    assert entry.kind is ReminderKind.OVERDUE_STATUS_CHANGED
    assert entry.task_id == task.id
    assert len(state.inbox) == before + 1
    assert_unread_invariant(state)


def test_status_change_on_future_task_is_plain(state: AppState) -> None:
    task = task_api.add_task(state, title="Gym", due_at=NOW + 3600, now_ts=NOW)
    assert task is not None
    entry = task_api.update_task(state, task.id, status=TaskStatus.IN_PROGRESS, now_ts=NOW)
    assert entry is not None
    assert entry.kind is ReminderKind.STATUS_CHANGED


def test_completing_never_emits_and_silences_polling(state: AppState) -> None:
    task = task_api.add_task(state, title="Ship it", due_at=NOW - 60, now_ts=NOW - 120)
    assert task is not None

    assert task_api.update_task(state, task.id, status=TaskStatus.COMPLETED, now_ts=NOW) is None
    assert len(state.inbox) == 0

    scheduler = ReminderScheduler(state)
    for hours in range(0, 48):
        assert scheduler.run_all(NOW + hours * 3600) == []


def test_non_status_update_emits_nothing(state: AppState) -> None:
    task = task_api.add_task(state, title="Read", due_at=NOW - 60, now_ts=NOW - 120)
    assert task is not None
    assert task_api.update_task(state, task.id, title="Read a book", now_ts=NOW) is None
    assert task_api.update_task(state, 999, status=TaskStatus.IN_PROGRESS, now_ts=NOW) is None
    assert len(state.inbox) == 0


def test_delete_cascades_only_that_tasks_entries(state: AppState) -> None:
    rent = task_api.add_task(state, title="Pay rent", due_at=NOW, now_ts=NOW - 60)
    twin = task_api.add_task(state, title="Pay rent", due_at=NOW, now_ts=NOW - 60)
    other = task_api.add_task(state, title="Walk dog", due_at=NOW, now_ts=NOW - 60)
    assert rent and twin and other
    ReminderScheduler(state).run_all(NOW)
    assert len(state.inbox) == 3
    state.inbox.acknowledge(state.inbox.entries()[0].id)

    removed = task_api.delete_task(state, rent.id)

    assert removed is not None and removed.id == rent.id
    assert {n.task_id for n in state.inbox.entries()} == {twin.id, other.id}
    assert_unread_invariant(state)


def test_deleting_last_task_clears_inbox(state: AppState) -> None:
    a = task_api.add_task(state, title="a", due_at=NOW, now_ts=NOW)
    b = task_api.add_task(state, title="b", due_at=NOW, now_ts=NOW)
    assert a and b
    ReminderScheduler(state).run_all(NOW)
    task_api.update_task(state, a.id, status=TaskStatus.IN_PROGRESS, now_ts=NOW + 1)

    task_api.delete_task(state, a.id)
    assert len(state.inbox) > 0
    task_api.delete_task(state, b.id)

    assert state.task_store.count_tasks() == 0
    assert len(state.inbox) == 0
    assert state.inbox.unread_count == 0


def test_delete_unknown_is_noop(state: AppState) -> None:
    assert task_api.delete_task(state, 42) is None


def test_reschedule_requests_new_deliveries(state: AppState, delivery: FakeDelivery) -> None:
    task = task_api.add_task(state, title="Call mom", due_at=NOW - 100, now_ts=NOW - 200)
    assert task is not None
    delivery.scheduled.clear()

    moved = task_api.reschedule_task(state, task.id, NOW + 7200, now_ts=NOW)

    assert moved is not None and moved.due_at == NOW + 7200
    assert len(delivery.scheduled) == 3
    assert task_api.reschedule_task(state, 999, NOW, now_ts=NOW) is None


def test_acknowledge_keeps_unread_invariant(state: AppState) -> None:
    task = task_api.add_task(state, title="x", due_at=NOW, now_ts=NOW)
    assert task is not None
    ReminderScheduler(state).run_all(NOW)
    entry = state.inbox.entries()[0]

    assert task_api.acknowledge(state, entry.id) is True
    assert task_api.acknowledge(state, entry.id) is False
    assert state.inbox.unread_count == 0
    assert_unread_invariant(state)


def test_string_completed_status_silences_overdue_task(state: AppState) -> None:
    task = task_api.add_task(state, title="Taxes", due_at=NOW - 600, now_ts=NOW - 7200)
    assert task is not None

    assert task_api.update_task(state, task.id, status="Completed", now_ts=NOW) is None  # type: ignore[arg-type]

    assert state.task_store.get(task.id).status is TaskStatus.COMPLETED  # type: ignore[union-attr]
    assert ReminderScheduler(state).run_all(NOW + 3600) == []
    assert len(state.inbox) == 0
