# src/taskpulse/tasks/task_api.py

from __future__ import annotations

import logging
import time

from ..core.state import AppState
from ..reminders.delivery import request_deliveries
from ..reminders.inbox import Notification
from ..reminders.policy import plan_deliveries
from .task_models import Priority, Task, TaskStatus

logger = logging.getLogger(__name__)


def _now(now_ts: float | None) -> float:
    return time.time() if now_ts is None else float(now_ts)


def _schedule_deliveries(state: AppState, task: Task, now_ts: float) -> None:
    requests = plan_deliveries(task, now_ts)
    if not requests:
        return
    accepted = request_deliveries(state.delivery, requests)
    logger.debug("Delivery requests task_id=%s planned=%d accepted=%d", task.id, len(requests), accepted)


def add_task(
    state: AppState,
    *,
    title: str,
    description: str = "",
    due_at: float | None = None,
    priority: Priority = Priority.MEDIUM,
    now_ts: float | None = None,
) -> Task | None:
    """
    User command: create a task and hand its time-anchored reminders to the
    delivery service. Returns None when the title is empty.
    """
    now = _now(now_ts)
    task = state.task_store.create(
        title=title,
        description=description,
        due_at=due_at,
        priority=priority,
        now_ts=now,
    )
    if task is None:
        return None

    _schedule_deliveries(state, task, now)
    return task


def update_task(
    state: AppState,
    task_id: int,
    *,
    title: str | None = None,
    description: str | None = None,
    priority: Priority | None = None,
    status: TaskStatus | None = None,
    now_ts: float | None = None,
) -> Notification | None:
    """
    User command: merge fields into a task.

    When the status changed, the one-shot status-change reminder (if any)
    goes straight into the inbox. Returns that inbox entry, else None.
    """
    now = _now(now_ts)
    change = state.task_store.update(
        task_id,
        title=title,
        description=description,
        priority=priority,
        status=status,
        now_ts=now,
    )
    if change is None:
        return None

    task = state.task_store.get(task_id)
    if task is None:
        return None

    event = state.policy.on_status_change(change, task, now)
    if event is None:
        return None
    return state.inbox.append(event)


def reschedule_task(
    state: AppState,
    task_id: int,
    due_at: float,
    *,
    now_ts: float | None = None,
) -> Task | None:
    """User command: move the due date and re-request time-anchored deliveries."""
    task = state.task_store.reschedule(task_id, due_at)
    if task is None:
        return None
    _schedule_deliveries(state, task, _now(now_ts))
    return task


def delete_task(state: AppState, task_id: int) -> Task | None:
    """
    User command: delete a task and every inbox entry that refers to it.

    When the last task goes away the inbox is cleared entirely.
    """
    task = state.task_store.delete(task_id)
    if task is None:
        return None

    state.inbox.cascade_delete_for_task(task.id)
    if state.task_store.count_tasks() == 0:
        state.inbox.clear_all()
    return task


def acknowledge(state: AppState, notification_id: int) -> bool:
    return state.inbox.acknowledge(notification_id)
