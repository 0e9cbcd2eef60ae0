# src/taskpulse/tasks/task_store.py

from __future__ import annotations

import itertools
import logging
import math
import time
from dataclasses import replace
from datetime import datetime

from .task_models import Priority, StatusChange, Task, TaskFilter, TaskStats, TaskStatus

logger = logging.getLogger(__name__)


def _coerce_status(value: object) -> TaskStatus | None:
    # Plain strings ("Completed", "done") are accepted; anything else is dropped.
    if value is None or isinstance(value, TaskStatus):
        return value
    return TaskStatus.parse(value) if isinstance(value, str) else None


def _coerce_priority(value: object) -> Priority | None:
    if value is None or isinstance(value, Priority):
        return value
    return Priority.parse(value) if isinstance(value, str) else None


class TaskStore:
    """
    In-memory task store (process lifetime only).

    Owns Task lifetime. Tasks are frozen dataclasses, so every mutation replaces
    the stored value and callers never hold a live reference into the store.

    Thread-safety:
    - none; all calls are expected to be serialized by the caller (AppState.lock)
    """

    def __init__(self) -> None:
        self._tasks: dict[int, Task] = {}
        self._ids = itertools.count(1)
        logger.info("TaskStore ready (in-memory)")

    def clear(self) -> None:
        self._tasks.clear()

    # ---- low-level helpers ----

    @staticmethod
    def _now(now_ts: float | None) -> float:
        return time.time() if now_ts is None else float(now_ts)

    @staticmethod
    def _sort_key(task: Task) -> tuple[int, float, float]:
        return (task.priority.rank, task.due_at, task.created_at)

    # ---- public API ----

    def __len__(self) -> int:
        return len(self._tasks)

    def count_tasks(self) -> int:
        return len(self._tasks)

    def get(self, task_id: int) -> Task | None:
        return self._tasks.get(task_id)

    def create(
        self,
        *,
        title: str,
        description: str = "",
        due_at: float | None = None,
        priority: Priority = Priority.MEDIUM,
        now_ts: float | None = None,
    ) -> Task | None:
        """
        Insert a new task.

        Status is always PENDING on creation. Returns None (and stores nothing)
        when the title is empty after trimming.
        """
        clean_title = (title or "").strip()
        if not clean_title:
            logger.debug("Task create ignored: empty title")
            return None

        now = self._now(now_ts)
        task = Task(
            id=next(self._ids),
            title=clean_title,
            description=(description or "").strip(),
            due_at=now if due_at is None else float(due_at),
            priority=_coerce_priority(priority) or Priority.MEDIUM,
            status=TaskStatus.PENDING,
            created_at=now,
        )
        self._tasks[task.id] = task
        logger.debug(
            "Task added id=%s priority=%s due_at=%s",
            task.id,
            task.priority.value,
            task.due_at,
        )
        return task

    def update(
        self,
        task_id: int,
        *,
        title: str | None = None,
        description: str | None = None,
        priority: Priority | None = None,
        status: TaskStatus | None = None,
        now_ts: float | None = None,
    ) -> StatusChange | None:
        """
        Merge the given fields into the task.

        id, created_at, due_at and last_notified are not reachable from here.
        Returns a StatusChange when the status actually changed, so the caller
        can decide whether a status-change reminder is due. Unknown ids are a no-op.
        """
        task = self._tasks.get(task_id)
        if task is None:
            logger.debug("Task update ignored: unknown id=%s", task_id)
            return None

        changes: dict[str, object] = {}

        if title is not None:
            clean_title = title.strip()
            if clean_title:
                changes["title"] = clean_title
            else:
                logger.debug("Task update id=%s: empty title ignored", task_id)

        if description is not None:
            changes["description"] = description.strip()

        new_priority = _coerce_priority(priority)
        if new_priority is not None:
            changes["priority"] = new_priority
        elif priority is not None:
            logger.debug("Task update id=%s: unknown priority %r ignored", task_id, priority)

        new_status = _coerce_status(status)
        if new_status is not None:
            changes["status"] = new_status
        elif status is not None:
            logger.debug("Task update id=%s: unknown status %r ignored", task_id, status)

        if not changes:
            return None

        self._tasks[task_id] = replace(task, **changes)

        if new_status is None or new_status == task.status:
            return None

        now = self._now(now_ts)
        change = StatusChange(
            task_id=task_id,
            previous=task.status,
            current=new_status,
            was_overdue=task.is_overdue(now),
        )
        logger.info("Task %s status %s -> %s", task_id, change.previous.value, change.current.value)
        return change

    def reschedule(self, task_id: int, due_at: float) -> Task | None:
        """Explicit due-date edit. Not part of ordinary update()."""
        task = self._tasks.get(task_id)
        if task is None:
            return None
        updated = replace(task, due_at=float(due_at))
        self._tasks[task_id] = updated
        logger.info("Task %s rescheduled due_at=%s", task_id, updated.due_at)
        return updated

    def mark_notified(self, task_id: int, ts: float) -> bool:
        """
        Advance the cooldown marker.

        The marker only moves forward; an older timestamp is ignored.
        """
        task = self._tasks.get(task_id)
        if task is None:
            return False
        if task.last_notified is not None and ts < task.last_notified:
            logger.debug(
                "mark_notified ignored id=%s ts=%s < last_notified=%s",
                task_id,
                ts,
                task.last_notified,
            )
            return False
        self._tasks[task_id] = replace(task, last_notified=float(ts))
        return True

    def delete(self, task_id: int) -> Task | None:
        task = self._tasks.pop(task_id, None)
        if task is None:
            logger.debug("Task delete ignored: unknown id=%s", task_id)
        else:
            logger.info("Task %s deleted", task_id)
        return task

    def list(self, task_filter: TaskFilter = TaskFilter.ALL) -> tuple[Task, ...]:
        """
        All tasks matching the filter, High priority first, then by due date.

        No pagination: this is a single user's personal list.
        """
        return tuple(sorted((t for t in self._tasks.values() if task_filter.matches(t)), key=self._sort_key))

    def snapshot_open(self) -> tuple[Task, ...]:
        """Non-completed tasks, as evaluated by the reminder scheduler."""
        return tuple(t for t in self._tasks.values() if t.is_open)

    def percent_complete(self) -> int:
        total = len(self._tasks)
        if total == 0:
            return 0
        completed = sum(1 for t in self._tasks.values() if t.status is TaskStatus.COMPLETED)
        # Half-up rounding, so 12.5 -> 13.
        return int(math.floor(100 * completed / total + 0.5))

    def stats(self, now_ts: float | None = None) -> TaskStats:
        now = datetime.fromtimestamp(self._now(now_ts))
        today = now.date()
        week = now.isocalendar()[:2]

        completed = 0
        due_today = 0
        due_this_week = 0
        for task in self._tasks.values():
            if task.status is TaskStatus.COMPLETED:
                completed += 1
                continue
            due = datetime.fromtimestamp(task.due_at)
            if due.date() == today:
                due_today += 1
            if due.isocalendar()[:2] == week:
                due_this_week += 1

        return TaskStats(
            total=len(self._tasks),
            completed=completed,
            due_today=due_today,
            due_this_week=due_this_week,
            percent_complete=self.percent_complete(),
        )
