# src/taskpulse/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The core depends on Protocols instead of concrete implementations.
This keeps the task store, delivery service and preference storage swappable and makes testing easier.
"""

from typing import Any, Protocol

from ..tasks.task_models import Priority, StatusChange, Task, TaskFilter, TaskStats, TaskStatus


class NotificationDelivery(Protocol):
    """
    OS-level notification service: "deliver this message at this time".

    Independent of the in-app inbox. The core never observes success or failure;
    implementations may raise and the caller will log and carry on.
    """

    def schedule(self, *, task_id: int, title: str, body: str, deliver_at: float) -> None: ...


class PreferenceRepo(Protocol):
    def get(self, key: str, default: Any = None) -> Any: ...
    def set(self, key: str, value: Any) -> None: ...
    def get_theme(self) -> str: ...
    def set_theme(self, theme: str) -> str: ...
    def toggle_theme(self) -> str: ...



class TaskRepo(Protocol):
    """
    Task storage as seen by the caller layer, the console and the reminder scheduler.

    Calls are not synchronized here; callers hold AppState.lock.
    """

    def get(self, task_id: int) -> Task | None: ...
    def count_tasks(self) -> int: ...

    def create(
        self,
        *,
        title: str,
        description: str = "",
        due_at: float | None = None,
        priority: Priority = Priority.MEDIUM,
        now_ts: float | None = None,
    ) -> Task | None: ...

    def update(
        self,
        task_id: int,
        *,
        title: str | None = None,
        description: str | None = None,
        priority: Priority | None = None,
        status: TaskStatus | None = None,
        now_ts: float | None = None,
    ) -> StatusChange | None: ...

    def reschedule(self, task_id: int, due_at: float) -> Task | None: ...
    def delete(self, task_id: int) -> Task | None: ...
    def mark_notified(self, task_id: int, ts: float) -> bool: ...

    def list(self, task_filter: TaskFilter = TaskFilter.ALL) -> tuple[Task, ...]: ...
    def snapshot_open(self) -> tuple[Task, ...]: ...
    def percent_complete(self) -> int: ...
    def stats(self, now_ts: float | None = None) -> TaskStats: ...
    def clear(self) -> None: ...
