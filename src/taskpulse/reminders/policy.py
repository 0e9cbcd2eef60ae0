# src/taskpulse/reminders/policy.py

from __future__ import annotations

"""
Reminder policy.

Pure decisions: given a task, the current time and the task's cooldown marker,
return at most one reminder event. Nothing here mutates a task, touches the inbox
or talks to a delivery service; the scheduler and task_api do that.

Two families:
- polled (due-now, overdue): re-evaluated on every tick, rate-limited by last_notified
- one-shot (status change): evaluated once when the user changes a status, no cooldown
"""

from dataclasses import dataclass
from enum import StrEnum

from ..tasks.task_models import StatusChange, Task, TaskStatus

DUE_WINDOW_SECONDS = 60.0
DUE_NOW_COOLDOWN_SECONDS = 300.0
OVERDUE_COOLDOWN_SECONDS = 3600.0

PRE_DUE_OFFSET_SECONDS = 3600.0


class ReminderKind(StrEnum):
    DUE_NOW_PENDING = "due_now_pending"
    DUE_NOW_IN_PROGRESS = "due_now_in_progress"
    OVERDUE_PENDING = "overdue_pending"
    OVERDUE_IN_PROGRESS = "overdue_in_progress"
    STATUS_CHANGED = "status_changed"
    OVERDUE_STATUS_CHANGED = "overdue_status_changed"

    @property
    def is_polled(self) -> bool:
        return self not in (ReminderKind.STATUS_CHANGED, ReminderKind.OVERDUE_STATUS_CHANGED)


@dataclass(slots=True, frozen=True)
class ReminderEvent:
    kind: ReminderKind
    task_id: int
    title: str
    message: str
    timestamp: float


@dataclass(slots=True, frozen=True)
class DeliveryRequest:
    """A time-anchored message for the OS-level delivery service."""

    task_id: int
    title: str
    body: str
    deliver_at: float


def _quoted(task: Task) -> str:
    # Inbox messages always carry the title in double quotes.
    return f'"{task.title}"'


def format_reminder(kind: ReminderKind, task: Task) -> tuple[str, str]:
    """Return (title, message) for a reminder of the given kind."""
    name = _quoted(task)

    if kind is ReminderKind.DUE_NOW_PENDING:
        return "Task Due Now - Still Pending", f"The task {name} is due now and has not been started."
    if kind is ReminderKind.DUE_NOW_IN_PROGRESS:
        return "Task Due Now - In Progress", f"The task {name} is due now and is still in progress."
    if kind is ReminderKind.OVERDUE_PENDING:
        return "Task Overdue - Pending", f"The task {name} is overdue and has not been started."
    if kind is ReminderKind.OVERDUE_IN_PROGRESS:
        return "Task Overdue - In Progress", f"The task {name} is overdue and is still in progress."
    if kind is ReminderKind.STATUS_CHANGED:
        return "Task Status Changed", f"The task {name} is now {task.status.value}."
    if kind is ReminderKind.OVERDUE_STATUS_CHANGED:
        return (
            "Overdue Task Updated",
            f"The overdue task {name} is now {task.status.value}.",
        )
    raise ValueError(f"unknown reminder kind: {kind!r}")


def _event(kind: ReminderKind, task: Task, now_ts: float) -> ReminderEvent:
    title, message = format_reminder(kind, task)
    return ReminderEvent(kind=kind, task_id=task.id, title=title, message=message, timestamp=now_ts)


def _cooled_down(task: Task, now_ts: float, cooldown: float) -> bool:
    return task.last_notified is None or now_ts - task.last_notified >= cooldown


@dataclass(slots=True, frozen=True)
class ReminderPolicy:
    due_window_seconds: float = DUE_WINDOW_SECONDS
    due_now_cooldown_seconds: float = DUE_NOW_COOLDOWN_SECONDS
    overdue_cooldown_seconds: float = OVERDUE_COOLDOWN_SECONDS

    @classmethod
    def from_settings(cls, settings: object) -> ReminderPolicy:
        return cls(
            due_window_seconds=float(getattr(settings, "due_window_seconds", DUE_WINDOW_SECONDS)),
            due_now_cooldown_seconds=float(
                getattr(settings, "due_now_cooldown_seconds", DUE_NOW_COOLDOWN_SECONDS)
            ),
            overdue_cooldown_seconds=float(
                getattr(settings, "overdue_cooldown_seconds", OVERDUE_COOLDOWN_SECONDS)
            ),
        )

    def check_due_now(self, task: Task, now_ts: float) -> ReminderEvent | None:
        if not task.is_open:
            return None
        if abs(now_ts - task.due_at) > self.due_window_seconds:
            return None
        if not _cooled_down(task, now_ts, self.due_now_cooldown_seconds):
            return None

        if task.status is TaskStatus.IN_PROGRESS:
            return _event(ReminderKind.DUE_NOW_IN_PROGRESS, task, now_ts)
        return _event(ReminderKind.DUE_NOW_PENDING, task, now_ts)

    def check_overdue(self, task: Task, now_ts: float) -> ReminderEvent | None:
        if not task.is_open:
            return None
        if not task.is_overdue(now_ts):
            return None
        if not _cooled_down(task, now_ts, self.overdue_cooldown_seconds):
            return None

        if task.status is TaskStatus.IN_PROGRESS:
            return _event(ReminderKind.OVERDUE_IN_PROGRESS, task, now_ts)
        return _event(ReminderKind.OVERDUE_PENDING, task, now_ts)

    def on_status_change(self, change: StatusChange, task: Task, now_ts: float) -> ReminderEvent | None:
        """
        One-shot reminder for a manual status change.

        - moving to COMPLETED never produces a reminder
        - an open -> open change on an overdue task produces OVERDUE_STATUS_CHANGED
        - anything else (including reopening a completed task) produces STATUS_CHANGED
        The cooldown marker is deliberately not consulted.
        """
        if change.current is TaskStatus.COMPLETED:
            return None
        if change.previous is change.current:
            return None

        if change.was_overdue and change.previous is not TaskStatus.COMPLETED:
            return _event(ReminderKind.OVERDUE_STATUS_CHANGED, task, now_ts)
        return _event(ReminderKind.STATUS_CHANGED, task, now_ts)


def plan_deliveries(task: Task, now_ts: float) -> list[DeliveryRequest]:
    """
    Pre-due category: messages handed to the OS delivery service for a task.

    Anchored at due - 1h, due and due + 1h. Anchors already in the past are dropped,
    and completed tasks get nothing.
    """
    if not task.is_open:
        return []

    name = _quoted(task)
    plan = [
        (task.due_at - PRE_DUE_OFFSET_SECONDS, "Task Due Soon", f"The task {name} is due in 1 hour!"),
        (task.due_at, "Task Due Now", f"The task {name} is due now!"),
        (task.due_at + PRE_DUE_OFFSET_SECONDS, "Task Overdue", f"The task {name} is overdue by 1 hour!"),
    ]
    return [
        DeliveryRequest(task_id=task.id, title=title, body=body, deliver_at=at)
        for at, title, body in plan
        if at >= now_ts
    ]
