# src/taskpulse/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class TaskStatus(StrEnum):
    """
    Task lifecycle status.

    Notes:
    - only PENDING and IN_PROGRESS are eligible for due/overdue reminders.
    - COMPLETED tasks are exempt from every reminder while they stay Completed;
      a reopened task is polled again from the next tick on.
    """

    PENDING = "Pending"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"

    @classmethod
    def parse(cls, raw: str | None) -> TaskStatus | None:
        if not raw:
            return None
        key = raw.strip().lower().replace("_", " ").replace("-", " ")
        for status in cls:
            if status.value.lower() == key:
                return status
        aliases = {"progress": cls.IN_PROGRESS, "done": cls.COMPLETED, "todo": cls.PENDING}
        return aliases.get(key)


class Priority(StrEnum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"

    @property
    def rank(self) -> int:
        # Display ordering only: High first.
        return {Priority.HIGH: 0, Priority.MEDIUM: 1, Priority.LOW: 2}[self]

    @classmethod
    def parse(cls, raw: str | None) -> Priority | None:
        if not raw:
            return None
        key = raw.strip().lower()
        for prio in cls:
            if prio.value.lower() == key:
                return prio
        return None


class TaskFilter(StrEnum):
    ALL = "all"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"

    def matches(self, task: Task) -> bool:
        if self is TaskFilter.IN_PROGRESS:
            return task.status is TaskStatus.IN_PROGRESS
        if self is TaskFilter.COMPLETED:
            return task.status is TaskStatus.COMPLETED
        return True


@dataclass(slots=True, frozen=True)
class Task:
    id: int
    title: str
    description: str
    due_at: float
    priority: Priority
    status: TaskStatus
    created_at: float

    # Cooldown marker, written only by the reminder scheduler.
    last_notified: float | None = None

    @property
    def is_open(self) -> bool:
        return self.status is not TaskStatus.COMPLETED

    def is_overdue(self, now_ts: float) -> bool:
        return self.due_at < now_ts


@dataclass(slots=True, frozen=True)
class StatusChange:
    """What TaskRepo.update() reports back when a status actually changed."""

    task_id: int
    previous: TaskStatus
    current: TaskStatus
    # Whether the due date had already passed at the moment of the change.
    was_overdue: bool


@dataclass(slots=True, frozen=True)
class TaskStats:
    total: int
    completed: int
    due_today: int
    due_this_week: int
    percent_complete: int
