# src/taskpulse/core/state.py

from __future__ import annotations

import threading
from dataclasses import dataclass, field

from ..reminders.inbox import NotificationInbox
from ..reminders.policy import ReminderPolicy
from .ports import NotificationDelivery, PreferenceRepo, TaskRepo


@dataclass
class AppState:
    # Store Settings on the state for easy access in other modules later.
    settings: object

    task_store: TaskRepo
    inbox: NotificationInbox
    delivery: NotificationDelivery
    preferences: PreferenceRepo
    policy: ReminderPolicy = field(default_factory=ReminderPolicy)

    # Console thread and scheduler thread both mutate the store/inbox; every
    # mutation goes through this lock so there is a single logical owner.
    lock: threading.RLock = field(default_factory=threading.RLock)
