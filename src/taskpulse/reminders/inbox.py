# src/taskpulse/reminders/inbox.py

from __future__ import annotations

import itertools
import logging
import time
from dataclasses import dataclass

from .policy import ReminderEvent, ReminderKind

logger = logging.getLogger(__name__)

DEFAULT_MAX_AGE_SECONDS = 24 * 3600.0


@dataclass(slots=True)
class Notification:
    id: int
    kind: ReminderKind
    task_id: int
    title: str
    message: str
    timestamp: float
    read: bool = False


class NotificationInbox:
    """
    Ordered log of emitted reminders, newest first.

    The unread count is derived from the entries on every read, there is no
    separate counter that callers could get out of sync.
    """

    def __init__(self) -> None:
        self._entries: list[Notification] = []
        self._ids = itertools.count(1)

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def unread_count(self) -> int:
        return sum(1 for n in self._entries if not n.read)

    def entries(self) -> tuple[Notification, ...]:
        return tuple(self._entries)

    def get(self, notification_id: int) -> Notification | None:
        for n in self._entries:
            if n.id == notification_id:
                return n
        return None

    def append(self, event: ReminderEvent) -> Notification:
        entry = Notification(
            id=next(self._ids),
            kind=event.kind,
            task_id=event.task_id,
            title=event.title,
            message=event.message,
            timestamp=event.timestamp,
        )
        self._entries.insert(0, entry)
        logger.debug("Inbox append id=%s kind=%s task_id=%s", entry.id, entry.kind.value, entry.task_id)
        return entry

    def acknowledge(self, notification_id: int) -> bool:
        """Mark an entry as read. Returns True only if an unread entry flipped."""
        entry = self.get(notification_id)
        if entry is None or entry.read:
            return False
        entry.read = True
        return True

    def acknowledge_all(self) -> int:
        flipped = 0
        for n in self._entries:
            if not n.read:
                n.read = True
                flipped += 1
        return flipped

    def sweep_older_than(
        self,
        max_age_seconds: float = DEFAULT_MAX_AGE_SECONDS,
        *,
        now_ts: float | None = None,
    ) -> int:
        now = time.time() if now_ts is None else float(now_ts)
        cutoff = now - float(max_age_seconds)
        return self._remove(lambda n: n.timestamp < cutoff, reason="age")

    def cascade_delete_for_task(self, task_id: int) -> int:
        return self._remove(lambda n: n.task_id == task_id, reason=f"task {task_id} deleted")

    def cascade_delete_for_title(self, title: str) -> int:
        """Legacy title match: removes entries whose message contains '"<title>"'."""
        needle = f'"{title}"'
        return self._remove(lambda n: needle in n.message, reason="title match")

    def clear_all(self) -> None:
        if self._entries:
            logger.info("Inbox cleared (%d entries)", len(self._entries))
        self._entries.clear()

    def _remove(self, predicate, *, reason: str) -> int:
        kept = [n for n in self._entries if not predicate(n)]
        removed = len(self._entries) - len(kept)
        self._entries = kept
        if removed:
            logger.info("Inbox removed %d entries (%s)", removed, reason)
        return removed
