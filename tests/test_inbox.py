# tests/test_inbox.py

from __future__ import annotations

from taskpulse.reminders.inbox import NotificationInbox
from taskpulse.reminders.policy import ReminderEvent, ReminderKind

from .conftest import NOW


def _event(task_id: int, title: str, ts: float, kind: ReminderKind = ReminderKind.OVERDUE_PENDING) -> ReminderEvent:
    return ReminderEvent(
        kind=kind,
        task_id=task_id,
        title="Task Overdue - Pending",
        message=f'The task "{title}" is overdue and has not been started.',
        timestamp=ts,
    )


def _unread(inbox: NotificationInbox) -> int:
    return sum(1 for n in inbox.entries() if not n.read)


def test_append_is_newest_first_and_counts_unread() -> None:
    inbox = NotificationInbox()
    first = inbox.append(_event(1, "a", NOW))
    second = inbox.append(_event(2, "b", NOW + 1))

    assert [n.id for n in inbox.entries()] == [second.id, first.id]
    assert first.id < second.id
    assert inbox.unread_count == 2 == _unread(inbox)


def test_acknowledge_flips_once() -> None:
    inbox = NotificationInbox()
    entry = inbox.append(_event(1, "a", NOW))

    assert inbox.acknowledge(entry.id) is True
    assert inbox.unread_count == 0
    assert inbox.acknowledge(entry.id) is False
    assert inbox.acknowledge(999) is False
    assert inbox.unread_count == 0 == _unread(inbox)


def test_acknowledge_all() -> None:
    inbox = NotificationInbox()
    inbox.append(_event(1, "a", NOW))
    inbox.append(_event(2, "b", NOW))
    assert inbox.acknowledge_all() == 2
    assert inbox.unread_count == 0


def test_sweep_removes_entries_older_than_max_age() -> None:
    inbox = NotificationInbox()
    old = inbox.append(_event(1, "old", NOW - 86401))
    edge = inbox.append(_event(2, "edge", NOW - 86400))
    fresh = inbox.append(_event(3, "fresh", NOW - 10))
    inbox.acknowledge(fresh.id)

    removed = inbox.sweep_older_than(now_ts=NOW)

    assert removed == 1
    assert inbox.get(old.id) is None
    assert inbox.get(edge.id) is not None
    assert inbox.unread_count == 1 == _unread(inbox)


def test_cascade_by_task_id_leaves_other_tasks_alone() -> None:
    inbox = NotificationInbox()
    inbox.append(_event(1, "Pay rent", NOW))
    inbox.append(_event(1, "Pay rent", NOW + 1, ReminderKind.STATUS_CHANGED))
    # Same title, different task: must survive.
    other = inbox.append(_event(2, "Pay rent", NOW + 2))

    assert inbox.cascade_delete_for_task(1) == 2
    assert [n.id for n in inbox.entries()] == [other.id]
    assert inbox.unread_count == 1 == _unread(inbox)


def test_cascade_by_title_matches_quoted_substring() -> None:
    inbox = NotificationInbox()
    inbox.append(_event(1, "rent", NOW))
    keep = inbox.append(_event(2, "Pay rent", NOW))

    assert inbox.cascade_delete_for_title("rent") == 1
    assert [n.id for n in inbox.entries()] == [keep.id]


def test_clear_all_zeroes_everything() -> None:
    inbox = NotificationInbox()
    inbox.append(_event(1, "a", NOW))
    inbox.append(_event(2, "b", NOW))
    inbox.clear_all()
    assert len(inbox) == 0
    assert inbox.unread_count == 0
