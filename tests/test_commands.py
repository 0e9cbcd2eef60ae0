# tests/test_commands.py

from __future__ import annotations

from datetime import datetime, timedelta

from taskpulse.cli.commands import CommandRegistry, group_tasks_by_day, parse_due, registry
from taskpulse.tasks.task_models import TaskStatus

from .conftest import NOW


def test_command_registry_routes_2_and_3_params(state) -> None:
    reg = CommandRegistry()
    called = {"h2": 0, "h3": 0}

    def h2(state, args):
        called["h2"] += 1
        return "h2"

    def h3(state, args, emit):
        called["h3"] += 1
        if emit is not None:
            emit("note")
        return "h3"

    reg.register("a", h2, "a")
    reg.register("b", h3, "b")

    assert reg.handle(state, "/a x") == "h2"
    assert reg.handle(state, "/b y", emit=lambda _: None) == "h3"
    assert called["h2"] == 1
    assert called["h3"] == 1


def test_command_registry_unknown_and_non_command(state) -> None:
    reg = CommandRegistry()
    assert reg.handle(state, "hello") is None
    assert "Unknown command" in (reg.handle(state, "/nope") or "")


def test_parse_due() -> None:
    assert parse_due("now", now_ts=NOW) == NOW
    assert parse_due("+30m", now_ts=NOW) == NOW + 1800
    assert parse_due("+2h", now_ts=NOW) == NOW + 7200
    assert parse_due("+1d", now_ts=NOW) == NOW + 86400
    assert parse_due("2026-10-20T18:30", now_ts=NOW) == datetime(2026, 10, 20, 18, 30).timestamp()
    assert parse_due("soonish", now_ts=NOW) is None
    assert parse_due("", now_ts=NOW) is None
    assert parse_due("+99999999d", now_ts=NOW) is None


def test_group_tasks_by_day_labels(state) -> None:
    ref = datetime(2026, 10, 14, 9, 0, 0)
    now = ref.timestamp()
    store = state.task_store
    store.create(title="later", due_at=(ref + timedelta(days=5)).timestamp(), now_ts=now)
    store.create(title="tomorrow", due_at=(ref + timedelta(days=1)).timestamp(), now_ts=now)
    store.create(title="today", due_at=(ref + timedelta(hours=2)).timestamp(), now_ts=now)

    groups = group_tasks_by_day(store.list(), now_ts=now)

    assert [label for label, _ in groups] == ["Today", "Tomorrow", "October 19, 2026"]
    assert [[t.title for t in ts] for _, ts in groups] == [["today"], ["tomorrow"], ["later"]]


def test_add_list_start_delete_flow(state) -> None:
    reply = registry.handle(state, "/add +2h Pay rent")
    assert reply is not None and reply.startswith("Added #1: Pay rent")

    listing = registry.handle(state, "/list") or ""
    assert "Pay rent" in listing
    assert "0% complete" in listing

    started = registry.handle(state, "/start 1") or ""
    assert "In Progress" in started
    assert state.task_store.get(1).status is TaskStatus.IN_PROGRESS
    assert state.inbox.unread_count == 1

    assert "1 unread" in (registry.handle(state, "/inbox") or "")
    assert registry.handle(state, "/ack 1") == "Marked as read."

    assert registry.handle(state, "/delete 1") == "Deleted #1: Pay rent"
    assert registry.handle(state, "/list") == "No tasks."
    assert registry.handle(state, "/inbox") == "Inbox is empty."


def test_bad_arguments_are_reported_not_raised(state) -> None:
    assert "Usage" in (registry.handle(state, "/add") or "")
    assert "Cannot parse" in (registry.handle(state, "/add someday Thing") or "")
    assert registry.handle(state, "/done 7") == "No task #7."
    assert "Usage" in (registry.handle(state, "/priority 1 urgent") or "")
    assert "Usage" in (registry.handle(state, "/list weird") or "")


def test_toggle_and_stats(state) -> None:
    registry.handle(state, "/add +1h A")
    registry.handle(state, "/add +1h B")
    registry.handle(state, "/toggle 1")
    assert state.task_store.get(1).status is TaskStatus.COMPLETED
    assert "(50%)" in (registry.handle(state, "/stats") or "")
    registry.handle(state, "/toggle 1")
    assert state.task_store.get(1).status is TaskStatus.PENDING


def test_theme_command(state) -> None:
    assert registry.handle(state, "/theme") == "Theme: light"
    assert registry.handle(state, "/theme toggle") == "Theme: dark"
    assert registry.handle(state, "/theme light") == "Theme: light"


def test_status_command_parses_aliases(state) -> None:
    registry.handle(state, "/add +1h Walk")
    assert "In Progress" in (registry.handle(state, "/status 1 in progress") or "")
    assert state.task_store.get(1).status is TaskStatus.IN_PROGRESS
    registry.handle(state, "/status 1 done")
    assert state.task_store.get(1).status is TaskStatus.COMPLETED
    assert "Usage" in (registry.handle(state, "/status 1 maybe") or "")


def test_add_with_unrepresentable_due_is_rejected(state) -> None:
    reply = registry.handle(state, "/add +99999999d Big") or ""

    assert reply.startswith("Cannot parse due date")
    assert state.task_store.count_tasks() == 0
    assert "No tasks" in (registry.handle(state, "/list") or "")
    registry.handle(state, "/stats")
