# src/taskpulse/cli/commands.py

from __future__ import annotations

import inspect
import logging
import re
import time
from collections.abc import Callable, Iterable
from datetime import date, datetime, timedelta
from typing import cast

from ..core.state import AppState
from ..reminders.scheduler import ReminderScheduler
from ..tasks import task_api
from ..tasks.task_models import Priority, Task, TaskFilter, TaskStatus

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)

_RELATIVE_DUE = re.compile(r"^\+(\d+)([mhd])$")
_UNIT_SECONDS = {"m": 60, "h": 3600, "d": 86400}


class CommandRegistry:
    """Simple slash-command registry used by the console (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except Exception:
            nparams = 3

        if nparams >= 3:
            h3 = cast(CommandHandler3, handler)
            return h3(state, args, emit)

        h2 = cast(CommandHandler2, handler)
        return h2(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- view helpers ----


def parse_due(raw: str, *, now_ts: float | None = None) -> float | None:
    """
    Parse a due-date argument:
      now | +30m | +2h | +1d | 2026-10-20 | 2026-10-20T18:30
    Naive ISO values are local time. Returns None if unparseable.
    """
    now = time.time() if now_ts is None else float(now_ts)
    text = (raw or "").strip().lower()
    if not text:
        return None
    if text == "now":
        return now

    m = _RELATIVE_DUE.match(text)
    try:
        if m:
            due = now + int(m.group(1)) * _UNIT_SECONDS[m.group(2)]
        else:
            due = datetime.fromisoformat(raw.strip()).timestamp()
        # Must stay representable, the list and stats views format it.
        datetime.fromtimestamp(due)
    except (ValueError, OverflowError, OSError):
        return None
    return due


def _day_label(day: date, today: date) -> str:
    if day == today:
        return "Today"
    if day == today + timedelta(days=1):
        return "Tomorrow"
    return day.strftime("%B %d, %Y")


def group_tasks_by_day(tasks: Iterable[Task], *, now_ts: float | None = None) -> list[tuple[str, list[Task]]]:
    """Group (already ordered) tasks by local due day, days ascending."""
    today = datetime.fromtimestamp(time.time() if now_ts is None else now_ts).date()
    groups: dict[date, list[Task]] = {}
    for task in tasks:
        groups.setdefault(datetime.fromtimestamp(task.due_at).date(), []).append(task)
    return [(_day_label(day, today), groups[day]) for day in sorted(groups)]


def _fmt_time(ts: float) -> str:
    return datetime.fromtimestamp(ts).strftime("%H:%M")


def _fmt_task(task: Task) -> str:
    return f"  #{task.id} [{task.status.value}] ({task.priority.value}) {task.title} @ {_fmt_time(task.due_at)}"


def _parse_id(args: list[str]) -> int | None:
    if not args:
        return None
    try:
        return int(args[0].lstrip("#"))
    except ValueError:
        return None


# ---- commands ----


def cmd_help(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    return registry.build_help()


def cmd_add(state: AppState, args: list[str]) -> str:
    """
    /add <due> <title...>
    /add +2h Pay rent
    """
    if len(args) < 2:
        return "Usage: /add <now|+30m|+2h|+1d|ISO datetime> <title...>"
    due_at = parse_due(args[0])
    if due_at is None:
        return f"Cannot parse due date: {args[0]}"
    with state.lock:
        task = task_api.add_task(state, title=" ".join(args[1:]), due_at=due_at)
    if task is None:
        return "Task title cannot be empty."
    return f"Added #{task.id}: {task.title} (due {datetime.fromtimestamp(task.due_at):%Y-%m-%d %H:%M})"


_FILTERS = {
    "all": TaskFilter.ALL,
    "progress": TaskFilter.IN_PROGRESS,
    "in_progress": TaskFilter.IN_PROGRESS,
    "done": TaskFilter.COMPLETED,
    "completed": TaskFilter.COMPLETED,
}


def cmd_list(state: AppState, args: list[str]) -> str:
    key = args[0].lower() if args else "all"
    task_filter = _FILTERS.get(key)
    if task_filter is None:
        return "Usage: /list [all|progress|done]"
    with state.lock:
        tasks = state.task_store.list(task_filter)
        progress = state.task_store.percent_complete()
    if not tasks:
        return "No tasks."
    lines = [f"Tasks ({progress}% complete):"]
    for label, group in group_tasks_by_day(tasks):
        lines.append(label)
        lines.extend(_fmt_task(t) for t in group)
    return "\n".join(lines)


def _set_status(state: AppState, args: list[str], status: TaskStatus) -> str:
    task_id = _parse_id(args)
    if task_id is None:
        return "Usage: /<command> <task id>"
    with state.lock:
        if state.task_store.get(task_id) is None:
            return f"No task #{task_id}."
        entry = task_api.update_task(state, task_id, status=status)
    reply = f"Task #{task_id} is now {status.value}."
    if entry is not None:
        reply += f"\n  [{entry.title}] {entry.message}"
    return reply


def cmd_start(state: AppState, args: list[str]) -> str:
    return _set_status(state, args, TaskStatus.IN_PROGRESS)


def cmd_pending(state: AppState, args: list[str]) -> str:
    return _set_status(state, args, TaskStatus.PENDING)


def cmd_done(state: AppState, args: list[str]) -> str:
    return _set_status(state, args, TaskStatus.COMPLETED)


def cmd_status(state: AppState, args: list[str]) -> str:
    """/status <id> pending|progress|done"""
    status = TaskStatus.parse(" ".join(args[1:])) if len(args) > 1 else None
    if status is None:
        return "Usage: /status <task id> pending|progress|done"
    return _set_status(state, args, status)


def cmd_toggle(state: AppState, args: list[str]) -> str:
    """Completed <-> Pending, like the list menu's "Mark as Complete/Pending"."""
    task_id = _parse_id(args)
    if task_id is None:
        return "Usage: /toggle <task id>"
    with state.lock:
        task = state.task_store.get(task_id)
    if task is None:
        return f"No task #{task_id}."
    target = TaskStatus.PENDING if task.status is TaskStatus.COMPLETED else TaskStatus.COMPLETED
    return _set_status(state, args, target)


def cmd_rename(state: AppState, args: list[str]) -> str:
    task_id = _parse_id(args)
    if task_id is None or len(args) < 2:
        return "Usage: /rename <task id> <title...>"
    with state.lock:
        task_api.update_task(state, task_id, title=" ".join(args[1:]))
        task = state.task_store.get(task_id)
    if task is None:
        return f"No task #{task_id}."
    return f"Task #{task_id}: {task.title}"


def cmd_priority(state: AppState, args: list[str]) -> str:
    task_id = _parse_id(args)
    prio = Priority.parse(args[1]) if len(args) > 1 else None
    if task_id is None or prio is None:
        return "Usage: /priority <task id> low|medium|high"
    with state.lock:
        task_api.update_task(state, task_id, priority=prio)
        task = state.task_store.get(task_id)
    if task is None:
        return f"No task #{task_id}."
    return f"Task #{task_id} priority: {task.priority.value}"


def cmd_due(state: AppState, args: list[str]) -> str:
    task_id = _parse_id(args)
    due_at = parse_due(args[1]) if len(args) > 1 else None
    if task_id is None or due_at is None:
        return "Usage: /due <task id> <now|+30m|+2h|+1d|ISO datetime>"
    with state.lock:
        task = task_api.reschedule_task(state, task_id, due_at)
    if task is None:
        return f"No task #{task_id}."
    return f"Task #{task_id} now due {datetime.fromtimestamp(task.due_at):%Y-%m-%d %H:%M}"


def cmd_delete(state: AppState, args: list[str]) -> str:
    task_id = _parse_id(args)
    if task_id is None:
        return "Usage: /delete <task id>"
    with state.lock:
        task = task_api.delete_task(state, task_id)
    if task is None:
        return f"No task #{task_id}."
    return f"Deleted #{task.id}: {task.title}"


def cmd_inbox(state: AppState, args: list[str]) -> str:
    with state.lock:
        entries = state.inbox.entries()
        unread = state.inbox.unread_count
    if not entries:
        return "Inbox is empty."
    lines = [f"Inbox ({unread} unread):"]
    for n in entries:
        mark = " " if n.read else "*"
        lines.append(f" {mark} {n.id}. {_fmt_time(n.timestamp)} {n.title}: {n.message}")
    return "\n".join(lines)


def cmd_ack(state: AppState, args: list[str]) -> str:
    if args and args[0].lower() == "all":
        with state.lock:
            flipped = state.inbox.acknowledge_all()
        return f"Marked {flipped} notification(s) as read."
    notification_id = _parse_id(args)
    if notification_id is None:
        return "Usage: /ack <notification id>|all"
    with state.lock:
        ok = task_api.acknowledge(state, notification_id)
    return "Marked as read." if ok else f"No unread notification {notification_id}."


def cmd_stats(state: AppState, args: list[str]) -> str:
    with state.lock:
        s = state.task_store.stats()
    return (
        "Stats:\n"
        f"  Total: {s.total}\n"
        f"  Completed: {s.completed} ({s.percent_complete}%)\n"
        f"  Due today: {s.due_today}\n"
        f"  Due this week: {s.due_this_week}"
    )


def cmd_theme(state: AppState, args: list[str]) -> str:
    """
    /theme          -> show current theme
    /theme toggle   -> switch light/dark
    /theme dark     -> set explicitly
    """
    if not args:
        return f"Theme: {state.preferences.get_theme()}"
    arg = args[0].lower()
    if arg == "toggle":
        return f"Theme: {state.preferences.toggle_theme()}"
    if arg in ("light", "dark"):
        return f"Theme: {state.preferences.set_theme(arg)}"
    return "Usage: /theme [light|dark|toggle]"


def cmd_tick(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """Run both reminder checks right now (same as a scheduler tick)."""
    events = ReminderScheduler(state).run_all()
    if not events:
        return "No reminders due."
    return "\n".join(f"[{e.title}] {e.message}" for e in events)


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("add", cmd_add, help_text="Add a task: /add <due> <title...>.")
registry.register("list", cmd_list, help_text="List tasks: /list [all|progress|done].", aliases=["ls"])
registry.register("start", cmd_start, help_text="Mark a task In Progress: /start <id>.")
registry.register("pending", cmd_pending, help_text="Mark a task Pending: /pending <id>.")
registry.register("done", cmd_done, help_text="Mark a task Completed: /done <id>.")
registry.register("status", cmd_status, help_text="Set status: /status <id> pending|progress|done.")
registry.register("toggle", cmd_toggle, help_text="Toggle Completed/Pending: /toggle <id>.")
registry.register("rename", cmd_rename, help_text="Rename a task: /rename <id> <title...>.")
registry.register("priority", cmd_priority, help_text="Set priority: /priority <id> low|medium|high.")
registry.register("due", cmd_due, help_text="Move a due date: /due <id> <due>.")
registry.register("delete", cmd_delete, help_text="Delete a task: /delete <id>.", aliases=["rm"])
registry.register("inbox", cmd_inbox, help_text="Show notifications.")
registry.register("ack", cmd_ack, help_text="Mark notification read: /ack <id>|all.")
registry.register("stats", cmd_stats, help_text="Show task stats.")
registry.register("theme", cmd_theme, help_text="Theme: /theme [light|dark|toggle].")
registry.register("tick", cmd_tick, help_text="Run reminder checks now.")
