# src/taskpulse/reminders/scheduler.py

from __future__ import annotations

"""
Reminder scheduler.

Periodic passes over the open tasks that:
- ask the policy whether a due-now / overdue reminder is due,
- append emitted reminders to the inbox,
- write the cooldown marker back through the task store.

Decisions are recomputed from current task state on every pass; nothing is queued,
so a pass that overlaps a user mutation simply sees the new state next time.
"""

import asyncio
import contextlib
import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass

from ..core.state import AppState
from ..tasks.task_models import Task
from .policy import ReminderEvent

logger = logging.getLogger(__name__)

DUE_NOW_TICK_SECONDS = 60.0
OVERDUE_TICK_SECONDS = 300.0
INBOX_SWEEP_SECONDS = 3600.0
INBOX_MAX_AGE_SECONDS = 24 * 3600.0


class ReminderScheduler:
    """Synchronous passes; the async loops below only decide *when* to call them."""

    def __init__(self, state: AppState) -> None:
        self._state = state

    def _pass(
        self,
        name: str,
        check: Callable[[Task, float], ReminderEvent | None],
        now_ts: float | None,
    ) -> list[ReminderEvent]:
        now = time.time() if now_ts is None else float(now_ts)
        emitted: list[ReminderEvent] = []

        with self._state.lock:
            store = self._state.task_store
            for task in store.snapshot_open():
                # Re-read so an earlier check in the same tick is seen.
                current = store.get(task.id)
                if current is None or not current.is_open:
                    continue
                try:
                    event = check(current, now)
                    if event is None:
                        continue
                    self._state.inbox.append(event)
                    store.mark_notified(current.id, now)
                except Exception:
                    logger.exception("%s check failed task_id=%s", name, task.id)
                    continue
                emitted.append(event)
                logger.info("Reminder %s task_id=%s", event.kind.value, event.task_id)

        if emitted:
            logger.debug("%s pass emitted=%d", name, len(emitted))
        return emitted

    def run_due_now_pass(self, now_ts: float | None = None) -> list[ReminderEvent]:
        return self._pass("due_now", self._state.policy.check_due_now, now_ts)

    def run_overdue_pass(self, now_ts: float | None = None) -> list[ReminderEvent]:
        return self._pass("overdue", self._state.policy.check_overdue, now_ts)

    def run_all(self, now_ts: float | None = None) -> list[ReminderEvent]:
        """Both checks in one tick; due-now first so its marker gates overdue."""
        now = time.time() if now_ts is None else float(now_ts)
        return self.run_due_now_pass(now) + self.run_overdue_pass(now)

    def sweep_inbox(
        self,
        now_ts: float | None = None,
        *,
        max_age_seconds: float = INBOX_MAX_AGE_SECONDS,
    ) -> int:
        with self._state.lock:
            return self._state.inbox.sweep_older_than(max_age_seconds, now_ts=now_ts)


async def _run_periodic(name: str, fn: Callable[[], object], interval_seconds: float, *, immediate: bool) -> None:
    sleep_s = max(0.01, float(interval_seconds))
    if not immediate:
        await asyncio.sleep(sleep_s)
    while True:
        try:
            fn()
        except Exception:
            logger.exception("%s tick failed", name)
        await asyncio.sleep(sleep_s)


async def run_reminder_scheduler(
        state: AppState,
        *,
        due_now_interval_seconds: float = DUE_NOW_TICK_SECONDS,
        overdue_interval_seconds: float = OVERDUE_TICK_SECONDS,
        sweep_interval_seconds: float = INBOX_SWEEP_SECONDS,
        inbox_max_age_seconds: float = INBOX_MAX_AGE_SECONDS,
) -> None:
    """
    Run the three periodic loops until cancelled:
    - due-now pass every due_now_interval_seconds
    - overdue pass every overdue_interval_seconds
    - inbox sweep every sweep_interval_seconds (plus once at startup)

    To stop the scheduler, cancel the coroutine/task. Cancellation propagates to
    every loop, so no further tick fires once it has been awaited.
    """
    scheduler = ReminderScheduler(state)

    loops = [
        _run_periodic("due_now", scheduler.run_due_now_pass, due_now_interval_seconds, immediate=True),
        _run_periodic("overdue", scheduler.run_overdue_pass, overdue_interval_seconds, immediate=True),
        _run_periodic(
            "inbox_sweep",
            lambda: scheduler.sweep_inbox(max_age_seconds=inbox_max_age_seconds),
            sweep_interval_seconds,
            immediate=True,
        ),
    ]
    logger.info(
        "Reminder scheduler started (due_now=%ss overdue=%ss sweep=%ss)",
        due_now_interval_seconds,
        overdue_interval_seconds,
        sweep_interval_seconds,
    )
    try:
        await asyncio.gather(*loops)
    finally:
        logger.info("Reminder scheduler stopped")


@dataclass
class SchedulerRunner:
    thread: threading.Thread
    loop: asyncio.AbstractEventLoop
    task: asyncio.Task

    def stop(self) -> None:
        try:
            self.loop.call_soon_threadsafe(self.task.cancel)
        except Exception:
            logger.debug("Failed to signal scheduler stop.", exc_info=True)

    def join(self, timeout: float | None = None) -> None:
        self.thread.join(timeout=timeout)


def start_scheduler_in_background(state: AppState) -> SchedulerRunner | None:
    """
    Start the reminder scheduler in a background thread with its own event loop,
    so the blocking console REPL can run in the main thread.
    """
    settings = state.settings
    ready = threading.Event()
    holder: dict[str, object] = {}

    def runner() -> None:
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        task = loop.create_task(
            run_reminder_scheduler(
                state,
                due_now_interval_seconds=float(getattr(settings, "due_now_tick_seconds", DUE_NOW_TICK_SECONDS)),
                overdue_interval_seconds=float(getattr(settings, "overdue_tick_seconds", OVERDUE_TICK_SECONDS)),
                sweep_interval_seconds=float(getattr(settings, "inbox_sweep_seconds", INBOX_SWEEP_SECONDS)),
                inbox_max_age_seconds=float(getattr(settings, "inbox_max_age_seconds", INBOX_MAX_AGE_SECONDS)),
            )
        )
        holder["loop"] = loop
        holder["task"] = task
        ready.set()

        try:
            with contextlib.suppress(asyncio.CancelledError):
                loop.run_until_complete(task)
        finally:
            with contextlib.suppress(Exception):
                loop.close()

    t = threading.Thread(target=runner, name="reminder-scheduler", daemon=True)
    t.start()

    ready.wait(timeout=5.0)
    loop = holder.get("loop")
    task = holder.get("task")

    if not isinstance(loop, asyncio.AbstractEventLoop) or not isinstance(task, asyncio.Task):
        logger.error("Scheduler thread did not initialize properly.")
        return None

    logger.info("Scheduler background thread started.")
    return SchedulerRunner(thread=t, loop=loop, task=task)
