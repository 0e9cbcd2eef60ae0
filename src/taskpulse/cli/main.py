# src/taskpulse/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, then starts:
- the reminder scheduler in a background thread (optional),
- the console REPL in the main thread (optional).
"""

from __future__ import annotations

import logging
import signal
import threading

from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..logging_setup import setup_logging
from ..reminders.scheduler import SchedulerRunner, start_scheduler_in_background

logger = logging.getLogger(__name__)


def _shutdown(state, runner: SchedulerRunner | None) -> None:
    """Best-effort shutdown (no exceptions should escape)."""
    if runner is not None:
        try:
            runner.stop()
            runner.join(timeout=10.0)
        except Exception:
            logger.exception("Failed to stop reminder scheduler.")

    # Tasks and inbox are process-lifetime only; nothing to flush.
    try:
        state.task_store.clear()
        state.inbox.clear_all()
    except Exception:
        logger.debug("State cleanup failed.", exc_info=True)


def main() -> None:
    settings = get_settings()

    log_dir = getattr(settings, "data_dir", ".local/taskpulse")
    log_file = setup_logging(log_dir=log_dir, console_level=getattr(settings, "log_level", "INFO"))

    logger.info("Starting %s (log file %s)...", getattr(settings, "app_name", "taskpulse"), log_file)

    # IMPORTANT: reuse same settings object
    state = create_initial_state(settings=settings)

    runner: SchedulerRunner | None = None
    if settings.scheduler_enabled:
        runner = start_scheduler_in_background(state)

    # Use an Event so main can wait without a busy while-loop.
    stop_main = threading.Event()

    def _handle_signal(signum, _frame) -> None:
        logger.info("Signal %s received, shutting down...", signum)
        stop_main.set()

    try:
        # The console REPL handles Ctrl+C itself (KeyboardInterrupt from input()).
        if not settings.console_enabled:
            signal.signal(signal.SIGINT, _handle_signal)
        signal.signal(signal.SIGTERM, _handle_signal)
    except Exception:
        # Some platforms may not support SIGTERM, etc.
        pass

    try:
        if settings.console_enabled:
            run_console_loop(state)
            stop_main.set()
        else:
            logger.info("Console disabled. Running reminder scheduler only. Press Ctrl+C to stop.")
            stop_main.wait()
    finally:
        _shutdown(state, runner)
        logger.info("Bye.")


if __name__ == "__main__":
    main()
