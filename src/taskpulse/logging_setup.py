# src/taskpulse/logging_setup.py

from __future__ import annotations

import logging
import logging.handlers
import sys
from pathlib import Path

LOG_FILE_NAME = "taskpulse.log"

# Loggers that fire on every scheduler tick from the background thread.
# They would interleave with the console prompt, so only WARNING+ reaches it.
BACKGROUND_LOGGERS = (
    "taskpulse.reminders.scheduler",
    "taskpulse.reminders.delivery",
)


def resolve_level(name: object, default: int = logging.INFO) -> int:
    """'debug' / 'WARNING' / 10 -> logging level; unknown names fall back to default."""
    if isinstance(name, int):
        return name
    level = logging.getLevelName(str(name or "").strip().upper())
    return level if isinstance(level, int) else default


class _ConsoleNoiseFilter(logging.Filter):
    """
    Console filter for the interactive REPL:
    - taskpulse logs pass, except the background reminder loggers below WARNING
    - everything else (third-party, py.warnings) only at ERROR+
    """

    def __init__(self, quiet: tuple[str, ...] = BACKGROUND_LOGGERS) -> None:
        super().__init__()
        self._quiet = quiet

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name
        if not name.startswith("taskpulse."):
            return record.levelno >= logging.ERROR
        if name.startswith(self._quiet):
            return record.levelno >= logging.WARNING
        return True


def setup_logging(
    *,
    log_dir: str | Path = ".local/taskpulse",
    console_level: int | str = logging.INFO,
    file_level: int | str = logging.DEBUG,
    max_bytes: int = 2 * 1024 * 1024,
    backup_count: int = 3,
) -> Path:
    """
    Console handler (filtered, stderr) plus a size-capped file handler with
    everything down to file_level. Replaces any handlers already on the root
    logger, so calling it twice does not duplicate output.

    Returns the log file path.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / LOG_FILE_NAME

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(threadName)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(resolve_level(console_level))
    console.setFormatter(fmt)
    console.addFilter(_ConsoleNoiseFilter())
    root.addHandler(console)

    # The scheduler ticks every minute for as long as the app runs.
    file_handler = logging.handlers.RotatingFileHandler(
        log_file,
        maxBytes=max_bytes,
        backupCount=backup_count,
        encoding="utf-8",
    )
    file_handler.setLevel(resolve_level(file_level, logging.DEBUG))
    file_handler.setFormatter(fmt)
    root.addHandler(file_handler)

    logging.captureWarnings(True)
    return log_file
