# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
This file exists to make the repo self-documenting even without opening .env.example.
"""

ENV_VARS = {
    # App / logging
    "TASKPULSE_APP_NAME": "App display name (default: taskpulse).",
    "TASKPULSE_LOG_LEVEL": "Console logging level (default: INFO).",
    # Switches
    "TASKPULSE_CONSOLE_ENABLED": "Run the console REPL (true/false, default: true).",
    "TASKPULSE_SCHEDULER_ENABLED": "Run the background reminder scheduler (default: true).",
    "TASKPULSE_DELIVERY_ENABLED": "Hand time-anchored reminders to the delivery service (default: true).",
    # Paths (gitignored)
    "TASKPULSE_DATA_DIR": "Local data directory for logs/preferences (default: .local/taskpulse).",
    "TASKPULSE_PREFERENCES_PATH": "Theme preference JSON (default: <data_dir>/preferences.json).",
    # Scheduler ticks (seconds)
    "TASKPULSE_DUE_NOW_TICK_SECONDS": "Due-now pass period (default: 60).",
    "TASKPULSE_OVERDUE_TICK_SECONDS": "Overdue pass period (default: 300).",
    "TASKPULSE_INBOX_SWEEP_SECONDS": "Inbox age sweep period (default: 3600).",
    "TASKPULSE_INBOX_MAX_AGE_SECONDS": "Inbox entries older than this are swept (default: 86400).",
    # Reminder policy (seconds)
    "TASKPULSE_DUE_WINDOW_SECONDS": "Tolerance around the due time for due-now reminders (default: 60).",
    "TASKPULSE_DUE_NOW_COOLDOWN_SECONDS": "Minimum gap between due-now reminders (default: 300).",
    "TASKPULSE_OVERDUE_COOLDOWN_SECONDS": "Minimum gap between overdue reminders (default: 3600).",
}
