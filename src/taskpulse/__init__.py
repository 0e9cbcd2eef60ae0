"""taskpulse: personal task tracker with client-local due-date reminders."""
