"""
Reminder subsystem.

Components:
- policy.py: pure decisions (due-now, overdue, status change, delivery plan)
- inbox.py: in-app notification log with read/unread state
- scheduler.py: periodic passes driving the policy over open tasks
- delivery.py: OS-level delivery collaborator (default: log only)
"""
