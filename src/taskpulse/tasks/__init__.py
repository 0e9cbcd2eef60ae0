"""
Task subsystem.

Components:
- task_models.py: data structures (Task, TaskStatus, Priority)
- task_store.py: in-memory storage + derived fields (progress, stats)
- task_api.py: user commands that also cascade into reminders/inbox/delivery
"""
