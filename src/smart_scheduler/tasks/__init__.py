"""
Task subsystem.

Components:
- task_models.py: data structures (Task, TaskRow, TaskFilter) and canonical ordering
- task_store.py: in-memory authoritative collection + sorted snapshots
- task_filters.py: pure filters over a sorted snapshot (today / priority / all)
- reminder_scanner.py: polling scanner that emits due-soon reminders
- task_persistence.py: versioned JSON snapshot on disk
- task_api.py: small high-level helpers used by the UI layer
"""
