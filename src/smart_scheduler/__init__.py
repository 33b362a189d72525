"""smart_scheduler: priority-ordered task queue with due-soon reminders."""

__version__ = "0.1.0"
