# src/smart_scheduler/core/errors.py

from __future__ import annotations


class SchedulerError(Exception):
    """Base class for all errors raised by smart_scheduler."""


class ValidationError(SchedulerError, ValueError):
    """Invalid task input (empty title, priority out of range, bad deadline)."""


class TaskNotFoundError(SchedulerError, LookupError):
    """Edit/delete target is not in the store."""

    def __init__(self, task_id: int) -> None:
        super().__init__(f"Task #{task_id} not found")
        self.task_id = task_id


class PersistenceError(SchedulerError):
    """
    Saving or loading the task file failed.

    The message is meant to be shown to the user as-is.
    """


class NotificationDeliveryError(SchedulerError):
    """A notifier could not deliver a reminder. Never fatal for the scanner."""
