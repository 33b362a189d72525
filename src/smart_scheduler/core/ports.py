# src/smart_scheduler/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The core depends on Protocols instead of concrete implementations.
This keeps the UI, storage and notification delivery swappable and makes
testing easier.
"""

from collections.abc import Sequence
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from ..tasks.reminder_scanner import ReminderEvent
    from ..tasks.task_models import Task, TaskRow


class TaskSnapshotSource(Protocol):
    """Read-only view of the store, as used by the reminder scanner."""

    def snapshot_sorted(self) -> Sequence[Task]: ...


class TaskCapture(Protocol):
    """
    Create/edit form.

    Given an optional existing task (edit), returns a validated Task or None
    when the user cancelled. Implementations re-prompt on invalid input and
    never return an invalid Task. confirm() asks a yes/no question (False on cancel).
    """

    def capture(self, existing: Task | None = None) -> Task | None: ...
    def confirm(self, prompt: str) -> bool: ...


class TaskPersistence(Protocol):
    """Full-snapshot save/load. Both raise PersistenceError on failure."""

    def save(self, tasks: Sequence[Task]) -> None: ...
    def load(self) -> list[Task]: ...


class TaskDisplay(Protocol):
    """Receives an ordered, read-only sequence of rows to render."""

    def show(self, rows: Sequence[TaskRow], *, title: str = "") -> None: ...


class ReminderNotifier(Protocol):
    """
    Fire-and-forget due-soon alerts.

    The notifier decides how/where the alert is presented. It may raise;
    the scanner logs and carries on.
    """

    def notify(self, event: ReminderEvent) -> None: ...
