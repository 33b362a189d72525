# tests/fakes.py

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime

from smart_scheduler.core.errors import NotificationDeliveryError, PersistenceError
from smart_scheduler.tasks.reminder_scanner import ReminderEvent
from smart_scheduler.tasks.task_models import Task, TaskRow


@dataclass(slots=True)
class FakeNotifier:
    """Records every reminder it receives."""

    events: list[ReminderEvent] = field(default_factory=list)

    def notify(self, event: ReminderEvent) -> None:
        self.events.append(event)

    @property
    def titles(self) -> list[str]:
        return [e.title for e in self.events]


@dataclass(slots=True)
class FlakyNotifier:
    """Fails for the given titles, records the rest."""

    fail_titles: set[str]
    events: list[ReminderEvent] = field(default_factory=list)

    def notify(self, event: ReminderEvent) -> None:
        if event.title in self.fail_titles:
            raise NotificationDeliveryError(f"cannot deliver {event.title}")
        self.events.append(event)


@dataclass(slots=True)
class FakeDisplay:
    shown: list[tuple[list[TaskRow], str]] = field(default_factory=list)

    def show(self, rows: Sequence[TaskRow], *, title: str = "") -> None:
        self.shown.append((list(rows), title))

    @property
    def last_titles(self) -> list[str]:
        return [r.title for r in self.shown[-1][0]] if self.shown else []


@dataclass(slots=True)
class ScriptedCapture:
    """
    TaskCapture returning pre-scripted answers in order (None = cancelled).

    confirm() pops from `confirmations` and declines once they run out.
    """

    answers: list[Task | None] = field(default_factory=list)
    seen: list[Task | None] = field(default_factory=list)
    confirmations: list[bool] = field(default_factory=list)
    prompts: list[str] = field(default_factory=list)

    def capture(self, existing: Task | None = None) -> Task | None:
        self.seen.append(existing)
        return self.answers.pop(0) if self.answers else None

    def confirm(self, prompt: str) -> bool:
        self.prompts.append(prompt)
        return self.confirmations.pop(0) if self.confirmations else False


@dataclass(slots=True)
class MemoryPersistence:
    """In-memory TaskPersistence; `fail` makes both directions raise."""

    saved: list[Task] | None = None
    fail: bool = False

    def save(self, tasks: Sequence[Task]) -> None:
        if self.fail:
            raise PersistenceError("disk full")
        self.saved = list(tasks)

    def load(self) -> list[Task]:
        if self.fail:
            raise PersistenceError("file is corrupt")
        if self.saved is None:
            raise PersistenceError("nothing saved")
        return list(self.saved)


class FakeClock:
    """Settable clock for the reminder scanner."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


def dt(text: str) -> datetime:
    return datetime.strptime(text, "%Y-%m-%d %H:%M")


def task(title: str, priority: int, deadline: str) -> Task:
    return Task(title=title, priority=priority, deadline=dt(deadline))
