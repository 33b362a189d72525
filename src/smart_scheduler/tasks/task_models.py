# src/smart_scheduler/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from typing import Any

from ..core.errors import ValidationError

DEADLINE_FORMAT = "%Y-%m-%d %H:%M"
DEADLINE_HINT = "yyyy-MM-dd HH:mm"

MIN_PRIORITY = 1  # highest urgency
MAX_PRIORITY = 5


class TaskFilter(StrEnum):
    """Views offered by the UI."""

    ALL = "all"
    TODAY = "today"
    HIGH_PRIORITY = "high"

    @classmethod
    def parse(cls, raw: str | None) -> TaskFilter:
        if not raw:
            return cls.ALL
        try:
            return cls(raw.strip().lower())
        except ValueError:
            return cls.ALL


def parse_deadline(text: str) -> datetime:
    """Parse 'yyyy-MM-dd HH:mm' into a naive local datetime."""
    raw = (text or "").strip()
    try:
        return datetime.strptime(raw, DEADLINE_FORMAT)
    except ValueError:
        raise ValidationError(f"Deadline must look like {DEADLINE_HINT}, got {raw!r}") from None


def format_deadline(deadline: datetime) -> str:
    return deadline.strftime(DEADLINE_FORMAT)


def parse_priority(text: Any) -> int:
    try:
        value = int(str(text).strip())
    except (TypeError, ValueError):
        raise ValidationError(
            f"Priority must be a number from {MIN_PRIORITY} to {MAX_PRIORITY}, got {text!r}"
        ) from None
    return validate_priority(value)


def validate_title(value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError("Title must not be empty")
    return value.strip()


def validate_priority(value: Any) -> int:
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"Priority must be an integer, got {value!r}")
    if not MIN_PRIORITY <= value <= MAX_PRIORITY:
        raise ValidationError(f"Priority must be from {MIN_PRIORITY} to {MAX_PRIORITY}, got {value}")
    return value


@dataclass(frozen=True, slots=True)
class TaskRow:
    """One line of the task table as handed to a display."""

    id: int
    title: str
    priority: int
    deadline: str


@dataclass(frozen=True, slots=True)
class Task:
    """
    A titled unit of work with a priority (1 = most urgent) and a deadline.

    Equality is by value (title, priority, deadline). `id` and `seq` are
    assigned by TaskStore and do not take part in comparisons, so lookups for
    edit/delete must go through the id.

    Instances are immutable; every construction, including
    dataclasses.replace(), re-runs validation.
    """

    title: str
    priority: int
    deadline: datetime
    id: int = field(default=0, compare=False)
    seq: int = field(default=0, compare=False, repr=False)

    def __post_init__(self) -> None:
        title = validate_title(self.title)
        validate_priority(self.priority)
        if not isinstance(self.deadline, datetime):
            raise ValidationError(f"Deadline must be a datetime, got {self.deadline!r}")
        # Deadlines are naive local time; mixing in aware ones breaks ordering.
        if self.deadline.tzinfo is not None:
            raise ValidationError("Deadline must be local time without a timezone")

        object.__setattr__(self, "title", title)
        # Minute resolution.
        object.__setattr__(self, "deadline", self.deadline.replace(second=0, microsecond=0))

    @classmethod
    def from_input(cls, title: str, priority_text: Any, deadline_text: str) -> Task:
        """Build a task from raw form text. Raises ValidationError."""
        return cls(
            title=title,
            priority=parse_priority(priority_text),
            deadline=parse_deadline(deadline_text),
        )

    @property
    def deadline_text(self) -> str:
        return format_deadline(self.deadline)

    def to_row(self) -> TaskRow:
        return TaskRow(
            id=self.id,
            title=self.title,
            priority=self.priority,
            deadline=self.deadline_text,
        )


def compare(a: Task, b: Task) -> int:
    """
    Canonical ordering: lower priority value first, then earlier deadline.

    Returns a negative number, zero or a positive number. Titles are ignored,
    so two different tasks may compare as 0.
    """
    if a.priority != b.priority:
        return -1 if a.priority < b.priority else 1
    if a.deadline != b.deadline:
        return -1 if a.deadline < b.deadline else 1
    return 0


def sort_key(task: Task) -> tuple[int, datetime, int]:
    """compare() extended with insertion sequence, so sorting is deterministic."""
    return (task.priority, task.deadline, task.seq)
