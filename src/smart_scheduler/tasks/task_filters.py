# src/smart_scheduler/tasks/task_filters.py

"""
Pure filters over a sorted task snapshot.

Every function returns a subsequence of its input: nothing is reordered and
the store is never touched. Inputs are expected to already be in canonical
order (TaskStore.snapshot_sorted()).
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime, timedelta

from .task_models import MIN_PRIORITY, Task, TaskFilter


def start_of_day(instant: datetime) -> datetime:
    """Local midnight of the instant's day."""
    return instant.replace(hour=0, minute=0, second=0, microsecond=0)


def filter_by_day_window(tasks: Iterable[Task], reference: datetime) -> tuple[Task, ...]:
    """Tasks whose deadline falls on the reference day: [midnight, midnight + 1 day)."""
    start = start_of_day(reference)
    end = start + timedelta(days=1)
    return tuple(t for t in tasks if start <= t.deadline < end)


def filter_by_priority(tasks: Iterable[Task], priority: int) -> tuple[Task, ...]:
    return tuple(t for t in tasks if t.priority == priority)


def identity(tasks: Iterable[Task]) -> tuple[Task, ...]:
    """'Show all'."""
    return tuple(tasks)


def apply_filter(
    tasks: Iterable[Task],
    task_filter: TaskFilter,
    *,
    now: datetime | None = None,
    high_priority: int = MIN_PRIORITY,
) -> tuple[Task, ...]:
    if task_filter == TaskFilter.TODAY:
        return filter_by_day_window(tasks, now or datetime.now())
    if task_filter == TaskFilter.HIGH_PRIORITY:
        return filter_by_priority(tasks, high_priority)
    return identity(tasks)
