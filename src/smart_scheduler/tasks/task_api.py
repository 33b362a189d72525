# src/smart_scheduler/tasks/task_api.py

from __future__ import annotations

import logging
from datetime import datetime

from ..core.ports import TaskPersistence
from ..core.state import AppState
from .task_filters import apply_filter
from .task_models import Task, TaskFilter, TaskRow

logger = logging.getLogger(__name__)

_FILTER_TITLES = {
    TaskFilter.ALL: "All tasks",
    TaskFilter.TODAY: "Due today",
    TaskFilter.HIGH_PRIORITY: "High priority",
}


def _high_priority(state: AppState) -> int:
    return int(getattr(state.settings, "high_priority", 1))


def create_task(state: AppState, task: Task) -> Task:
    stored = state.task_store.add(task)
    logger.info("Created task id=%s title=%r", stored.id, stored.title)
    return stored


def edit_task(state: AppState, task_id: int, new_task: Task) -> Task:
    """Replace task_id with new_task. Raises TaskNotFoundError (store unchanged)."""
    stored = state.task_store.replace(task_id, new_task)
    logger.info("Edited task id=%s title=%r", stored.id, stored.title)
    return stored


def delete_task(state: AppState, task_id: int) -> Task:
    """Raises TaskNotFoundError (store unchanged)."""
    removed = state.task_store.remove(task_id)
    logger.info("Deleted task id=%s title=%r", removed.id, removed.title)
    return removed


def visible_tasks(state: AppState, *, now: datetime | None = None) -> tuple[Task, ...]:
    """Sorted snapshot with the active filter applied."""
    return apply_filter(
        state.task_store.snapshot_sorted(),
        state.active_filter,
        now=now,
        high_priority=_high_priority(state),
    )


def current_rows(state: AppState, *, now: datetime | None = None) -> list[TaskRow]:
    return [t.to_row() for t in visible_tasks(state, now=now)]


def view_title(state: AppState) -> str:
    title = _FILTER_TITLES.get(state.active_filter, "Tasks")
    if state.active_filter == TaskFilter.HIGH_PRIORITY:
        title = f"{title} (priority {_high_priority(state)})"
    return title


def refresh_display(state: AppState, *, now: datetime | None = None) -> list[TaskRow]:
    """Push the current view to the display port and return what was shown."""
    rows = current_rows(state, now=now)
    state.display.show(rows, title=view_title(state))
    return rows


def save_tasks(state: AppState, persistence: TaskPersistence | None = None) -> int:
    """Save the full collection (to state.persistence by default). Raises PersistenceError."""
    tasks = state.task_store.snapshot()
    (persistence or state.persistence).save(tasks)
    return len(tasks)


def load_tasks(state: AppState, persistence: TaskPersistence | None = None) -> int:
    """
    Replace the store with the saved collection. Raises PersistenceError.

    The store is only touched after a complete, valid load.
    """
    tasks = (persistence or state.persistence).load()
    return state.task_store.replace_all(tasks)
