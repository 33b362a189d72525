# src/smart_scheduler/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..tasks.task_models import TaskFilter
from ..tasks.task_store import TaskStore
from .ports import TaskCapture, TaskDisplay, TaskPersistence


@dataclass
class AppState:
    """
    Everything the foreground (UI) needs, wired in one place.

    The reminder scanner is not part of the state: it only gets the store
    (read-only) and a notifier.
    """

    settings: Any
    task_store: TaskStore
    persistence: TaskPersistence
    display: TaskDisplay
    capture: TaskCapture

    active_filter: TaskFilter = TaskFilter.ALL
