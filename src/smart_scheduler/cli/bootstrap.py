# src/smart_scheduler/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires concrete implementations into AppState (store/persistence/console ports),
- builds the reminder scanner that shares the store read-only.
"""

from __future__ import annotations

import logging
from datetime import timedelta

from ..config import get_settings
from ..connectors.console_connector import ConsoleNotifier, ConsoleTableDisplay, ConsoleTaskForm
from ..core.errors import PersistenceError
from ..core.ports import ReminderNotifier
from ..core.state import AppState
from ..tasks.reminder_scanner import ReminderMode, ReminderScanner
from ..tasks.task_api import load_tasks, save_tasks
from ..tasks.task_persistence import JsonTaskFile
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.tasks_file_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    return AppState(
        settings=settings,
        task_store=TaskStore(),
        persistence=JsonTaskFile(settings.tasks_file_path),
        display=ConsoleTableDisplay(),
        capture=ConsoleTaskForm(),
    )


def create_reminder_scanner(state: AppState, notifier: ReminderNotifier | None = None) -> ReminderScanner:
    settings = state.settings
    return ReminderScanner(
        state.task_store,
        notifier or ConsoleNotifier(),
        window=timedelta(minutes=int(getattr(settings, "reminder_window_minutes", 5))),
        mode=ReminderMode.parse(getattr(settings, "reminder_mode", None)),
    )


def autoload_tasks(state: AppState) -> int:
    """Load the tasks file at startup if enabled and present. Never raises."""
    if not getattr(state.settings, "autoload", False):
        return 0
    path = getattr(state.persistence, "path", None)
    if path is not None and not path.exists():
        logger.info("No tasks file at %s yet; starting empty.", path)
        return 0
    try:
        return load_tasks(state)
    except PersistenceError:
        logger.exception("Autoload failed; starting with an empty task list.")
        return 0


def autosave_tasks(state: AppState) -> None:
    """Save on exit if enabled. Never raises."""
    if not getattr(state.settings, "autosave", False):
        return
    try:
        save_tasks(state)
    except PersistenceError:
        logger.exception("Autosave failed.")
