# src/smart_scheduler/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, then starts:
- the reminder scanner in a background thread (optional),
- the console REPL in the main thread.
"""

from __future__ import annotations

import logging

from ..cli.bootstrap import autoload_tasks, autosave_tasks, create_initial_state, create_reminder_scanner
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..logging_setup import setup_logging
from ..tasks.reminder_scanner import ReminderBackgroundRunner, start_reminders_in_background
from ..tasks.task_api import refresh_display

logger = logging.getLogger(__name__)


def main() -> None:
    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)
    setup_logging(log_dir=settings.data_dir, console_level=console_level)

    logger.info("Starting %s...", settings.app_name)

    state = create_initial_state(settings=settings)

    loaded = autoload_tasks(state)
    if loaded:
        logger.info("Autoloaded %d tasks from %s", loaded, settings.tasks_file_path)
    refresh_display(state)

    reminders: ReminderBackgroundRunner | None = None
    if settings.reminders_enabled:
        scanner = create_reminder_scanner(state)
        reminders = start_reminders_in_background(
            scanner, interval_seconds=settings.reminder_interval_seconds
        )
    else:
        logger.info("Reminders disabled, not starting the scanner.")

    try:
        run_console_loop(state)
    finally:
        if reminders is not None:
            reminders.stop()
            reminders.join(timeout=10.0)

        autosave_tasks(state)
        logger.info("Bye.")


if __name__ == "__main__":
    main()
