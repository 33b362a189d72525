# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from smart_scheduler.core.state import AppState
from smart_scheduler.tasks.task_store import TaskStore

from .fakes import FakeDisplay, MemoryPersistence, ScriptedCapture


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the CLI helpers.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="smart-scheduler-test",
        data_dir=tmp_path,
        tasks_file_path=tmp_path / "tasks.json",
        reminders_enabled=False,
        reminder_interval_seconds=60.0,
        reminder_window_minutes=5,
        reminder_mode="every_tick",
        high_priority=1,
        autoload=False,
        autosave=False,
    )


@pytest.fixture()
def state(settings: SimpleNamespace) -> AppState:
    """AppState wired with an in-memory store and deterministic fakes."""
    return AppState(
        settings=settings,
        task_store=TaskStore(),
        persistence=MemoryPersistence(),
        display=FakeDisplay(),
        capture=ScriptedCapture(),
    )
