# src/smart_scheduler/tasks/task_persistence.py

from __future__ import annotations

import contextlib
import json
import logging
import os
from collections.abc import Sequence
from datetime import datetime
from pathlib import Path
from typing import Any

from ..core.errors import PersistenceError, ValidationError
from .task_models import Task, parse_deadline

logger = logging.getLogger(__name__)

FILE_FORMAT = "smart-scheduler/tasks"
FILE_VERSION = 1


def _task_to_record(task: Task) -> dict[str, Any]:
    return {
        "title": task.title,
        "priority": task.priority,
        "deadline": task.deadline_text,
    }


def _record_to_task(record: Any, index: int) -> Task:
    if not isinstance(record, dict):
        raise PersistenceError(f"Task record #{index} is not an object")
    try:
        return Task(
            title=record.get("title", ""),
            priority=record.get("priority"),
            deadline=parse_deadline(str(record.get("deadline", ""))),
        )
    except ValidationError as e:
        raise PersistenceError(f"Task record #{index} is invalid: {e}") from e


def encode_tasks(tasks: Sequence[Task]) -> str:
    payload = {
        "format": FILE_FORMAT,
        "version": FILE_VERSION,
        "saved_at": datetime.now().replace(microsecond=0).isoformat(),
        "tasks": [_task_to_record(t) for t in tasks],
    }
    return json.dumps(payload, ensure_ascii=False, indent=2)


def decode_tasks(raw: str) -> list[Task]:
    """Parse a whole file. All-or-nothing: any bad record fails the load."""
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise PersistenceError(f"Not a valid task file (JSON error at line {e.lineno})") from e

    if not isinstance(data, dict) or data.get("format") != FILE_FORMAT:
        raise PersistenceError("Not a smart-scheduler task file")

    version = data.get("version")
    if version != FILE_VERSION:
        raise PersistenceError(f"Unsupported task file version: {version!r}")

    records = data.get("tasks")
    if not isinstance(records, list):
        raise PersistenceError("Task file has no task list")

    return [_record_to_task(r, i) for i, r in enumerate(records, start=1)]


class JsonTaskFile:
    """
    Versioned JSON snapshot of the full task collection.

    Schema (version 1):
        {"format": "smart-scheduler/tasks", "version": 1, "saved_at": "...",
         "tasks": [{"title": "...", "priority": 1, "deadline": "yyyy-MM-dd HH:mm"}]}

    Writes go to a temp file and are moved into place, so a failed save
    leaves the previous file intact.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path).expanduser()

    def save(self, tasks: Sequence[Task]) -> None:
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(encode_tasks(tasks), "utf-8")
            os.replace(tmp, self.path)
        except OSError as e:
            with contextlib.suppress(OSError):
                tmp.unlink()
            raise PersistenceError(f"Could not save tasks to {self.path}: {e.strerror or e}") from e

        with contextlib.suppress(OSError):
            os.chmod(self.path, 0o600)
        logger.info("Saved %d tasks to %s", len(tasks), self.path)

    def load(self) -> list[Task]:
        if not self.path.exists():
            raise PersistenceError(f"Task file not found: {self.path}")
        try:
            raw = self.path.read_text("utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise PersistenceError(f"Could not read tasks from {self.path}: {e}") from e

        tasks = decode_tasks(raw)
        logger.info("Loaded %d tasks from %s", len(tasks), self.path)
        return tasks
