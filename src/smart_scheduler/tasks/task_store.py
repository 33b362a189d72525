# src/smart_scheduler/tasks/task_store.py

from __future__ import annotations

import dataclasses
import logging
import threading
from collections.abc import Iterable

from ..core.errors import TaskNotFoundError
from .task_models import Task, sort_key

logger = logging.getLogger(__name__)


class TaskStore:
    """
    In-memory authoritative task collection.

    Ownership:
    - the foreground (UI) is the only writer,
    - any number of readers (reminder scanner) take snapshots.

    Thread-safety:
    - every method holds one RLock for its whole duration,
    - Task values are immutable, so a copied tuple is a consistent snapshot;
      a reader never sees a half-applied mutation.

    Insertion order is kept in the authoritative list and is used as the
    last tie-break of the sorted view.
    """

    def __init__(self, tasks: Iterable[Task] = ()) -> None:
        self._lock = threading.RLock()
        self._tasks: list[Task] = []
        self._next_id = 1
        self._next_seq = 1
        self._sorted_cache: tuple[Task, ...] | None = None
        if tasks:
            self.replace_all(tasks)

    # ---- low-level helpers ----

    def _stamp(self, task: Task, *, task_id: int | None = None, seq: int | None = None) -> Task:
        if task_id is None:
            task_id = self._next_id
            self._next_id += 1
        if seq is None:
            seq = self._next_seq
            self._next_seq += 1
        return dataclasses.replace(task, id=task_id, seq=seq)

    def _index_of(self, task_id: int) -> int:
        for i, t in enumerate(self._tasks):
            if t.id == task_id:
                return i
        raise TaskNotFoundError(task_id)

    def _invalidate(self) -> None:
        self._sorted_cache = None

    # ---- public API ----

    def count(self) -> int:
        with self._lock:
            return len(self._tasks)

    def get(self, task_id: int) -> Task | None:
        with self._lock:
            for t in self._tasks:
                if t.id == task_id:
                    return t
            return None

    def find_by_value(self, task: Task) -> Task | None:
        """First stored task equal by value (title, priority, deadline)."""
        with self._lock:
            for t in self._tasks:
                if t == task:
                    return t
            return None

    def add(self, task: Task) -> Task:
        """Append a task; returns the stored copy carrying its new id."""
        with self._lock:
            stored = self._stamp(task)
            self._tasks.append(stored)
            self._invalidate()
        logger.debug("Task added id=%s priority=%s deadline=%s", stored.id, stored.priority, stored.deadline_text)
        return stored

    def replace(self, task_id: int, new_task: Task) -> Task:
        """
        Substitute the task with task_id by new_task.

        The id and insertion sequence of the old task are kept, so an edited
        task stays where it was among equal-ranked tasks.
        Raises TaskNotFoundError (store unchanged) when task_id is unknown.
        """
        with self._lock:
            idx = self._index_of(task_id)
            old = self._tasks[idx]
            stored = self._stamp(new_task, task_id=old.id, seq=old.seq)
            self._tasks[idx] = stored
            self._invalidate()
        logger.debug("Task replaced id=%s", task_id)
        return stored

    def remove(self, task_id: int) -> Task:
        """Remove and return the task with task_id. Raises TaskNotFoundError."""
        with self._lock:
            idx = self._index_of(task_id)
            removed = self._tasks.pop(idx)
            self._invalidate()
        logger.debug("Task removed id=%s", task_id)
        return removed

    def replace_all(self, tasks: Iterable[Task]) -> int:
        """
        Swap in a whole new collection (used after load).

        Ids and sequences are re-assigned in the given order.
        """
        incoming = list(tasks)
        with self._lock:
            self._next_id = 1
            self._next_seq = 1
            self._tasks = [self._stamp(t) for t in incoming]
            self._invalidate()
            total = len(self._tasks)
        logger.debug("TaskStore replaced, total=%s", total)
        return total

    def clear(self) -> None:
        self.replace_all(())

    def snapshot(self) -> tuple[Task, ...]:
        """All tasks in insertion order."""
        with self._lock:
            return tuple(self._tasks)

    def snapshot_sorted(self) -> tuple[Task, ...]:
        """
        All tasks in canonical order (priority, deadline, insertion).

        The result is a tuple; callers cannot mutate the store through it.
        """
        with self._lock:
            if self._sorted_cache is None:
                self._sorted_cache = tuple(sorted(self._tasks, key=sort_key))
            return self._sorted_cache
