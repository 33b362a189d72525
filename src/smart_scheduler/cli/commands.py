# src/smart_scheduler/cli/commands.py

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from typing import cast

from ..core.errors import PersistenceError, TaskNotFoundError, ValidationError
from ..core.state import AppState
from ..tasks.task_api import (
    create_task,
    delete_task,
    edit_task,
    load_tasks,
    refresh_display,
    save_tasks,
)
from ..tasks.task_models import DEADLINE_HINT, Task, TaskFilter
from ..tasks.task_persistence import JsonTaskFile

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by the console connector (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 3

        if nparams >= 3:
            h3 = cast(CommandHandler3, handler)
            return h3(state, args, emit)

        h2 = cast(CommandHandler2, handler)
        return h2(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def _parse_task_id(args: list[str]) -> int | None:
    if not args:
        return None
    raw = args[0].lstrip("#")
    try:
        return int(raw)
    except ValueError:
        return None


def _show(state: AppState, message: str) -> str:
    # Every mutation or view change redraws the table.
    rows = refresh_display(state)
    return f"{message} ({len(rows)} shown, {state.task_store.count()} total)"


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_status(state: AppState, args: list[str]) -> str:
    s = state.settings
    reminders = "ON" if getattr(s, "reminders_enabled", False) else "OFF"
    return (
        "Status:\n"
        f"  Tasks: {state.task_store.count()}\n"
        f"  View: {state.active_filter.value}\n"
        f"  Reminders: {reminders} (every {getattr(s, 'reminder_interval_seconds', '?')}s, "
        f"window {getattr(s, 'reminder_window_minutes', '?')} min, "
        f"mode {getattr(s, 'reminder_mode', '?')})\n"
        f"  Tasks file: {getattr(s, 'tasks_file_path', '?')}"
    )


def cmd_add(state: AppState, args: list[str]) -> str:
    """
    /add                               -> open the task form
    /add <priority> <date> <time> <title...>
    """
    if args:
        if len(args) < 4:
            return f"Usage: /add <priority 1-5> <{DEADLINE_HINT}> <title>, or /add to open the form."
        try:
            task = Task.from_input(" ".join(args[3:]), args[0], f"{args[1]} {args[2]}")
        except ValidationError as e:
            return f"Invalid task: {e}"
    else:
        task = state.capture.capture(None)
        if task is None:
            return "Add cancelled."

    stored = create_task(state, task)
    return _show(state, f"Added task #{stored.id}: {stored.title}")


def cmd_edit(state: AppState, args: list[str]) -> str:
    task_id = _parse_task_id(args)
    if task_id is None:
        return "Select a task to edit: /edit <id> (ids are shown by /list)."

    existing = state.task_store.get(task_id)
    if existing is None:
        return f"Task #{task_id} not found. Use /list to see ids."

    edited = state.capture.capture(existing)
    if edited is None:
        return "Edit cancelled."

    try:
        stored = edit_task(state, task_id, edited)
    except TaskNotFoundError as e:
        # Deleted while the form was open.
        logger.warning("Edit target vanished: %s", e)
        return f"{e}. Nothing was changed."
    return _show(state, f"Updated task #{stored.id}: {stored.title}")


def cmd_delete(state: AppState, args: list[str]) -> str:
    task_id = _parse_task_id(args)
    if task_id is None:
        return "Select a task to delete: /delete <id> (ids are shown by /list)."

    target = state.task_store.get(task_id)
    if target is None:
        return f"Task #{task_id} not found. Use /list to see ids."
    if not state.capture.confirm(f"Delete task #{target.id} '{target.title}'?"):
        return "Delete cancelled."

    try:
        removed = delete_task(state, task_id)
    except TaskNotFoundError as e:
        return f"{e}. Use /list to see ids."
    return _show(state, f"Deleted task #{removed.id}: {removed.title}")


def _persistence_for(state: AppState, args: list[str]):
    if args:
        return JsonTaskFile(" ".join(args))
    return state.persistence


def cmd_save(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    target = _persistence_for(state, args)
    where = getattr(target, "path", "storage")
    if emit is not None:
        emit(f"Saving {state.task_store.count()} tasks to {where}...")
    try:
        n = save_tasks(state, target)
    except PersistenceError as e:
        logger.warning("Save failed: %s", e)
        return f"Save failed: {e}"
    return f"Saved {n} tasks to {where}."


def cmd_load(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    source = _persistence_for(state, args)
    where = getattr(source, "path", "storage")
    if emit is not None:
        emit(f"Loading tasks from {where}...")
    try:
        n = load_tasks(state, source)
    except PersistenceError as e:
        logger.warning("Load failed: %s", e)
        return f"Load failed: {e}"
    return _show(state, f"Loaded {n} tasks from {where}")


def _set_view(state: AppState, task_filter: TaskFilter) -> str:
    state.active_filter = task_filter
    return _show(state, f"View: {task_filter.value}")


def cmd_list(state: AppState, args: list[str]) -> str:
    """Redisplay the current view."""
    return _show(state, f"View: {state.active_filter.value}")


def cmd_all(state: AppState, args: list[str]) -> str:
    return _set_view(state, TaskFilter.ALL)


def cmd_today(state: AppState, args: list[str]) -> str:
    return _set_view(state, TaskFilter.TODAY)


def cmd_high(state: AppState, args: list[str]) -> str:
    return _set_view(state, TaskFilter.HIGH_PRIORITY)


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show task count, view and reminder settings.")
registry.register(
    "add",
    cmd_add,
    help_text=f"Add a task: /add (form) | /add <priority> <{DEADLINE_HINT}> <title>.",
)
registry.register("edit", cmd_edit, help_text="Edit a task: /edit <id>.")
registry.register("delete", cmd_delete, help_text="Delete a task: /delete <id>.", aliases=["del", "rm"])
registry.register("list", cmd_list, help_text="Show the current view.", aliases=["ls"])
registry.register("all", cmd_all, help_text="Show all tasks.")
registry.register("today", cmd_today, help_text="Show tasks due today.")
registry.register("high", cmd_high, help_text="Show high priority tasks.")
registry.register("save", cmd_save, help_text="Save tasks: /save [path].")
registry.register("load", cmd_load, help_text="Load tasks (replaces current ones): /load [path].")
