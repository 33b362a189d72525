# src/smart_scheduler/connectors/console_connector.py

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Sequence
from datetime import datetime
from typing import TypeVar

from ..cli.commands import registry as command_registry
from ..core.errors import NotificationDeliveryError, ValidationError
from ..core.state import AppState
from ..tasks.reminder_scanner import ReminderEvent
from ..tasks.task_models import DEADLINE_HINT, Task, TaskRow, parse_deadline, parse_priority, validate_title

logger = logging.getLogger(__name__)

T = TypeVar("T")

InputFn = Callable[[str], str]
OutputFn = Callable[[str], None]

# The reminder thread and the REPL both print; keep lines whole.
_print_lock = threading.Lock()

CANCEL_TOKEN = "/cancel"


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    with _print_lock:
        print(f"[{_ts_local()}] {text}", flush=True)


def format_table(rows: Sequence[TaskRow], *, title: str = "") -> str:
    """Plain-text table: id | title | priority | deadline."""
    header = ("ID", "Title", "Priority", "Deadline")
    body = [(f"#{r.id}", r.title, str(r.priority), r.deadline) for r in rows]

    widths = [len(h) for h in header]
    for line in body:
        for i, cell in enumerate(line):
            widths[i] = max(widths[i], len(cell))

    def fmt(cells: Sequence[str]) -> str:
        return "  ".join(c.ljust(widths[i]) for i, c in enumerate(cells)).rstrip()

    out: list[str] = []
    if title:
        out.append(f"== {title} ==")
    out.append(fmt(header))
    out.append(fmt(["-" * w for w in widths]))
    if body:
        out.extend(fmt(line) for line in body)
    else:
        out.append("(no tasks)")
    return "\n".join(out)


class ConsoleTableDisplay:
    """TaskDisplay printing a table to stdout."""

    def __init__(self, output: OutputFn | None = None) -> None:
        self._output = output

    def show(self, rows: Sequence[TaskRow], *, title: str = "") -> None:
        text = format_table(rows, title=title)
        if self._output is not None:
            self._output(text)
            return
        with _print_lock:
            print(text, flush=True)


class ConsoleNotifier:
    """ReminderNotifier printing due-soon alerts (called from the reminder thread)."""

    def __init__(self, output: OutputFn | None = None) -> None:
        self._output = output

    def notify(self, event: ReminderEvent) -> None:
        text = f"[REMINDER] {event.message()}"
        try:
            if self._output is not None:
                self._output(text)
            else:
                _print_ts(text)
        except (OSError, ValueError) as e:
            # ValueError: write to a closed stdout
            raise NotificationDeliveryError(f"Could not print reminder for task #{event.task_id}: {e}") from e


class ConsoleTaskForm:
    """
    TaskCapture asking for title, priority and deadline on the console.

    - invalid input (including empty): the message is shown and the same field is asked again
    - empty input while editing: keeps the current value
    - /cancel, EOF or Ctrl+C: cancels
    """

    def __init__(self, input_fn: InputFn = input, output: OutputFn = print) -> None:
        self._input = input_fn
        self._output = output

    def _ask(self, label: str, default: str | None, convert: Callable[[str], T]) -> T | None:
        prompt = f"{label} [{default}]: " if default else f"{label}: "
        while True:
            try:
                raw = self._input(prompt).strip()
            except (EOFError, KeyboardInterrupt):
                return None

            if raw.lower() == CANCEL_TOKEN:
                return None
            if not raw and default is not None:
                raw = default

            try:
                return convert(raw)
            except ValidationError as e:
                self._output(f"  {e}")

    def capture(self, existing: Task | None = None) -> Task | None:
        title = self._ask("Title", existing.title if existing else None, validate_title)
        if title is None:
            return None
        priority = self._ask(
            "Priority (1-5, 1 = highest)",
            str(existing.priority) if existing else None,
            parse_priority,
        )
        if priority is None:
            return None
        deadline = self._ask(
            f"Deadline ({DEADLINE_HINT})",
            existing.deadline_text if existing else None,
            parse_deadline,
        )
        if deadline is None:
            return None

        try:
            return Task(title=title, priority=priority, deadline=deadline)
        except ValidationError as e:
            # Fields were validated one by one; this only guards against future rules.
            self._output(f"  {e}")
            return None

    def confirm(self, prompt: str) -> bool:
        try:
            raw = self._input(f"{prompt} [y/N]: ").strip().lower()
        except (EOFError, KeyboardInterrupt):
            return False
        return raw in ("y", "yes")


def run_console_loop(state: AppState, input_fn: InputFn = input) -> None:
    logger.info("Console connector started (tasks=%s).", state.task_store.count())
    _print_ts("[CONSOLE] Use /help for commands, /add to create a task, /exit to quit.\n")

    def emit(text: str) -> None:
        _print_ts(text)

    while True:
        try:
            user_input = input_fn(">>> ").strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if not user_input:
            continue

        if user_input.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        try:
            response = command_registry.handle(state, user_input, emit=emit)
        except Exception:
            logger.exception("Command handler crashed.")
            response = "Internal error while handling a command."

        if response is None:
            response = "Commands start with '/'. Use /help to list them."
        _print_ts(response)

    logger.info("Console connector finished.")
