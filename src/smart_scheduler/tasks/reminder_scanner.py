# src/smart_scheduler/tasks/reminder_scanner.py

from __future__ import annotations

"""
Reminder scanner.

A small polling loop that, every tick:
- takes one consistent sorted snapshot of the store,
- picks the tasks whose deadline is inside the due-soon window,
- hands a ReminderEvent per task to the injected notifier port.

The scanner only reads the store. How a reminder is shown belongs to the
notifier, not the scanner.
"""

import asyncio
import contextlib
import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import StrEnum

from ..core.ports import ReminderNotifier, TaskSnapshotSource
from .task_models import Task, format_deadline

logger = logging.getLogger(__name__)

DEFAULT_WINDOW = timedelta(minutes=5)
DEFAULT_INTERVAL_SECONDS = 60.0


class ScannerState(StrEnum):
    IDLE = "idle"
    SCANNING = "scanning"


class ReminderMode(StrEnum):
    """
    Repeat policy while a task stays inside the due-soon window.

    - EVERY_TICK: notify on every scan (with a 60s tick and a 5 minute window
      that is up to 5 reminders per task).
    - ONCE_PER_WINDOW: notify once per task; editing the deadline re-arms it.
    """

    EVERY_TICK = "every_tick"
    ONCE_PER_WINDOW = "once_per_window"

    @classmethod
    def parse(cls, raw: str | None) -> ReminderMode:
        if not raw:
            return cls.EVERY_TICK
        try:
            return cls(raw.strip().lower())
        except ValueError:
            logger.warning("Unknown reminder mode %r; using %s", raw, cls.EVERY_TICK.value)
            return cls.EVERY_TICK


@dataclass(frozen=True, slots=True)
class ReminderEvent:
    """What the scanner wants the user to know: a task is due soon."""

    task_id: int
    title: str
    deadline: datetime
    fired_at: datetime

    @property
    def time_left(self) -> timedelta:
        return self.deadline - self.fired_at

    @property
    def deadline_text(self) -> str:
        return format_deadline(self.deadline)

    def message(self) -> str:
        minutes = max(1, int(self.time_left.total_seconds() // 60))
        return f"Task '{self.title}' is due at {self.deadline_text} (in {minutes} min)."


def is_due_soon(task: Task, now: datetime, window: timedelta = DEFAULT_WINDOW) -> bool:
    """0 < deadline - now <= window. Past and exactly-now deadlines never fire."""
    delta = task.deadline - now
    return timedelta(0) < delta <= window


class ReminderScanner:
    """
    Two-state scanner: IDLE -> SCANNING -> IDLE.

    scan() never raises: store read failures yield an empty pass and notifier
    failures are logged per task.
    """

    def __init__(
        self,
        source: TaskSnapshotSource,
        notifier: ReminderNotifier,
        *,
        window: timedelta = DEFAULT_WINDOW,
        mode: ReminderMode = ReminderMode.EVERY_TICK,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        if window <= timedelta(0):
            raise ValueError("window must be positive")
        self._source = source
        self._notifier = notifier
        self.window = window
        self.mode = mode
        self._clock = clock
        self._state = ScannerState.IDLE
        self._scan_lock = threading.Lock()
        # task_id -> deadline already notified (ONCE_PER_WINDOW only)
        self._notified: dict[int, datetime] = {}

    @property
    def state(self) -> ScannerState:
        return self._state

    def due_soon(self, tasks: list[Task] | tuple[Task, ...], now: datetime) -> list[Task]:
        return [t for t in tasks if is_due_soon(t, now, self.window)]

    def scan(self) -> list[ReminderEvent]:
        """Run one pass and return the events that were delivered."""
        if not self._scan_lock.acquire(blocking=False):
            logger.debug("Scan already in progress; skipping tick")
            return []

        self._state = ScannerState.SCANNING
        try:
            return self._scan_once()
        finally:
            self._state = ScannerState.IDLE
            self._scan_lock.release()

    def _scan_once(self) -> list[ReminderEvent]:
        now = self._clock()

        try:
            tasks = tuple(self._source.snapshot_sorted())
        except Exception:
            logger.exception("Reading task snapshot failed; skipping scan")
            return []

        due = self.due_soon(tasks, now)
        once = self.mode == ReminderMode.ONCE_PER_WINDOW
        delivered: list[ReminderEvent] = []

        for task in due:
            if once and self._notified.get(task.id) == task.deadline:
                continue

            event = ReminderEvent(task_id=task.id, title=task.title, deadline=task.deadline, fired_at=now)
            try:
                self._notifier.notify(event)
            except Exception:
                logger.exception("Reminder delivery failed task_id=%s", task.id)
                continue

            delivered.append(event)
            if once:
                self._notified[task.id] = task.deadline

        if once:
            # Forget tasks that left the window (done, deleted, edited, or past).
            still_due = {t.id: t.deadline for t in due}
            self._notified = {
                tid: dl for tid, dl in self._notified.items() if still_due.get(tid) == dl
            }

        if delivered:
            logger.info("Reminder scan: %d due soon, %d notified", len(due), len(delivered))
        else:
            logger.debug("Reminder scan: %d tasks, none notified", len(tasks))
        return delivered


async def run_reminder_scanner(
    scanner: ReminderScanner,
    *,
    interval_seconds: float = DEFAULT_INTERVAL_SECONDS,
    stop_event: asyncio.Event | None = None,
) -> None:
    """
    Simple polling loop: scan, then wait interval_seconds.

    Stops when stop_event is set (checked before every scan and while
    waiting) or when the coroutine is cancelled.
    """
    sleep_s = max(0.01, float(interval_seconds))

    while stop_event is None or not stop_event.is_set():
        try:
            scanner.scan()
        except Exception:
            logger.exception("Reminder scan crashed")

        if stop_event is None:
            await asyncio.sleep(sleep_s)
            continue

        with contextlib.suppress(TimeoutError):
            await asyncio.wait_for(stop_event.wait(), timeout=sleep_s)

    logger.info("Reminder scanner stopped.")


@dataclass(slots=True)
class ReminderBackgroundRunner:
    thread: threading.Thread
    loop: asyncio.AbstractEventLoop
    stop_event: asyncio.Event

    def stop(self) -> None:
        try:
            self.loop.call_soon_threadsafe(self.stop_event.set)
        except Exception:
            # Loop already closed: the thread is done anyway.
            logger.debug("Failed to signal reminder stop.", exc_info=True)

    def join(self, timeout: float | None = None) -> None:
        self.thread.join(timeout=timeout)

    def is_alive(self) -> bool:
        return self.thread.is_alive()


def start_reminders_in_background(
    scanner: ReminderScanner,
    *,
    interval_seconds: float = DEFAULT_INTERVAL_SECONDS,
) -> ReminderBackgroundRunner | None:
    """
    Start the reminder loop in a background thread with its own event loop
    (the console REPL blocks the main thread on input()).
    """
    ready = threading.Event()
    holder: dict[str, object] = {}

    def runner() -> None:
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        stop_event = asyncio.Event()

        holder["loop"] = loop
        holder["stop_event"] = stop_event
        ready.set()

        try:
            loop.run_until_complete(
                run_reminder_scanner(scanner, interval_seconds=interval_seconds, stop_event=stop_event)
            )
        finally:
            with contextlib.suppress(Exception):
                loop.close()

    t = threading.Thread(target=runner, name="reminder-scanner", daemon=True)
    t.start()

    ready.wait(timeout=5.0)
    loop = holder.get("loop")
    stop_event = holder.get("stop_event")

    if not isinstance(loop, asyncio.AbstractEventLoop) or not isinstance(stop_event, asyncio.Event):
        logger.error("Reminder thread did not initialize properly.")
        return None

    logger.info(
        "Reminder scanner started (interval=%ss window=%s mode=%s).",
        interval_seconds,
        scanner.window,
        scanner.mode.value,
    )
    return ReminderBackgroundRunner(thread=t, loop=loop, stop_event=stop_event)
