# tests/test_reminder_scanner.py

from __future__ import annotations

import asyncio
import time
from datetime import datetime, timedelta, timezone

import pytest

from smart_scheduler.core.errors import ValidationError
from smart_scheduler.tasks.reminder_scanner import (
    ReminderMode,
    ReminderScanner,
    ScannerState,
    is_due_soon,
    run_reminder_scanner,
    start_reminders_in_background,
)
from smart_scheduler.tasks.task_models import Task
from smart_scheduler.tasks.task_store import TaskStore

from .fakes import FakeClock, FakeNotifier, FlakyNotifier, dt, task


def test_due_soon_window_edges() -> None:
    now = dt("2024-06-01 09:58")
    window = timedelta(minutes=5)

    assert is_due_soon(task("Soon", 1, "2024-06-01 10:00"), now, window)  # 2 min
    assert not is_due_soon(task("Later", 1, "2024-06-01 10:10"), now, window)  # 12 min
    assert not is_due_soon(task("Past", 1, "2024-06-01 09:50"), now, window)
    assert not is_due_soon(task("Now", 1, "2024-06-01 09:58"), now, window)  # delta == 0
    assert is_due_soon(task("Edge", 1, "2024-06-01 10:03"), now, window)  # delta == window


def test_scan_fires_only_for_tasks_inside_window() -> None:
    store = TaskStore()
    store.add(task("Later", 1, "2024-06-01 10:10"))
    store.add(task("Soon", 2, "2024-06-01 10:00"))
    store.add(task("Past", 1, "2024-06-01 09:50"))
    notifier = FakeNotifier()
    scanner = ReminderScanner(store, notifier, clock=FakeClock(dt("2024-06-01 09:58")))

    events = scanner.scan()

    assert notifier.titles == ["Soon"]
    assert events == notifier.events
    assert events[0].task_id == 2
    assert events[0].time_left == timedelta(minutes=2)
    assert "due at 2024-06-01 10:00" in events[0].message()
    assert scanner.state == ScannerState.IDLE


def test_aware_deadline_never_reaches_the_scanner() -> None:
    store = TaskStore()
    store.add(task("Soon", 2, "2024-06-01 10:00"))
    with pytest.raises(ValidationError):
        store.add(Task(title="Aware", priority=1, deadline=datetime(2024, 6, 1, 10, 0, tzinfo=timezone.utc)))
    notifier = FakeNotifier()

    ReminderScanner(store, notifier, clock=FakeClock(dt("2024-06-01 09:58"))).scan()

    assert notifier.titles == ["Soon"]
    assert store.count() == 1


def test_every_tick_mode_repeats_while_in_window() -> None:
    store = TaskStore()
    store.add(task("Soon", 1, "2024-06-01 10:00"))
    clock = FakeClock(dt("2024-06-01 09:55"))
    notifier = FakeNotifier()
    scanner = ReminderScanner(store, notifier, clock=clock)

    for minute in range(6):  # 09:55 .. 10:00
        clock.now = dt("2024-06-01 09:55") + timedelta(minutes=minute)
        scanner.scan()

    # 09:55 (5 min) .. 09:59 (1 min); 10:00 is delta 0
    assert len(notifier.events) == 5


def test_once_per_window_mode_fires_once_and_rearms_on_deadline_change() -> None:
    store = TaskStore()
    t = store.add(task("Soon", 1, "2024-06-01 10:00"))
    clock = FakeClock(dt("2024-06-01 09:56"))
    notifier = FakeNotifier()
    scanner = ReminderScanner(store, notifier, mode=ReminderMode.ONCE_PER_WINDOW, clock=clock)

    scanner.scan()
    clock.now = dt("2024-06-01 09:57")
    scanner.scan()
    assert len(notifier.events) == 1

    store.replace(t.id, task("Soon", 1, "2024-06-01 10:01"))
    scanner.scan()
    assert len(notifier.events) == 2
    assert notifier.events[-1].deadline == dt("2024-06-01 10:01")


def test_notifier_failure_is_logged_and_scan_continues(caplog: pytest.LogCaptureFixture) -> None:
    store = TaskStore()
    store.add(task("Broken", 1, "2024-06-01 10:00"))
    store.add(task("Fine", 2, "2024-06-01 10:00"))
    notifier = FlakyNotifier(fail_titles={"Broken"})
    scanner = ReminderScanner(store, notifier, clock=FakeClock(dt("2024-06-01 09:58")))

    events = scanner.scan()

    assert [e.title for e in events] == ["Fine"]
    assert "Reminder delivery failed" in caplog.text
    assert scanner.state == ScannerState.IDLE


def test_scan_survives_broken_store() -> None:
    class BrokenSource:
        def snapshot_sorted(self):
            raise RuntimeError("boom")

    notifier = FakeNotifier()
    scanner = ReminderScanner(BrokenSource(), notifier, clock=FakeClock(dt("2024-06-01 09:58")))
    assert scanner.scan() == []
    assert notifier.events == []


def test_scan_does_not_mutate_store() -> None:
    store = TaskStore()
    store.add(task("Soon", 1, "2024-06-01 10:00"))
    before = store.snapshot()
    ReminderScanner(store, FakeNotifier(), clock=FakeClock(dt("2024-06-01 09:58"))).scan()
    assert store.snapshot() == before


def test_reminder_mode_parse() -> None:
    assert ReminderMode.parse("once_per_window") == ReminderMode.ONCE_PER_WINDOW
    assert ReminderMode.parse(" EVERY_TICK ") == ReminderMode.EVERY_TICK
    assert ReminderMode.parse("nonsense") == ReminderMode.EVERY_TICK
    assert ReminderMode.parse(None) == ReminderMode.EVERY_TICK


@pytest.mark.asyncio
async def test_loop_scans_periodically_until_cancelled() -> None:
    store = TaskStore()
    store.add(task("Soon", 1, "2024-06-01 10:00"))
    notifier = FakeNotifier()
    scanner = ReminderScanner(store, notifier, clock=FakeClock(dt("2024-06-01 09:58")))

    runner = asyncio.create_task(run_reminder_scanner(scanner, interval_seconds=0.01))
    await asyncio.sleep(0.1)
    runner.cancel()
    with pytest.raises(asyncio.CancelledError):
        await runner

    assert len(notifier.events) >= 2, "every tick re-notifies while inside the window"


@pytest.mark.asyncio
async def test_loop_stops_on_stop_event() -> None:
    notifier = FakeNotifier()
    scanner = ReminderScanner(TaskStore(), notifier, clock=FakeClock(dt("2024-06-01 09:58")))
    stop_event = asyncio.Event()

    runner = asyncio.create_task(
        run_reminder_scanner(scanner, interval_seconds=30.0, stop_event=stop_event)
    )
    await asyncio.sleep(0.05)
    stop_event.set()
    await asyncio.wait_for(runner, timeout=1.0)
    assert runner.done()


def test_background_runner_delivers_and_stops() -> None:
    store = TaskStore()
    store.add(task("Soon", 1, "2024-06-01 10:00"))
    notifier = FakeNotifier()
    scanner = ReminderScanner(store, notifier, clock=FakeClock(dt("2024-06-01 09:58")))

    runner = start_reminders_in_background(scanner, interval_seconds=0.01)
    assert runner is not None

    deadline = time.monotonic() + 2.0
    while not notifier.events and time.monotonic() < deadline:
        time.sleep(0.01)

    runner.stop()
    runner.join(timeout=2.0)

    assert notifier.events
    assert not runner.is_alive()
