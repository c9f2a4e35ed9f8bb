import asyncio
import logging

import pytest

from taskflow.core.errors import TransportError
from taskflow.schemas.task import TaskCreate, TaskUpdate
from taskflow.services.record_store import InMemoryRecordStore
from taskflow.services.task_service import TaskService
from taskflow.services.timer import TimerRegistry, TimerTracker

SLOW = 3600


class Recorder:
    def __init__(self):
        self.updates = []

    async def __call__(self, task_id, elapsed_seconds, is_running):
        self.updates.append((task_id, elapsed_seconds, is_running))


async def _wait_for(predicate, attempts=300):
    for _ in range(attempts):
        if predicate():
            return
        await asyncio.sleep(0.01)


@pytest.mark.asyncio
async def test_ticks_accumulate_across_stop_and_start():
    recorder = Recorder()
    tracker = TimerTracker(7, on_update=recorder, interval_seconds=SLOW)

    await tracker.toggle()
    for _ in range(3):
        await tracker.tick()
    await tracker.toggle()
    assert tracker.elapsed_seconds == 3
    assert not tracker.is_running

    await tracker.toggle()
    for _ in range(2):
        await tracker.tick()

    assert tracker.elapsed_seconds == 5
    assert recorder.updates[-1] == (7, 5, True)
    await tracker.close()


@pytest.mark.asyncio
async def test_every_tick_and_toggle_is_reported():
    recorder = Recorder()
    tracker = TimerTracker(1, elapsed_seconds=10, on_update=recorder, interval_seconds=SLOW)

    await tracker.start()
    await tracker.tick()
    await tracker.stop()

    assert recorder.updates == [(1, 10, True), (1, 11, True), (1, 11, False)]


@pytest.mark.asyncio
async def test_tick_while_stopped_does_nothing():
    recorder = Recorder()
    tracker = TimerTracker(1, elapsed_seconds=4, on_update=recorder)

    await tracker.tick()

    assert tracker.elapsed_seconds == 4
    assert recorder.updates == []


@pytest.mark.asyncio
async def test_running_loop_ticks_and_is_cancelled_on_stop():
    tracker = TimerTracker(1, on_update=Recorder(), interval_seconds=0.01)

    await tracker.start()
    assert tracker.has_loop
    await _wait_for(lambda: tracker.elapsed_seconds >= 3)
    await tracker.stop()
    stopped_at = tracker.elapsed_seconds

    await asyncio.sleep(0.05)

    assert stopped_at >= 3
    assert tracker.elapsed_seconds == stopped_at
    assert not tracker.has_loop


@pytest.mark.asyncio
async def test_sync_adopts_values_that_differ_from_current_state():
    tracker = TimerTracker(1, elapsed_seconds=30, interval_seconds=SLOW)
    await tracker.start()
    await tracker.tick()

    assert tracker.sync(31, True) is False
    assert tracker.elapsed_seconds == 31

    assert tracker.sync(90, False) is True
    assert tracker.elapsed_seconds == 90
    assert not tracker.is_running
    assert not tracker.has_loop

    assert tracker.sync(90, True) is True
    assert tracker.has_loop
    await tracker.close()
    assert not tracker.has_loop


@pytest.mark.asyncio
async def test_reset_to_the_seeded_value_is_not_ignored():
    recorder = Recorder()
    tracker = TimerTracker(1, elapsed_seconds=0, on_update=recorder, interval_seconds=SLOW)
    await tracker.start()
    for _ in range(3):
        await tracker.tick()
    await tracker.stop()

    assert tracker.sync(0, False) is True
    assert tracker.elapsed_seconds == 0

    await tracker.start()
    assert recorder.updates[-1] == (1, 0, True)
    await tracker.close()


@pytest.mark.asyncio
async def test_registry_picks_up_a_time_reset_after_ticking():
    tasks = TaskService(InMemoryRecordStore())
    task = await tasks.create(TaskCreate(title="Reset me"))
    registry = TimerRegistry(tasks, interval_seconds=SLOW)

    tracker = await registry.toggle(task)
    for _ in range(3):
        await tracker.tick()
    await registry.toggle(task)

    reset = await tasks.update(task.id, TaskUpdate(time_spent=0))
    registry.sync(reset)
    assert tracker.elapsed_seconds == 0

    await registry.toggle(reset)
    stored = await tasks.get_by_id(task.id)
    assert stored.time_spent == 0
    assert stored.timer_state.is_running
    await registry.shutdown()

    assert tracker.sync(90, True) is True
    assert tracker.has_loop
    await tracker.close()
    assert not tracker.has_loop


@pytest.mark.asyncio
async def test_read_formats_display():
    tracker = TimerTracker(3, elapsed_seconds=3725)
    reading = tracker.read()
    assert reading.display == "1:02:05"
    assert reading.is_running is False


@pytest.mark.asyncio
async def test_registry_persists_timer_state():
    tasks = TaskService(InMemoryRecordStore())
    task = await tasks.create(TaskCreate(title="Focus"))
    registry = TimerRegistry(tasks, interval_seconds=SLOW)

    tracker = await registry.toggle(task)
    await tracker.tick()
    await tracker.tick()
    stored = await tasks.get_by_id(task.id)
    assert stored.time_spent == 2
    assert stored.timer_state.is_running
    assert stored.timer_state.last_updated is not None

    await registry.toggle(stored)
    stored = await tasks.get_by_id(task.id)
    assert stored.time_spent == 2
    assert not stored.timer_state.is_running

    await registry.shutdown()
    assert len(registry) == 0


@pytest.mark.asyncio
async def test_registry_resumes_running_tasks_and_shutdown_cancels_loops():
    tasks = TaskService(InMemoryRecordStore())
    running = await tasks.create(TaskCreate(title="Running"))
    await tasks.create(TaskCreate(title="Idle"))
    registry = TimerRegistry(tasks, interval_seconds=SLOW)
    await registry.toggle(running)

    fresh = TimerRegistry(tasks, interval_seconds=SLOW)
    assert fresh.resume(await tasks.get_all()) == 1
    tracker = fresh.get(running.id)
    assert tracker.is_running and tracker.has_loop

    await fresh.shutdown()
    await registry.shutdown()
    assert not tracker.has_loop
    assert fresh.get(running.id) is None


@pytest.mark.asyncio
async def test_discard_stops_the_loop():
    tasks = TaskService(InMemoryRecordStore())
    task = await tasks.create(TaskCreate(title="Gone soon"))
    registry = TimerRegistry(tasks, interval_seconds=SLOW)
    tracker = await registry.toggle(task)

    await registry.discard(task.id)

    assert not tracker.has_loop
    assert registry.get(task.id) is None


@pytest.mark.asyncio
async def test_persist_failure_is_logged_and_timer_keeps_running(caplog, monkeypatch):
    tasks = TaskService(InMemoryRecordStore())
    task = await tasks.create(TaskCreate(title="Offline"))
    registry = TimerRegistry(tasks, interval_seconds=SLOW)

    async def failing_update(task_id, patch):
        raise TransportError("store offline")

    monkeypatch.setattr(tasks, "update", failing_update)
    with caplog.at_level(logging.ERROR, logger="taskflow.services.timer"):
        tracker = await registry.toggle(task)

    assert tracker.is_running
    assert "Could not persist timer" in caplog.text
    await registry.shutdown()
