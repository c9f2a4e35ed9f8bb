"""
Per-task stopwatch.

A ``TimerTracker`` is either stopped or running. While running, a background
``asyncio`` task calls ``tick`` once per interval; every tick and every
start/stop reports ``(task_id, elapsed_seconds, is_running)`` to the
``on_update`` callback. Stopping keeps the accumulated seconds.

``TimerRegistry`` owns one tracker per task and persists each update through
the task service.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import Awaitable, Callable, Iterable, Optional

from ..core.errors import TransportError
from ..core.timeutils import utcnow
from ..schemas.task import Task, TaskUpdate, TimerRead, TimerStatePatch
from .task_service import TaskService
from .task_summary import format_elapsed

logger = logging.getLogger(__name__)

OnUpdate = Callable[[int, int, bool], Awaitable[None]]


class TimerTracker:
    def __init__(
        self,
        task_id: int,
        elapsed_seconds: int = 0,
        is_running: bool = False,
        on_update: Optional[OnUpdate] = None,
        interval_seconds: float = 1.0,
    ) -> None:
        self.task_id = task_id
        self.elapsed_seconds = max(0, elapsed_seconds)
        self.is_running = is_running
        self.interval_seconds = interval_seconds
        self._on_update = on_update
        self._loop_task: Optional[asyncio.Task] = None
        self._emit_lock = asyncio.Lock()

    @property
    def has_loop(self) -> bool:
        return self._loop_task is not None and not self._loop_task.done()

    async def _emit(self) -> None:
        if self._on_update is not None:
            async with self._emit_lock:
                await self._on_update(self.task_id, self.elapsed_seconds, self.is_running)

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval_seconds)
            # a started tick always reports, even if the loop is cancelled meanwhile
            await asyncio.shield(self.tick())

    def _spawn_loop(self) -> None:
        if not self.has_loop:
            self._loop_task = asyncio.create_task(self._run(), name=f"timer-{self.task_id}")

    def _cancel_loop(self) -> Optional[asyncio.Task]:
        loop_task, self._loop_task = self._loop_task, None
        if loop_task is not None and not loop_task.done() and loop_task is not asyncio.current_task():
            loop_task.cancel()
        return loop_task

    def resume(self) -> None:
        """Start the tick loop for a tracker created in the running state."""
        if self.is_running:
            self._spawn_loop()

    async def tick(self) -> None:
        if not self.is_running:
            return
        self.elapsed_seconds += 1
        await self._emit()

    async def start(self) -> None:
        if self.is_running:
            return
        self.is_running = True
        self._spawn_loop()
        await self._emit()

    async def stop(self) -> None:
        if not self.is_running:
            return
        self.is_running = False
        self._cancel_loop()
        await self._emit()

    async def toggle(self) -> bool:
        if self.is_running:
            await self.stop()
        else:
            await self.start()
        return self.is_running

    def sync(self, elapsed_seconds: int, is_running: bool) -> bool:
        """
        Adopt externally stored values when they differ from the current
        state. Returns whether anything changed.
        """
        if (max(0, elapsed_seconds), is_running) == (self.elapsed_seconds, self.is_running):
            return False
        self.elapsed_seconds = max(0, elapsed_seconds)
        if is_running and not self.is_running:
            self.is_running = True
            self._spawn_loop()
        elif not is_running and self.is_running:
            self.is_running = False
            self._cancel_loop()
        return True

    async def close(self) -> None:
        loop_task = self._cancel_loop()
        if loop_task is not None:
            with contextlib.suppress(asyncio.CancelledError):
                await loop_task

    def read(self) -> TimerRead:
        return TimerRead(
            task_id=self.task_id,
            elapsed_seconds=self.elapsed_seconds,
            is_running=self.is_running,
            display=format_elapsed(self.elapsed_seconds),
        )


class TimerRegistry:
    def __init__(self, tasks: TaskService, interval_seconds: float = 1.0) -> None:
        self._tasks = tasks
        self._interval = interval_seconds
        self._trackers: dict[int, TimerTracker] = {}

    def __len__(self) -> int:
        return len(self._trackers)

    def get(self, task_id: int) -> Optional[TimerTracker]:
        return self._trackers.get(task_id)

    async def _persist(self, task_id: int, elapsed_seconds: int, is_running: bool) -> None:
        patch = TaskUpdate(
            time_spent=elapsed_seconds,
            timer_state=TimerStatePatch(is_running=is_running, last_updated=utcnow()),
        )
        try:
            updated = await self._tasks.update(task_id, patch)
        except TransportError:
            logger.exception("Could not persist timer for task %s (%ss)", task_id, elapsed_seconds)
            return
        if updated is None:
            logger.warning("Timer update for missing task %s ignored", task_id)

    def tracker_for(self, task: Task) -> TimerTracker:
        tracker = self._trackers.get(task.id)
        if tracker is None:
            tracker = TimerTracker(
                task.id,
                elapsed_seconds=task.time_spent,
                is_running=task.timer_state.is_running,
                on_update=self._persist,
                interval_seconds=self._interval,
            )
            tracker.resume()
            self._trackers[task.id] = tracker
        return tracker

    async def toggle(self, task: Task) -> TimerTracker:
        tracker = self.tracker_for(task)
        await tracker.toggle()
        logger.info("Timer for task %s %s at %ss", task.id, "started" if tracker.is_running else "stopped", tracker.elapsed_seconds)
        return tracker

    def sync(self, task: Task) -> None:
        """Pick up a task whose stored time or running flag was edited directly."""
        tracker = self._trackers.get(task.id)
        if tracker is None:
            if task.timer_state.is_running:
                self.tracker_for(task)
            return
        tracker.sync(task.time_spent, task.timer_state.is_running)

    async def discard(self, task_id: int) -> None:
        tracker = self._trackers.pop(task_id, None)
        if tracker is not None:
            await tracker.close()
            logger.debug("Timer for task %s discarded", task_id)

    def resume(self, tasks: Iterable[Task]) -> int:
        resumed = 0
        for task in tasks:
            if task.timer_state.is_running and task.id not in self._trackers:
                self.tracker_for(task)
                resumed += 1
        if resumed:
            logger.info("Resumed %d running timer(s)", resumed)
        return resumed

    async def shutdown(self) -> None:
        trackers = list(self._trackers.values())
        self._trackers.clear()
        await asyncio.gather(*(tracker.close() for tracker in trackers))
        logger.info("All timers stopped")
