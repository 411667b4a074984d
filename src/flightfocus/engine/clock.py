"""Time sources for the session engine.

The engine never reads the wall clock or creates timers directly. It asks a
``Clock`` for one-shot and periodic callbacks, so tests can drive time with
``ManualClock`` and the TUI can hand timers to Textual.
"""

from __future__ import annotations

import asyncio
import heapq
import inspect
import itertools
import logging
from collections.abc import Awaitable, Callable
from datetime import datetime, timedelta
from typing import Protocol

logger = logging.getLogger(__name__)

TimerCallback = Callable[[], Awaitable[object] | object]

TICK_SECONDS = 1.0


class TimerHandle(Protocol):
    """A scheduled callback that can be stopped."""

    def stop(self) -> None: ...


class Clock(Protocol):
    """Timer capability injected into the engine."""

    def now(self) -> datetime: ...

    def on_tick(self, callback: TimerCallback) -> TimerHandle: ...

    def every(self, interval: float, callback: TimerCallback) -> TimerHandle: ...

    def after(self, delay: float, callback: TimerCallback) -> TimerHandle: ...

    def cancel(self, handle: TimerHandle | None) -> None: ...


class ClockBase:
    """Shared helpers for clock implementations."""

    def now(self) -> datetime:
        return datetime.now().astimezone()

    def on_tick(self, callback: TimerCallback) -> TimerHandle:
        """Call ``callback`` once per second."""
        return self.every(TICK_SECONDS, callback)

    def every(self, interval: float, callback: TimerCallback) -> TimerHandle:
        raise NotImplementedError

    def after(self, delay: float, callback: TimerCallback) -> TimerHandle:
        raise NotImplementedError

    def cancel(self, handle: TimerHandle | None) -> None:
        """Stop ``handle``; None and already-stopped handles are ignored."""
        if handle is not None:
            handle.stop()


class ManualTimer:
    """Timer owned by a ManualClock."""

    def __init__(
        self,
        clock: "ManualClock",
        due: float,
        callback: TimerCallback,
        interval: float | None,
    ) -> None:
        self._clock = clock
        self.due = due
        self.callback = callback
        self.interval = interval
        self.active = True

    def stop(self) -> None:
        self.active = False


class ManualClock(ClockBase):
    """Deterministic clock advanced explicitly by the caller."""

    def __init__(self, start: datetime | None = None) -> None:
        self._start = start or datetime(2026, 1, 15, 9, 0).astimezone()
        self.elapsed = 0.0
        self._queue: list[tuple[float, int, ManualTimer]] = []
        self._seq = itertools.count()

    def now(self) -> datetime:
        return self._start + timedelta(seconds=self.elapsed)

    def _schedule(self, timer: ManualTimer) -> ManualTimer:
        heapq.heappush(self._queue, (timer.due, next(self._seq), timer))
        return timer

    def every(self, interval: float, callback: TimerCallback) -> ManualTimer:
        if interval <= 0:
            raise ValueError("interval must be positive")
        return self._schedule(
            ManualTimer(self, self.elapsed + interval, callback, interval)
        )

    def after(self, delay: float, callback: TimerCallback) -> ManualTimer:
        return self._schedule(
            ManualTimer(self, self.elapsed + max(0.0, delay), callback, None)
        )

    @property
    def pending(self) -> int:
        """Number of active timers still scheduled."""
        return sum(1 for _, _, timer in self._queue if timer.active)

    async def advance(self, seconds: float) -> None:
        """Move time forward, firing due timers in order."""
        target = self.elapsed + seconds
        while self._queue and self._queue[0][0] <= target:
            due, _, timer = heapq.heappop(self._queue)
            if not timer.active:
                continue
            self.elapsed = due
            if timer.interval is not None:
                timer.due = due + timer.interval
                self._schedule(timer)
            else:
                timer.active = False
            result = timer.callback()
            if inspect.isawaitable(result):
                await result
        self.elapsed = target


class AsyncioTimer:
    """Timer scheduled on an asyncio event loop."""

    def __init__(
        self,
        clock: "AsyncioClock",
        callback: TimerCallback,
        interval: float | None,
    ) -> None:
        self._clock = clock
        self.callback = callback
        self.interval = interval
        self.active = True
        self._handle: asyncio.TimerHandle | None = None

    def stop(self) -> None:
        self.active = False
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None


class AsyncioClock(ClockBase):
    """Wall-clock timers on the running asyncio loop."""

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop
        self._tasks: set[asyncio.Task[object]] = set()

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def _arm(self, timer: AsyncioTimer, when: float) -> None:
        timer._handle = self.loop.call_at(when, self._fire, timer, when)

    def _fire(self, timer: AsyncioTimer, when: float) -> None:
        if not timer.active:
            return
        if timer.interval is not None:
            # Re-arm from the scheduled time, not from now, to avoid drift
            self._arm(timer, when + timer.interval)
        else:
            timer.active = False
        result = timer.callback()
        if inspect.isawaitable(result):
            task = asyncio.ensure_future(result)
            self._tasks.add(task)
            task.add_done_callback(self._task_done)

    def _task_done(self, task: "asyncio.Task[object]") -> None:
        self._tasks.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error("Timer callback failed", exc_info=task.exception())

    def every(self, interval: float, callback: TimerCallback) -> AsyncioTimer:
        if interval <= 0:
            raise ValueError("interval must be positive")
        timer = AsyncioTimer(self, callback, interval)
        self._arm(timer, self.loop.time() + interval)
        return timer

    def after(self, delay: float, callback: TimerCallback) -> AsyncioTimer:
        timer = AsyncioTimer(self, callback, None)
        self._arm(timer, self.loop.time() + max(0.0, delay))
        return timer
