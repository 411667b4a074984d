"""Clock backed by Textual timers."""

from __future__ import annotations

from textual.message_pump import MessagePump
from textual.timer import Timer

from flightfocus.engine.clock import ClockBase, TimerCallback


class TextualClock(ClockBase):
    """Schedules engine callbacks on a Textual message pump (app or screen).

    Textual awaits coroutine callbacks itself, and a ``Timer`` already
    exposes ``stop()``, so timers are returned to the engine as-is.
    """

    def __init__(self, pump: MessagePump) -> None:
        self.pump = pump

    def every(self, interval: float, callback: TimerCallback) -> Timer:
        return self.pump.set_interval(interval, callback)

    def after(self, delay: float, callback: TimerCallback) -> Timer:
        return self.pump.set_timer(delay, callback)
