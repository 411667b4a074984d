"""Periodic flight attendant messages.

While a session runs, the scheduler shows a message 30 seconds after the
session (re)enters RUNNING, and again every 5 minutes from that same moment.
Each message stays visible for 4 seconds. A new message replaces a visible
one immediately; nothing is queued.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from flightfocus.engine.clock import Clock, TimerHandle
from flightfocus.messages import AttendantMessage, LocalMessageSource, MessageSource
from flightfocus.models.session import FlightClass

logger = logging.getLogger(__name__)

FIRST_MESSAGE_DELAY = 30.0
MESSAGE_INTERVAL = 300.0
MESSAGE_DISPLAY_SECONDS = 4.0

SnapshotProvider = Callable[[], tuple[float, FlightClass]]
MessageListener = Callable[[AttendantMessage | None], None]


class MessageScheduler:
    """Fires attendant messages on a fixed cadence while a session runs."""

    def __init__(
        self,
        clock: Clock,
        *,
        first_delay: float = FIRST_MESSAGE_DELAY,
        interval: float = MESSAGE_INTERVAL,
        display_seconds: float = MESSAGE_DISPLAY_SECONDS,
        on_change: MessageListener | None = None,
    ) -> None:
        self.clock = clock
        self.first_delay = first_delay
        self.interval = interval
        self.display_seconds = display_seconds
        self.on_change = on_change
        self.source: MessageSource = LocalMessageSource()
        self.visible_message: AttendantMessage | None = None
        self.fired_count = 0

        self._snapshot: SnapshotProvider | None = None
        self._first_timer: TimerHandle | None = None
        self._interval_timer: TimerHandle | None = None
        self._hide_timer: TimerHandle | None = None
        # Bumped on every stop so fetches that resolve late are discarded
        self._generation = 0

    @property
    def is_running(self) -> bool:
        return self._snapshot is not None

    @property
    def is_visible(self) -> bool:
        return self.visible_message is not None

    def attach(self, source: MessageSource) -> None:
        """Use ``source`` for future firings."""
        self.source = source

    def start(self, snapshot: SnapshotProvider) -> None:
        """Arm the first-message and periodic timers from now."""
        self._cancel_timers()
        self._generation += 1
        self._snapshot = snapshot
        self._first_timer = self.clock.after(self.first_delay, self._fire)
        self._interval_timer = self.clock.every(self.interval, self._fire)

    def stop(self) -> None:
        """Cancel every pending timer and hide any visible message."""
        self._cancel_timers()
        self._generation += 1
        self._snapshot = None
        self._set_visible(None)

    def reset(self) -> None:
        """Stop and forget all scheduler state."""
        self.stop()
        self.fired_count = 0

    def _cancel_timers(self) -> None:
        self.clock.cancel(self._first_timer)
        self.clock.cancel(self._interval_timer)
        self.clock.cancel(self._hide_timer)
        self._first_timer = None
        self._interval_timer = None
        self._hide_timer = None

    async def _fire(self) -> None:
        if self._snapshot is None:
            return
        generation = self._generation
        progress, flight_class = self._snapshot()
        try:
            message = await self.source.next_message(progress, flight_class)
        except Exception as exc:  # noqa: BLE001
            logger.warning("Message source failed, using fallback: %s", exc)
            message = AttendantMessage.fallback(progress)

        if generation != self._generation:
            logger.debug("Discarding message fetched before the session stopped")
            return

        self.fired_count += 1
        self.clock.cancel(self._hide_timer)
        self._set_visible(message)
        self._hide_timer = self.clock.after(self.display_seconds, self._hide)

    def _hide(self) -> None:
        self._hide_timer = None
        self._set_visible(None)

    def _set_visible(self, message: AttendantMessage | None) -> None:
        if message is None and self.visible_message is None:
            return
        self.visible_message = message
        if self.on_change is not None:
            self.on_change(message)
