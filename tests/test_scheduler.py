"""Tests for the attendant message scheduler."""

from __future__ import annotations

import pytest

from flightfocus.engine import ManualClock, MessageScheduler
from flightfocus.errors import MessageSourceError
from flightfocus.messages import FALLBACK_MESSAGE, AttendantMessage
from flightfocus.models import FlightClass


class CountingSource:
    """Returns numbered messages and records each request."""

    def __init__(self) -> None:
        self.requests: list[tuple[float, FlightClass]] = []

    async def next_message(
        self, progress: float, flight_class: FlightClass
    ) -> AttendantMessage:
        self.requests.append((progress, flight_class))
        return AttendantMessage(
            message=f"message {len(self.requests)}",
            type="encouragement",
            flight_progress=progress,
        )


class FailingSource:
    async def next_message(
        self, progress: float, flight_class: FlightClass
    ) -> AttendantMessage:
        raise MessageSourceError("service unavailable")


def _snapshot() -> tuple[float, FlightClass]:
    return 0.25, FlightClass.ECONOMY


@pytest.fixture
def source() -> CountingSource:
    return CountingSource()


@pytest.fixture
def scheduler(clock: ManualClock, source: CountingSource) -> MessageScheduler:
    scheduler = MessageScheduler(clock)
    scheduler.attach(source)
    return scheduler


@pytest.mark.anyio
async def test_first_message_after_30_seconds(
    clock: ManualClock, scheduler: MessageScheduler, source: CountingSource
) -> None:
    scheduler.start(_snapshot)

    await clock.advance(29)
    assert scheduler.visible_message is None

    await clock.advance(1)
    assert scheduler.visible_message is not None
    assert scheduler.visible_message.message == "message 1"
    assert source.requests == [(0.25, FlightClass.ECONOMY)]


@pytest.mark.anyio
async def test_message_hides_after_4_seconds(
    clock: ManualClock, scheduler: MessageScheduler
) -> None:
    scheduler.start(_snapshot)
    await clock.advance(33)
    assert scheduler.is_visible

    await clock.advance(1)
    assert not scheduler.is_visible


@pytest.mark.anyio
async def test_periodic_messages_every_five_minutes(
    clock: ManualClock, scheduler: MessageScheduler
) -> None:
    scheduler.start(_snapshot)
    await clock.advance(299)
    assert scheduler.fired_count == 1

    await clock.advance(1)
    assert scheduler.fired_count == 2

    await clock.advance(300)
    assert scheduler.fired_count == 3


@pytest.mark.anyio
async def test_stop_hides_message_and_cancels_timers(
    clock: ManualClock, scheduler: MessageScheduler
) -> None:
    changes: list[AttendantMessage | None] = []
    scheduler.on_change = changes.append
    scheduler.start(_snapshot)
    await clock.advance(31)
    assert scheduler.is_visible

    scheduler.stop()

    assert not scheduler.is_visible
    assert changes[-1] is None
    await clock.advance(1000)
    assert scheduler.fired_count == 1
    assert clock.pending == 0


@pytest.mark.anyio
async def test_restart_rearms_from_the_new_moment(
    clock: ManualClock, scheduler: MessageScheduler
) -> None:
    scheduler.start(_snapshot)
    await clock.advance(10)
    scheduler.stop()
    await clock.advance(90)

    scheduler.start(_snapshot)
    await clock.advance(29)
    assert scheduler.fired_count == 0
    await clock.advance(1)
    assert scheduler.fired_count == 1


@pytest.mark.anyio
async def test_source_failure_shows_fallback(clock: ManualClock) -> None:
    scheduler = MessageScheduler(clock)
    scheduler.attach(FailingSource())
    scheduler.start(_snapshot)

    await clock.advance(30)

    assert scheduler.visible_message is not None
    assert scheduler.visible_message.message == FALLBACK_MESSAGE
    assert scheduler.visible_message.flight_progress == 0.25


@pytest.mark.anyio
async def test_message_resolved_after_stop_is_discarded(clock: ManualClock) -> None:
    scheduler = MessageScheduler(clock)

    class StopsMidFetch(CountingSource):
        async def next_message(
            self, progress: float, flight_class: FlightClass
        ) -> AttendantMessage:
            scheduler.stop()
            return await super().next_message(progress, flight_class)

    scheduler.attach(StopsMidFetch())
    scheduler.start(_snapshot)
    await clock.advance(30)

    assert scheduler.visible_message is None
    assert scheduler.fired_count == 0


@pytest.mark.anyio
async def test_new_message_replaces_visible_one(
    clock: ManualClock, source: CountingSource
) -> None:
    scheduler = MessageScheduler(clock, first_delay=5, interval=8, display_seconds=4)
    scheduler.attach(source)
    scheduler.start(_snapshot)

    await clock.advance(5)
    assert scheduler.visible_message is not None
    assert scheduler.visible_message.message == "message 1"

    await clock.advance(3)
    assert scheduler.visible_message.message == "message 2"

    # The hide timer restarts with each new message
    await clock.advance(1)
    assert scheduler.visible_message is not None
    await clock.advance(3)
    assert scheduler.visible_message is None


@pytest.mark.anyio
async def test_reset_clears_fired_count(
    clock: ManualClock, scheduler: MessageScheduler
) -> None:
    scheduler.start(_snapshot)
    await clock.advance(30)
    scheduler.reset()
    assert scheduler.fired_count == 0
    assert not scheduler.is_running
