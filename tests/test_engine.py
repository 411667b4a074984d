"""Tests for the session engine."""

from __future__ import annotations

import asyncio
import inspect
import json
from datetime import timedelta
from pathlib import Path

import pytest

from flightfocus.engine import (
    CompletionOutcome,
    EngineEvent,
    EngineEventKind,
    ManualClock,
    SessionEngine,
)
from flightfocus.engine.clock import ClockBase, TimerCallback
from flightfocus.errors import (
    InsufficientCreditsError,
    InvalidSessionError,
    InvalidTransitionError,
    PersistenceError,
)
from flightfocus.models import FlightClass, HistoryRecord, SessionPhase
from flightfocus.models.history import encode_history
from flightfocus.store import (
    BUSINESS_FLIGHTS_KEY,
    FLIGHT_HISTORY_KEY,
    HAS_LAUNCHED_KEY,
    TOTAL_FOCUS_TIME_KEY,
    AggregateCounters,
    JsonFileStore,
    MemoryStore,
)


def _collect(engine: SessionEngine) -> list[EngineEvent]:
    events: list[EngineEvent] = []
    engine.add_listener(events.append)
    return events


def _outcomes(events: list[EngineEvent]) -> list[CompletionOutcome]:
    return [
        e.outcome
        for e in events
        if e.kind == EngineEventKind.COMPLETED and e.outcome is not None
    ]


class _TaskTimer:
    """Timer running in its own task; ``stop()`` cancels that task."""

    def __init__(self, delay: float, callback: TimerCallback, repeat: bool) -> None:
        self._task = asyncio.ensure_future(self._run(delay, callback, repeat))

    async def _run(self, delay: float, callback: TimerCallback, repeat: bool) -> None:
        while True:
            await asyncio.sleep(delay)
            result = callback()
            if inspect.isawaitable(result):
                await result
            if not repeat:
                return

    def stop(self) -> None:
        self._task.cancel()


class TaskTimerClock(ClockBase):
    """Clock with Textual-style timers, running a hundred times faster."""

    SCALE = 0.01

    def every(self, interval: float, callback: TimerCallback) -> _TaskTimer:
        return _TaskTimer(interval * self.SCALE, callback, repeat=True)

    def after(self, delay: float, callback: TimerCallback) -> _TaskTimer:
        return _TaskTimer(delay * self.SCALE, callback, repeat=False)


class TestCompletion:
    """Tests for folding completed sessions into history and counters."""

    @pytest.mark.anyio
    async def test_one_second_session_completes(
        self,
        engine: SessionEngine,
        clock: ManualClock,
        store: MemoryStore,
        make_descriptor,
    ) -> None:
        events = _collect(engine)
        engine.create_session(make_descriptor(1))
        engine.start()

        await clock.advance(1)

        assert engine.session is not None
        assert engine.session.phase == SessionPhase.COMPLETED
        [outcome] = _outcomes(events)
        assert outcome.persisted
        assert outcome.credit_awarded is False
        assert outcome.record.duration_minutes == 0
        assert outcome.record.departure_label == "London"
        assert outcome.record.arrival_label == "Paris"
        assert outcome.record.completed_at == clock.now()
        assert store.data[TOTAL_FOCUS_TIME_KEY] == "0"
        assert BUSINESS_FLIGHTS_KEY not in store.data
        saved = json.loads(store.data[FLIGHT_HISTORY_KEY])
        assert [entry["id"] for entry in saved] == [outcome.record.id]

    @pytest.mark.anyio
    async def test_completion_happens_exactly_once(
        self, engine: SessionEngine, clock: ManualClock, make_descriptor
    ) -> None:
        events = _collect(engine)
        engine.create_session(make_descriptor(2))
        engine.start()

        await clock.advance(10)
        result = await engine.on_tick()

        assert result is None
        assert len(_outcomes(events)) == 1
        assert len(engine.history) == 1
        assert clock.pending == 0

    @pytest.mark.anyio
    async def test_45_minute_session_earns_business_flight(
        self,
        engine: SessionEngine,
        clock: ManualClock,
        store: MemoryStore,
        make_descriptor,
    ) -> None:
        events = _collect(engine)
        engine.create_session(make_descriptor(45 * 60))
        engine.start()

        await clock.advance(45 * 60)

        [outcome] = _outcomes(events)
        assert outcome.credit_awarded is True
        assert engine.counters.business_credits == 6
        assert engine.counters.total_focus_minutes == 45
        assert store.data[BUSINESS_FLIGHTS_KEY] == "6"
        assert store.data[TOTAL_FOCUS_TIME_KEY] == "45"

    @pytest.mark.anyio
    async def test_44_minute_session_earns_nothing(
        self, engine: SessionEngine, clock: ManualClock, make_descriptor
    ) -> None:
        engine.create_session(make_descriptor(44 * 60 + 59))
        engine.start()

        await clock.advance(45 * 60)

        assert engine.counters.business_credits == 5
        assert engine.counters.total_focus_minutes == 44

    @pytest.mark.anyio
    async def test_storage_failure_still_completes(
        self,
        engine: SessionEngine,
        clock: ManualClock,
        store: MemoryStore,
        make_descriptor,
    ) -> None:
        events = _collect(engine)
        store.fail_writes = True
        engine.create_session(make_descriptor(60))
        engine.start()

        await clock.advance(60)

        assert engine.session is not None
        assert engine.session.phase == SessionPhase.COMPLETED
        [outcome] = _outcomes(events)
        assert not outcome.persisted
        assert isinstance(outcome.error, PersistenceError)
        assert engine.last_error is outcome.error
        assert len(engine.history) == 1
        assert engine.stats().total_focus_minutes == 1
        assert EngineEventKind.PERSISTENCE_FAILED in [e.kind for e in events]

    @pytest.mark.anyio
    async def test_history_keeps_newest_fifty(
        self, clock: ManualClock, make_descriptor
    ) -> None:
        start = clock.now() - timedelta(days=1)
        old = [
            HistoryRecord(
                id=str(i),
                departure_label="Paris",
                arrival_label="London",
                duration_minutes=25,
                flight_class=FlightClass.ECONOMY,
                seat="A1",
                completed_at=start - timedelta(minutes=i),
            )
            for i in range(50)
        ]
        store = MemoryStore({FLIGHT_HISTORY_KEY: encode_history(old)})
        engine = await SessionEngine.open(store, clock)
        engine.create_session(make_descriptor(1))
        engine.start()

        await clock.advance(1)

        assert len(engine.history) == 50
        assert engine.history[0].departure_label == "London"
        assert engine.history[-1].id == "48"
        assert len(json.loads(store.data[FLIGHT_HISTORY_KEY])) == 50


class TestLifecycle:
    """Tests for start, pause, resume and reset through the engine."""

    @pytest.mark.anyio
    async def test_pause_freezes_countdown(
        self, engine: SessionEngine, clock: ManualClock, make_descriptor
    ) -> None:
        events = _collect(engine)
        engine.create_session(make_descriptor(40))
        engine.start()
        await clock.advance(30)

        engine.pause()
        ticks_before = len(events)
        await clock.advance(120)

        assert engine.session is not None
        assert engine.session.remaining_seconds == 10
        assert len(events) == ticks_before
        assert clock.pending == 0

        engine.resume()
        await clock.advance(10)
        assert engine.session.phase == SessionPhase.COMPLETED
        assert len(_outcomes(events)) == 1

    @pytest.mark.anyio
    async def test_reset_cancels_timers(
        self, engine: SessionEngine, clock: ManualClock, make_descriptor
    ) -> None:
        engine.create_session(make_descriptor(60))
        engine.start()
        await clock.advance(31)

        engine.reset()

        assert engine.session is not None
        assert engine.session.phase == SessionPhase.IDLE
        assert engine.session.remaining_seconds == 60
        assert engine.scheduler.visible_message is None
        assert clock.pending == 0
        assert engine.history == []

    def test_invalid_descriptor_is_rejected(
        self, engine: SessionEngine, make_descriptor
    ) -> None:
        with pytest.raises(InvalidSessionError):
            engine.create_session(make_descriptor(0))
        assert engine.session is None

    def test_cannot_replace_session_in_flight(
        self, engine: SessionEngine, make_descriptor
    ) -> None:
        engine.create_session(make_descriptor(60))
        engine.start()
        with pytest.raises(InvalidTransitionError):
            engine.create_session(make_descriptor(120))

    def test_actions_need_a_session(self, engine: SessionEngine) -> None:
        with pytest.raises(InvalidSessionError):
            engine.start()

    def test_pause_from_idle_raises(
        self, engine: SessionEngine, make_descriptor
    ) -> None:
        engine.create_session(make_descriptor(60))
        with pytest.raises(InvalidTransitionError):
            engine.pause()


class TestMessages:
    """Tests for attendant messages driven by the engine."""

    @pytest.mark.anyio
    async def test_message_shown_after_30_seconds_and_hidden_on_pause(
        self, engine: SessionEngine, clock: ManualClock, make_descriptor
    ) -> None:
        events = _collect(engine)
        engine.create_session(make_descriptor(600))
        engine.start()

        await clock.advance(30)
        messages = [e.message for e in events if e.kind == EngineEventKind.MESSAGE]
        assert len(messages) == 1
        assert messages[0] is not None
        assert 0 < messages[0].flight_progress < 0.1

        engine.pause()
        messages = [e.message for e in events if e.kind == EngineEventKind.MESSAGE]
        assert messages[-1] is None
        assert engine.scheduler.visible_message is None

    @pytest.mark.anyio
    async def test_completion_hides_message(
        self, engine: SessionEngine, clock: ManualClock, make_descriptor
    ) -> None:
        engine.create_session(make_descriptor(32))
        engine.start()
        await clock.advance(31)
        assert engine.scheduler.is_visible

        await clock.advance(1)

        assert engine.scheduler.visible_message is None
        assert clock.pending == 0


class TestCredits:
    """Tests for spending business flights."""

    @pytest.mark.anyio
    async def test_business_spends_one_credit(
        self, engine: SessionEngine, store: MemoryStore
    ) -> None:
        error = await engine.select_flight_class(FlightClass.BUSINESS)
        assert error is None
        assert engine.counters.business_credits == 4
        assert store.data[BUSINESS_FLIGHTS_KEY] == "4"

    @pytest.mark.anyio
    async def test_economy_is_free(
        self, engine: SessionEngine, store: MemoryStore
    ) -> None:
        assert await engine.select_flight_class(FlightClass.ECONOMY) is None
        assert engine.counters.business_credits == 5
        assert store.data == {}

    @pytest.mark.anyio
    async def test_no_credits_raises_without_side_effects(
        self, store: MemoryStore, clock: ManualClock
    ) -> None:
        engine = SessionEngine(
            store, clock, counters=AggregateCounters(business_credits=0)
        )
        with pytest.raises(InsufficientCreditsError):
            await engine.select_flight_class(FlightClass.BUSINESS)
        assert engine.counters.business_credits == 0
        assert store.data == {}

    @pytest.mark.anyio
    async def test_debit_kept_in_memory_when_save_fails(
        self, engine: SessionEngine, store: MemoryStore
    ) -> None:
        store.fail_writes = True
        error = await engine.select_flight_class(FlightClass.BUSINESS)
        assert isinstance(error, PersistenceError)
        assert engine.counters.business_credits == 4


class TestOpen:
    """Tests for loading engine state from the store."""

    @pytest.mark.anyio
    async def test_open_loads_counters(self, clock: ManualClock) -> None:
        store = MemoryStore(
            {
                TOTAL_FOCUS_TIME_KEY: "120",
                BUSINESS_FLIGHTS_KEY: "2",
                HAS_LAUNCHED_KEY: "true",
            }
        )
        engine = await SessionEngine.open(store, clock)
        assert engine.counters == AggregateCounters(120, 2, True)
        assert engine.history == []

    @pytest.mark.anyio
    async def test_open_propagates_read_failure(self, clock: ManualClock) -> None:
        store = MemoryStore()
        store.fail_reads = True
        with pytest.raises(PersistenceError):
            await SessionEngine.open(store, clock)

    @pytest.mark.anyio
    async def test_mark_launched_only_once(self, engine: SessionEngine) -> None:
        assert await engine.mark_launched() is True
        assert await engine.mark_launched() is False
        assert engine.counters.has_onboarded is True

    @pytest.mark.anyio
    async def test_open_recovers_from_corrupt_store_file(
        self, tmp_path: Path, clock: ManualClock
    ) -> None:
        path = tmp_path / "store.json"
        path.write_text("{broken", encoding="utf-8")

        engine = await SessionEngine.open(JsonFileStore(path), clock)

        assert engine.history == []
        assert engine.counters == AggregateCounters()
        assert (tmp_path / "store.json.corrupt").read_text() == "{broken"


class TestTaskTimers:
    """Tests for completion when stopping a timer cancels its task."""

    @pytest.mark.anyio
    async def test_completion_writes_everything_once(
        self, tmp_path: Path, make_descriptor
    ) -> None:
        path = tmp_path / "store.json"
        engine = SessionEngine(JsonFileStore(path), TaskTimerClock())
        events = _collect(engine)
        landed = asyncio.Event()
        engine.add_listener(
            lambda e: landed.set() if e.kind == EngineEventKind.COMPLETED else None
        )

        engine.create_session(make_descriptor(60))
        engine.start()
        await asyncio.wait_for(landed.wait(), timeout=10)
        await engine.wait_for_completion()

        [outcome] = _outcomes(events)
        assert outcome.persisted
        saved = json.loads(path.read_text(encoding="utf-8"))
        assert saved[TOTAL_FOCUS_TIME_KEY] == "1"
        assert len(json.loads(saved[FLIGHT_HISTORY_KEY])) == 1
        assert not any(e.kind == EngineEventKind.PERSISTENCE_FAILED for e in events)
