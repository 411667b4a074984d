"""Session engine: drives one focus session from clock ticks to history.

The engine owns the active ``SessionState``, arms the one-second tick timer
and the attendant-message scheduler in lock-step with the session phase,
and folds a naturally completed session into history and counters.

Completion is committed in memory first and then written through the
store. A storage failure never leaves the session RUNNING: the session is
COMPLETED, the in-memory stats include it, and the failure is reported on
the returned ``CompletionOutcome`` and to listeners.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date
from enum import Enum

from flightfocus.engine.clock import Clock, TimerHandle
from flightfocus.engine.scheduler import MessageScheduler
from flightfocus.errors import (
    InsufficientCreditsError,
    InvalidSessionError,
    InvalidTransitionError,
    PersistenceError,
)
from flightfocus.messages import AttendantMessage, LocalMessageSource, MessageSource
from flightfocus.models.history import (
    HistoryRecord,
    RecordIdFactory,
    decode_history,
    encode_history,
    prepend_record,
)
from flightfocus.models.session import (
    FlightClass,
    SessionDescriptor,
    SessionPhase,
    SessionState,
)
from flightfocus.stats import DerivedStats, compute_stats
from flightfocus.store import (
    BUSINESS_FLIGHTS_KEY,
    FLIGHT_HISTORY_KEY,
    TOTAL_FOCUS_TIME_KEY,
    AggregateCounters,
    SessionStore,
    load_counters,
    mark_launched,
)

logger = logging.getLogger(__name__)

# Sessions at least this long earn one business flight
CREDIT_THRESHOLD_MINUTES = 45


class EngineEventKind(Enum):
    """Kinds of notifications sent to engine listeners."""

    TICK = "tick"
    MESSAGE = "message"
    COMPLETED = "completed"
    PERSISTENCE_FAILED = "persistence_failed"


@dataclass
class CompletionOutcome:
    """Result of folding a completed session into history."""

    record: HistoryRecord
    counters: AggregateCounters
    credit_awarded: bool
    error: PersistenceError | None = None

    @property
    def persisted(self) -> bool:
        return self.error is None


@dataclass
class EngineEvent:
    """Notification delivered to engine listeners."""

    kind: EngineEventKind
    state: SessionState | None = None
    message: AttendantMessage | None = None
    outcome: CompletionOutcome | None = None
    error: PersistenceError | None = None


EngineListener = Callable[[EngineEvent], None]


class SessionEngine:
    """Runs one focus session at a time."""

    def __init__(
        self,
        store: SessionStore,
        clock: Clock,
        source: MessageSource | None = None,
        *,
        counters: AggregateCounters | None = None,
        history: list[HistoryRecord] | None = None,
        scheduler: MessageScheduler | None = None,
    ) -> None:
        self.store = store
        self.clock = clock
        self.counters = counters or AggregateCounters()
        self.history: list[HistoryRecord] = list(history or [])
        self.scheduler = scheduler or MessageScheduler(clock)
        self.scheduler.attach(source or LocalMessageSource())
        self.scheduler.on_change = self._on_message_change
        self.last_error: PersistenceError | None = None

        self._session: SessionState | None = None
        self._tick_timer: TimerHandle | None = None
        self._listeners: list[EngineListener] = []
        self._ids = RecordIdFactory()
        self._completions: set[asyncio.Future[CompletionOutcome]] = set()

    @classmethod
    async def open(
        cls,
        store: SessionStore,
        clock: Clock,
        source: MessageSource | None = None,
        **kwargs: object,
    ) -> "SessionEngine":
        """Create an engine with counters and history loaded from ``store``.

        Raises:
            PersistenceError: if the store cannot be read.
        """
        counters = await load_counters(store)
        history = decode_history(await store.get(FLIGHT_HISTORY_KEY))
        logger.info(
            "Loaded %d flights, %d focus minutes, %d business credits",
            len(history),
            counters.total_focus_minutes,
            counters.business_credits,
        )
        return cls(
            store,
            clock,
            source,
            counters=counters,
            history=history,
            **kwargs,  # type: ignore[arg-type]
        )

    # --- Listeners ---

    def add_listener(self, listener: EngineListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: EngineListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _emit(self, event: EngineEvent) -> None:
        for listener in list(self._listeners):
            listener(event)

    def _on_message_change(self, message: AttendantMessage | None) -> None:
        self._emit(
            EngineEvent(EngineEventKind.MESSAGE, state=self._session, message=message)
        )

    # --- Session lifecycle ---

    @property
    def session(self) -> SessionState | None:
        """The current session, if one has been created."""
        return self._session

    def _require_session(self) -> SessionState:
        if self._session is None:
            raise InvalidSessionError("No session has been created")
        return self._session

    def create_session(self, descriptor: SessionDescriptor) -> SessionState:
        """Validate ``descriptor`` and make it the current session.

        Raises:
            InvalidSessionError: if the descriptor is invalid.
            InvalidTransitionError: if the current session is still in flight.
        """
        descriptor.validate()
        if self._session is not None and self._session.is_active:
            raise InvalidTransitionError(self._session.phase, "replace")
        self._cancel_tick()
        self.scheduler.reset()
        self._session = SessionState(descriptor)
        logger.info(
            "Created %s session %s -> %s (%ds, seat %s)",
            descriptor.flight_class.value,
            descriptor.departure.code,
            descriptor.arrival.code,
            descriptor.duration_seconds,
            descriptor.seat,
        )
        return self._session

    def start(self) -> None:
        """Start the countdown and the message cadence."""
        session = self._require_session()
        session.start()
        self._arm_tick()
        self.scheduler.start(self._snapshot)
        logger.info("Session started")

    def pause(self) -> None:
        """Freeze the countdown; no timer fires after this returns."""
        session = self._require_session()
        session.pause()
        self._cancel_tick()
        self.scheduler.stop()
        logger.info("Session paused at %ds remaining", session.remaining_seconds)

    def resume(self) -> None:
        """Continue the countdown; the message cadence restarts from now."""
        session = self._require_session()
        session.resume()
        self._arm_tick()
        self.scheduler.start(self._snapshot)
        logger.info("Session resumed at %ds remaining", session.remaining_seconds)

    def reset(self) -> None:
        """Return the session to IDLE and cancel all timers."""
        session = self._require_session()
        session.reset()
        self._cancel_tick()
        self.scheduler.reset()
        logger.info("Session reset")

    def _snapshot(self) -> tuple[float, FlightClass]:
        session = self._require_session()
        return session.progress, session.descriptor.flight_class

    def _arm_tick(self) -> None:
        self._cancel_tick()
        self._tick_timer = self.clock.on_tick(self.on_tick)

    def _cancel_tick(self) -> None:
        self.clock.cancel(self._tick_timer)
        self._tick_timer = None

    async def on_tick(self) -> CompletionOutcome | None:
        """Advance the session by one second.

        Returns:
            The completion outcome on the tick that finishes the session,
            otherwise None.
        """
        session = self._session
        if session is None:
            return None
        completed = session.tick()
        if not completed:
            if session.phase == SessionPhase.RUNNING:
                self._emit(EngineEvent(EngineEventKind.TICK, state=session))
            return None

        self._cancel_tick()
        self.scheduler.stop()
        self._emit(EngineEvent(EngineEventKind.TICK, state=session))
        # Stopping a Textual tick timer cancels the task running this
        # callback, so completion gets a task of its own.
        completion = asyncio.ensure_future(self._complete(session))
        self._completions.add(completion)
        completion.add_done_callback(self._completions.discard)
        return await asyncio.shield(completion)

    async def wait_for_completion(self) -> None:
        """Wait for any completion writes still in progress."""
        if self._completions:
            await asyncio.gather(*self._completions, return_exceptions=True)

    async def _complete(self, session: SessionState) -> CompletionOutcome:
        descriptor = session.descriptor
        now = self.clock.now()
        record = HistoryRecord.from_descriptor(
            self._ids.next_id(now), descriptor, now
        )
        minutes = descriptor.duration_minutes
        credit_awarded = minutes >= CREDIT_THRESHOLD_MINUTES

        self.history = prepend_record(self.history, record)
        self.counters.total_focus_minutes += minutes
        if credit_awarded:
            self.counters.business_credits += 1

        error: PersistenceError | None = None
        try:
            await self._persist_completion(credit_awarded)
        except PersistenceError as exc:
            logger.warning("Failed to save completed flight %s: %s", record.id, exc)
            error = exc
            self.last_error = exc

        outcome = CompletionOutcome(
            record=record,
            counters=self.counters,
            credit_awarded=credit_awarded,
            error=error,
        )
        logger.info(
            "Flight %s -> %s complete: %d minutes%s",
            record.departure_label,
            record.arrival_label,
            minutes,
            ", business flight earned" if credit_awarded else "",
        )
        self._emit(
            EngineEvent(EngineEventKind.COMPLETED, state=session, outcome=outcome)
        )
        if error is not None:
            self._emit(
                EngineEvent(
                    EngineEventKind.PERSISTENCE_FAILED, state=session, error=error
                )
            )
        return outcome

    async def _persist_completion(self, credit_awarded: bool) -> None:
        await self.store.set(FLIGHT_HISTORY_KEY, encode_history(self.history))
        await self.store.set(
            TOTAL_FOCUS_TIME_KEY, str(self.counters.total_focus_minutes)
        )
        if credit_awarded:
            await self.store.set(
                BUSINESS_FLIGHTS_KEY, str(self.counters.business_credits)
            )

    # --- Credits and stats ---

    async def select_flight_class(
        self, flight_class: FlightClass
    ) -> PersistenceError | None:
        """Spend a business flight when business class is chosen.

        Returns:
            The storage error if the debit could not be saved, else None.

        Raises:
            InsufficientCreditsError: if business is chosen with no credits.
        """
        if flight_class != FlightClass.BUSINESS:
            return None
        if self.counters.business_credits <= 0:
            raise InsufficientCreditsError(self.counters.business_credits)

        self.counters.business_credits -= 1
        try:
            await self.store.set(
                BUSINESS_FLIGHTS_KEY, str(self.counters.business_credits)
            )
        except PersistenceError as exc:
            logger.warning("Failed to save business flight debit: %s", exc)
            self.last_error = exc
            self._emit(
                EngineEvent(
                    EngineEventKind.PERSISTENCE_FAILED, state=self._session, error=exc
                )
            )
            return exc
        logger.info(
            "Business flight spent, %d remaining", self.counters.business_credits
        )
        return None

    async def mark_launched(self) -> bool:
        """Record the app launch; True on the very first launch."""
        first = await mark_launched(self.store)
        self.counters.has_onboarded = True
        return first

    def stats(self, today: date | None = None) -> DerivedStats:
        """Statistics over the in-memory history and counters."""
        return compute_stats(self.history, self.counters, today)
