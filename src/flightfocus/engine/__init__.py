"""Focus session engine: clock, message scheduler and orchestration."""

from .clock import AsyncioClock, Clock, ManualClock, TimerHandle
from .engine import (
    CREDIT_THRESHOLD_MINUTES,
    CompletionOutcome,
    EngineEvent,
    EngineEventKind,
    SessionEngine,
)
from .scheduler import (
    FIRST_MESSAGE_DELAY,
    MESSAGE_DISPLAY_SECONDS,
    MESSAGE_INTERVAL,
    MessageScheduler,
)

__all__ = [
    "AsyncioClock",
    "CREDIT_THRESHOLD_MINUTES",
    "Clock",
    "CompletionOutcome",
    "EngineEvent",
    "EngineEventKind",
    "FIRST_MESSAGE_DELAY",
    "MESSAGE_DISPLAY_SECONDS",
    "MESSAGE_INTERVAL",
    "ManualClock",
    "MessageScheduler",
    "SessionEngine",
    "TimerHandle",
]
