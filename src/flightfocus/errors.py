"""Error taxonomy for Flight Focus."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from flightfocus.models.session import SessionPhase


class FlightFocusError(Exception):
    """Base class for all Flight Focus errors."""


class InvalidSessionError(FlightFocusError):
    """Raised when a session descriptor fails validation."""


class InvalidTransitionError(FlightFocusError):
    """Raised when a lifecycle action is attempted from a disallowed phase."""

    def __init__(self, phase: "SessionPhase", action: str) -> None:
        self.phase = phase
        self.action = action
        super().__init__(f"Cannot {action} a session that is {phase.value}")


class InsufficientCreditsError(FlightFocusError):
    """Raised when business class is requested without a credit to spend."""

    def __init__(self, credits: int) -> None:
        self.credits = credits
        super().__init__(
            f"No business flights available ({credits} remaining). "
            "Complete a focus session of 45 minutes or more to earn one."
        )


class PersistenceError(FlightFocusError):
    """Raised when the key-value store cannot be read or written."""

    def __init__(self, message: str, key: str | None = None) -> None:
        self.key = key
        super().__init__(message)


class MessageSourceError(FlightFocusError):
    """Raised when an attendant message cannot be fetched."""
