"""Focus session descriptor and countdown state machine.

A session counts down from its descriptor's duration one tick at a time.
Progress, position and heading are always derived from the remaining
seconds, so they can never drift out of step with the countdown.

Lifecycle::

    IDLE -> RUNNING <-> PAUSED
              |
              v
          COMPLETED
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum

from flightfocus.errors import InvalidSessionError, InvalidTransitionError


class FlightClass(Enum):
    """Cabin class chosen for a session."""

    ECONOMY = "economy"
    BUSINESS = "business"


class SessionPhase(Enum):
    """Phase of the countdown state machine."""

    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    COMPLETED = "completed"


@dataclass(frozen=True, slots=True)
class Coordinate:
    """A latitude/longitude pair in decimal degrees."""

    lat: float
    lon: float

    def interpolate(self, other: "Coordinate", fraction: float) -> "Coordinate":
        """Linear interpolation from this point towards ``other``."""
        return Coordinate(
            lat=self.lat + (other.lat - self.lat) * fraction,
            lon=self.lon + (other.lon - self.lon) * fraction,
        )


@dataclass(frozen=True, slots=True)
class Endpoint:
    """A departure or arrival point. Identity is the endpoint code."""

    code: str
    label: str
    coordinate: Coordinate


@dataclass(frozen=True, slots=True)
class SessionDescriptor:
    """Immutable parameters of one focus session."""

    duration_seconds: int
    departure: Endpoint
    arrival: Endpoint
    flight_class: FlightClass = FlightClass.ECONOMY
    seat: str = "A1"

    @classmethod
    def from_minutes(
        cls,
        minutes: int,
        departure: Endpoint,
        arrival: Endpoint,
        *,
        flight_class: FlightClass = FlightClass.ECONOMY,
        seat: str = "A1",
    ) -> "SessionDescriptor":
        """Build a descriptor from a whole-minute duration."""
        return cls(
            duration_seconds=minutes * 60,
            departure=departure,
            arrival=arrival,
            flight_class=flight_class,
            seat=seat,
        )

    @property
    def duration_minutes(self) -> int:
        """Whole minutes credited for this session (floor of seconds / 60)."""
        return self.duration_seconds // 60

    def validate(self) -> None:
        """Raise InvalidSessionError if the descriptor cannot start a session."""
        if isinstance(self.duration_seconds, bool) or not isinstance(
            self.duration_seconds, int
        ):
            raise InvalidSessionError(
                f"Duration must be a whole number of seconds, "
                f"got {self.duration_seconds!r}"
            )
        if self.duration_seconds < 1:
            raise InvalidSessionError(
                f"Duration must be at least 1 second, got {self.duration_seconds}"
            )
        if self.departure.code == self.arrival.code:
            raise InvalidSessionError(
                "Arrival city cannot be the same as departure city "
                f"({self.departure.code})"
            )


class SessionState:
    """Mutable countdown state for one session."""

    def __init__(self, descriptor: SessionDescriptor) -> None:
        self.descriptor = descriptor
        self.phase = SessionPhase.IDLE
        self.remaining_seconds = descriptor.duration_seconds
        self.has_started = False

    def __repr__(self) -> str:
        return (
            f"SessionState(phase={self.phase.value}, "
            f"remaining={self.remaining_seconds}/{self.descriptor.duration_seconds})"
        )

    @property
    def progress(self) -> float:
        """Fraction of the session elapsed, in [0, 1]."""
        total = self.descriptor.duration_seconds
        return 1 - self.remaining_seconds / total

    @property
    def position(self) -> Coordinate:
        """Current position on the straight line between the endpoints."""
        return self.descriptor.departure.coordinate.interpolate(
            self.descriptor.arrival.coordinate, self.progress
        )

    @property
    def heading_degrees(self) -> float:
        """Direction of travel, degrees clockwise from north."""
        dep = self.descriptor.departure.coordinate
        arr = self.descriptor.arrival.coordinate
        return math.degrees(math.atan2(arr.lon - dep.lon, arr.lat - dep.lat)) % 360

    @property
    def is_active(self) -> bool:
        """Whether the session is mid-flight (running or paused)."""
        return self.phase in {SessionPhase.RUNNING, SessionPhase.PAUSED}

    def start(self) -> None:
        """Begin the countdown from IDLE."""
        if self.phase != SessionPhase.IDLE:
            raise InvalidTransitionError(self.phase, "start")
        self.phase = SessionPhase.RUNNING
        self.has_started = True

    def pause(self) -> None:
        """Freeze the countdown."""
        if self.phase != SessionPhase.RUNNING:
            raise InvalidTransitionError(self.phase, "pause")
        self.phase = SessionPhase.PAUSED

    def resume(self) -> None:
        """Continue a paused countdown."""
        if self.phase != SessionPhase.PAUSED:
            raise InvalidTransitionError(self.phase, "resume")
        self.phase = SessionPhase.RUNNING

    def tick(self) -> bool:
        """Advance one second.

        Returns:
            True only on the tick that moves the session to COMPLETED.
        """
        if self.phase != SessionPhase.RUNNING:
            return False
        self.remaining_seconds = max(0, self.remaining_seconds - 1)
        if self.remaining_seconds == 0:
            self.phase = SessionPhase.COMPLETED
            return True
        return False

    def reset(self) -> None:
        """Return to IDLE with a full countdown."""
        self.phase = SessionPhase.IDLE
        self.remaining_seconds = self.descriptor.duration_seconds
        self.has_started = False
