"""Flight attendant messages shown during a session.

Messages come from a ``MessageSource``. The local source picks from a fixed
table filtered by flight progress; the remote source asks the
flight-attendant-message HTTP endpoint and expects the same response shape.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any, Protocol

import httpx

from flightfocus.errors import MessageSourceError
from flightfocus.models.session import FlightClass

logger = logging.getLogger(__name__)

FALLBACK_MESSAGE = "Keep up the great work! Stay focused!"
MESSAGE_PATH = "/api/flight-attendant-message"


@dataclass(frozen=True, slots=True)
class AttendantMessage:
    """One message as returned by a message source."""

    message: str
    type: str
    flight_progress: float
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    def to_dict(self) -> dict[str, Any]:
        """Convert to the wire format."""
        return {
            "message": self.message,
            "type": self.type,
            "timestamp": self.timestamp.isoformat(),
            "flightProgress": self.flight_progress,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AttendantMessage":
        """Create from the wire format.

        Raises:
            KeyError, ValueError, TypeError: if the payload is malformed.
        """
        raw_timestamp = data.get("timestamp")
        timestamp = (
            datetime.fromisoformat(str(raw_timestamp).replace("Z", "+00:00"))
            if raw_timestamp
            else datetime.now(UTC)
        )
        return cls(
            message=str(data["message"]),
            type=str(data.get("type", "encouragement")),
            flight_progress=float(data.get("flightProgress", 0.0)),
            timestamp=timestamp,
        )

    @classmethod
    def fallback(cls, progress: float) -> "AttendantMessage":
        """Generic encouragement used when a source fails."""
        return cls(
            message=FALLBACK_MESSAGE, type="encouragement", flight_progress=progress
        )


class MessageSource(Protocol):
    """Supplies the next attendant message for a flight."""

    async def next_message(
        self, progress: float, flight_class: FlightClass
    ) -> AttendantMessage: ...


# (message, type)
MOTIVATIONAL_MESSAGES: tuple[tuple[str, str], ...] = (
    ("Great progress! Keep going!", "encouragement"),
    ("You're doing amazing! Stay focused!", "motivation"),
    ("Almost there! Your destination is getting closer!", "progress"),
    ("Excellent focus! The view from up here is beautiful!", "scenery"),
    ("Stay on track! You're flying like a pro!", "encouragement"),
    ("Wonderful concentration! Enjoy your journey!", "motivation"),
    ("Keep it up! We're cruising at the perfect altitude!", "status"),
    ("Fantastic work! The captain is impressed!", "encouragement"),
    ("You're in the zone! Let's reach that destination!", "motivation"),
    ("Perfect flight so far! Maintain that focus!", "encouragement"),
    ("We're passing over beautiful landscapes below. Stay focused!", "scenery"),
    ("Your focus is inspiring other passengers!", "encouragement"),
    ("Smooth flying conditions ahead. Keep up the great work!", "status"),
    ("You're making excellent time to your destination!", "progress"),
    ("The captain has turned off the seatbelt sign. Stay focused!", "status"),
)

BUSINESS_MESSAGES: tuple[tuple[str, str], ...] = (
    ("Enjoy your premium Business class experience!", "business"),
    ("Your lie-flat seat is perfect for deep focus work!", "business"),
)


def candidate_messages(
    progress: float, flight_class: FlightClass
) -> list[tuple[str, str]]:
    """Filter the message table for the current stage of the flight."""
    if progress > 0.8:
        pool = [
            (text, kind)
            for text, kind in MOTIVATIONAL_MESSAGES
            if kind == "progress" or "Almost" in text or "destination" in text
        ]
    elif progress > 0.5:
        pool = [
            (text, kind)
            for text, kind in MOTIVATIONAL_MESSAGES
            if kind in {"encouragement", "scenery"}
        ]
    else:
        pool = [
            (text, kind)
            for text, kind in MOTIVATIONAL_MESSAGES
            if kind in {"motivation", "status"}
        ]
    if flight_class == FlightClass.BUSINESS:
        pool.extend(BUSINESS_MESSAGES)
    return pool


def select_message(
    progress: float, flight_class: FlightClass, rng: random.Random
) -> AttendantMessage:
    """Pick one message uniformly from the filtered pool."""
    text, kind = rng.choice(candidate_messages(progress, flight_class))
    return AttendantMessage(message=text, type=kind, flight_progress=progress)


def contextual_message(
    progress: float,
    flight_class: FlightClass,
    departure_label: str,
    arrival_label: str,
    duration_minutes: int,
) -> AttendantMessage:
    """A templated message that mentions the route."""
    del flight_class  # same wording for both cabins
    if progress > 0.9:
        text = (
            f"Excellent work! You're almost at {arrival_label}. Prepare for landing!"
        )
    elif progress > 0.5:
        text = (
            f"Halfway there! The view between {departure_label} and "
            f"{arrival_label} is spectacular!"
        )
    elif duration_minutes > 60:
        text = (
            f"This is a long-haul flight to {arrival_label}. "
            "Stay hydrated and keep focusing!"
        )
    else:
        text = (
            f"Great progress on your flight from {departure_label} "
            f"to {arrival_label}!"
        )
    return AttendantMessage(message=text, type="contextual", flight_progress=progress)


class LocalMessageSource:
    """Message source backed by the built-in table."""

    def __init__(self, rng: random.Random | None = None) -> None:
        self.rng = rng or random.Random()

    async def next_message(
        self, progress: float, flight_class: FlightClass
    ) -> AttendantMessage:
        return select_message(progress, flight_class, self.rng)


class RemoteMessageSource:
    """Message source that calls the flight-attendant-message endpoint."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 5.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._owns_client = client is None

    @property
    def url(self) -> str:
        return f"{self.base_url}{MESSAGE_PATH}"

    async def aclose(self) -> None:
        """Close the HTTP client if this source created it."""
        if self._owns_client:
            await self._client.aclose()

    async def next_message(
        self, progress: float, flight_class: FlightClass
    ) -> AttendantMessage:
        params = {"progress": str(progress), "class": flight_class.value}
        try:
            response = await self._client.get(self.url, params=params)
            response.raise_for_status()
            payload = response.json()
            return AttendantMessage.from_dict(payload)
        except (httpx.HTTPStatusError, httpx.RequestError) as exc:
            raise MessageSourceError(f"Message request failed: {exc}") from exc
        except (KeyError, ValueError, TypeError) as exc:
            raise MessageSourceError(f"Malformed message response: {exc}") from exc

    async def contextual_message(
        self,
        progress: float,
        flight_class: FlightClass,
        departure_label: str,
        arrival_label: str,
        duration_minutes: int,
    ) -> AttendantMessage:
        """Ask the endpoint for a route-aware message."""
        body = {
            "progress": progress,
            "flightClass": flight_class.value,
            "departure": departure_label,
            "arrival": arrival_label,
            "duration": duration_minutes,
        }
        try:
            response = await self._client.post(self.url, json=body)
            response.raise_for_status()
            return AttendantMessage.from_dict(response.json())
        except (httpx.HTTPStatusError, httpx.RequestError) as exc:
            raise MessageSourceError(f"Message request failed: {exc}") from exc
        except (KeyError, ValueError, TypeError) as exc:
            raise MessageSourceError(f"Malformed message response: {exc}") from exc


def build_message_source(
    kind: str,
    *,
    endpoint: str | None = None,
    timeout: float = 5.0,
    rng: random.Random | None = None,
) -> MessageSource:
    """Create the configured message source, defaulting to the local table."""
    if kind == "remote":
        if endpoint:
            return RemoteMessageSource(endpoint, timeout=timeout)
        logger.warning("Remote message source selected without an endpoint")
    return LocalMessageSource(rng)
