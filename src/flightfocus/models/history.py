"""Flight history records and their persisted JSON encoding.

History is stored as a single JSON array string, most recent flight first,
capped at ``HISTORY_CAPACITY`` entries::

    [{"id": "1760862000000", "departure": "London", "arrival": "Paris",
      "duration": 25, "class": "economy", "seat": "12A",
      "completedAt": "2026-10-19T09:00:00+00:00"}, ...]
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from flightfocus.models.session import FlightClass, SessionDescriptor

logger = logging.getLogger(__name__)

HISTORY_CAPACITY = 50


@dataclass(frozen=True, slots=True)
class HistoryRecord:
    """One completed flight."""

    id: str
    departure_label: str
    arrival_label: str
    duration_minutes: int
    flight_class: FlightClass
    seat: str
    completed_at: datetime

    @classmethod
    def from_descriptor(
        cls,
        record_id: str,
        descriptor: SessionDescriptor,
        completed_at: datetime,
    ) -> "HistoryRecord":
        """Create the record for a session that just completed."""
        return cls(
            id=record_id,
            departure_label=descriptor.departure.label,
            arrival_label=descriptor.arrival.label,
            duration_minutes=descriptor.duration_minutes,
            flight_class=descriptor.flight_class,
            seat=descriptor.seat,
            completed_at=completed_at,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to the persisted dictionary shape."""
        return {
            "id": self.id,
            "departure": self.departure_label,
            "arrival": self.arrival_label,
            "duration": self.duration_minutes,
            "class": self.flight_class.value,
            "seat": self.seat,
            "completedAt": self.completed_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "HistoryRecord":
        """Create from the persisted dictionary shape.

        Raises:
            KeyError, ValueError, TypeError: if the entry is malformed.
        """
        completed_at = datetime.fromisoformat(
            str(data["completedAt"]).replace("Z", "+00:00")
        )
        return cls(
            id=str(data["id"]),
            departure_label=str(data["departure"]),
            arrival_label=str(data["arrival"]),
            duration_minutes=int(data["duration"]),
            flight_class=FlightClass(data.get("class", "economy")),
            seat=str(data.get("seat", "")),
            completed_at=completed_at,
        )


def encode_history(records: Iterable[HistoryRecord]) -> str:
    """Serialize history for storage."""
    return json.dumps([record.to_dict() for record in records])


def decode_history(raw: str | None) -> list[HistoryRecord]:
    """Parse stored history, treating missing or corrupt data as empty.

    Individual malformed entries are dropped; the rest are kept in order.
    """
    if not raw:
        return []
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as exc:
        logger.warning("Ignoring corrupt flight history: %s", exc)
        return []
    if not isinstance(payload, list):
        logger.warning(
            "Ignoring flight history with unexpected type %s", type(payload).__name__
        )
        return []

    records: list[HistoryRecord] = []
    for index, entry in enumerate(payload):
        if not isinstance(entry, dict):
            logger.warning("Skipping history entry %d: not an object", index)
            continue
        try:
            records.append(HistoryRecord.from_dict(entry))
        except (KeyError, ValueError, TypeError) as exc:
            logger.warning("Skipping malformed history entry %d: %s", index, exc)
    return records


def prepend_record(
    history: list[HistoryRecord],
    record: HistoryRecord,
    capacity: int = HISTORY_CAPACITY,
) -> list[HistoryRecord]:
    """Return a new history with ``record`` first, dropping the oldest overflow."""
    return [record, *history][:capacity]


class RecordIdFactory:
    """Issues millisecond-timestamp ids that strictly increase."""

    def __init__(self) -> None:
        self._last = 0

    def next_id(self, now: datetime) -> str:
        """Return an id derived from ``now``, bumped past the previous id."""
        candidate = int(now.timestamp() * 1000)
        if candidate <= self._last:
            candidate = self._last + 1
        self._last = candidate
        return str(candidate)
