"""Durable key-value storage for flight history and aggregate counters.

Every value is a string: counters hold decimal integers, ``flightHistory``
holds a JSON array (see ``flightfocus.models.history``).
"""

from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from flightfocus.errors import PersistenceError

logger = logging.getLogger(__name__)

TOTAL_FOCUS_TIME_KEY = "totalFocusTime"
BUSINESS_FLIGHTS_KEY = "businessFlights"
FLIGHT_HISTORY_KEY = "flightHistory"
HAS_LAUNCHED_KEY = "hasLaunched"

DEFAULT_BUSINESS_CREDITS = 5


class SessionStore(Protocol):
    """Async string-keyed storage."""

    async def get(self, key: str) -> str | None: ...

    async def set(self, key: str, value: str) -> None: ...


class MemoryStore:
    """In-process store, used for tests and throwaway sessions."""

    def __init__(self, data: dict[str, str] | None = None) -> None:
        self.data: dict[str, str] = dict(data or {})
        self.fail_reads = False
        self.fail_writes = False

    async def get(self, key: str) -> str | None:
        if self.fail_reads:
            raise PersistenceError(f"Failed to read {key}", key=key)
        return self.data.get(key)

    async def set(self, key: str, value: str) -> None:
        if self.fail_writes:
            raise PersistenceError(f"Failed to write {key}", key=key)
        self.data[key] = value


class JsonFileStore:
    """Store backed by a single JSON object file."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def _read_all(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except OSError as exc:
            raise PersistenceError(f"Failed to read {self.path}: {exc}") from exc
        except json.JSONDecodeError as exc:
            self._set_aside(str(exc))
            return {}
        if not isinstance(raw, dict):
            self._set_aside("not a JSON object")
            return {}
        return {str(k): str(v) for k, v in raw.items()}

    def _set_aside(self, reason: str) -> None:
        """Move a corrupt store file out of the way so a fresh one is started."""
        backup = self.path.with_name(self.path.name + ".corrupt")
        logger.warning(
            "Corrupt store file %s (%s), moving it to %s", self.path, reason, backup
        )
        try:
            self.path.replace(backup)
        except OSError as exc:
            logger.error("Failed to move corrupt store file: %s", exc)

    def _write(self, key: str, value: str) -> None:
        data = self._read_all()
        data[key] = value
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(data, indent=2), encoding="utf-8")
        except OSError as exc:
            raise PersistenceError(
                f"Failed to write {key} to {self.path}: {exc}", key=key
            ) from exc

    async def get(self, key: str) -> str | None:
        data = await asyncio.to_thread(self._read_all)
        return data.get(key)

    async def set(self, key: str, value: str) -> None:
        await asyncio.to_thread(self._write, key, value)
        logger.debug("Stored %s in %s", key, self.path)


@dataclass
class AggregateCounters:
    """Running totals kept alongside the flight history."""

    total_focus_minutes: int = 0
    business_credits: int = DEFAULT_BUSINESS_CREDITS
    has_onboarded: bool = False


def _parse_count(key: str, raw: str | None, default: int) -> int:
    if raw is None:
        return default
    try:
        value = int(raw.strip())
    except ValueError:
        logger.warning("Ignoring non-numeric %s value %r", key, raw)
        return default
    return max(0, value)


async def load_counters(store: SessionStore) -> AggregateCounters:
    """Read counters from the store, filling in defaults for absent keys."""
    total = await store.get(TOTAL_FOCUS_TIME_KEY)
    credits = await store.get(BUSINESS_FLIGHTS_KEY)
    launched = await store.get(HAS_LAUNCHED_KEY)
    return AggregateCounters(
        total_focus_minutes=_parse_count(TOTAL_FOCUS_TIME_KEY, total, 0),
        business_credits=_parse_count(
            BUSINESS_FLIGHTS_KEY, credits, DEFAULT_BUSINESS_CREDITS
        ),
        has_onboarded=launched == "true",
    )


async def mark_launched(store: SessionStore) -> bool:
    """Record that the app has been opened.

    Returns:
        True if this is the first launch.
    """
    if await store.get(HAS_LAUNCHED_KEY):
        return False
    await store.set(HAS_LAUNCHED_KEY, "true")
    return True
