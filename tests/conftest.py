from __future__ import annotations

import copy
from collections.abc import Callable, Iterator
from datetime import datetime
from pathlib import Path
from typing import Any

import pytest

from flightfocus.config.paths import reset_paths
from flightfocus.config.settings import settings
from flightfocus.engine import ManualClock, SessionEngine
from flightfocus.models import Coordinate, Endpoint, SessionDescriptor
from flightfocus.store import MemoryStore


@pytest.fixture(autouse=True)
def isolate_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Prevent tests from persisting settings to disk."""
    original_data = copy.deepcopy(settings._data)

    def _noop_save() -> None:
        return None

    monkeypatch.setattr(settings, "_save", _noop_save)
    monkeypatch.delenv("FLIGHTFOCUS_MESSAGE_ENDPOINT", raising=False)
    try:
        yield
    finally:
        settings._data = original_data


@pytest.fixture
def xdg_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[Path]:
    """Point every XDG directory into tmp_path."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.setenv("XDG_STATE_HOME", str(tmp_path / "state"))
    reset_paths()
    try:
        yield tmp_path
    finally:
        reset_paths()


LONDON = Endpoint("LHR", "London", Coordinate(51.47, -0.4543))
PARIS = Endpoint("CDG", "Paris", Coordinate(49.0097, 2.5479))

DescriptorFactory = Callable[..., SessionDescriptor]


@pytest.fixture
def make_descriptor() -> DescriptorFactory:
    """Build London -> Paris descriptors with a duration in seconds."""

    def _make(seconds: int = 60, **kwargs: Any) -> SessionDescriptor:
        return SessionDescriptor(
            duration_seconds=seconds, departure=LONDON, arrival=PARIS, **kwargs
        )

    return _make


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock(datetime(2026, 3, 10, 9, 0).astimezone())


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def engine(store: MemoryStore, clock: ManualClock) -> SessionEngine:
    return SessionEngine(store, clock)


@pytest.fixture
def anyio_backend() -> str:
    """The code is asyncio-based (asyncio.to_thread, loop.call_at, Textual)."""
    return "asyncio"
