"""Shared context helpers for CLI command modules."""

from __future__ import annotations

import sys

from rich.console import Console

from flightfocus.config import settings
from flightfocus.engine import AsyncioClock, SessionEngine
from flightfocus.engine.clock import Clock
from flightfocus.errors import PersistenceError
from flightfocus.messages import MessageSource
from flightfocus.store import JsonFileStore, SessionStore

# Exit codes
EXIT_OK = 0
EXIT_USER_ERROR = 1
EXIT_NO_CREDITS = 2

console = Console()


def print_error(message: str) -> None:
    """Print a user-facing error to stderr."""
    print(f"Error: {message}", file=sys.stderr)


def default_store() -> SessionStore:
    """The store configured in settings."""
    return JsonFileStore(settings.store_path)


async def open_engine(
    clock: Clock | None = None,
    source: MessageSource | None = None,
    store: SessionStore | None = None,
) -> SessionEngine | None:
    """Open the engine on the configured store, or print an error and return None."""
    try:
        return await SessionEngine.open(
            store or default_store(), clock or AsyncioClock(), source
        )
    except PersistenceError as e:
        print_error(f"Cannot open flight log: {e}")
        return None
