"""Main Flight Focus TUI application."""

import logging
from typing import Any

from textual.app import App
from textual.binding import Binding

from flightfocus.config import settings
from flightfocus.engine import SessionEngine
from flightfocus.errors import PersistenceError
from flightfocus.messages import (
    MessageSource,
    RemoteMessageSource,
    build_message_source,
)
from flightfocus.models import SessionDescriptor
from flightfocus.store import JsonFileStore, SessionStore
from flightfocus.tui.clock import TextualClock
from flightfocus.tui.screens.home import HomeScreen

logger = logging.getLogger(__name__)


class FlightFocusApp(App[None]):
    """Main Flight Focus TUI application."""

    TITLE = "Flight Focus"
    SUB_TITLE = "Turn focus time into flights"

    BINDINGS = [
        Binding("ctrl+q", "quit", "Quit"),
        Binding("ctrl+d", "toggle_dark", "Toggle Dark Mode"),
    ]

    CSS = """
    Screen {
        background: $surface;
    }
    """

    def __init__(
        self,
        store: SessionStore | None = None,
        source: MessageSource | None = None,
        initial_flight: SessionDescriptor | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self._store = store
        self._source = source
        self._initial_flight = initial_flight
        self.engine: SessionEngine | None = None

    async def on_mount(self) -> None:
        """Load the flight log and show the home screen."""
        saved_theme = settings.theme
        logger.info("Loading saved theme: %s", saved_theme)
        self.theme = saved_theme

        store = self._store or JsonFileStore(settings.store_path)
        if self._source is None:
            self._source = build_message_source(
                settings.message_source,
                endpoint=settings.message_endpoint,
                timeout=settings.message_timeout_seconds,
            )
        try:
            self.engine = await SessionEngine.open(
                store, TextualClock(self), self._source
            )
            first_launch = await self.engine.mark_launched()
        except PersistenceError as e:
            logger.error("Cannot open flight log: %s", e)
            self.exit(message=f"Cannot open flight log: {e}")
            return
        home = HomeScreen(self.engine, first_launch=first_launch)
        await self.push_screen(home)
        if self._initial_flight is not None:
            await home.board(self._initial_flight)

    async def on_unmount(self) -> None:
        if isinstance(self._source, RemoteMessageSource):
            await self._source.aclose()

    def watch_theme(self, new_theme: str) -> None:
        """Save theme whenever it changes (from any source)."""
        logger.info("Theme changed to: %s, saving...", new_theme)
        settings.theme = new_theme

    def action_toggle_dark(self) -> None:
        self.theme = (
            "textual-dark" if self.theme == "textual-light" else "textual-light"
        )
