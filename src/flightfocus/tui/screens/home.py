"""Home screen: stats, business credits and quick-start presets."""

import logging

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.screen import Screen
from textual.widgets import Footer, Header, Input, OptionList, Static
from textual.widgets.option_list import Option

from flightfocus.engine import SessionEngine
from flightfocus.errors import FlightFocusError, InsufficientCreditsError
from flightfocus.models import (
    CUSTOM_ROUTE,
    PRESET_ROUTE,
    TIMER_PRESETS,
    FlightClass,
    SessionDescriptor,
    find_destination,
    plan_flight,
    validate_custom_minutes,
)
from flightfocus.tui.screens.flight import FlightScreen
from flightfocus.tui.screens.history import HistoryScreen
from flightfocus.tui.widgets import StatsPanel

logger = logging.getLogger(__name__)

WELCOME_TEXT = (
    "Welcome aboard! Every focus session is a flight. Pick a timer below, "
    "stay focused until landing, and sessions of 45 minutes or more earn "
    "a business class upgrade."
)


def _route_label(codes: tuple[str, str]) -> str:
    labels = []
    for code in codes:
        destination = find_destination(code)
        labels.append(destination.city if destination else code)
    return " -> ".join(labels)


class HomeScreen(Screen):
    """Landing screen for choosing the next flight."""

    BINDINGS = [
        Binding("b", "toggle_class", "Economy/Business"),
        Binding("h", "show_history", "History"),
        Binding("ctrl+q", "quit", "Quit"),
    ]

    DEFAULT_CSS = """
    HomeScreen {
        background: $surface;
    }

    HomeScreen .content {
        width: 100%;
        height: 1fr;
        padding: 1 2;
    }

    HomeScreen .welcome {
        padding: 1 2;
        margin-bottom: 1;
        border: round $accent;
        color: $text;
    }

    HomeScreen .section-header {
        text-style: bold;
        color: $primary;
        padding: 1 0 0 0;
    }

    HomeScreen .cabin {
        color: $text-muted;
        padding: 0 0 1 0;
    }

    HomeScreen OptionList {
        height: auto;
        max-height: 12;
        border: none;
    }

    HomeScreen Input {
        width: 40;
    }
    """

    def __init__(self, engine: SessionEngine, first_launch: bool = False) -> None:
        super().__init__()
        self.engine = engine
        self.first_launch = first_launch
        self.flight_class = FlightClass.ECONOMY

    def compose(self) -> ComposeResult:
        yield Header()
        with Vertical(classes="content"):
            if self.first_launch:
                yield Static(WELCOME_TEXT, classes="welcome")
            yield StatsPanel(id="stats")
            yield Static("", id="cabin", classes="cabin")
            yield Static(
                f"Quick focus ({_route_label(PRESET_ROUTE)})",
                classes="section-header",
            )
            yield OptionList(
                *[
                    Option(f"{preset.name} - {preset.minutes} min", id=str(index))
                    for index, preset in enumerate(TIMER_PRESETS)
                ],
                id="presets",
            )
            yield Static(
                f"Custom timer ({_route_label(CUSTOM_ROUTE)})",
                classes="section-header",
            )
            yield Input(
                placeholder="Minutes (1-999)", type="integer", id="custom-minutes"
            )
        yield Footer()

    def on_mount(self) -> None:
        self._refresh()
        self.query_one("#presets", OptionList).focus()

    def on_screen_resume(self) -> None:
        """Refresh totals after returning from a flight."""
        self._refresh()

    def _refresh(self) -> None:
        self.query_one(StatsPanel).stats = self.engine.stats()
        credits = self.engine.counters.business_credits
        self.query_one("#cabin", Static).update(
            f"Cabin: {self.flight_class.value.title()}   "
            f"(business flights available: {credits}, press b to switch)"
        )

    def action_toggle_class(self) -> None:
        if self.flight_class == FlightClass.BUSINESS:
            self.flight_class = FlightClass.ECONOMY
        elif self.engine.counters.business_credits <= 0:
            self.notify(
                "No business flights left. Complete a 45+ minute flight to earn one.",
                severity="warning",
            )
            return
        else:
            self.flight_class = FlightClass.BUSINESS
        self._refresh()

    def action_show_history(self) -> None:
        self.app.push_screen(HistoryScreen(self.engine))

    async def on_option_list_option_selected(
        self, event: OptionList.OptionSelected
    ) -> None:
        preset = TIMER_PRESETS[int(event.option.id or 0)]
        await self.board(
            plan_flight(*PRESET_ROUTE, preset.minutes, flight_class=self.flight_class)
        )

    async def on_input_submitted(self, event: Input.Submitted) -> None:
        try:
            minutes = int(event.value or "0")
            validate_custom_minutes(minutes)
        except ValueError as e:
            self.notify(str(e), severity="error")
            return
        event.input.value = ""
        await self.board(
            plan_flight(*CUSTOM_ROUTE, minutes, flight_class=self.flight_class)
        )

    async def board(self, descriptor: SessionDescriptor) -> None:
        """Spend a credit if needed, then open the flight screen."""
        try:
            error = await self.engine.select_flight_class(descriptor.flight_class)
        except InsufficientCreditsError as e:
            self.notify(str(e), severity="warning")
            self.flight_class = FlightClass.ECONOMY
            self._refresh()
            return
        except FlightFocusError as e:
            self.notify(str(e), severity="error")
            return
        if error is not None:
            self.notify(f"Could not save credits: {error}", severity="warning")

        logger.info(
            "Boarding %s -> %s for %d minutes",
            descriptor.departure.code,
            descriptor.arrival.code,
            descriptor.duration_minutes,
        )
        # One business flight per credit; the next boarding defaults to economy
        self.flight_class = FlightClass.ECONOMY
        self.app.push_screen(FlightScreen(self.engine, descriptor))
