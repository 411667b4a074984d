"""In-flight screen: countdown, progress and attendant messages."""

import logging

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.screen import Screen
from textual.widgets import Footer, Header, ProgressBar, Static

from flightfocus.engine import (
    CompletionOutcome,
    EngineEvent,
    EngineEventKind,
    SessionEngine,
)
from flightfocus.errors import InvalidSessionError, InvalidTransitionError
from flightfocus.formatting import format_clock, format_coordinate
from flightfocus.models import SessionDescriptor, SessionPhase, SessionState
from flightfocus.tui.widgets import AttendantToast

logger = logging.getLogger(__name__)

STATUS_TEXT = {
    SessionPhase.IDLE: "Ready for departure. Press space to take off.",
    SessionPhase.RUNNING: "Cruising. Press space to pause.",
    SessionPhase.PAUSED: "Holding pattern. Press space to resume.",
    SessionPhase.COMPLETED: "Landed. Press escape to return to the terminal.",
}


class FlightScreen(Screen):
    """Runs one focus session on the shared engine."""

    BINDINGS = [
        Binding("space", "toggle_flight", "Start/Pause"),
        Binding("r", "reset_flight", "Reset"),
        Binding("escape", "leave", "Back"),
    ]

    DEFAULT_CSS = """
    FlightScreen {
        background: $surface;
    }

    FlightScreen .content {
        width: 100%;
        height: 1fr;
        padding: 1 2;
        align: center top;
    }

    FlightScreen .route {
        text-style: bold;
        color: $primary;
        text-align: center;
        width: 100%;
    }

    FlightScreen .countdown {
        text-style: bold;
        text-align: center;
        width: 100%;
        padding: 1 0;
    }

    FlightScreen .position, FlightScreen .status {
        color: $text-muted;
        text-align: center;
        width: 100%;
    }

    FlightScreen ProgressBar {
        width: 100%;
        padding: 1 0;
    }
    """

    def __init__(self, engine: SessionEngine, descriptor: SessionDescriptor) -> None:
        super().__init__()
        self.engine = engine
        self.descriptor = descriptor

    def compose(self) -> ComposeResult:
        d = self.descriptor
        yield Header()
        with Vertical(classes="content"):
            yield Static(
                f"{d.departure.label} ({d.departure.code}) -> "
                f"{d.arrival.label} ({d.arrival.code})   "
                f"{d.flight_class.value.title()}, seat {d.seat}",
                classes="route",
            )
            yield Static("", id="countdown", classes="countdown")
            yield ProgressBar(total=100, show_eta=False, id="progress")
            yield Static("", id="position", classes="position")
            yield Static("", id="status", classes="status")
            yield AttendantToast(id="attendant")
        yield Footer()

    def on_mount(self) -> None:
        try:
            self.engine.create_session(self.descriptor)
        except (InvalidSessionError, InvalidTransitionError) as e:
            logger.warning("Cannot board flight: %s", e)
            self.notify(str(e), severity="error")
            self.app.pop_screen()
            return
        self.engine.add_listener(self._on_engine_event)
        self._render_state(self.engine.session)

    def on_unmount(self) -> None:
        self.engine.remove_listener(self._on_engine_event)
        session = self.engine.session
        if session is not None and session.is_active:
            logger.info("Abandoning flight with %ds left", session.remaining_seconds)
            self.engine.reset()

    def _on_engine_event(self, event: EngineEvent) -> None:
        if event.kind == EngineEventKind.TICK:
            self._render_state(event.state)
        elif event.kind == EngineEventKind.MESSAGE:
            self.query_one(AttendantToast).show_message(event.message)
        elif event.kind == EngineEventKind.COMPLETED and event.outcome:
            self._render_state(event.state)
            self._announce_landing(event.outcome)
        elif event.kind == EngineEventKind.PERSISTENCE_FAILED:
            self.notify(
                f"Flight log could not be saved: {event.error}", severity="error"
            )

    def _render_state(self, state: SessionState | None) -> None:
        if state is None:
            return
        self.query_one("#countdown", Static).update(
            format_clock(state.remaining_seconds)
        )
        self.query_one("#progress", ProgressBar).update(progress=state.progress * 100)
        position = state.position
        self.query_one("#position", Static).update(
            f"Position {format_coordinate(position.lat, position.lon)}   "
            f"Heading {state.heading_degrees:.0f}°"
        )
        self.query_one("#status", Static).update(STATUS_TEXT[state.phase])

    def _announce_landing(self, outcome: CompletionOutcome) -> None:
        message = (
            f"Welcome to {outcome.record.arrival_label}! "
            f"{outcome.record.duration_minutes} minutes of focus logged."
        )
        if outcome.credit_awarded:
            message += " You earned a business class flight."
        self.notify(message, title="Landed")

    def action_toggle_flight(self) -> None:
        session = self.engine.session
        if session is None:
            return
        try:
            if session.phase == SessionPhase.IDLE:
                self.engine.start()
            elif session.phase == SessionPhase.RUNNING:
                self.engine.pause()
            elif session.phase == SessionPhase.PAUSED:
                self.engine.resume()
            else:
                self.notify("This flight has already landed.")
                return
        except InvalidTransitionError as e:
            self.notify(str(e), severity="warning")
            return
        self._render_state(session)

    def action_reset_flight(self) -> None:
        if self.engine.session is None:
            return
        self.engine.reset()
        self._render_state(self.engine.session)

    def action_leave(self) -> None:
        self.app.pop_screen()
