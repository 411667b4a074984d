"""Flight history screen."""

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.screen import Screen
from textual.widgets import DataTable, Footer, Header, Static

from flightfocus.engine import SessionEngine
from flightfocus.formatting import format_completed_date
from flightfocus.tui.widgets import StatsPanel


class HistoryScreen(Screen):
    """Stats and the most recent completed flights."""

    BINDINGS = [
        Binding("escape", "back", "Back"),
    ]

    DEFAULT_CSS = """
    HistoryScreen {
        background: $surface;
    }

    HistoryScreen .content {
        width: 100%;
        height: 1fr;
        padding: 1 2;
    }

    HistoryScreen .empty {
        color: $text-muted;
        text-style: italic;
        padding: 1 0;
    }

    HistoryScreen DataTable {
        height: 1fr;
    }
    """

    def __init__(self, engine: SessionEngine) -> None:
        super().__init__()
        self.engine = engine

    def compose(self) -> ComposeResult:
        yield Header()
        with Vertical(classes="content"):
            yield StatsPanel()
            if not self.engine.history:
                yield Static(
                    "No flights yet. Complete a focus session to log one.",
                    classes="empty",
                )
            yield DataTable(zebra_stripes=True, cursor_type="row")
        yield Footer()

    def on_mount(self) -> None:
        self.query_one(StatsPanel).stats = self.engine.stats()
        table = self.query_one(DataTable)
        table.add_columns("Route", "Duration", "Class", "Seat", "Date")
        for record in self.engine.history:
            table.add_row(
                f"{record.departure_label} -> {record.arrival_label}",
                f"{record.duration_minutes} min",
                record.flight_class.value.title(),
                record.seat,
                format_completed_date(record.completed_at),
            )

    def action_back(self) -> None:
        self.app.pop_screen()
