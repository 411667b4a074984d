"""Stats summary widget shared by the home and history screens."""

from textual.reactive import reactive
from textual.widgets import Static

from flightfocus.formatting import format_minutes
from flightfocus.stats import DerivedStats


class StatsPanel(Static):
    """One-line summary of flights, focus time, streak and credits."""

    DEFAULT_CSS = """
    StatsPanel {
        width: 100%;
        height: auto;
        padding: 1 2;
        border: round $primary;
        color: $text;
    }
    """

    stats: reactive[DerivedStats | None] = reactive(None)

    def render(self) -> str:
        stats = self.stats
        if stats is None:
            return "Loading flight log..."
        streak = "day" if stats.current_streak_days == 1 else "days"
        return (
            f"Flights: {stats.total_flights}   "
            f"Focus: {format_minutes(stats.total_focus_minutes)}   "
            f"Average: {stats.average_session_minutes}m   "
            f"Longest: {stats.longest_session_minutes}m   "
            f"Streak: {stats.current_streak_days} {streak}   "
            f"Business flights: {stats.business_credits}"
        )
