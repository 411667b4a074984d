"""Stats command."""

from __future__ import annotations

import argparse
import asyncio

from rich.table import Table

from flightfocus.cli.context import EXIT_OK, EXIT_USER_ERROR, console, open_engine
from flightfocus.formatting import format_minutes


def cmd_stats(args: argparse.Namespace) -> int:
    """Show focus statistics."""
    del args
    engine = asyncio.run(open_engine())
    if engine is None:
        return EXIT_USER_ERROR

    stats = engine.stats()
    table = Table(title="Flight Focus", show_header=False)
    table.add_column("Stat", style="bold")
    table.add_column("Value", justify="right")
    table.add_row("Total flights", str(stats.total_flights))
    table.add_row("Focus time", format_minutes(stats.total_focus_minutes))
    table.add_row("Average session", f"{stats.average_session_minutes} min")
    table.add_row("Longest session", f"{stats.longest_session_minutes} min")
    table.add_row("Current streak", f"{stats.current_streak_days} days")
    table.add_row("Business flights", str(stats.business_credits))
    console.print(table)
    return EXIT_OK
