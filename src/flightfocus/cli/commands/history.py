"""History command."""

from __future__ import annotations

import argparse
import asyncio

from rich.table import Table

from flightfocus.cli.context import (
    EXIT_OK,
    EXIT_USER_ERROR,
    console,
    open_engine,
    print_error,
)
from flightfocus.formatting import format_completed_date


def cmd_history(args: argparse.Namespace) -> int:
    """List completed flights, newest first."""
    if args.limit < 0:
        print_error("--limit must be 0 or more")
        return EXIT_USER_ERROR

    engine = asyncio.run(open_engine())
    if engine is None:
        return EXIT_USER_ERROR

    records = engine.history if args.limit == 0 else engine.history[: args.limit]
    if not records:
        console.print("No flights yet.")
        return EXIT_OK

    table = Table(title=f"Recent flights ({len(records)} of {len(engine.history)})")
    table.add_column("Route")
    table.add_column("Duration", justify="right")
    table.add_column("Class")
    table.add_column("Seat")
    table.add_column("Completed")
    for record in records:
        table.add_row(
            f"{record.departure_label} -> {record.arrival_label}",
            f"{record.duration_minutes} min",
            record.flight_class.value.title(),
            record.seat,
            format_completed_date(record.completed_at),
        )
    console.print(table)
    return EXIT_OK
