"""Destinations command."""

from __future__ import annotations

import argparse

from rich.table import Table

from flightfocus.cli.context import EXIT_OK, EXIT_USER_ERROR, console, print_error
from flightfocus.models import DESTINATIONS, estimate_flight_minutes, find_destination


def cmd_destinations(args: argparse.Namespace) -> int:
    """List airports, optionally with flight times from one of them."""
    origin = None
    if args.departure:
        origin = find_destination(args.departure)
        if origin is None:
            print_error(f"Unknown airport: {args.departure}")
            return EXIT_USER_ERROR

    table = Table(title="Destinations")
    table.add_column("Code", style="bold")
    table.add_column("City")
    table.add_column("Country")
    if origin is not None:
        table.add_column(f"From {origin.code}", justify="right")

    for destination in DESTINATIONS:
        row = [destination.code, destination.city, destination.country]
        if origin is not None:
            row.append(
                "-"
                if destination.code == origin.code
                else f"{estimate_flight_minutes(origin, destination)} min"
            )
        table.add_row(*row)
    console.print(table)
    return EXIT_OK
