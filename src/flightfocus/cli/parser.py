"""Argument parser construction for the Flight Focus CLI."""

from __future__ import annotations

import argparse
from collections.abc import Sequence

from flightfocus.models import CUSTOM_ROUTE, FlightClass

CLASS_CHOICES = [flight_class.value for flight_class in FlightClass]


def _add_route_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--from",
        dest="departure",
        default=CUSTOM_ROUTE[0],
        help=f"Departure airport code (default: {CUSTOM_ROUTE[0]})",
    )
    parser.add_argument(
        "--to",
        dest="arrival",
        default=CUSTOM_ROUTE[1],
        help=f"Arrival airport code (default: {CUSTOM_ROUTE[1]})",
    )


def build_parser() -> argparse.ArgumentParser:
    """Build and return the top-level CLI parser."""
    parser = argparse.ArgumentParser(
        description="Flight Focus - turn focus sessions into flights"
    )

    # Subcommands
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Fly command
    fly_parser = subparsers.add_parser(
        "fly",
        help="Start a focus flight",
    )
    _add_route_arguments(fly_parser)
    fly_parser.add_argument(
        "--minutes",
        "-m",
        type=int,
        default=25,
        help="Flight duration in minutes, 1-999 (default: 25)",
    )
    fly_parser.add_argument(
        "--class",
        dest="flight_class",
        choices=CLASS_CHOICES,
        default=FlightClass.ECONOMY.value,
        help="Cabin class; business spends one business flight",
    )
    fly_parser.add_argument(
        "--seat",
        help="Seat id such as 12C (default: A1)",
    )
    fly_parser.add_argument(
        "--headless",
        action="store_true",
        help="Fly in the terminal without the TUI",
    )

    # Stats command
    subparsers.add_parser(
        "stats",
        help="Show focus statistics",
    )

    # History command
    history_parser = subparsers.add_parser(
        "history",
        help="List completed flights, newest first",
    )
    history_parser.add_argument(
        "--limit",
        "-n",
        type=int,
        default=10,
        help="Max flights to show (0 for all, default: 10)",
    )

    # Destinations command
    destinations_parser = subparsers.add_parser(
        "destinations",
        help="List airports and estimated flight times",
    )
    destinations_parser.add_argument(
        "--from",
        dest="departure",
        help="Estimate flight minutes from this airport",
    )

    # Message command
    message_parser = subparsers.add_parser(
        "message",
        help="Ask the flight attendant for a message",
    )
    message_parser.add_argument(
        "--progress",
        "-p",
        type=float,
        default=0.0,
        help="Flight progress between 0 and 1 (default: 0)",
    )
    message_parser.add_argument(
        "--class",
        dest="flight_class",
        choices=CLASS_CHOICES,
        default=FlightClass.ECONOMY.value,
        help="Cabin class (default: economy)",
    )
    message_parser.add_argument(
        "--remote",
        metavar="URL",
        help="Fetch from a message service at URL instead of the built-in table",
    )
    message_parser.add_argument(
        "--contextual",
        action="store_true",
        help="Ask for a route-aware message",
    )
    _add_route_arguments(message_parser)
    message_parser.add_argument(
        "--minutes",
        "-m",
        type=int,
        default=25,
        help="Flight duration used for contextual messages (default: 25)",
    )

    return parser


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse CLI args using the top-level parser."""
    return build_parser().parse_args(argv)
