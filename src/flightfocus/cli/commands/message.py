"""Message command: preview flight attendant messages."""

from __future__ import annotations

import argparse
import asyncio

from flightfocus.cli.context import EXIT_OK, EXIT_USER_ERROR, console, print_error
from flightfocus.config import settings
from flightfocus.errors import MessageSourceError
from flightfocus.messages import (
    AttendantMessage,
    LocalMessageSource,
    RemoteMessageSource,
    contextual_message,
)
from flightfocus.models import FlightClass, find_destination


async def fetch_message(
    args: argparse.Namespace, remote: RemoteMessageSource | None = None
) -> AttendantMessage:
    """Get one message for the requested progress and class.

    Raises:
        MessageSourceError: if the remote service fails.
    """
    flight_class = FlightClass(args.flight_class)
    if remote is None and args.remote:
        remote = RemoteMessageSource(
            args.remote, timeout=settings.message_timeout_seconds
        )
    try:
        if args.contextual:
            departure = find_destination(args.departure)
            arrival = find_destination(args.arrival)
            departure_label = departure.city if departure else args.departure
            arrival_label = arrival.city if arrival else args.arrival
            if remote is not None:
                return await remote.contextual_message(
                    args.progress,
                    flight_class,
                    departure_label,
                    arrival_label,
                    args.minutes,
                )
            return contextual_message(
                args.progress,
                flight_class,
                departure_label,
                arrival_label,
                args.minutes,
            )
        if remote is not None:
            return await remote.next_message(args.progress, flight_class)
        return await LocalMessageSource().next_message(args.progress, flight_class)
    finally:
        if remote is not None:
            await remote.aclose()


def cmd_message(args: argparse.Namespace) -> int:
    """Print one flight attendant message."""
    if not 0.0 <= args.progress <= 1.0:
        print_error("--progress must be between 0 and 1")
        return EXIT_USER_ERROR

    try:
        message = asyncio.run(fetch_message(args))
    except MessageSourceError as e:
        print_error(str(e))
        return EXIT_USER_ERROR

    console.print(f"[bold]{message.type}[/bold]: {message.message}")
    return EXIT_OK
