"""Fly command: run a focus session in the TUI or headless."""

from __future__ import annotations

import argparse
import asyncio
import logging

from flightfocus.cli.context import (
    EXIT_NO_CREDITS,
    EXIT_OK,
    EXIT_USER_ERROR,
    console,
    open_engine,
    print_error,
)
from flightfocus.config import settings
from flightfocus.engine import CompletionOutcome, EngineEvent, EngineEventKind
from flightfocus.engine.clock import Clock
from flightfocus.errors import InsufficientCreditsError, InvalidSessionError
from flightfocus.formatting import format_clock
from flightfocus.messages import (
    MessageSource,
    RemoteMessageSource,
    build_message_source,
)
from flightfocus.models import (
    FlightClass,
    SessionDescriptor,
    is_valid_seat,
    plan_flight,
    validate_custom_minutes,
)
from flightfocus.store import SessionStore
from flightfocus.tui.app import FlightFocusApp

logger = logging.getLogger(__name__)


def build_descriptor(args: argparse.Namespace) -> SessionDescriptor | None:
    """Build the flight from CLI args, or print an error and return None."""
    try:
        validate_custom_minutes(args.minutes)
    except ValueError as e:
        print_error(str(e))
        return None

    flight_class = FlightClass(args.flight_class)
    if args.seat is not None and not is_valid_seat(flight_class, args.seat):
        print_error(f"Seat {args.seat} does not exist in {flight_class.value}")
        return None

    try:
        descriptor = plan_flight(
            args.departure,
            args.arrival,
            args.minutes,
            flight_class=flight_class,
            seat=args.seat or "A1",
        )
        descriptor.validate()
    except InvalidSessionError as e:
        print_error(str(e))
        return None
    return descriptor


async def fly_headless(
    descriptor: SessionDescriptor,
    *,
    clock: Clock | None = None,
    source: MessageSource | None = None,
    store: SessionStore | None = None,
) -> int:
    """Fly ``descriptor`` to completion, printing progress to the console."""
    engine = await open_engine(clock, source, store)
    if engine is None:
        return EXIT_USER_ERROR

    try:
        debit_error = await engine.select_flight_class(descriptor.flight_class)
    except InsufficientCreditsError as e:
        print_error(str(e))
        return EXIT_NO_CREDITS
    if debit_error is not None:
        print_error(f"Could not save business flight debit: {debit_error}")

    landed = asyncio.Event()
    outcomes: list[CompletionOutcome] = []

    def on_event(event: EngineEvent) -> None:
        if event.kind == EngineEventKind.TICK and event.state is not None:
            remaining = event.state.remaining_seconds
            if remaining > 0 and remaining % 60 == 0:
                console.print(
                    f"{format_clock(remaining)} remaining "
                    f"({event.state.progress:.0%} of the way)"
                )
        elif event.kind == EngineEventKind.MESSAGE and event.message is not None:
            console.print(f"[italic]Flight attendant:[/italic] {event.message.message}")
        elif event.kind == EngineEventKind.COMPLETED and event.outcome is not None:
            outcomes.append(event.outcome)
            landed.set()
        elif event.kind == EngineEventKind.PERSISTENCE_FAILED:
            print_error(f"Flight log could not be saved: {event.error}")

    engine.create_session(descriptor)
    engine.add_listener(on_event)
    console.print(
        f"[bold]{descriptor.departure.label} -> {descriptor.arrival.label}[/bold]  "
        f"{descriptor.duration_minutes} min, {descriptor.flight_class.value}, "
        f"seat {descriptor.seat}"
    )
    engine.start()
    try:
        await landed.wait()
    finally:
        engine.remove_listener(on_event)
        session = engine.session
        if session is not None and session.is_active:
            engine.reset()
        if isinstance(source, RemoteMessageSource):
            await source.aclose()

    outcome = outcomes[0]
    console.print(
        f"[bold green]Landed in {outcome.record.arrival_label}![/bold green] "
        f"{outcome.record.duration_minutes} minutes of focus logged."
    )
    if outcome.credit_awarded:
        console.print(
            "You earned a business class flight "
            f"({outcome.counters.business_credits} available)."
        )
    return EXIT_OK if outcome.persisted else EXIT_USER_ERROR


def cmd_fly(args: argparse.Namespace) -> int:
    """Start a focus flight."""
    descriptor = build_descriptor(args)
    if descriptor is None:
        return EXIT_USER_ERROR

    if not args.headless:
        FlightFocusApp(initial_flight=descriptor).run()
        return EXIT_OK

    source = build_message_source(
        settings.message_source,
        endpoint=settings.message_endpoint,
        timeout=settings.message_timeout_seconds,
    )
    try:
        return asyncio.run(fly_headless(descriptor, source=source))
    except KeyboardInterrupt:
        console.print("Flight abandoned.")
        logger.info("Headless flight interrupted")
        return EXIT_USER_ERROR
