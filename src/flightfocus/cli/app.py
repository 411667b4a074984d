"""CLI orchestration and command routing."""

from __future__ import annotations

import argparse
import logging
from collections.abc import Callable, Sequence

from flightfocus.cli.commands import (
    cmd_destinations,
    cmd_fly,
    cmd_history,
    cmd_message,
    cmd_stats,
    cmd_tui,
)
from flightfocus.cli.parser import parse_args

logger = logging.getLogger(__name__)


def dispatch(args: argparse.Namespace) -> int:
    """Route parsed args to the correct command handler."""
    command_handlers: dict[str, Callable[[argparse.Namespace], int]] = {
        "fly": cmd_fly,
        "stats": cmd_stats,
        "history": cmd_history,
        "destinations": cmd_destinations,
        "message": cmd_message,
    }

    if args.command is None:
        return cmd_tui(args)

    return command_handlers[args.command](args)


def run(
    argv: Sequence[str] | None = None,
    *,
    configure_logging: Callable[[], None] | None = None,
) -> int:
    """Parse args, apply shared CLI setup, and execute command."""
    args = parse_args(argv)

    if configure_logging is not None:
        configure_logging()

    logger.info("Running command: %s", args.command or "tui")
    return dispatch(args)
