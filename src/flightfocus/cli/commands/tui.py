"""TUI launch command."""

from __future__ import annotations

import argparse

from flightfocus.tui.app import FlightFocusApp


def cmd_tui(args: argparse.Namespace) -> int:
    """Launch the TUI application."""
    del args
    app = FlightFocusApp()
    app.run()
    return 0
