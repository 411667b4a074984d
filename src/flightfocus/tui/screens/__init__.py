"""TUI screens for Flight Focus."""
from __future__ import annotations

from .flight import FlightScreen
from .history import HistoryScreen
from .home import HomeScreen

__all__ = [
    "FlightScreen",
    "HistoryScreen",
    "HomeScreen",
]
