"""CLI command handlers."""

from .destinations import cmd_destinations
from .fly import cmd_fly
from .history import cmd_history
from .message import cmd_message
from .stats import cmd_stats
from .tui import cmd_tui

__all__ = [
    "cmd_destinations",
    "cmd_fly",
    "cmd_history",
    "cmd_message",
    "cmd_stats",
    "cmd_tui",
]
