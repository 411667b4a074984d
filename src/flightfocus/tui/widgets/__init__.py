"""Custom widgets for the Flight Focus TUI."""

from .attendant import AttendantToast
from .stats import StatsPanel

__all__ = ["AttendantToast", "StatsPanel"]
