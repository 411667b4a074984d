"""Configuration management for Flight Focus."""
from __future__ import annotations

from flightfocus.config.paths import FlightFocusPaths, get_paths, reset_paths
from flightfocus.config.settings import Settings, get_settings_path, settings

__all__ = [
    "FlightFocusPaths",
    "Settings",
    "get_paths",
    "get_settings_path",
    "reset_paths",
    "settings",
]
