"""Centralized path management for Flight Focus.

Follows XDG Base Directory Specification:
- Config: $XDG_CONFIG_HOME/flightfocus (default: ~/.config/flightfocus)
- Data: $XDG_DATA_HOME/flightfocus (default: ~/.local/share/flightfocus)
- State: $XDG_STATE_HOME/flightfocus (default: ~/.local/state/flightfocus)
"""

import os
from dataclasses import dataclass, field
from pathlib import Path


def _xdg_config_home() -> Path:
    """Get XDG_CONFIG_HOME, defaulting to ~/.config."""
    return Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))


def _xdg_data_home() -> Path:
    """Get XDG_DATA_HOME, defaulting to ~/.local/share."""
    return Path(os.environ.get("XDG_DATA_HOME", Path.home() / ".local" / "share"))


def _xdg_state_home() -> Path:
    """Get XDG_STATE_HOME, defaulting to ~/.local/state."""
    return Path(os.environ.get("XDG_STATE_HOME", Path.home() / ".local" / "state"))


@dataclass
class FlightFocusPaths:
    """Centralized path management following XDG spec."""

    _config_home: Path = field(default_factory=_xdg_config_home)
    _data_home: Path = field(default_factory=_xdg_data_home)
    _state_home: Path = field(default_factory=_xdg_state_home)

    @property
    def global_config_dir(self) -> Path:
        """Global config: ~/.config/flightfocus/"""
        return self._config_home / "flightfocus"

    @property
    def global_settings(self) -> Path:
        """Global settings file: ~/.config/flightfocus/settings.json"""
        return self.global_config_dir / "settings.json"

    @property
    def global_data_dir(self) -> Path:
        """Global data: ~/.local/share/flightfocus/"""
        return self._data_home / "flightfocus"

    @property
    def store_file(self) -> Path:
        """Key-value store holding history and counters."""
        return self.global_data_dir / "store.json"

    @property
    def global_state_dir(self) -> Path:
        """Global state: ~/.local/state/flightfocus/"""
        return self._state_home / "flightfocus"

    @property
    def debug_log(self) -> Path:
        """Debug log: ~/.local/state/flightfocus/debug.log"""
        return self.global_state_dir / "debug.log"


# Singleton instance
_paths: FlightFocusPaths | None = None


def get_paths() -> FlightFocusPaths:
    """Get the paths singleton."""
    global _paths
    if _paths is None:
        _paths = FlightFocusPaths()
    return _paths


def reset_paths() -> None:
    """Reset paths singleton (for testing)."""
    global _paths
    _paths = None
