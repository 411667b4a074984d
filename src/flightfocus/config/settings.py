"""Configuration and settings persistence."""

import json
import logging
import os
from pathlib import Path
from typing import Any

from flightfocus.config.paths import get_paths

logger = logging.getLogger(__name__)

MESSAGE_SOURCES = {"local", "remote"}


def get_settings_path() -> Path:
    """Get the path to the settings file."""
    return get_paths().global_settings


def detect_terminal_theme() -> str:
    """Detect terminal light/dark preference."""
    # COLORFGBG is "fg;bg"; a background index of 7 or more is a light terminal
    colorfgbg = os.environ.get("COLORFGBG", "")
    if colorfgbg:
        try:
            parts = colorfgbg.split(";")
            if len(parts) >= 2:
                bg = int(parts[-1])
                return "textual-light" if bg >= 7 else "textual-dark"
        except (ValueError, IndexError):
            pass
    return "textual-dark"


class Settings:
    """Persistent settings for Flight Focus."""

    _defaults: dict[str, Any] = {
        "message_source": "local",
        "message_timeout_seconds": 5.0,
    }

    def __init__(self) -> None:
        self._data: dict[str, Any] = {}
        self._load()

    def _load(self) -> None:
        """Load settings from disk."""
        path = get_settings_path()
        if path.exists():
            try:
                self._data = json.loads(path.read_text(encoding="utf-8"))
            except (json.JSONDecodeError, OSError):
                self._data = {}
        else:
            self._data = {}

    def _save(self) -> None:
        """Save settings to disk."""
        path = get_settings_path()
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(json.dumps(self._data, indent=2), encoding="utf-8")
            logger.info("Saved settings to %s: %s", path, self._data)
        except OSError as e:
            logger.error("Failed to save settings: %s", e)

    def get(self, key: str) -> Any:
        """Get a setting value, falling back to default."""
        return self._data.get(key, self._defaults.get(key))

    def set(self, key: str, value: Any) -> None:
        """Set a setting value and persist to disk."""
        self._data[key] = value
        self._save()

    @property
    def theme(self) -> str:
        """Get the current theme, detecting from terminal if not set."""
        saved = self._data.get("theme")
        if saved:
            return str(saved)
        return detect_terminal_theme()

    @theme.setter
    def theme(self, value: str) -> None:
        self.set("theme", value)

    @property
    def message_source(self) -> str:
        """Where attendant messages come from: 'local' or 'remote'.

        A configured endpoint with no explicit source selects 'remote'.
        """
        raw = self._data.get("message_source")
        if raw is None and self.message_endpoint:
            return "remote"
        normalized = str(raw or self._defaults["message_source"]).strip().lower()
        if normalized not in MESSAGE_SOURCES:
            return "local"
        return normalized

    @message_source.setter
    def message_source(self, value: str) -> None:
        normalized = str(value).strip().lower()
        if normalized not in MESSAGE_SOURCES:
            normalized = "local"
        self.set("message_source", normalized)

    @property
    def message_endpoint(self) -> str | None:
        """Base URL of the attendant-message service.

        Priority: FLIGHTFOCUS_MESSAGE_ENDPOINT env var > settings
        """
        env = os.environ.get("FLIGHTFOCUS_MESSAGE_ENDPOINT")
        if env:
            return env
        saved = self._data.get("message_endpoint")
        return str(saved) if saved else None

    @message_endpoint.setter
    def message_endpoint(self, value: str | None) -> None:
        if value:
            self.set("message_endpoint", value)
        elif "message_endpoint" in self._data:
            del self._data["message_endpoint"]
            self._save()

    @property
    def message_timeout_seconds(self) -> float:
        """HTTP timeout for the remote message source."""
        raw = self._data.get(
            "message_timeout_seconds", self._defaults["message_timeout_seconds"]
        )
        try:
            value = float(raw)
        except (TypeError, ValueError):
            return float(self._defaults["message_timeout_seconds"])
        if value <= 0:
            return float(self._defaults["message_timeout_seconds"])
        return value

    @message_timeout_seconds.setter
    def message_timeout_seconds(self, value: float) -> None:
        self.set("message_timeout_seconds", float(value))

    @property
    def store_path(self) -> Path:
        """Location of the history/counters store.

        Returns the configured path, or the XDG data default.
        """
        saved = self._data.get("store_path")
        if saved:
            return Path(saved).expanduser().resolve()
        return get_paths().store_file

    @store_path.setter
    def store_path(self, value: str | Path) -> None:
        self.set("store_path", str(value))


# Global settings instance
settings = Settings()
