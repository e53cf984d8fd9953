"""ConfigManager - load and persist application settings as JSON."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from poolnav.constants.defaults import SETTINGS_DIR_NAME, SETTINGS_FILE_NAME
from poolnav.models.state.app_settings import (
    AppSettings,
    ConfigError,
    ConfigLoadError,
    ConfigSaveError,
    NavigationSettings,
)

logger = logging.getLogger(__name__)


def default_settings_path() -> Path:
    """Location of the settings file under the user's config directory."""
    return Path.home() / ".config" / SETTINGS_DIR_NAME / SETTINGS_FILE_NAME


class ConfigManager:
    """Read and write AppSettings.

    A missing settings file is not an error: defaults are returned. A file
    that exists but cannot be parsed raises ConfigLoadError.
    """

    def __init__(self, path: Path | None = None) -> None:
        self.path = path or default_settings_path()

    def load(self) -> AppSettings:
        """Load settings from disk, falling back to defaults if absent."""
        if not self.path.exists():
            logger.debug("No settings file at %s, using defaults", self.path)
            return AppSettings()

        try:
            text = self.path.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigLoadError(f"Cannot read settings {self.path}: {e}") from e

        try:
            raw = json.loads(text)
            settings = AppSettings.model_validate(raw)
        except (json.JSONDecodeError, ValidationError) as e:
            raise ConfigLoadError(f"Invalid settings in {self.path}: {e}") from e

        unknown = sorted(set(raw) - set(AppSettings.model_fields))
        if unknown:
            logger.warning("Ignoring unknown settings in %s: %s", self.path, ", ".join(unknown))
        return settings

    def save(self, settings: AppSettings) -> None:
        """Write settings to disk, creating the parent directory."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(settings.model_dump_json(indent=2), encoding="utf-8")
        except OSError as e:
            raise ConfigSaveError(f"Cannot write settings {self.path}: {e}") from e
        logger.debug("Settings saved to %s", self.path)


__all__ = [
    "AppSettings",
    "ConfigError",
    "ConfigLoadError",
    "ConfigManager",
    "ConfigSaveError",
    "NavigationSettings",
    "default_settings_path",
]
