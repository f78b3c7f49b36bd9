"""Settings loader and singleton manager.

This module handles:
- Configuration file loading from TOML
- Thread-safe singleton pattern for the Settings instance
"""

from __future__ import annotations

import logging
import os
import threading
from pathlib import Path

from pydantic import ValidationError

from filedeck.config.models.settings import Settings
from filedeck.shared.constants import FileSystem
from filedeck.shared.errors import create_config_error

logger = logging.getLogger(__name__)

CONFIG_PATH_ENV = "FILEDECK_CONFIG"


def default_config_path() -> Path:
    """Return the configuration file path.

    ``FILEDECK_CONFIG`` wins, then ``~/.filedeck/config/config.toml``.
    """
    override = os.environ.get(CONFIG_PATH_ENV)
    if override:
        return Path(override)
    return Path.home() / FileSystem.HOME_DIR / FileSystem.CONFIG_DIRECTORY / FileSystem.CONFIG_FILE


def load_settings(config_path: Path | str | None = None) -> Settings:
    """Load settings from ``config_path`` if it exists, defaults otherwise.

    Raises:
        ApplicationError: If the file exists but does not validate.
    """
    path = Path(config_path) if config_path is not None else default_config_path()
    try:
        if path.exists():
            return Settings.from_toml_file(path)
        logger.debug("No configuration file at %s, using defaults", path)
        return Settings()
    except ValidationError as e:
        raise create_config_error(
            f"Invalid configuration in {path}: {e.error_count()} error(s)",
            config_key=str(path),
            original_error=e,
        ) from e
    except (OSError, ValueError) as e:
        raise create_config_error(
            f"Failed to read configuration {path}: {e}",
            config_key=str(path),
            original_error=e,
        ) from e


class SettingsLoader:
    """Thread-safe singleton manager for Settings.

    Uses double-checked locking to keep the fast path lock-free.
    """

    _instance: Settings | None = None
    _lock: threading.RLock = threading.RLock()

    def get_config(self) -> Settings:
        if self._instance is None:
            with self._lock:
                if self._instance is None:
                    self._instance = load_settings()
        return self._instance

    def reload_config(self, config_path: Path | str | None = None) -> Settings:
        with self._lock:
            self._instance = load_settings(config_path)
        return self._instance

    def set_config(self, settings: Settings) -> None:
        """Replace the cached instance (used by the CLI and tests)."""
        with self._lock:
            self._instance = settings


_loader = SettingsLoader()


def get_config() -> Settings:
    """Get the global settings instance, loading it on first use."""
    return _loader.get_config()


def reload_config(config_path: Path | str | None = None) -> Settings:
    """Reload the global settings instance from disk."""
    return _loader.reload_config(config_path)


def set_config(settings: Settings) -> None:
    _loader.set_config(settings)
