"""filedeck Configuration Module

Unified access to configuration models and the settings loader.
"""

from __future__ import annotations

from .loader import default_config_path, get_config, load_settings, reload_config, set_config
from .models import (
    AppSettings,
    BusSettings,
    ClipboardSettings,
    LoggingSettings,
    OperationSettings,
    TrashSettings,
)
from .models.settings import Settings

__all__ = [
    "AppSettings",
    "BusSettings",
    "ClipboardSettings",
    "LoggingSettings",
    "OperationSettings",
    "Settings",
    "TrashSettings",
    "default_config_path",
    "get_config",
    "load_settings",
    "reload_config",
    "set_config",
]
