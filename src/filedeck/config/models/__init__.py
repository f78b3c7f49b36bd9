"""Configuration models for filedeck."""

from __future__ import annotations

from .app_settings import AppSettings, LoggingSettings
from .engine_settings import (
    BusSettings,
    ClipboardSettings,
    OperationSettings,
    TrashSettings,
    default_trash_root,
)

__all__ = [
    "AppSettings",
    "BusSettings",
    "ClipboardSettings",
    "LoggingSettings",
    "OperationSettings",
    "TrashSettings",
    "default_trash_root",
]
