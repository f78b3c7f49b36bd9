"""
filedeck Constants Module

Centralized constants for the filedeck engine. Magic values used by the
adapters, the message bus and the handlers live here.
"""

from .icons import Icons
from .system import (
    Application,
    BusDefaults,
    ClipboardDefaults,
    FileSystem,
    Logging,
    TrashLayout,
)

__all__ = [
    "Application",
    "BusDefaults",
    "ClipboardDefaults",
    "FileSystem",
    "Icons",
    "Logging",
    "TrashLayout",
]
