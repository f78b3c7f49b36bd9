"""System level constants."""

from __future__ import annotations

from typing import ClassVar

# Base file size unit (1KB)
BASE_FILE_SIZE = 1024


class Application:
    """Application identity."""

    NAME = "filedeck"
    VERSION = "0.1.0"
    DESCRIPTION = "File-operation engine for terminal file managers"


class BusDefaults:
    """Message bus sizing."""

    CAPACITY = 1000
    # Below this many pending messages intermediate ticks are announced.
    TICK_THRESHOLD = 5
    DRAIN_TIMEOUT = 0.1


class ClipboardDefaults:
    """Clipboard Stage limits."""

    MIRROR_LIMIT_BYTES = 250 * BASE_FILE_SIZE * BASE_FILE_SIZE  # 250 MiB


class TrashLayout:
    """freedesktop.org trash directory layout."""

    DIRECTORY = "Trash"
    FILES = "files"
    INFO = "info"
    INFO_SUFFIX = ".trashinfo"
    INFO_HEADER = "[Trash Info]"
    DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"
    NATIVE_PLATFORMS: ClassVar[tuple[str, ...]] = ("darwin", "win32")


class FileSystem:
    """File system related constants."""

    HOME_DIR = ".filedeck"
    CONFIG_DIRECTORY = "config"
    CONFIG_FILE = "config.toml"
    DIRECTORY_MODE = 0o755
    COPY_BUFFER_SIZE = 64 * BASE_FILE_SIZE
    ZIP_EXTENSION = ".zip"
    # Double extensions must be matched before their last suffix.
    ARCHIVE_EXTENSIONS: ClassVar[tuple[str, ...]] = (
        ".tar.gz",
        ".tar.bz2",
        ".tar.xz",
        ".tgz",
        ".tbz2",
        ".txz",
        ".tar",
        ".zip",
    )


class Logging:
    """Logging defaults."""

    DEFAULT_LEVEL = "INFO"
    DEFAULT_FILE_PATH = "logs/filedeck.log"
    MAX_BYTES = 10 * BASE_FILE_SIZE * BASE_FILE_SIZE  # 10MB
    BACKUP_COUNT = 5
