"""Engine configuration models.

Sizing of the message bus, clipboard mirroring limits, trash location
and the background runner.
"""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import BaseModel, Field, model_validator

from filedeck.shared.constants import BusDefaults, ClipboardDefaults, FileSystem, TrashLayout


def default_trash_root() -> Path:
    """Return ``$XDG_DATA_HOME/Trash`` (``~/.local/share/Trash`` when unset)."""
    data_home = os.environ.get("XDG_DATA_HOME") or str(Path.home() / ".local" / "share")
    return Path(data_home) / TrashLayout.DIRECTORY


class BusSettings(BaseModel):
    """Message bus sizing and tick coalescing threshold."""

    capacity: int = Field(default=BusDefaults.CAPACITY, gt=0, description="Queue capacity for ticks")
    tick_threshold: int = Field(
        default=BusDefaults.TICK_THRESHOLD,
        gt=0,
        description="Pending count at or above which intermediate ticks are dropped",
    )

    @model_validator(mode="after")
    def _threshold_within_capacity(self) -> BusSettings:
        if self.tick_threshold > self.capacity:
            msg = "tick_threshold must not exceed capacity"
            raise ValueError(msg)
        return self


class ClipboardSettings(BaseModel):
    """System clipboard mirroring."""

    mirror_enabled: bool = Field(default=True, description="Mirror single small files to the system clipboard")
    mirror_limit_bytes: int = Field(
        default=ClipboardDefaults.MIRROR_LIMIT_BYTES,
        gt=0,
        description="Files at or above this size are never mirrored",
    )


class TrashSettings(BaseModel):
    """Trash location and native recycle facility usage."""

    trash_root: Path = Field(default_factory=default_trash_root, description="freedesktop trash root")
    use_native: bool = Field(default=True, description="Use the platform recycle bin on macOS/Windows")

    @property
    def files_dir(self) -> Path:
        return self.trash_root / TrashLayout.FILES

    @property
    def info_dir(self) -> Path:
        return self.trash_root / TrashLayout.INFO


class OperationSettings(BaseModel):
    """Background runner settings."""

    max_workers: int = Field(default=4, gt=0, description="Worker threads for batch operations")
    copy_buffer_size: int = Field(
        default=FileSystem.COPY_BUFFER_SIZE,
        gt=0,
        description="Chunk size used for content copies",
    )


__all__ = [
    "BusSettings",
    "ClipboardSettings",
    "OperationSettings",
    "TrashSettings",
    "default_trash_root",
]
