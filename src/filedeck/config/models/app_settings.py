"""Application and logging configuration models."""

from __future__ import annotations

from pydantic import BaseModel, Field

from filedeck.shared.constants import Application, Logging


class AppSettings(BaseModel):
    """Application identity and debug switch."""

    name: str = Field(default=Application.NAME, description="Application name")
    version: str = Field(default=Application.VERSION, description="Application version")
    debug: bool = Field(default=False, description="Enable debug mode")


class LoggingSettings(BaseModel):
    """Logging configuration.

    Controls level, the rotating JSON log file and console output.
    """

    level: str = Field(default=Logging.DEFAULT_LEVEL, description="Logging level")
    file: str = Field(default=Logging.DEFAULT_FILE_PATH, description="Log file path")
    max_bytes: int = Field(default=Logging.MAX_BYTES, gt=0, description="Maximum log file size in bytes")
    backup_count: int = Field(
        default=Logging.BACKUP_COUNT,
        ge=0,
        description="Number of backup log files to keep",
    )
    console_output: bool = Field(default=True, description="Enable rich console logging")


__all__ = ["AppSettings", "LoggingSettings"]
