"""filedeck Settings Configuration Model.

Main Settings class that consolidates all configuration domains.
"""

from __future__ import annotations

import logging
from pathlib import Path

import toml
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from filedeck.config.models.app_settings import AppSettings, LoggingSettings
from filedeck.config.models.engine_settings import (
    BusSettings,
    ClipboardSettings,
    OperationSettings,
    TrashSettings,
)

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Unified configuration access.

    Values come from (highest priority first) constructor arguments,
    ``FILEDECK_*`` environment variables and defaults. ``from_toml_file``
    feeds a TOML document in as constructor arguments.
    """

    model_config = SettingsConfigDict(
        env_prefix="FILEDECK_",
        env_nested_delimiter="__",
        env_ignore_empty=True,
        extra="ignore",
    )

    app: AppSettings = Field(default_factory=AppSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    bus: BusSettings = Field(default_factory=BusSettings)
    clipboard: ClipboardSettings = Field(default_factory=ClipboardSettings)
    trash: TrashSettings = Field(default_factory=TrashSettings)
    operations: OperationSettings = Field(default_factory=OperationSettings)

    @classmethod
    def from_toml_file(cls, file_path: str | Path) -> Settings:
        """Load settings from a TOML file; environment variables fill keys the file omits."""
        file_path = Path(file_path)
        if not file_path.exists():
            msg = f"Configuration file not found: {file_path}"
            raise FileNotFoundError(msg)

        raw_config = toml.load(file_path)
        logger.debug("Loaded configuration from %s", file_path)
        return cls(**raw_config)

    def to_toml_file(self, file_path: str | Path) -> None:
        """Save settings to TOML file."""
        file_path = Path(file_path)
        file_path.parent.mkdir(parents=True, exist_ok=True)

        config_dict = self.model_dump(mode="json", exclude_none=True)

        with open(file_path, "w", encoding="utf-8") as f:
            toml.dump(config_dict, f)
