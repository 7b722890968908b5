"""blurqueue Settings Configuration Model.

Main Settings class that consolidates all configuration domains.
"""

from __future__ import annotations

from pathlib import Path

import toml
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from blurqueue.config.models.app_settings import LoggingSettings
from blurqueue.config.models.pipeline_settings import FilterSettings, PipelineSettings
from blurqueue.shared.constants import Application


class Settings(BaseSettings):
    """Settings facade providing unified configuration access.

    Values come from keyword arguments (e.g. a TOML file), then
    ``BLURQUEUE_``-prefixed environment variables, then ``.env``.
    Nested fields use ``__``, e.g. ``BLURQUEUE_PIPELINE__NUM_CONSUMERS=4``.
    """

    model_config = SettingsConfigDict(
        env_prefix=Application.ENV_PREFIX,
        env_nested_delimiter="__",
        env_ignore_empty=True,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    pipeline: PipelineSettings = Field(default_factory=PipelineSettings)
    filter: FilterSettings = Field(default_factory=FilterSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @classmethod
    def from_toml_file(cls, file_path: str | Path) -> Settings:
        """Load settings from a TOML file.

        File values are passed as keyword arguments, so they take priority
        over environment variables; fields the file omits still fall back
        to the environment and ``.env``.
        """

        file_path = Path(file_path)
        if not file_path.exists():
            msg = f"Configuration file not found: {file_path}"
            raise FileNotFoundError(msg)

        raw_config = toml.load(file_path)
        return cls(**raw_config)

    def to_toml_file(self, file_path: str | Path) -> None:
        """Save settings to TOML file."""

        file_path = Path(file_path)
        file_path.parent.mkdir(parents=True, exist_ok=True)

        config_dict = self.model_dump(mode="json", exclude_none=True)

        with open(file_path, "w", encoding="utf-8") as f:
            toml.dump(config_dict, f)
