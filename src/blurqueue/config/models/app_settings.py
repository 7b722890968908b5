"""Logging configuration model."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class LoggingSettings(BaseModel):
    """Logging configuration.

    This class manages logging behavior including level, file output
    and the console handler style.
    """

    level: str = Field(default="INFO", description="Logging level")
    log_file: str | None = Field(
        default=None,
        description="Optional JSON-lines log file path",
    )
    use_rich_console: bool = Field(
        default=True,
        description="Use the Rich console handler instead of JSON lines",
    )

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate and normalize the level name."""
        level = v.upper()
        if level not in _LOG_LEVELS:
            msg = f"Invalid log level '{v}'. Expected one of {', '.join(_LOG_LEVELS)}"
            raise ValueError(msg)
        return level


__all__ = ["LoggingSettings"]
