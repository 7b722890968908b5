"""Pipeline and filter configuration models.

This module contains configuration models for the producer/consumer
pipeline and the box filter.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field, field_validator

from blurqueue.config.validators import validate_extensions_list, validate_filter_window
from blurqueue.shared.constants import FilterConfig, PipelineDefaults, RetryConfig


class PipelineSettings(BaseModel):
    """Configuration for the work pipeline.

    This class manages the input and output roots, pool sizes, queue
    capacity and the retry policy for transient I/O failures.
    """

    input_root: Path = Field(
        default=Path(PipelineDefaults.INPUT_ROOT),
        description="Directory holding the images to blur",
    )
    output_root: Path = Field(
        default=Path(PipelineDefaults.OUTPUT_ROOT),
        description="Directory the blurred images are written to",
    )
    num_producers: int = Field(
        default=PipelineDefaults.NUM_PRODUCERS,
        gt=0,
        description="Number of producer threads",
    )
    num_consumers: int = Field(
        default=PipelineDefaults.NUM_CONSUMERS,
        gt=0,
        description="Number of consumer threads",
    )
    queue_capacity: int = Field(
        default=PipelineDefaults.QUEUE_CAPACITY,
        gt=0,
        description="Capacity of the bounded work queue",
    )
    extensions: list[str] | None = Field(
        default=None,
        description="File suffixes to process; all files when unset",
    )
    max_io_retries: int = Field(
        default=RetryConfig.DEFAULT_MAX_IO_RETRIES,
        ge=0,
        le=RetryConfig.MAX_IO_RETRIES_LIMIT,
        description="Extra attempts for a transient decode or encode failure",
    )
    retry_delay_seconds: float = Field(
        default=RetryConfig.DEFAULT_RETRY_DELAY_SECONDS,
        ge=0,
        description="Pause before retrying a transient failure",
    )
    output_format: str | None = Field(
        default=None,
        description="Pillow format name for outputs; inferred from the suffix when unset",
    )

    @field_validator("extensions")
    @classmethod
    def validate_extensions(cls, v: list[str] | None) -> list[str] | None:
        """Validate that extensions start with a dot."""
        return validate_extensions_list(v)


class FilterSettings(BaseModel):
    """Configuration for the box filter."""

    filter_size: int = Field(
        default=FilterConfig.DEFAULT_SIZE,
        description="Edge length of the square averaging window (odd, >= 3)",
    )

    @field_validator("filter_size")
    @classmethod
    def validate_filter_size(cls, v: int) -> int:
        """Validate that the window is odd and large enough."""
        return validate_filter_window(v)


__all__ = [
    "FilterSettings",
    "PipelineSettings",
]
