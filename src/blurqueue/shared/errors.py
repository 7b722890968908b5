"""blurqueue Error Handling Module

This module defines the error handling system for blurqueue, providing
structured error classes with context information.

The error hierarchy follows these principles:
- One Source of Truth: All error codes are defined in ErrorCode enum
- Structured Context: ErrorContext provides additional information
- Two failure families: item-level errors (DomainError subclasses) are
  recoverable per work item; environment errors (InfrastructureError
  subclasses) abort the whole run
- Proper Exception Chaining: Original exceptions are preserved
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from pathlib import Path
from typing import Any, Union

# Type alias for primitive context values (str, int, float, bool only)
PrimitiveContextValue = Union[str, int, float, bool]


class ErrorCode(str, Enum):
    """Error codes for blurqueue.

    This enum serves as the single source of truth for all error codes
    used throughout the application.
    """

    # File System / Environment Errors
    DIRECTORY_NOT_FOUND = "DIRECTORY_NOT_FOUND"
    DIRECTORY_CREATION_FAILED = "DIRECTORY_CREATION_FAILED"
    NOT_A_DIRECTORY = "NOT_A_DIRECTORY"
    OUTPUT_ROOT_UNUSABLE = "OUTPUT_ROOT_UNUSABLE"
    INVALID_PATH = "INVALID_PATH"

    # Item-level Image Errors
    IMAGE_DECODE_FAILED = "IMAGE_DECODE_FAILED"
    IMAGE_ENCODE_FAILED = "IMAGE_ENCODE_FAILED"
    INVALID_WORK_ITEM = "INVALID_WORK_ITEM"

    # Filter Errors
    INVALID_FILTER_SIZE = "INVALID_FILTER_SIZE"
    INVALID_CHANNEL_SHAPE = "INVALID_CHANNEL_SHAPE"

    # Configuration Errors
    CONFIG_INVALID = "CONFIG_INVALID"
    CONFIG_MISSING = "CONFIG_MISSING"

    # Queue Errors
    QUEUE_CLOSED = "QUEUE_CLOSED"
    QUEUE_FULL = "QUEUE_FULL"
    QUEUE_EMPTY = "QUEUE_EMPTY"
    QUEUE_INVARIANT_VIOLATION = "QUEUE_INVARIANT_VIOLATION"

    # Pipeline Errors
    PIPELINE_INITIALIZATION_ERROR = "PIPELINE_INITIALIZATION_ERROR"
    PIPELINE_SHUTDOWN_ERROR = "PIPELINE_SHUTDOWN_ERROR"
    PRODUCER_ERROR = "PRODUCER_ERROR"
    CONSUMER_ERROR = "CONSUMER_ERROR"

    # CLI Errors
    CLI_UNEXPECTED_ERROR = "CLI_UNEXPECTED_ERROR"


def _coerce_primitives(value: Any | None) -> dict[str, PrimitiveContextValue] | None:
    """Coerce additional_data values to primitives.

    Converts Path, Enum, Decimal to primitive types.

    Args:
        value: Input dictionary or None

    Returns:
        Dictionary with primitive values only, or None

    Raises:
        TypeError: If value is not a dict or contains unconvertible types
    """
    if value is None:
        return None

    if not isinstance(value, dict):
        error_msg = f"additional_data must be dict, got {type(value).__name__}"
        raise TypeError(error_msg)

    coerced: dict[str, PrimitiveContextValue] = {}
    for key, val in value.items():
        if isinstance(val, (str, int, float, bool)):
            coerced[key] = val
        elif isinstance(val, Path):
            coerced[key] = str(val)
        elif isinstance(val, Enum):
            coerced[key] = val.value
        elif isinstance(val, Decimal):
            coerced[key] = float(val)
        else:
            error_msg = (
                f"Cannot coerce {type(val).__name__} to primitive type. "
                f"Only str, int, float, bool, Path, Enum, Decimal are allowed."
            )
            raise TypeError(error_msg)

    return coerced


@dataclass(frozen=True)
class ErrorContext:
    """Context information for errors.

    Only primitive types (str, int, float, bool) are allowed in
    additional_data to keep log records serializable.

    Attributes:
        file_path: Optional file path associated with the error
        operation: Optional operation name that caused the error
        additional_data: Optional dict with primitive values only
    """

    file_path: str | None = None
    operation: str | None = None
    additional_data: dict[str, PrimitiveContextValue] | None = None

    def __post_init__(self) -> None:
        """Post-initialization validation and coercion."""
        if self.additional_data is not None:
            coerced = _coerce_primitives(self.additional_data)
            object.__setattr__(self, "additional_data", coerced)

    def safe_dict(self) -> dict[str, Any]:
        """Export context as a dict for logging.

        Returns:
            Dictionary with guaranteed additional_data key.

        Example:
            >>> context = ErrorContext(file_path="/in/a.png")
            >>> context.safe_dict()
            {'file_path': '/in/a.png', 'additional_data': {}}
        """
        data: dict[str, Any] = {}
        if self.file_path is not None:
            data["file_path"] = self.file_path
        if self.operation is not None:
            data["operation"] = self.operation

        if self.additional_data is not None:
            data["additional_data"] = self.additional_data
        else:
            data["additional_data"] = {}

        return data


class BlurQueueError(Exception):
    """Base exception class for all blurqueue errors."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        context: ErrorContext | None = None,
        original_error: Exception | None = None,
    ) -> None:
        """Initialize BlurQueueError.

        Args:
            code: Error code from ErrorCode enum
            message: Human-readable error message
            context: Additional context information
            original_error: Original exception that caused this error
        """
        self.code = code
        self.message = message
        self.context = context or ErrorContext()
        self.original_error = original_error

        formatted_message = f"{code.value}: {message}"
        super().__init__(formatted_message)

    def __str__(self) -> str:
        """Return string representation of the error."""
        return f"{self.code.value}: {self.message}"

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging.

        Returns:
            Dictionary representation of the error with code, message,
            context, and original_error (if present)
        """
        return {
            "code": self.code.value,
            "message": self.message,
            "context": self.context.safe_dict(),
            "original_error": str(self.original_error) if self.original_error else None,
        }


class DomainError(BlurQueueError):
    """Domain-specific errors.

    These errors occur when the data being processed violates a rule of
    the domain, e.g. an invalid filter window or an unreadable image.
    """


class InfrastructureError(BlurQueueError):
    """Infrastructure-related errors.

    These errors occur when interacting with the file system or when the
    pipeline machinery itself fails.
    """


class ApplicationError(BlurQueueError):
    """Application-level errors.

    Configuration errors and command handling errors.
    """


class ItemProcessingError(DomainError):
    """Recoverable failure of a single work item.

    Consumers log these, count them, and move on to the next item.

    Attributes:
        transient: True when the failure came from an I/O condition that
            may succeed on a second attempt.
    """

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        context: ErrorContext | None = None,
        original_error: Exception | None = None,
        *,
        transient: bool = False,
    ) -> None:
        super().__init__(code, message, context, original_error)
        self.transient = transient


class ImageDecodeError(ItemProcessingError):
    """The input image could not be read or decoded."""


class ImageEncodeError(ItemProcessingError):
    """The filtered image could not be encoded or written."""


class InvalidWorkItemError(ItemProcessingError):
    """The work item cannot be mapped to an output path."""


class FilterConfigurationError(DomainError):
    """Invalid box filter window or channel shape."""


class PipelineEnvironmentError(InfrastructureError):
    """Fatal environment failure.

    Raised before any task starts when the input or output root is
    unusable, or by a consumer when the output root becomes unusable
    mid-run.
    """


class QueueClosedError(InfrastructureError):
    """The queue was closed; no more items will be accepted or delivered."""


class QueueFullError(InfrastructureError):
    """Non-blocking push on a full queue."""


class QueueEmptyError(InfrastructureError):
    """Non-blocking pop on an empty queue."""


class QueueInvariantError(InfrastructureError):
    """Internal queue bookkeeping is inconsistent.

    This is a programming defect. It is never caught by the pipeline.
    """


class CliError(ApplicationError):
    """CLI-specific error carrying a process exit code."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        context: ErrorContext | None = None,
        original_error: Exception | None = None,
        command: str | None = None,
        exit_code: int = 1,
    ):
        super().__init__(code, message, context, original_error)
        self.command = command
        self.exit_code = exit_code


def create_environment_error(
    code: ErrorCode,
    message: str,
    path: str | Path,
    operation: str | None = None,
    original_error: Exception | None = None,
) -> PipelineEnvironmentError:
    """Create a fatal environment error with context."""
    context = ErrorContext(
        file_path=str(path),
        operation=operation,
    )
    return PipelineEnvironmentError(
        code,
        message,
        context,
        original_error,
    )


def create_config_error(
    message: str,
    config_key: str | None = None,
    operation: str | None = None,
    original_error: Exception | None = None,
) -> ApplicationError:
    """Create a configuration error with context."""
    additional_data: dict[str, PrimitiveContextValue] | None = (
        {"config_key": config_key} if config_key else None
    )
    context = ErrorContext(
        operation=operation,
        additional_data=additional_data,
    )
    return ApplicationError(
        ErrorCode.CONFIG_INVALID,
        message,
        context,
        original_error,
    )


def create_cli_error(
    message: str,
    command: str | None = None,
    operation: str | None = None,
    original_error: Exception | None = None,
    exit_code: int = 1,
) -> CliError:
    """Create a CLI error with context."""
    additional_data: dict[str, PrimitiveContextValue] | None = (
        {"command": command} if command else None
    )
    context = ErrorContext(
        operation=operation,
        additional_data=additional_data,
    )
    return CliError(
        ErrorCode.CLI_UNEXPECTED_ERROR,
        message,
        context,
        original_error,
        command,
        exit_code,
    )
