"""Per-item transform step executed by consumer threads.

``ImageTransformer.process`` runs one work item end to end on the calling
thread: decode, blur every channel, derive the output path, encode and
write. Instances hold only immutable configuration, so a single
transformer is shared by all consumers.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import TypeVar

from blurqueue.core.imaging import blur_pixel_grid, decode_image, encode_image
from blurqueue.core.imaging.box_blur import validate_filter_size
from blurqueue.core.pipeline.utils import TransformStatistics
from blurqueue.shared.constants import FilterConfig, RetryConfig
from blurqueue.shared.errors import (
    ErrorCode,
    ErrorContext,
    ImageEncodeError,
    InvalidWorkItemError,
    ItemProcessingError,
    create_environment_error,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class TransformResult:
    """Outcome of one successfully transformed work item."""

    input_path: Path
    output_path: Path
    width: int
    height: int
    attempts: int
    duration_ms: float


def derive_output_path(
    input_path: str | Path,
    input_root: str | Path,
    output_root: str | Path,
) -> Path:
    """Re-root ``input_path`` from ``input_root`` to ``output_root``.

    Args:
        input_path: Path of the work item.
        input_root: Directory the item was discovered in.
        output_root: Directory the result is written to.

    Returns:
        Output path with the same relative location and filename.

    Raises:
        InvalidWorkItemError: If ``input_path`` is not inside ``input_root``.
    """
    input_path = Path(input_path)
    try:
        relative = input_path.relative_to(input_root)
    except ValueError as e:
        raise InvalidWorkItemError(
            ErrorCode.INVALID_WORK_ITEM,
            f"Work item {input_path} is not under input root {input_root}",
            ErrorContext(file_path=str(input_path), operation="derive_output_path"),
            original_error=e,
        ) from e

    if not relative.parts:
        raise InvalidWorkItemError(
            ErrorCode.INVALID_WORK_ITEM,
            f"Work item {input_path} is the input root itself",
            ErrorContext(file_path=str(input_path), operation="derive_output_path"),
        )
    return Path(output_root) / relative


class ImageTransformer:
    """Decode, blur and re-encode one image per call.

    Args:
        input_root: Directory work items are discovered in.
        output_root: Directory results are written to.
        filter_size: Box filter window size.
        max_io_retries: Extra attempts (0 or 1) for a transient decode/encode failure.
        retry_delay_seconds: Pause before a retry.
        output_format: Explicit Pillow format name, or None to infer it
            from the output filename.
        stats: Optional statistics collector for retry counts.
    """

    def __init__(  # pylint: disable=too-many-arguments
        self,
        input_root: str | Path,
        output_root: str | Path,
        filter_size: int = FilterConfig.DEFAULT_SIZE,
        max_io_retries: int = RetryConfig.DEFAULT_MAX_IO_RETRIES,
        retry_delay_seconds: float = RetryConfig.DEFAULT_RETRY_DELAY_SECONDS,
        output_format: str | None = None,
        stats: TransformStatistics | None = None,
    ) -> None:
        if not 0 <= max_io_retries <= RetryConfig.MAX_IO_RETRIES_LIMIT:
            msg = f"max_io_retries must be between 0 and {RetryConfig.MAX_IO_RETRIES_LIMIT}, got {max_io_retries}"
            raise ValueError(msg)
        self.input_root = Path(input_root)
        self.output_root = Path(output_root)
        self.filter_size = validate_filter_size(filter_size)
        self.max_io_retries = max_io_retries
        self.retry_delay_seconds = retry_delay_seconds
        self.output_format = output_format
        self.stats = stats

    def process(self, input_path: Path) -> TransformResult:
        """Transform a single work item.

        Args:
            input_path: Path of the image to blur.

        Returns:
            TransformResult describing the written output.

        Raises:
            ItemProcessingError: If the item cannot be decoded, mapped or
                written. Recoverable; the caller moves on to the next item.
            PipelineEnvironmentError: If writing failed because the output
                root is no longer a usable directory.
        """
        start_time = time.perf_counter()
        input_path = Path(input_path)

        grid, decode_attempts = self._with_retry(
            "decode_image",
            input_path,
            lambda: decode_image(input_path),
        )
        blurred = blur_pixel_grid(grid, self.filter_size)
        output_path = derive_output_path(input_path, self.input_root, self.output_root)

        try:
            _, encode_attempts = self._with_retry(
                "encode_image",
                output_path,
                lambda: encode_image(blurred, output_path, self.output_format),
            )
        except ImageEncodeError as e:
            self._raise_if_output_root_unusable(e)
            raise

        duration_ms = (time.perf_counter() - start_time) * 1000
        return TransformResult(
            input_path=input_path,
            output_path=output_path,
            width=blurred.width,
            height=blurred.height,
            attempts=decode_attempts + encode_attempts,
            duration_ms=duration_ms,
        )

    def _with_retry(
        self,
        operation: str,
        path: Path,
        step: Callable[[], T],
    ) -> tuple[T, int]:
        """Run ``step``, retrying transient item errors up to max_io_retries times."""
        attempt = 0
        while True:
            attempt += 1
            try:
                return step(), attempt
            except ItemProcessingError as e:
                if not e.transient or attempt > self.max_io_retries:
                    raise
                logger.warning(
                    "Transient failure in %s for %s. Attempt %d/%d: %s",
                    operation,
                    path,
                    attempt,
                    self.max_io_retries + 1,
                    e.message,
                )
                if self.stats is not None:
                    self.stats.increment_retries()
                time.sleep(self.retry_delay_seconds)

    def _raise_if_output_root_unusable(self, error: ImageEncodeError) -> None:
        if self.output_root.is_dir():
            return
        raise create_environment_error(
            ErrorCode.OUTPUT_ROOT_UNUSABLE,
            f"Output root is no longer a directory: {self.output_root}",
            self.output_root,
            operation="encode_image",
            original_error=error,
        ) from error
