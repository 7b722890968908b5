"""Box blur (mean filter) kernel.

Each interior pixel is replaced by the arithmetic mean of the
``filter_size x filter_size`` window centred on it. Pixels closer than
``filter_size // 2`` to any edge are copied unchanged: there is no
clamping, mirroring or wraparound sampling.

Images smaller than the window in either dimension have no interior
pixels, so the result is an unchanged copy of the input.
"""

from __future__ import annotations

import numpy as np
from numpy.lib.stride_tricks import sliding_window_view

from blurqueue.core.imaging.models import PixelGrid
from blurqueue.shared.constants import FilterConfig
from blurqueue.shared.errors import ErrorCode, ErrorContext, FilterConfigurationError


def validate_filter_size(filter_size: int) -> int:
    """Return ``filter_size`` if it is an odd positive integer.

    Raises:
        FilterConfigurationError: If the window size is not odd and positive.
    """
    if (
        isinstance(filter_size, bool)
        or not isinstance(filter_size, (int, np.integer))
        or filter_size <= 0
        or filter_size % 2 == 0
    ):
        raise FilterConfigurationError(
            ErrorCode.INVALID_FILTER_SIZE,
            f"Filter size must be an odd positive integer, got {filter_size!r}",
            ErrorContext(
                operation="validate_filter_size",
                additional_data={"filter_size": str(filter_size)},
            ),
        )
    return int(filter_size)


def apply_box_blur(
    channel: np.ndarray,
    filter_size: int = FilterConfig.DEFAULT_SIZE,
) -> np.ndarray:
    """Apply a box blur to a single 2-D channel.

    Window sums are accumulated in float64 and the mean is truncated
    toward zero when stored back in the channel's dtype.

    Args:
        channel: 2-D grid of intensity samples.
        filter_size: Odd positive window size.

    Returns:
        A new array with the same shape and dtype as ``channel``.

    Raises:
        FilterConfigurationError: If the window size or channel shape is invalid.
    """
    filter_size = validate_filter_size(filter_size)
    source = np.asarray(channel)
    if source.ndim != 2:
        raise FilterConfigurationError(
            ErrorCode.INVALID_CHANNEL_SHAPE,
            f"Expected a 2-D channel, got {source.ndim} dimensions",
            ErrorContext(operation="apply_box_blur"),
        )

    result = source.copy()
    height, width = source.shape
    if height < filter_size or width < filter_size:
        return result

    pad = filter_size // 2
    windows = sliding_window_view(source, (filter_size, filter_size))
    means = windows.mean(axis=(-2, -1), dtype=np.float64)
    result[pad : height - pad, pad : width - pad] = np.trunc(means).astype(source.dtype)
    return result


def blur_pixel_grid(
    grid: PixelGrid,
    filter_size: int = FilterConfig.DEFAULT_SIZE,
) -> PixelGrid:
    """Apply :func:`apply_box_blur` independently to every channel."""
    filter_size = validate_filter_size(filter_size)
    return grid.map_channels(lambda channel: apply_box_blur(channel, filter_size))
