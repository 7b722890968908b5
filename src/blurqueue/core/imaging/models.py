"""In-memory image representation.

A decoded image is held as three separate same-shaped channel grids of
8-bit samples. Grids are never mutated in place: every transform builds a
new PixelGrid.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

import numpy as np

from blurqueue.shared.constants import ImageConfig
from blurqueue.shared.errors import ErrorCode, ErrorContext, FilterConfigurationError


@dataclass(frozen=True, eq=False)
class PixelGrid:
    """Three row-major channel grids sharing one ``height x width`` shape."""

    red: np.ndarray
    green: np.ndarray
    blue: np.ndarray

    def __post_init__(self) -> None:
        shapes = {channel.shape for channel in self.channels}
        if len(shapes) != 1 or any(channel.ndim != 2 for channel in self.channels):
            raise FilterConfigurationError(
                ErrorCode.INVALID_CHANNEL_SHAPE,
                "All channels must be 2-D grids of the same shape",
                ErrorContext(
                    operation="create_pixel_grid",
                    additional_data={"shapes": str(sorted(shapes))},
                ),
            )

    @classmethod
    def from_interleaved(cls, array: np.ndarray) -> PixelGrid:
        """Split an ``(height, width, 3)`` array into channel grids."""
        if array.ndim != 3 or array.shape[2] != ImageConfig.NUM_CHANNELS:
            raise FilterConfigurationError(
                ErrorCode.INVALID_CHANNEL_SHAPE,
                f"Expected an (H, W, {ImageConfig.NUM_CHANNELS}) array, got {array.shape}",
                ErrorContext(operation="split_channels"),
            )
        return cls(
            red=np.ascontiguousarray(array[:, :, 0]),
            green=np.ascontiguousarray(array[:, :, 1]),
            blue=np.ascontiguousarray(array[:, :, 2]),
        )

    def to_interleaved(self) -> np.ndarray:
        """Merge the channels back into an ``(height, width, 3)`` array."""
        return np.stack(self.channels, axis=-1)

    def map_channels(self, transform: Callable[[np.ndarray], np.ndarray]) -> PixelGrid:
        """Return a new grid with ``transform`` applied to every channel."""
        return PixelGrid(*(transform(channel) for channel in self.channels))

    @property
    def channels(self) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
        return (self.red, self.green, self.blue)

    @property
    def height(self) -> int:
        return int(self.red.shape[0])

    @property
    def width(self) -> int:
        return int(self.red.shape[1])
