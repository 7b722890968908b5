"""Tests for the box blur kernel and PixelGrid container."""

from __future__ import annotations

from typing import Any

import numpy as np
import pytest

from blurqueue.core.imaging import PixelGrid, apply_box_blur, blur_pixel_grid, validate_filter_size
from blurqueue.shared.errors import ErrorCode, FilterConfigurationError


class TestApplyBoxBlur:
    """Test cases for apply_box_blur."""

    def test_uniform_image_is_fixed_point(self) -> None:
        """A uniform 10x10 channel of 100 is unchanged by a 5x5 blur."""
        channel = np.full((10, 10), 100, dtype=np.uint8)

        result = apply_box_blur(channel, 5)

        assert np.array_equal(result, channel)

    def test_center_pixel_is_window_mean(self) -> None:
        """The centre of a 7x7 grid is the truncated mean of its 5x5 window."""
        # Given
        channel = np.arange(49, dtype=np.uint8).reshape(7, 7) * 5
        window = channel[1:6, 1:6].astype(np.int64)

        # When
        result = apply_box_blur(channel, 5)

        # Then
        assert int(result[3, 3]) == int(window.sum() / 25)

    def test_interior_uses_truncation(self) -> None:
        """Means are truncated toward zero, not rounded."""
        channel = np.zeros((3, 3), dtype=np.uint8)
        channel[0, 0] = 8  # window sum 8 / 9 = 0.89

        result = apply_box_blur(channel, 3)

        assert result[1, 1] == 0

    def test_interior_matches_reference_loop(self) -> None:
        """Every interior pixel matches a straightforward nested-loop mean."""
        rng = np.random.default_rng(7)
        channel = rng.integers(0, 256, size=(9, 11), dtype=np.uint8)
        size, pad = 5, 2

        result = apply_box_blur(channel, size)

        for row in range(pad, 9 - pad):
            for col in range(pad, 11 - pad):
                window = channel[row - pad : row + pad + 1, col - pad : col + pad + 1]
                assert result[row, col] == int(window.astype(np.float64).sum() / (size * size))

    def test_border_pixels_copied(self) -> None:
        """Pixels within pad of any edge keep their original value."""
        rng = np.random.default_rng(11)
        channel = rng.integers(0, 256, size=(8, 8), dtype=np.uint8)

        result = apply_box_blur(channel, 5)

        assert np.array_equal(result[:2, :], channel[:2, :])
        assert np.array_equal(result[-2:, :], channel[-2:, :])
        assert np.array_equal(result[:, :2], channel[:, :2])
        assert np.array_equal(result[:, -2:], channel[:, -2:])

    @pytest.mark.parametrize("shape", [(4, 10), (10, 4), (3, 3), (1, 1)])
    def test_image_smaller_than_window_is_unchanged_copy(self, shape: tuple[int, int]) -> None:
        """Without interior pixels the output equals the input."""
        rng = np.random.default_rng(3)
        channel = rng.integers(0, 256, size=shape, dtype=np.uint8)

        result = apply_box_blur(channel, 5)

        assert np.array_equal(result, channel)
        assert result is not channel

    def test_exact_window_size_has_single_interior_pixel(self) -> None:
        """A 5x5 image with k=5 blurs only its centre pixel."""
        channel = np.zeros((5, 5), dtype=np.uint8)
        channel[0, 0] = 250

        result = apply_box_blur(channel, 5)

        assert result[2, 2] == 10
        assert result[0, 0] == 250

    def test_filter_size_one_is_identity(self) -> None:
        """A 1x1 window averages each pixel with itself."""
        channel = np.arange(12, dtype=np.uint8).reshape(3, 4)
        assert np.array_equal(apply_box_blur(channel, 1), channel)

    def test_input_is_not_mutated(self) -> None:
        """The kernel returns a new array and leaves its input alone."""
        channel = np.arange(100, dtype=np.uint8).reshape(10, 10)
        original = channel.copy()

        result = apply_box_blur(channel, 3)

        assert np.array_equal(channel, original)
        assert result is not channel
        assert result.shape == channel.shape
        assert result.dtype == channel.dtype

    @pytest.mark.parametrize("filter_size", [0, -3, 4, 2, True, 3.0, "5", None])
    def test_invalid_filter_size(self, filter_size: Any) -> None:
        """Only odd positive integers are accepted."""
        channel = np.zeros((10, 10), dtype=np.uint8)

        with pytest.raises(FilterConfigurationError) as exc_info:
            apply_box_blur(channel, filter_size)

        assert exc_info.value.code == ErrorCode.INVALID_FILTER_SIZE

    def test_non_2d_channel_rejected(self) -> None:
        """A channel must be a 2-D grid."""
        with pytest.raises(FilterConfigurationError) as exc_info:
            apply_box_blur(np.zeros((4, 4, 3), dtype=np.uint8), 3)

        assert exc_info.value.code == ErrorCode.INVALID_CHANNEL_SHAPE

    def test_validate_filter_size_accepts_numpy_integers(self) -> None:
        """numpy integer scalars are accepted and normalised to int."""
        size = validate_filter_size(np.int64(7))
        assert size == 7
        assert type(size) is int


class TestPixelGrid:
    """Test cases for PixelGrid and blur_pixel_grid."""

    def test_interleaved_round_trip(self) -> None:
        """Splitting and merging channels preserves every sample."""
        rng = np.random.default_rng(5)
        array = rng.integers(0, 256, size=(6, 4, 3), dtype=np.uint8)

        grid = PixelGrid.from_interleaved(array)

        assert (grid.height, grid.width) == (6, 4)
        assert np.array_equal(grid.green, array[:, :, 1])
        assert np.array_equal(grid.to_interleaved(), array)

    def test_mismatched_channel_shapes_rejected(self) -> None:
        """All three channels must share one shape."""
        with pytest.raises(FilterConfigurationError):
            PixelGrid(
                red=np.zeros((2, 2), dtype=np.uint8),
                green=np.zeros((2, 3), dtype=np.uint8),
                blue=np.zeros((2, 2), dtype=np.uint8),
            )

    def test_from_interleaved_requires_three_channels(self) -> None:
        """Grayscale or RGBA arrays are rejected."""
        with pytest.raises(FilterConfigurationError):
            PixelGrid.from_interleaved(np.zeros((2, 2, 4), dtype=np.uint8))

    def test_blur_pixel_grid_filters_channels_independently(self) -> None:
        """Each channel is blurred on its own values."""
        array = np.zeros((5, 5, 3), dtype=np.uint8)
        array[:, :, 0] = 50
        array[0, 0, 1] = 250
        grid = PixelGrid.from_interleaved(array)

        blurred = blur_pixel_grid(grid, 5)

        assert blurred is not grid
        assert np.array_equal(blurred.red, grid.red)
        assert blurred.green[2, 2] == 10
        assert blurred.blue[2, 2] == 0
        assert grid.green[2, 2] == 0
