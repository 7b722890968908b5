"""Image representation, codec adapter and box blur kernel."""

from __future__ import annotations

from blurqueue.core.imaging.box_blur import (
    apply_box_blur,
    blur_pixel_grid,
    validate_filter_size,
)
from blurqueue.core.imaging.codec import decode_image, encode_image, resolve_format
from blurqueue.core.imaging.models import PixelGrid

__all__ = [
    "PixelGrid",
    "apply_box_blur",
    "blur_pixel_grid",
    "decode_image",
    "encode_image",
    "resolve_format",
    "validate_filter_size",
]
