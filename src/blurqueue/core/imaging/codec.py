"""Image container decode/encode backed by Pillow.

Decoding always yields a three-channel RGB PixelGrid. Failures are raised
as item-level errors; an ``OSError`` that carries an errno (a real I/O
failure rather than bad image data) is marked transient so the transform
step may retry it.
"""

from __future__ import annotations

import logging
from pathlib import Path

import numpy as np
from PIL import Image, UnidentifiedImageError

from blurqueue.core.imaging.models import PixelGrid
from blurqueue.shared.constants import ImageConfig
from blurqueue.shared.errors import (
    ErrorCode,
    ErrorContext,
    ImageDecodeError,
    ImageEncodeError,
)

logger = logging.getLogger(__name__)

_PERMANENT_OS_ERRORS = (
    FileNotFoundError,
    IsADirectoryError,
    NotADirectoryError,
    PermissionError,
)


def _is_transient(error: OSError) -> bool:
    return error.errno is not None and not isinstance(error, _PERMANENT_OS_ERRORS)


def decode_image(path: Path) -> PixelGrid:
    """Read ``path`` and split it into RGB channel grids.

    Raises:
        ImageDecodeError: If the file cannot be read or is not a valid image.
    """
    context = ErrorContext(file_path=str(path), operation="decode_image")
    try:
        with Image.open(path) as image:
            array = np.asarray(image.convert(ImageConfig.PIL_MODE), dtype=np.uint8)
    except UnidentifiedImageError as e:
        raise ImageDecodeError(
            ErrorCode.IMAGE_DECODE_FAILED,
            f"Not a recognizable image: {path}",
            context,
            original_error=e,
        ) from e
    except OSError as e:
        raise ImageDecodeError(
            ErrorCode.IMAGE_DECODE_FAILED,
            f"Failed to read image {path}: {e}",
            context,
            original_error=e,
            transient=_is_transient(e),
        ) from e
    except (ValueError, SyntaxError, Image.DecompressionBombError) as e:
        raise ImageDecodeError(
            ErrorCode.IMAGE_DECODE_FAILED,
            f"Corrupt image data in {path}: {e}",
            context,
            original_error=e,
        ) from e

    logger.debug("Decoded %s (%dx%d)", path, array.shape[1], array.shape[0])
    return PixelGrid.from_interleaved(array)


def resolve_format(path: Path, image_format: str | None = None) -> str:
    """Pick the container format for ``path``.

    An explicit ``image_format`` wins; otherwise the format registered for
    the file suffix is used, falling back to PNG for unknown suffixes.
    """
    if image_format:
        return image_format.upper()
    return Image.registered_extensions().get(
        path.suffix.lower(),
        ImageConfig.FALLBACK_FORMAT,
    )


def encode_image(grid: PixelGrid, path: Path, image_format: str | None = None) -> None:
    """Interleave ``grid`` and write it to ``path``.

    Raises:
        ImageEncodeError: If the image cannot be encoded or written.
    """
    container = resolve_format(path, image_format)
    context = ErrorContext(
        file_path=str(path),
        operation="encode_image",
        additional_data={"format": container},
    )
    image = Image.fromarray(grid.to_interleaved())
    try:
        image.save(path, format=container)
    except OSError as e:
        raise ImageEncodeError(
            ErrorCode.IMAGE_ENCODE_FAILED,
            f"Failed to write image {path}: {e}",
            context,
            original_error=e,
            transient=_is_transient(e),
        ) from e
    except (ValueError, KeyError) as e:
        raise ImageEncodeError(
            ErrorCode.IMAGE_ENCODE_FAILED,
            f"Cannot encode {path} as {container}: {e}",
            context,
            original_error=e,
        ) from e
