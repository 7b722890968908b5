"""Run environment preparation and work item discovery.

Everything in this module runs on the orchestrating thread before any
producer or consumer starts, so failures here abort the run without
leaving threads behind.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable
from pathlib import Path

from blurqueue.shared.errors import ErrorCode, create_environment_error

logger = logging.getLogger(__name__)


def prepare_environment(input_root: str | Path, output_root: str | Path) -> tuple[Path, Path]:
    """Validate the input root and make sure the output root is usable.

    The output root is created with its parents when it does not exist.

    Args:
        input_root: Directory holding the images to blur.
        output_root: Directory the blurred images are written to.

    Returns:
        Tuple of (input_root, output_root) as Path objects.

    Raises:
        PipelineEnvironmentError: If the input root is missing or not a
            directory, or if the output root cannot be created or written.
    """
    input_root = Path(input_root)
    output_root = Path(output_root)

    if not input_root.exists():
        raise create_environment_error(
            ErrorCode.DIRECTORY_NOT_FOUND,
            f"Input root does not exist: {input_root}",
            input_root,
            operation="prepare_environment",
        )
    if not input_root.is_dir():
        raise create_environment_error(
            ErrorCode.NOT_A_DIRECTORY,
            f"Input root is not a directory: {input_root}",
            input_root,
            operation="prepare_environment",
        )

    if output_root.exists() and not output_root.is_dir():
        raise create_environment_error(
            ErrorCode.NOT_A_DIRECTORY,
            f"Output root exists and is not a directory: {output_root}",
            output_root,
            operation="prepare_environment",
        )

    try:
        output_root.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise create_environment_error(
            ErrorCode.DIRECTORY_CREATION_FAILED,
            f"Cannot create output root {output_root}: {e}",
            output_root,
            operation="prepare_environment",
            original_error=e,
        ) from e

    if not os.access(output_root, os.W_OK | os.X_OK):
        raise create_environment_error(
            ErrorCode.OUTPUT_ROOT_UNUSABLE,
            f"Output root is not writable: {output_root}",
            output_root,
            operation="prepare_environment",
        )

    if input_root.resolve() == output_root.resolve():
        raise create_environment_error(
            ErrorCode.INVALID_PATH,
            f"Input and output roots must differ: {input_root}",
            output_root,
            operation="prepare_environment",
        )

    logger.debug("Environment ready: input=%s output=%s", input_root, output_root)
    return input_root, output_root


def _normalize_extensions(extensions: Iterable[str] | None) -> set[str] | None:
    if extensions is None:
        return None
    normalized = {ext.lower() for ext in extensions}
    return normalized or None


def discover_work_items(
    input_root: str | Path,
    extensions: Iterable[str] | None = None,
) -> list[Path]:
    """List the images to process directly under ``input_root``.

    Only regular files are returned; subdirectories are not descended.
    The result is sorted by filename.

    Args:
        input_root: Directory to list.
        extensions: Optional suffixes (e.g. ``[".png"]``), compared
            case-insensitively. None or empty keeps every file.

    Returns:
        Sorted list of work item paths.

    Raises:
        PipelineEnvironmentError: If the directory cannot be listed.
    """
    input_root = Path(input_root)
    allowed = _normalize_extensions(extensions)

    try:
        entries = list(input_root.iterdir())
    except OSError as e:
        raise create_environment_error(
            ErrorCode.DIRECTORY_NOT_FOUND,
            f"Cannot list input root {input_root}: {e}",
            input_root,
            operation="discover_work_items",
            original_error=e,
        ) from e

    items = [
        entry
        for entry in entries
        if entry.is_file() and (allowed is None or entry.suffix.lower() in allowed)
    ]
    items.sort(key=lambda path: path.name)

    logger.info("Discovered %d work items in %s", len(items), input_root)
    return items
