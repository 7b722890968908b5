"""Blur command handler: filter one image file outside the pipeline."""

from __future__ import annotations

import sys
import time
from pathlib import Path

from pydantic import ValidationError

from blurqueue.cli.common.error_handler import format_json_output, handle_cli_error
from blurqueue.config import FilterSettings
from blurqueue.core.imaging import blur_pixel_grid, decode_image, encode_image
from blurqueue.shared.constants import CLICommands, CLIDefaults
from blurqueue.shared.errors import create_config_error


def handle_blur_command(
    input_path: Path,
    output_path: Path,
    filter_size: int,
    *,
    json_output: bool = False,
) -> int:
    """Decode ``input_path``, blur it and write ``output_path``.

    The parent directory of ``output_path`` is created when missing.

    Returns:
        Exit code
    """
    start_time = time.perf_counter()
    try:
        try:
            filter_settings = FilterSettings(filter_size=filter_size)
        except ValidationError as e:
            raise create_config_error(
                f"Invalid filter size: {e.errors()[0]['msg']}",
                config_key="filter_size",
                operation="handle_blur_command",
                original_error=e,
            ) from e

        grid = decode_image(input_path)
        blurred = blur_pixel_grid(grid, filter_settings.filter_size)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        encode_image(blurred, output_path)
    except Exception as e:  # noqa: BLE001  # pylint: disable=broad-exception-caught
        return handle_cli_error(e, CLICommands.BLUR, json_output=json_output)

    duration_ms = (time.perf_counter() - start_time) * 1000
    if json_output:
        sys.stdout.write(
            format_json_output(
                CLICommands.BLUR,
                success=True,
                data={
                    "input_path": str(input_path),
                    "output_path": str(output_path),
                    "width": blurred.width,
                    "height": blurred.height,
                    "filter_size": filter_settings.filter_size,
                    "duration_ms": duration_ms,
                },
            )
            + "\n",
        )
    else:
        sys.stdout.write(f"Wrote {output_path} ({blurred.width}x{blurred.height})\n")
    return CLIDefaults.EXIT_SUCCESS
