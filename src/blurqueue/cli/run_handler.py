"""Run command handler for the blurqueue CLI.

Resolves the effective settings (TOML file, environment, then command
line flags), runs the pipeline and renders the summary.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Any

from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from blurqueue.cli.common.context import get_cli_context
from blurqueue.cli.common.error_handler import format_json_output, handle_cli_error
from blurqueue.config import FilterSettings, PipelineSettings, Settings, load_settings
from blurqueue.core.pipeline.domain.orchestrator import PipelineResult, run_pipeline_from_settings
from blurqueue.shared.constants import CLICommands, CLIDefaults
from blurqueue.shared.errors import create_config_error
from blurqueue.shared.logging import setup_structured_logger

logger = logging.getLogger(__name__)


def resolve_run_settings(
    config_path: Path | None,
    pipeline_overrides: dict[str, Any],
    filter_size: int | None,
) -> Settings:
    """Load settings and apply command line overrides.

    Overrides whose value is None are ignored.

    Raises:
        ApplicationError: If the file or the merged values are invalid.
    """
    settings = load_settings(config_path)

    pipeline_data = settings.pipeline.model_dump()
    pipeline_data.update({key: value for key, value in pipeline_overrides.items() if value is not None})
    filter_data = settings.filter.model_dump()
    if filter_size is not None:
        filter_data["filter_size"] = filter_size

    try:
        pipeline = PipelineSettings.model_validate(pipeline_data)
        filter_settings = FilterSettings.model_validate(filter_data)
    except ValidationError as e:
        first = e.errors()[0]
        config_key = ".".join(str(part) for part in first["loc"])
        raise create_config_error(
            f"Invalid option {config_key}: {first['msg']}",
            config_key=config_key,
            operation="resolve_run_settings",
            original_error=e,
        ) from e

    return settings.model_copy(update={"pipeline": pipeline, "filter": filter_settings})


def _configure_logging(settings: Settings) -> None:
    setup_structured_logger(
        level=get_cli_context().get_effective_log_level(),
        log_file=settings.logging.log_file,
        use_rich_console=settings.logging.use_rich_console,
    )


def handle_run_command(  # pylint: disable=too-many-arguments
    *,
    input_root: Path | None,
    output_root: Path | None,
    producers: int | None,
    consumers: int | None,
    capacity: int | None,
    filter_size: int | None,
    retries: int | None,
    extensions: list[str] | None,
    config_path: Path | None,
    json_output: bool,
) -> int:
    """Handle the run command.

    Returns:
        Exit code: 0 unless a fatal error occurred.
    """
    try:
        settings = resolve_run_settings(
            config_path,
            {
                "input_root": input_root,
                "output_root": output_root,
                "num_producers": producers,
                "num_consumers": consumers,
                "queue_capacity": capacity,
                "max_io_retries": retries,
                "extensions": extensions or None,
            },
            filter_size,
        )
        _configure_logging(settings)
        result = run_pipeline_from_settings(settings)
    except KeyboardInterrupt:
        sys.stderr.write("Interrupted\n")
        return CLIDefaults.EXIT_INTERRUPTED
    except Exception as e:  # noqa: BLE001  # pylint: disable=broad-exception-caught
        return handle_cli_error(e, CLICommands.RUN, json_output=json_output)

    if json_output:
        sys.stdout.write(
            format_json_output(
                CLICommands.RUN,
                success=result.exit_code == CLIDefaults.EXIT_SUCCESS,
                errors=[result.fatal_error.message] if result.fatal_error else None,
                data=result.to_dict(),
            )
            + "\n",
        )
    else:
        print_run_summary(Console(), result)

    return result.exit_code


def print_run_summary(console: Console, result: PipelineResult) -> None:
    """Render the run summary and the failed items as Rich tables."""
    table = Table(title="Blur run summary", show_header=True, header_style="bold")
    table.add_column("Metric")
    table.add_column("Value", justify="right")
    table.add_row("Discovered", f"{result.items_discovered:,}")
    table.add_row("Pushed", f"{result.items_pushed:,}")
    table.add_row("Processed", f"{result.items_processed:,}")
    table.add_row("Succeeded", f"[green]{result.succeeded:,}[/green]")
    table.add_row("Failed", f"[yellow]{result.failed:,}[/yellow]")
    table.add_row("I/O retries", f"{result.retries:,}")
    table.add_row("Queue peak", f"{result.queue_stats.max_size_reached:,} / {result.queue_stats.capacity:,}")
    table.add_row("Duration", f"{result.total_duration:.2f}s")
    console.print(table)

    if result.failures:
        failures = Table(title="Failed items", show_header=True, header_style="bold yellow")
        failures.add_column("Path")
        failures.add_column("Code")
        failures.add_column("Reason")
        for failure in result.failures:
            failures.add_row(str(failure.input_path), failure.error_code, failure.reason)
        console.print(failures)

    if result.fatal_error is not None:
        console.print(f"[red bold]Run aborted:[/red bold] {result.fatal_error.message}")
