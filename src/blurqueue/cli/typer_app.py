"""
blurqueue Typer CLI Application

Command-line entry point: ``run`` blurs a whole directory through the
producer/consumer pipeline, ``blur`` filters a single file.
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from blurqueue.cli.blur_handler import handle_blur_command
from blurqueue.cli.common.context import CliContext, LogLevel, set_cli_context
from blurqueue.cli.common.options import log_level_option, verbose_option, version_option
from blurqueue.cli.run_handler import handle_run_command
from blurqueue.shared.constants import (
    CLICommands,
    CLIDefaults,
    CLIHelp,
    CLIOptions,
    FilterConfig,
)
from blurqueue.shared.logging import setup_structured_logger

# Version information
__version__ = CLIDefaults.VERSION


def version_callback(value: bool) -> None:
    """Print version information and exit."""
    if value:
        typer.echo(CLIHelp.VERSION_TEXT.format(version=__version__))
        raise typer.Exit


# Create the main Typer app with callback
app = typer.Typer(
    name=CLIHelp.APP_NAME,
    help=CLIHelp.APP_DESCRIPTION,
    add_completion=False,
    rich_markup_mode=CLIHelp.APP_STYLE,
    no_args_is_help=True,
    invoke_without_command=True,
)


@app.callback()
def main(
    verbose: Annotated[int, verbose_option] = 0,
    log_level: Annotated[LogLevel, log_level_option] = LogLevel.INFO,
    version: Annotated[bool, version_option] = False,
) -> None:
    """Process the common options and configure logging."""
    if version:
        version_callback(value=True)

    context = CliContext(verbose=verbose, log_level=log_level)
    set_cli_context(context)
    setup_structured_logger(level=context.get_effective_log_level())


@app.command(CLICommands.RUN, help=CLIHelp.RUN_HELP)
def run_command_typer(  # pylint: disable=too-many-arguments
    input_root: Annotated[
        Path | None,
        typer.Option(CLIOptions.INPUT, CLIOptions.INPUT_SHORT, help=CLIHelp.INPUT_HELP),
    ] = None,
    output_root: Annotated[
        Path | None,
        typer.Option(CLIOptions.OUTPUT, CLIOptions.OUTPUT_SHORT, help=CLIHelp.OUTPUT_HELP),
    ] = None,
    producers: Annotated[
        int | None,
        typer.Option(CLIOptions.PRODUCERS, help=CLIHelp.PRODUCERS_HELP),
    ] = None,
    consumers: Annotated[
        int | None,
        typer.Option(CLIOptions.CONSUMERS, help=CLIHelp.CONSUMERS_HELP),
    ] = None,
    capacity: Annotated[
        int | None,
        typer.Option(CLIOptions.CAPACITY, help=CLIHelp.CAPACITY_HELP),
    ] = None,
    filter_size: Annotated[
        int | None,
        typer.Option(CLIOptions.FILTER_SIZE, help=CLIHelp.FILTER_SIZE_HELP),
    ] = None,
    retries: Annotated[
        int | None,
        typer.Option(CLIOptions.RETRIES, help=CLIHelp.RETRIES_HELP),
    ] = None,
    extension: Annotated[
        list[str] | None,
        typer.Option(CLIOptions.EXTENSION, help=CLIHelp.EXTENSION_HELP),
    ] = None,
    config: Annotated[
        Path | None,
        typer.Option(CLIOptions.CONFIG, CLIOptions.CONFIG_SHORT, help=CLIHelp.CONFIG_HELP),
    ] = None,
    json_output: Annotated[
        bool,
        typer.Option(CLIOptions.JSON, help=CLIHelp.JSON_HELP),
    ] = False,
) -> None:
    """
    Blur every image under the input root into the output root.

    Examples:
        # Defaults from config.toml or the environment
        blurqueue run

        # Explicit roots, four consumers, 7x7 window
        blurqueue run -i ./photos -o ./blurred --consumers 4 --filter-size 7

        # Only PNG files, JSON summary
        blurqueue run -i ./photos -o ./blurred --extension .png --json
    """
    exit_code = handle_run_command(
        input_root=input_root,
        output_root=output_root,
        producers=producers,
        consumers=consumers,
        capacity=capacity,
        filter_size=filter_size,
        retries=retries,
        extensions=extension,
        config_path=config,
        json_output=json_output,
    )
    raise typer.Exit(exit_code)


@app.command(CLICommands.BLUR, help=CLIHelp.BLUR_HELP)
def blur_command_typer(
    input_path: Annotated[
        Path,
        typer.Argument(exists=True, file_okay=True, dir_okay=False, readable=True),
    ],
    output_path: Annotated[Path, typer.Argument()],
    filter_size: Annotated[
        int,
        typer.Option(CLIOptions.FILTER_SIZE, help=CLIHelp.FILTER_SIZE_HELP),
    ] = FilterConfig.DEFAULT_SIZE,
    json_output: Annotated[
        bool,
        typer.Option(CLIOptions.JSON, help=CLIHelp.JSON_HELP),
    ] = False,
) -> None:
    """Blur a single image file into OUTPUT_PATH."""
    exit_code = handle_blur_command(
        input_path,
        output_path,
        filter_size,
        json_output=json_output,
    )
    raise typer.Exit(exit_code)


if __name__ == "__main__":
    app()
