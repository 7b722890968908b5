"""
Reusable Typer Options Module

Centralizes the option definitions shared by the main callback. Each one
is a ``typer.Option`` meant to be used as ``Annotated`` metadata:
- verbose: Verbosity level (count-based)
- log_level: Logging level (enum-based)
- version: Print version and exit
"""

from __future__ import annotations

import typer

# Verbose option - count-based for multiple -v flags
verbose_option = typer.Option(
    "--verbose",
    "-v",
    count=True,
    help="Enable verbose output (equivalent to --log-level DEBUG).",
)


# Log level option - enum-based with case-insensitive choices
log_level_option = typer.Option(
    "--log-level",
    case_sensitive=False,
    help="Set the logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL). Default: INFO.",
)


# Version option - for main app only
version_option = typer.Option(
    "--version",
    "-V",
    help="Show version information and exit.",
    is_eager=True,
)
