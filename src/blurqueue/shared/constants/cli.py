"""
CLI Configuration Constants

This module contains constants for the command-line interface:
command names, option flags, help texts and exit codes.
"""

from .core import Application


class CLICommands:
    """Command names."""

    RUN = "run"
    BLUR = "blur"


class CLIDefaults:
    """CLI defaults and exit codes."""

    VERSION = Application.VERSION
    EXIT_SUCCESS = 0
    EXIT_ERROR = 1
    EXIT_INTERRUPTED = 130


class CLIOptions:
    """Option flags."""

    INPUT = "--input"
    INPUT_SHORT = "-i"
    OUTPUT = "--output"
    OUTPUT_SHORT = "-o"
    PRODUCERS = "--producers"
    CONSUMERS = "--consumers"
    CAPACITY = "--capacity"
    FILTER_SIZE = "--filter-size"
    RETRIES = "--retries"
    EXTENSION = "--extension"
    CONFIG = "--config"
    CONFIG_SHORT = "-c"
    JSON = "--json"


class CLIHelp:
    """Help texts."""

    APP_NAME = Application.NAME
    APP_DESCRIPTION = "Blur every image in a directory with a pool of worker threads."
    APP_STYLE = "rich"
    VERSION_TEXT = "blurqueue {version}"

    RUN_HELP = "Blur all images under the input root into the output root."
    BLUR_HELP = "Blur a single image file (useful for checking the filter)."
    INPUT_HELP = "Input root directory (non-recursive)."
    OUTPUT_HELP = "Output root directory; created when missing."
    PRODUCERS_HELP = "Number of producer threads."
    CONSUMERS_HELP = "Number of consumer threads."
    CAPACITY_HELP = "Capacity of the shared bounded queue."
    FILTER_SIZE_HELP = "Box filter window size (odd, >= 3)."
    RETRIES_HELP = "Extra attempt for transient I/O failures (0 or 1)."
    EXTENSION_HELP = "Only process files with this extension (repeatable)."
    CONFIG_HELP = "Path to a TOML configuration file."
    JSON_HELP = "Print the run summary as JSON."
