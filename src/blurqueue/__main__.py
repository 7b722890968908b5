"""
blurqueue Package Main Entry Point

Runs the CLI when the package is executed with ``python -m blurqueue``.
"""

import logging
import sys

from blurqueue.cli.common.error_handler import handle_cli_error
from blurqueue.cli.typer_app import app
from blurqueue.shared.constants import CLIDefaults

logger = logging.getLogger(__name__)


if __name__ == "__main__":
    try:
        app()
    except KeyboardInterrupt:
        logger.info("Command interrupted by user")
        sys.exit(CLIDefaults.EXIT_INTERRUPTED)
    # pylint: disable-next=broad-exception-caught
    except Exception as e:  # noqa: BLE001
        exit_code = handle_cli_error(e, "blurqueue-main")
        sys.exit(exit_code)
