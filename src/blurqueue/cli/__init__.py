"""Command-line interface for blurqueue."""

from blurqueue.cli.typer_app import app

__all__ = ["app"]
