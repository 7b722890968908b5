"""
blurqueue Constants Module

Centralized constants so that defaults and magic values have a single
source of truth across configuration, pipeline and CLI code.
"""

from .cli import CLICommands, CLIDefaults, CLIHelp, CLIOptions
from .core import (
    Application,
    FilterConfig,
    ImageConfig,
    PipelineDefaults,
    RetryConfig,
    Timeout,
)

__all__ = [
    "Application",
    "CLICommands",
    "CLIDefaults",
    "CLIHelp",
    "CLIOptions",
    "FilterConfig",
    "ImageConfig",
    "PipelineDefaults",
    "RetryConfig",
    "Timeout",
]
