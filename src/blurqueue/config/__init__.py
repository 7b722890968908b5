"""blurqueue Configuration Module

This module provides unified access to configuration models and settings
management:
- Settings: Main configuration facade
- Loader functions: get_config, load_settings, reload_config
- Domain models: Pipeline, Filter, Logging settings
"""

from __future__ import annotations

from .loader import get_config, load_settings, reload_config
from .models import FilterSettings, LoggingSettings, PipelineSettings, Settings

__all__ = [
    "FilterSettings",
    "LoggingSettings",
    "PipelineSettings",
    "Settings",
    "get_config",
    "load_settings",
    "reload_config",
]
