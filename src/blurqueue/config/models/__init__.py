"""Configuration domain models."""

from __future__ import annotations

from .app_settings import LoggingSettings
from .pipeline_settings import FilterSettings, PipelineSettings
from .settings import Settings

__all__ = [
    "FilterSettings",
    "LoggingSettings",
    "PipelineSettings",
    "Settings",
]
