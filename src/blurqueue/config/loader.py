"""Settings loader and singleton manager.

This module handles:
- Configuration file loading from TOML
- Thread-safe singleton pattern for Settings instance
- Conversion of validation failures into structured errors
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path

import toml
from pydantic import ValidationError

from blurqueue.config.models.settings import Settings
from blurqueue.shared.errors import (
    ApplicationError,
    ErrorCode,
    ErrorContext,
    create_config_error,
)

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATHS: tuple[Path, ...] = (
    Path("config/config.toml"),
    Path("config.toml"),
)


class SettingsLoader:
    """Thread-safe singleton manager for Settings.

    Uses double-checked locking pattern to ensure thread-safety
    while minimizing lock overhead.
    """

    _instance: Settings | None = None
    _lock: threading.RLock = threading.RLock()

    def get_config(self) -> Settings:
        """Get the global settings instance (thread-safe).

        Returns:
            The global Settings instance, loading it if necessary.
        """
        if self._instance is None:
            with self._lock:
                if self._instance is None:
                    self._instance = load_settings()

        return self._instance

    def reload_config(self, config_path: str | Path | None = None) -> Settings:
        """Reload the global settings instance from configuration files.

        Returns:
            The reloaded Settings instance.
        """
        with self._lock:
            self._instance = load_settings(config_path)

        return self._instance


def _find_default_config() -> Path | None:
    for candidate in DEFAULT_CONFIG_PATHS:
        if candidate.exists():
            return candidate
    return None


def load_settings(config_path: str | Path | None = None) -> Settings:
    """Load settings from TOML configuration file or environment.

    Args:
        config_path: Optional path to TOML configuration file. If None, tries
            ``config/config.toml`` then ``config.toml``, then falls back to
            environment variables only.

    Returns:
        Settings instance loaded from the specified source

    Raises:
        ApplicationError: If the file is missing, unparsable or fails validation.
    """
    path = Path(config_path) if config_path else _find_default_config()

    try:
        if path is None:
            return Settings()
        logger.debug("Loading configuration from %s", path)
        return Settings.from_toml_file(path)
    except FileNotFoundError as e:
        raise ApplicationError(
            ErrorCode.CONFIG_MISSING,
            f"Configuration file not found: {path}",
            ErrorContext(
                file_path=str(path),
                operation="load_settings",
            ),
            original_error=e,
        ) from e
    except toml.TomlDecodeError as e:
        raise create_config_error(
            f"Configuration file is not valid TOML: {path}: {e}",
            operation="load_settings",
            original_error=e,
        ) from e
    except ValidationError as e:
        first = e.errors()[0]
        config_key = ".".join(str(part) for part in first["loc"])
        raise create_config_error(
            f"Invalid configuration: {config_key}: {first['msg']}",
            config_key=config_key,
            operation="load_settings",
            original_error=e,
        ) from e


# Global loader instance
_loader = SettingsLoader()


def get_config() -> Settings:
    """Get the global settings instance (thread-safe).

    Returns:
        The global Settings instance, loading it if necessary.
    """
    return _loader.get_config()


def reload_config(config_path: str | Path | None = None) -> Settings:
    """Reload the global settings instance from configuration files.

    Returns:
        The reloaded Settings instance.
    """
    return _loader.reload_config(config_path)


__all__ = [
    "SettingsLoader",
    "get_config",
    "load_settings",
    "reload_config",
]
