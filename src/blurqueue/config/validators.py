"""Common validation functions for configuration fields.

This module provides reusable validation functions for Pydantic models
in the configuration system.
"""

from __future__ import annotations

from blurqueue.shared.constants import FilterConfig


def validate_extensions_list(extensions: list[str] | None) -> list[str] | None:
    """Validate a list of file extensions.

    Args:
        extensions: List of file extensions to validate

    Returns:
        The extensions, lowercased

    Raises:
        ValueError: If any extension doesn't start with a dot

    Example:
        >>> validate_extensions_list([".PNG", ".jpg"])
        ['.png', '.jpg']
    """
    if not extensions:
        return extensions

    invalid_exts = [ext for ext in extensions if not ext.startswith(".")]
    if invalid_exts:
        msg = f"Extensions {invalid_exts} must start with a dot"
        raise ValueError(msg)

    return [ext.lower() for ext in extensions]


def validate_filter_window(filter_size: int) -> int:
    """Validate a configured box filter window size.

    Args:
        filter_size: Window edge length

    Returns:
        The validated size

    Raises:
        ValueError: If the size is even or below the configured minimum
    """
    if filter_size < FilterConfig.MIN_CONFIGURED_SIZE:
        msg = f"filter_size must be at least {FilterConfig.MIN_CONFIGURED_SIZE}, got {filter_size}"
        raise ValueError(msg)
    if filter_size % 2 == 0:
        msg = f"filter_size must be odd, got {filter_size}"
        raise ValueError(msg)
    return filter_size
