"""
Pytest configuration and shared fixtures for blurqueue tests.

This module provides common fixtures and configuration that can be used
across all test modules in the project.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Generator
from pathlib import Path

import numpy as np
import pytest
from PIL import Image


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Drop BLURQUEUE_* variables so settings only see what a test sets."""
    for key in list(os.environ):
        if key.startswith("BLURQUEUE_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture(autouse=True)
def _reset_package_logger() -> Generator[None, None, None]:
    """Undo handler changes made by setup_structured_logger."""
    yield
    package_logger = logging.getLogger("blurqueue")
    package_logger.handlers.clear()
    package_logger.propagate = True
    package_logger.setLevel(logging.NOTSET)


@pytest.fixture
def write_image() -> Callable[[Path, np.ndarray], Path]:
    """Return a helper that saves an (H, W, 3) uint8 array with Pillow."""

    def _write(path: Path, array: np.ndarray) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        Image.fromarray(np.asarray(array, dtype=np.uint8)).save(path)
        return path

    return _write


@pytest.fixture
def read_image() -> Callable[[Path], np.ndarray]:
    """Return a helper that loads an image as an (H, W, 3) uint8 array."""

    def _read(path: Path) -> np.ndarray:
        with Image.open(path) as image:
            return np.asarray(image.convert("RGB"), dtype=np.uint8)

    return _read


@pytest.fixture
def random_rgb() -> Callable[[int, int], np.ndarray]:
    """Return a seeded factory of random RGB arrays."""
    rng = np.random.default_rng(1234)

    def _make(height: int, width: int) -> np.ndarray:
        return rng.integers(0, 256, size=(height, width, 3), dtype=np.uint8)

    return _make


@pytest.fixture
def image_roots(
    tmp_path: Path,
    write_image: Callable[[Path, np.ndarray], Path],
    random_rgb: Callable[[int, int], np.ndarray],
) -> tuple[Path, Path, list[Path]]:
    """Create an input root with a handful of PNG files.

    Returns:
        Tuple of (input_root, output_root, written input paths). The output
        root does not exist yet.
    """
    input_root = tmp_path / "input"
    output_root = tmp_path / "output"
    paths = [
        write_image(input_root / f"image_{index:02d}.png", random_rgb(12 + index, 9 + index))
        for index in range(6)
    ]
    return input_root, output_root, paths
