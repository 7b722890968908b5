"""Statistics collectors for pipeline operations.

This module provides thread-safe statistics collectors for tracking
metrics across the pipeline tasks:
- ProducerStatistics: Work item discovery and push metrics
- TransformStatistics: Per-item transform outcomes
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class ItemFailure:
    """A work item that could not be transformed."""

    input_path: Path
    error_code: str
    reason: str
    transient: bool = False


class ProducerStatistics:
    """Statistics collector for producer tasks.

    This class provides thread-safe counters shared by all producers.
    """

    def __init__(self) -> None:
        """Initialize the producer statistics with zero counters."""
        self._lock = threading.Lock()
        self._items_discovered = 0
        self._items_pushed = 0

    def add_discovered(self, count: int) -> None:
        """Record the number of discovered work items."""
        with self._lock:
            self._items_discovered += count

    def increment_items_pushed(self) -> None:
        """Increment the items pushed counter."""
        with self._lock:
            self._items_pushed += 1

    @property
    def items_discovered(self) -> int:
        """Get the number of discovered work items."""
        with self._lock:
            return self._items_discovered

    @property
    def items_pushed(self) -> int:
        """Get the number of items pushed onto the queue."""
        with self._lock:
            return self._items_pushed


class TransformStatistics:
    """Statistics collector for consumer tasks.

    This class provides thread-safe counters and the list of failed
    items, shared by all consumers.
    """

    def __init__(self) -> None:
        """Initialize the transform statistics with zero counters."""
        self._lock = threading.Lock()
        self._items_processed = 0
        self._successes = 0
        self._retries = 0
        self._failures: list[ItemFailure] = []

    def record_success(self) -> None:
        """Record one successfully transformed item."""
        with self._lock:
            self._items_processed += 1
            self._successes += 1

    def record_failure(self, failure: ItemFailure) -> None:
        """Record one item that failed to transform."""
        with self._lock:
            self._items_processed += 1
            self._failures.append(failure)

    def increment_retries(self) -> None:
        """Increment the retry counter."""
        with self._lock:
            self._retries += 1

    @property
    def items_processed(self) -> int:
        """Get the number of items processed (successes and failures)."""
        with self._lock:
            return self._items_processed

    @property
    def successes(self) -> int:
        """Get the number of successful transforms."""
        with self._lock:
            return self._successes

    @property
    def failures(self) -> int:
        """Get the number of failed transforms."""
        with self._lock:
            return len(self._failures)

    @property
    def retries(self) -> int:
        """Get the number of retried I/O steps."""
        with self._lock:
            return self._retries

    def failed_items(self) -> list[ItemFailure]:
        """Return a copy of the recorded failures."""
        with self._lock:
            return list(self._failures)
