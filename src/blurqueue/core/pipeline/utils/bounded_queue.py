"""
BoundedQueue - Thread-safe fixed-capacity circular buffer.

A monitor-style queue used to hand work items from producer threads to
consumer threads with backpressure: producers block while the buffer is
full, consumers block while it is empty.

Storage is a list of exactly ``capacity`` slots addressed by ``head`` and
``tail`` indices modulo ``capacity``. The item count is tracked explicitly
because ``head == tail`` holds both when the buffer is empty and when it is
full.

Shutdown is drain-then-close: after :meth:`BoundedQueue.close`, pushes fail
immediately while pops keep returning buffered items until the buffer is
empty, then raise :class:`QueueClosedError`.
"""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Any

from blurqueue.shared.errors import (
    ErrorCode,
    ErrorContext,
    QueueClosedError,
    QueueEmptyError,
    QueueFullError,
    QueueInvariantError,
)


@dataclass
class QueueStats:
    """Statistics for queue operations."""

    size: int
    capacity: int
    total_pushed: int
    total_popped: int
    max_size_reached: int
    closed: bool


class BoundedQueue:
    """
    Thread-safe bounded FIFO queue with blocking push/pop and close().

    Features:
    - One lock guarding slots, head, tail and count
    - Two wait conditions on that lock: "space available" and
      "item available", each woken one waiter at a time
    - Optional timeouts on push and pop
    - Broadcast close that unblocks every waiter

    Args:
        capacity: Maximum number of items the queue can hold
    """

    def __init__(self, capacity: int = 1000) -> None:
        if isinstance(capacity, bool) or not isinstance(capacity, int) or capacity <= 0:
            msg = f"Capacity must be a positive integer, got {capacity!r}"
            raise ValueError(msg)

        self._capacity = capacity

        # Thread synchronization
        self._lock = threading.Lock()
        self._item_available = threading.Condition(self._lock)
        self._space_available = threading.Condition(self._lock)

        # Circular storage
        self._slots: list[Any] = [None] * capacity
        self._head = 0
        self._tail = 0
        self._count = 0
        self._closed = False

        # Statistics
        self._total_pushed = 0
        self._total_popped = 0
        self._max_size_reached = 0

    def push(self, item: Any, timeout: float | None = None) -> bool:
        """
        Add an item at the tail, blocking while the queue is full.

        Args:
            item: Item to add to the queue
            timeout: Maximum time to wait in seconds (None waits forever)

        Returns:
            True if the item was added, False if the timeout expired

        Raises:
            ValueError: If item is None
            QueueClosedError: If the queue is closed, before or while waiting
        """
        if item is None:
            msg = "Cannot add None to queue"
            raise ValueError(msg)

        with self._space_available:
            end_time = None if timeout is None else time.monotonic() + timeout
            while True:
                if self._closed:
                    raise self._closed_error("push")
                if self._count < self._capacity:
                    break
                if end_time is None:
                    self._space_available.wait()
                else:
                    remaining = end_time - time.monotonic()
                    if remaining <= 0:
                        return False
                    self._space_available.wait(remaining)

            self._insert(item)
            self._item_available.notify()
            return True

    def pop(self, timeout: float | None = None) -> Any | None:
        """
        Remove and return the item at the head, blocking while empty.

        Buffered items are still delivered after close(); closure is only
        reported once the queue is empty.

        Args:
            timeout: Maximum time to wait in seconds (None waits forever)

        Returns:
            The oldest item, or None if the timeout expired

        Raises:
            QueueClosedError: If the queue is closed and drained
        """
        with self._item_available:
            end_time = None if timeout is None else time.monotonic() + timeout
            while self._count == 0:
                if self._closed:
                    raise self._closed_error("pop")
                if end_time is None:
                    self._item_available.wait()
                else:
                    remaining = end_time - time.monotonic()
                    if remaining <= 0:
                        return None
                    self._item_available.wait(remaining)

            item = self._remove()
            self._space_available.notify()
            return item

    def push_nowait(self, item: Any) -> None:
        """
        Add an item without blocking.

        Raises:
            ValueError: If item is None
            QueueClosedError: If the queue is closed
            QueueFullError: If the queue is at capacity
        """
        if item is None:
            msg = "Cannot add None to queue"
            raise ValueError(msg)

        with self._lock:
            if self._closed:
                raise self._closed_error("push_nowait")
            if self._count >= self._capacity:
                raise QueueFullError(
                    ErrorCode.QUEUE_FULL,
                    "Queue is full",
                    ErrorContext(
                        operation="push_nowait",
                        additional_data={"capacity": self._capacity},
                    ),
                )
            self._insert(item)
            self._item_available.notify()

    def pop_nowait(self) -> Any:
        """
        Remove and return the head item without blocking.

        Raises:
            QueueClosedError: If the queue is closed and drained
            QueueEmptyError: If the queue is empty but still open
        """
        with self._lock:
            if self._count == 0:
                if self._closed:
                    raise self._closed_error("pop_nowait")
                raise QueueEmptyError(
                    ErrorCode.QUEUE_EMPTY,
                    "Queue is empty",
                    ErrorContext(operation="pop_nowait"),
                )
            item = self._remove()
            self._space_available.notify()
            return item

    def close(self) -> None:
        """
        Close the queue and wake every blocked producer and consumer.

        Idempotent. Items already buffered remain poppable.
        """
        with self._lock:
            self._closed = True
            self._item_available.notify_all()
            self._space_available.notify_all()

    # Internal helpers; callers hold self._lock

    def _insert(self, item: Any) -> None:
        self._slots[self._tail] = item
        self._tail = (self._tail + 1) % self._capacity
        self._count += 1
        self._total_pushed += 1
        self._max_size_reached = max(self._max_size_reached, self._count)
        self._check_invariants("push")

    def _remove(self) -> Any:
        item = self._slots[self._head]
        self._slots[self._head] = None
        self._head = (self._head + 1) % self._capacity
        self._count -= 1
        self._total_popped += 1
        self._check_invariants("pop")
        return item

    def _check_invariants(self, operation: str) -> None:
        if not 0 <= self._count <= self._capacity or (
            (self._head + self._count) % self._capacity != self._tail
        ):
            raise QueueInvariantError(
                ErrorCode.QUEUE_INVARIANT_VIOLATION,
                "Queue bookkeeping is inconsistent",
                ErrorContext(
                    operation=operation,
                    additional_data={
                        "head": self._head,
                        "tail": self._tail,
                        "count": self._count,
                        "capacity": self._capacity,
                    },
                ),
            )

    def _closed_error(self, operation: str) -> QueueClosedError:
        return QueueClosedError(
            ErrorCode.QUEUE_CLOSED,
            "Queue is closed",
            ErrorContext(
                operation=operation,
                additional_data={"size": self._count},
            ),
        )

    # Introspection

    @property
    def capacity(self) -> int:
        """Maximum number of items the queue can hold."""
        return self._capacity

    @property
    def closed(self) -> bool:
        """True once close() has been called."""
        with self._lock:
            return self._closed

    def size(self) -> int:
        """Return the current number of items in the queue."""
        with self._lock:
            return self._count

    def is_empty(self) -> bool:
        """Return True if the queue is empty."""
        with self._lock:
            return self._count == 0

    def is_full(self) -> bool:
        """Return True if the queue is at capacity."""
        with self._lock:
            return self._count >= self._capacity

    def get_stats(self) -> QueueStats:
        """Return current queue statistics."""
        with self._lock:
            return QueueStats(
                size=self._count,
                capacity=self._capacity,
                total_pushed=self._total_pushed,
                total_popped=self._total_popped,
                max_size_reached=self._max_size_reached,
                closed=self._closed,
            )

    def __len__(self) -> int:
        """Return the current number of items in the queue."""
        return self.size()

    def __repr__(self) -> str:
        """Return a string representation of the queue."""
        stats = self.get_stats()
        return (
            f"BoundedQueue(size={stats.size}, capacity={stats.capacity}, "
            f"closed={stats.closed})"
        )
