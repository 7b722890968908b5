"""Pipeline utilities package.

This package provides core utilities for the work pipeline:
- BoundedQueue: Thread-safe circular buffer with backpressure and close()
- Statistics classes: For collecting pipeline metrics
"""

from __future__ import annotations

from blurqueue.core.pipeline.utils.bounded_queue import BoundedQueue, QueueStats
from blurqueue.core.pipeline.utils.statistics import (
    ItemFailure,
    ProducerStatistics,
    TransformStatistics,
)

__all__ = [
    "BoundedQueue",
    "ItemFailure",
    "ProducerStatistics",
    "QueueStats",
    "TransformStatistics",
]
