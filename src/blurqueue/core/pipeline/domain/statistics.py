"""Pipeline statistics formatting and aggregation.

This module provides utilities for formatting and aggregating pipeline statistics:
- format_statistics(): Format statistics into human-readable report
- StatisticsAggregator: Aggregate and export statistics as dict or JSON
"""

from __future__ import annotations

import json
from typing import Any

from blurqueue.core.pipeline.utils import (
    ProducerStatistics,
    QueueStats,
    TransformStatistics,
)


def _rate(part: int, total: int) -> float:
    return (part / total * 100) if total > 0 else 0.0


def format_statistics(
    producer_stats: ProducerStatistics,
    queue_stats: QueueStats,
    transform_stats: TransformStatistics,
    total_duration: float,
) -> str:
    """Format pipeline statistics into a human-readable report.

    Args:
        producer_stats: ProducerStatistics instance with discovery metrics.
        queue_stats: Snapshot of the work queue statistics.
        transform_stats: TransformStatistics instance with consumer metrics.
        total_duration: Total pipeline execution time in seconds.

    Returns:
        A formatted multi-line string containing all statistics.
    """
    total_processed = transform_stats.items_processed
    success_rate = _rate(transform_stats.successes, total_processed)
    failure_rate = _rate(transform_stats.failures, total_processed)

    lines = [
        "",
        "=" * 60,
        "                    PIPELINE STATISTICS",
        "=" * 60,
        "",
        "Timing:",
        f"  - Total pipeline time:  {total_duration:.2f}s",
        "",
        "Producers:",
        f"  - Items discovered:     {producer_stats.items_discovered:,}",
        f"  - Items pushed:         {producer_stats.items_pushed:,}",
        "",
        "Queue:",
        f"  - Capacity:             {queue_stats.capacity:,}",
        f"  - Items pushed:         {queue_stats.total_pushed:,}",
        f"  - Items popped:         {queue_stats.total_popped:,}",
        f"  - Peak size:            {queue_stats.max_size_reached:,}",
        "",
        "Consumers:",
        f"  - Items processed:      {transform_stats.items_processed:,}",
        f"  - Successful:           {transform_stats.successes:,} ({success_rate:.2f}%)",
        f"  - Failed:               {transform_stats.failures:,} ({failure_rate:.2f}%)",
        f"  - I/O retries:          {transform_stats.retries:,}",
        "",
        "=" * 60,
        "",
    ]

    return "\n".join(lines)


class StatisticsAggregator:
    """Aggregates and exports pipeline statistics in various formats."""

    def __init__(
        self,
        producer_stats: ProducerStatistics,
        queue_stats: QueueStats,
        transform_stats: TransformStatistics,
        total_duration: float,
    ) -> None:
        self.producer_stats = producer_stats
        self.queue_stats = queue_stats
        self.transform_stats = transform_stats
        self.total_duration = total_duration

    def aggregate(self) -> dict[str, Any]:
        """Aggregate all statistics into a structured dictionary.

        Returns:
            Dictionary containing all pipeline statistics organized by category.
        """
        total_processed = self.transform_stats.items_processed
        return {
            "timing": {
                "total_duration": self.total_duration,
                "total_duration_formatted": f"{self.total_duration:.2f}s",
            },
            "producers": {
                "items_discovered": self.producer_stats.items_discovered,
                "items_pushed": self.producer_stats.items_pushed,
            },
            "queue": {
                "capacity": self.queue_stats.capacity,
                "total_pushed": self.queue_stats.total_pushed,
                "total_popped": self.queue_stats.total_popped,
                "max_size_reached": self.queue_stats.max_size_reached,
                "closed": self.queue_stats.closed,
            },
            "consumers": {
                "items_processed": total_processed,
                "successes": self.transform_stats.successes,
                "failures": self.transform_stats.failures,
                "retries": self.transform_stats.retries,
                "success_rate": _rate(self.transform_stats.successes, total_processed),
                "failure_rate": _rate(self.transform_stats.failures, total_processed),
            },
            "failed_items": [
                {
                    "input_path": str(failure.input_path),
                    "error_code": failure.error_code,
                    "reason": failure.reason,
                    "transient": failure.transient,
                }
                for failure in self.transform_stats.failed_items()
            ],
        }

    def to_json(self, indent: int = 2) -> str:
        """Export statistics as a JSON string."""
        return json.dumps(self.aggregate(), indent=indent, ensure_ascii=False)

    def to_formatted_string(self) -> str:
        """Export statistics as the human-readable report."""
        return format_statistics(
            producer_stats=self.producer_stats,
            queue_stats=self.queue_stats,
            transform_stats=self.transform_stats,
            total_duration=self.total_duration,
        )
