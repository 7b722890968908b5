"""Pipeline orchestration and component factory.

This module provides factory classes and orchestration functions for the pipeline:
- PipelineFactory: Creates and wires up all pipeline components
- run_pipeline: Main orchestration function for running the complete pipeline
- run_pipeline_from_settings: Same, driven by a loaded Settings object
"""

from __future__ import annotations

import logging
import time
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any

from blurqueue.core.pipeline.components import (
    ImageTransformer,
    TransformResult,
    TransformWorkerPool,
    WorkItemProducer,
    partition_work_items,
)
from blurqueue.core.pipeline.domain.environment import discover_work_items, prepare_environment
from blurqueue.core.pipeline.domain.lifecycle import (
    force_shutdown_if_needed,
    graceful_shutdown,
    signal_consumer_shutdown,
    start_pipeline_components,
    wait_for_consumers_completion,
    wait_for_producers_completion,
)
from blurqueue.core.pipeline.domain.statistics import StatisticsAggregator
from blurqueue.core.pipeline.utils import (
    BoundedQueue,
    ItemFailure,
    ProducerStatistics,
    QueueStats,
    TransformStatistics,
)
from blurqueue.shared.constants import FilterConfig, PipelineDefaults, RetryConfig
from blurqueue.shared.errors import (
    BlurQueueError,
    ErrorCode,
    ErrorContext,
    InfrastructureError,
    PipelineEnvironmentError,
    create_config_error,
)
from blurqueue.shared.logging import log_operation_error, log_operation_success

if TYPE_CHECKING:
    from blurqueue.config.models.settings import Settings

logger = logging.getLogger(__name__)


@dataclass
class PipelineResult:
    """Summary of one pipeline run.

    Item-level failures are listed in ``failures`` and never affect
    ``exit_code``; only ``fatal_error`` does.
    """

    items_discovered: int
    items_pushed: int
    items_processed: int
    succeeded: int
    failed: int
    retries: int
    queue_stats: QueueStats
    total_duration: float
    failures: list[ItemFailure] = field(default_factory=list)
    results: list[TransformResult] = field(default_factory=list)
    fatal_error: BlurQueueError | None = None
    statistics: dict[str, Any] = field(default_factory=dict)

    @property
    def exit_code(self) -> int:
        """Process exit status: 0 unless a fatal error occurred."""
        return 0 if self.fatal_error is None else 1

    def to_dict(self) -> dict[str, Any]:
        """Convert the result to a JSON-serializable dictionary."""
        return {
            "exit_code": self.exit_code,
            "items_discovered": self.items_discovered,
            "items_pushed": self.items_pushed,
            "items_processed": self.items_processed,
            "succeeded": self.succeeded,
            "failed": self.failed,
            "retries": self.retries,
            "total_duration": self.total_duration,
            "queue": {
                "capacity": self.queue_stats.capacity,
                "total_pushed": self.queue_stats.total_pushed,
                "total_popped": self.queue_stats.total_popped,
                "max_size_reached": self.queue_stats.max_size_reached,
                "closed": self.queue_stats.closed,
            },
            "failures": [
                {
                    "input_path": str(failure.input_path),
                    "error_code": failure.error_code,
                    "reason": failure.reason,
                    "transient": failure.transient,
                }
                for failure in self.failures
            ],
            "outputs": [str(result.output_path) for result in self.results],
            "fatal_error": self.fatal_error.to_dict() if self.fatal_error else None,
        }


@dataclass
class PipelineComponents:
    """Wired-up components for a single run."""

    queue: BoundedQueue
    producer_stats: ProducerStatistics
    transform_stats: TransformStatistics
    transformer: ImageTransformer
    producers: list[WorkItemProducer]
    consumer_pool: TransformWorkerPool


def _require_positive(name: str, value: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise create_config_error(
            f"{name} must be a positive integer, got {value!r}",
            config_key=name,
            operation="create_pipeline_components",
        )


def _require_retry_limit(value: int) -> None:
    limit = RetryConfig.MAX_IO_RETRIES_LIMIT
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= limit:
        raise create_config_error(
            f"max_io_retries must be between 0 and {limit}, got {value!r}",
            config_key="max_io_retries",
            operation="create_pipeline_components",
        )


class PipelineFactory:
    """Factory for creating and initializing pipeline components."""

    @staticmethod
    def create_components(  # pylint: disable=too-many-arguments
        work_items: Sequence[Path],
        input_root: Path,
        output_root: Path,
        *,
        num_producers: int,
        num_consumers: int,
        queue_capacity: int,
        filter_size: int,
        max_io_retries: int,
        retry_delay_seconds: float,
        output_format: str | None,
    ) -> PipelineComponents:
        """Create and wire up all pipeline components without starting them.

        Work items are dealt round-robin across the producers so each item
        is pushed exactly once.

        Raises:
            ApplicationError: If a pool size or the capacity is not positive,
                or max_io_retries is outside 0..1.
            FilterConfigurationError: If filter_size is not an odd positive integer.
        """
        _require_positive("num_producers", num_producers)
        _require_positive("num_consumers", num_consumers)
        _require_positive("queue_capacity", queue_capacity)
        _require_retry_limit(max_io_retries)

        queue = BoundedQueue(capacity=queue_capacity)
        producer_stats = ProducerStatistics()
        transform_stats = TransformStatistics()
        producer_stats.add_discovered(len(work_items))

        transformer = ImageTransformer(
            input_root=input_root,
            output_root=output_root,
            filter_size=filter_size,
            max_io_retries=max_io_retries,
            retry_delay_seconds=retry_delay_seconds,
            output_format=output_format,
            stats=transform_stats,
        )

        producers = [
            WorkItemProducer(
                work_items=shard,
                queue=queue,
                stats=producer_stats,
                producer_id=f"producer_{index}",
            )
            for index, shard in enumerate(partition_work_items(work_items, num_producers))
        ]

        consumer_pool = TransformWorkerPool(
            num_workers=num_consumers,
            queue=queue,
            transformer=transformer,
            stats=transform_stats,
        )

        return PipelineComponents(
            queue=queue,
            producer_stats=producer_stats,
            transform_stats=transform_stats,
            transformer=transformer,
            producers=producers,
            consumer_pool=consumer_pool,
        )


def run_pipeline(  # pylint: disable=too-many-arguments,too-many-locals
    input_root: str | Path = PipelineDefaults.INPUT_ROOT,
    output_root: str | Path = PipelineDefaults.OUTPUT_ROOT,
    *,
    num_producers: int = PipelineDefaults.NUM_PRODUCERS,
    num_consumers: int = PipelineDefaults.NUM_CONSUMERS,
    queue_capacity: int = PipelineDefaults.QUEUE_CAPACITY,
    filter_size: int = FilterConfig.DEFAULT_SIZE,
    extensions: Sequence[str] | None = None,
    max_io_retries: int = RetryConfig.DEFAULT_MAX_IO_RETRIES,
    retry_delay_seconds: float = RetryConfig.DEFAULT_RETRY_DELAY_SECONDS,
    output_format: str | None = None,
) -> PipelineResult:
    """Run the complete blur pipeline.

    This function orchestrates the entire pipeline:
    1. Validate the roots and create the output root
    2. Discover work items and split them across producers
    3. Start consumers, then producers
    4. Join producers, close the queue, join consumers

    Args:
        input_root: Directory holding the images to blur.
        output_root: Directory the blurred images are written to.
        num_producers: Number of producer threads.
        num_consumers: Number of consumer threads.
        queue_capacity: Capacity of the bounded work queue.
        filter_size: Box filter window size.
        extensions: Optional file suffixes to restrict discovery to.
        max_io_retries: Extra attempt (0 or 1) for transient decode/encode failures.
        retry_delay_seconds: Pause before a retry.
        output_format: Explicit Pillow output format, or None to infer it.

    Returns:
        PipelineResult for the run. A mid-run environment failure is
        reported through ``fatal_error`` after all threads have stopped.

    Raises:
        PipelineEnvironmentError: If the roots are unusable at startup.
        ApplicationError: If the pool sizes or capacity are invalid.
        FilterConfigurationError: If filter_size is invalid.
        InfrastructureError: If a producer or consumer failed unexpectedly.
        QueueInvariantError: If the queue bookkeeping became inconsistent.
    """
    context = ErrorContext(
        operation="run_pipeline",
        additional_data={
            "input_root": str(input_root),
            "output_root": str(output_root),
            "num_producers": num_producers,
            "num_consumers": num_consumers,
            "queue_capacity": queue_capacity,
            "filter_size": filter_size,
        },
    )

    logger.info(
        "Starting pipeline: input=%s, output=%s, producers=%s, consumers=%s, capacity=%s",
        input_root,
        output_root,
        num_producers,
        num_consumers,
        queue_capacity,
    )

    start_time = time.perf_counter()

    input_path, output_path = prepare_environment(input_root, output_root)
    work_items = discover_work_items(input_path, extensions)
    components = PipelineFactory.create_components(
        work_items,
        input_path,
        output_path,
        num_producers=num_producers,
        num_consumers=num_consumers,
        queue_capacity=queue_capacity,
        filter_size=filter_size,
        max_io_retries=max_io_retries,
        retry_delay_seconds=retry_delay_seconds,
        output_format=output_format,
    )

    try:
        _execute_pipeline(components)
    except KeyboardInterrupt:
        logger.warning("Interrupted, shutting down pipeline...")
        graceful_shutdown(components.producers, components.consumer_pool, components.queue)
        raise
    finally:
        force_shutdown_if_needed(
            components.producers,
            components.consumer_pool,
            components.queue,
        )

    fatal_error = _resolve_fatal_error(components, context)
    total_duration = time.perf_counter() - start_time
    return _collect_results(components, total_duration, fatal_error, context)


def run_pipeline_from_settings(settings: Settings) -> PipelineResult:
    """Run the pipeline with values from a loaded Settings object."""
    pipeline = settings.pipeline
    return run_pipeline(
        pipeline.input_root,
        pipeline.output_root,
        num_producers=pipeline.num_producers,
        num_consumers=pipeline.num_consumers,
        queue_capacity=pipeline.queue_capacity,
        filter_size=settings.filter.filter_size,
        extensions=pipeline.extensions,
        max_io_retries=pipeline.max_io_retries,
        retry_delay_seconds=pipeline.retry_delay_seconds,
        output_format=pipeline.output_format,
    )


def _execute_pipeline(components: PipelineComponents) -> None:
    """Execute pipeline stages."""
    start_pipeline_components(components.producers, components.consumer_pool)
    wait_for_producers_completion(components.producers, components.producer_stats)
    signal_consumer_shutdown(components.queue)
    wait_for_consumers_completion(components.consumer_pool, components.transform_stats)


def _resolve_fatal_error(
    components: PipelineComponents,
    context: ErrorContext,
) -> PipelineEnvironmentError | None:
    """Return an environment failure, re-raise anything else that was fatal."""
    fatal_error = components.consumer_pool.fatal_error
    if fatal_error is not None:
        if isinstance(fatal_error, PipelineEnvironmentError):
            log_operation_error(logger=logger, error=fatal_error, operation="run_pipeline")
            return fatal_error
        raise fatal_error

    for producer in components.producers:
        if producer.error is None:
            continue
        original = producer.error if isinstance(producer.error, Exception) else None
        producer_error = InfrastructureError(
            ErrorCode.PRODUCER_ERROR,
            f"Producer {producer.producer_id} failed: {producer.error}",
            context,
            original_error=original,
        )
        log_operation_error(logger=logger, error=producer_error, operation="run_pipeline")
        raise producer_error from producer.error

    return None


def _collect_results(
    components: PipelineComponents,
    total_duration: float,
    fatal_error: PipelineEnvironmentError | None,
    context: ErrorContext,
) -> PipelineResult:
    """Build the run summary and log statistics."""
    queue_stats = components.queue.get_stats()
    aggregator = StatisticsAggregator(
        producer_stats=components.producer_stats,
        queue_stats=queue_stats,
        transform_stats=components.transform_stats,
        total_duration=total_duration,
    )
    logger.info(aggregator.to_formatted_string())

    transform_stats = components.transform_stats
    result = PipelineResult(
        items_discovered=components.producer_stats.items_discovered,
        items_pushed=components.producer_stats.items_pushed,
        items_processed=transform_stats.items_processed,
        succeeded=transform_stats.successes,
        failed=transform_stats.failures,
        retries=transform_stats.retries,
        queue_stats=queue_stats,
        total_duration=total_duration,
        failures=transform_stats.failed_items(),
        results=components.consumer_pool.results(),
        fatal_error=fatal_error,
        statistics=aggregator.aggregate(),
    )

    if fatal_error is None:
        logger.info("Pipeline completed successfully!")
        log_operation_success(
            logger=logger,
            operation="run_pipeline",
            duration_ms=total_duration * 1000,
            result_info={
                "succeeded": result.succeeded,
                "failed": result.failed,
            },
            context=context,
        )
    else:
        logger.error("Pipeline aborted: %s", fatal_error.message)

    return result
