"""Pipeline component lifecycle management.

This module provides functions for managing the lifecycle of pipeline components:
- Starting consumers, then producers
- Waiting for producers and consumers to finish
- Closing the queue to signal end of input
- Graceful and forced shutdown procedures
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from blurqueue.core.pipeline.components import TransformWorkerPool, WorkItemProducer
from blurqueue.core.pipeline.utils import (
    BoundedQueue,
    ProducerStatistics,
    TransformStatistics,
)
from blurqueue.shared.constants import Timeout
from blurqueue.shared.errors import ErrorCode, ErrorContext, InfrastructureError
from blurqueue.shared.logging import log_operation_error, log_operation_success

logger = logging.getLogger(__name__)


def start_pipeline_components(
    producers: Sequence[WorkItemProducer],
    consumer_pool: TransformWorkerPool,
) -> None:
    """Start the consumer pool, then every producer.

    Args:
        producers: Producer threads, one per work item shard.
        consumer_pool: TransformWorkerPool instance.

    Raises:
        InfrastructureError: If a thread cannot be started.
    """
    context = ErrorContext(
        operation="start_pipeline_components",
        additional_data={
            "num_producers": len(producers),
            "num_consumers": consumer_pool.num_workers,
        },
    )

    try:
        logger.info("Starting consumer pool with %s workers...", consumer_pool.num_workers)
        consumer_pool.start()

        logger.info("Starting %s producers...", len(producers))
        for producer in producers:
            producer.start()

        log_operation_success(
            logger=logger,
            operation="start_pipeline_components",
            duration_ms=0.0,
            context=context.safe_dict(),
        )

    except RuntimeError as e:
        infrastructure_error = InfrastructureError(
            ErrorCode.PIPELINE_INITIALIZATION_ERROR,
            f"Failed to start pipeline components: {e}",
            context,
            original_error=e,
        )
        log_operation_error(
            logger=logger,
            error=infrastructure_error,
            operation="start_pipeline_components",
        )
        raise infrastructure_error from e


def wait_for_producers_completion(
    producers: Sequence[WorkItemProducer],
    producer_stats: ProducerStatistics,
) -> None:
    """Join every producer and log how many items were pushed.

    Args:
        producers: Producer threads.
        producer_stats: ProducerStatistics instance.
    """
    logger.info("Waiting for producers to complete...")
    for producer in producers:
        producer.join()
    logger.info(
        "Producers completed. Pushed %s of %s items.",
        producer_stats.items_pushed,
        producer_stats.items_discovered,
    )


def signal_consumer_shutdown(queue: BoundedQueue) -> None:
    """Close the queue so consumers exit once it is drained.

    Args:
        queue: BoundedQueue shared by producers and consumers.
    """
    logger.info("Closing work queue (%s items still buffered)...", queue.size())
    queue.close()


def wait_for_consumers_completion(
    consumer_pool: TransformWorkerPool,
    transform_stats: TransformStatistics,
) -> None:
    """Join the consumer pool and log results.

    Args:
        consumer_pool: TransformWorkerPool instance.
        transform_stats: TransformStatistics instance.
    """
    logger.info("Waiting for consumer pool to complete...")
    consumer_pool.join()
    logger.info(
        "Consumer pool completed. Processed %s items (%s failed).",
        transform_stats.items_processed,
        transform_stats.failures,
    )


def graceful_shutdown(
    producers: Sequence[WorkItemProducer],
    consumer_pool: TransformWorkerPool,
    queue: BoundedQueue,
) -> None:
    """Ask every component to stop and wake any blocked thread.

    Args:
        producers: Producer threads.
        consumer_pool: TransformWorkerPool instance.
        queue: BoundedQueue shared by producers and consumers.
    """
    context = ErrorContext(operation="graceful_shutdown")

    try:
        logger.info("Attempting graceful shutdown...")
        for producer in producers:
            producer.stop()
        consumer_pool.stop()
        queue.close()

        log_operation_success(
            logger=logger,
            operation="graceful_shutdown",
            duration_ms=0.0,
            context=context.safe_dict(),
        )

    except Exception as e:  # noqa: BLE001  # pylint: disable=broad-exception-caught
        infrastructure_error = InfrastructureError(
            ErrorCode.PIPELINE_SHUTDOWN_ERROR,
            f"Graceful shutdown failed: {e}",
            context,
            original_error=e,
        )
        log_operation_error(
            logger=logger,
            error=infrastructure_error,
            operation="graceful_shutdown",
        )


def force_shutdown_if_needed(
    producers: Sequence[WorkItemProducer],
    consumer_pool: TransformWorkerPool,
    queue: BoundedQueue,
    join_timeout: float = Timeout.FORCED_SHUTDOWN_JOIN,
) -> None:
    """Stop and join components that are still alive.

    Args:
        producers: Producer threads.
        consumer_pool: TransformWorkerPool instance.
        queue: BoundedQueue shared by producers and consumers.
        join_timeout: Seconds to wait for each remaining thread.
    """
    context = ErrorContext(operation="force_shutdown_if_needed")

    try:
        alive_producers = [producer for producer in producers if producer.is_alive()]
        if alive_producers:
            logger.warning("%s producers still alive, forcing stop...", len(alive_producers))
            for producer in alive_producers:
                producer.stop()

        pool_alive = consumer_pool.is_alive()
        if pool_alive:
            logger.warning("Consumer pool still alive, forcing stop...")
            consumer_pool.stop()

        if alive_producers or pool_alive:
            queue.close()
            for producer in alive_producers:
                producer.join(timeout=join_timeout)
            consumer_pool.join(timeout=join_timeout)

        log_operation_success(
            logger=logger,
            operation="force_shutdown_if_needed",
            duration_ms=0.0,
            context=context.safe_dict(),
        )

    except Exception as e:  # noqa: BLE001  # pylint: disable=broad-exception-caught
        infrastructure_error = InfrastructureError(
            ErrorCode.PIPELINE_SHUTDOWN_ERROR,
            f"Force shutdown failed: {e}",
            context,
            original_error=e,
        )
        log_operation_error(
            logger=logger,
            error=infrastructure_error,
            operation="force_shutdown_if_needed",
        )
