"""Transform worker and pool for the blurqueue pipeline.

This module provides the TransformWorker class (a threading.Thread subclass)
and TransformWorkerPool. Workers pop work items from the shared bounded
queue and run the image transform on each one until the queue is closed
and drained.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from pathlib import Path
from typing import Any

from blurqueue.core.pipeline.components.transform import ImageTransformer, TransformResult
from blurqueue.core.pipeline.utils import BoundedQueue, ItemFailure, TransformStatistics
from blurqueue.shared.errors import (
    BlurQueueError,
    ErrorCode,
    ErrorContext,
    InfrastructureError,
    ItemProcessingError,
    PipelineEnvironmentError,
    QueueClosedError,
)
from blurqueue.shared.logging import (
    log_operation_error,
    log_operation_start,
    log_operation_success,
)

logger = logging.getLogger(__name__)

FatalErrorHandler = Callable[["TransformWorker", BaseException], None]


class TransformWorker(threading.Thread):
    """Worker thread that transforms work items from the queue.

    Item-level failures are recorded and skipped. Any other exception is
    reported through ``on_fatal`` and ends the worker.

    Args:
        queue: BoundedQueue instance to pop work items from.
        transformer: Shared ImageTransformer.
        stats: TransformStatistics instance for tracking outcomes.
        worker_id: Optional identifier, also used as the thread name.
        on_fatal: Callback invoked with (worker, error) on a fatal error.
    """

    def __init__(  # pylint: disable=too-many-arguments
        self,
        queue: BoundedQueue,
        transformer: ImageTransformer,
        stats: TransformStatistics,
        worker_id: str | None = None,
        on_fatal: FatalErrorHandler | None = None,
    ) -> None:
        self.worker_id = worker_id or f"worker_{id(self)}"
        super().__init__(name=self.worker_id)
        self.queue = queue
        self.transformer = transformer
        self.stats = stats
        self.on_fatal = on_fatal
        self.results: list[TransformResult] = []
        self.error: BaseException | None = None
        self._stop_event = threading.Event()

    def run(self) -> None:
        """Main worker loop: pop, transform, repeat until closed and drained."""
        try:
            while not self._stop_event.is_set():
                try:
                    work_item = self.queue.pop()
                except QueueClosedError:
                    logger.debug("Worker %s: queue closed and drained", self.worker_id)
                    break
                self._process_item(work_item)
        # pylint: disable-next=broad-exception-caught
        except Exception as e:  # noqa: BLE001
            self.error = e
            if isinstance(e, BlurQueueError):
                log_operation_error(logger, e, context={"worker_id": self.worker_id})
            else:
                logger.exception("Worker %s unexpected error", self.worker_id)
            if self.on_fatal is not None:
                self.on_fatal(self, e)

    def _process_item(self, work_item: Path) -> None:
        """Transform one item and record its outcome.

        Raises:
            PipelineEnvironmentError: If the output root became unusable.
        """
        log_operation_start(
            logger,
            "process_item",
            {"input_path": str(work_item), "worker_id": self.worker_id},
        )
        start_time = time.perf_counter()
        try:
            result = self.transformer.process(work_item)
        except PipelineEnvironmentError:
            raise
        except ItemProcessingError as e:
            self.stats.record_failure(
                ItemFailure(
                    input_path=Path(work_item),
                    error_code=e.code.value,
                    reason=e.message,
                    transient=e.transient,
                ),
            )
            log_operation_error(
                logger,
                e,
                context={
                    "worker_id": self.worker_id,
                    "duration_ms": (time.perf_counter() - start_time) * 1000,
                },
                level=logging.WARNING,
            )
            return

        self.results.append(result)
        self.stats.record_success()
        log_operation_success(
            logger,
            "process_item",
            result.duration_ms,
            {"output_path": str(result.output_path), "worker_id": self.worker_id},
        )

    def stop(self) -> None:
        """Signal the worker to stop after its current item."""
        self._stop_event.set()


class TransformWorkerPool:
    """Pool of TransformWorker threads sharing one queue.

    The first fatal error raised by any worker is kept in ``fatal_error``;
    it stops every worker and closes the queue so blocked producers and
    consumers wake up.

    Args:
        num_workers: Number of worker threads to create.
        queue: BoundedQueue instance to pop work items from.
        transformer: Shared ImageTransformer.
        stats: TransformStatistics instance for tracking outcomes.
    """

    def __init__(
        self,
        num_workers: int,
        queue: BoundedQueue,
        transformer: ImageTransformer,
        stats: TransformStatistics,
    ) -> None:
        if num_workers <= 0:
            msg = f"num_workers must be positive, got {num_workers}"
            raise ValueError(msg)
        self.num_workers = num_workers
        self.queue = queue
        self.transformer = transformer
        self.stats = stats
        self.workers: list[TransformWorker] = []
        self._started = False
        self._fatal_lock = threading.Lock()
        self._fatal_error: BaseException | None = None

    def start(self) -> None:
        """Start all worker threads."""
        if self._started:
            msg = "Worker pool has already been started"
            raise RuntimeError(msg)

        for i in range(self.num_workers):
            worker = TransformWorker(
                queue=self.queue,
                transformer=self.transformer,
                stats=self.stats,
                worker_id=f"consumer_{i}",
                on_fatal=self._handle_fatal,
            )
            self.workers.append(worker)
            worker.start()

        self._started = True
        logger.info("Started %d transform workers", self.num_workers)

    def join(self, timeout: float | None = None) -> None:
        """Wait for all worker threads to complete.

        Args:
            timeout: Maximum time to wait for each thread.
        """
        if not self._started:
            msg = "Worker pool has not been started"
            raise RuntimeError(msg)

        for worker in self.workers:
            worker.join(timeout=timeout)

    def stop(self) -> None:
        """Stop all workers and close the queue to wake blocked ones."""
        for worker in self.workers:
            worker.stop()
        self.queue.close()

    def is_alive(self) -> bool:
        """Check if any worker threads are still alive."""
        return any(worker.is_alive() for worker in self.workers)

    def get_worker_count(self) -> int:
        """Get the number of worker threads."""
        return len(self.workers)

    def get_alive_worker_count(self) -> int:
        """Get the number of alive worker threads."""
        return sum(1 for worker in self.workers if worker.is_alive())

    @property
    def fatal_error(self) -> BaseException | None:
        """First fatal error reported by any worker, if any."""
        with self._fatal_lock:
            return self._fatal_error

    def results(self) -> list[TransformResult]:
        """Collect the successful results of every worker."""
        collected: list[TransformResult] = []
        for worker in self.workers:
            collected.extend(worker.results)
        return collected

    def get_pool_status(self) -> dict[str, Any]:
        """Get status information about the worker pool."""
        return {
            "num_workers": self.num_workers,
            "started": self._started,
            "alive_workers": self.get_alive_worker_count(),
            "queue_size": self.queue.size(),
            "items_processed": self.stats.items_processed,
            "successes": self.stats.successes,
            "failures": self.stats.failures,
            "fatal_error": str(self.fatal_error) if self.fatal_error else None,
        }

    def _handle_fatal(self, worker: TransformWorker, error: BaseException) -> None:
        with self._fatal_lock:
            if self._fatal_error is None:
                if isinstance(error, BlurQueueError):
                    self._fatal_error = error
                else:
                    self._fatal_error = InfrastructureError(
                        ErrorCode.CONSUMER_ERROR,
                        f"Worker {worker.worker_id} failed unexpectedly: {error}",
                        ErrorContext(
                            operation="transform_worker",
                            additional_data={"worker_id": worker.worker_id},
                        ),
                        original_error=error if isinstance(error, Exception) else None,
                    )
        self.stop()
