"""Tests for pipeline lifecycle helpers."""

from __future__ import annotations

from pathlib import Path

import pytest

from blurqueue.core.pipeline.components import TransformWorkerPool, WorkItemProducer
from blurqueue.core.pipeline.domain import (
    force_shutdown_if_needed,
    graceful_shutdown,
    signal_consumer_shutdown,
    start_pipeline_components,
)
from blurqueue.core.pipeline.utils import BoundedQueue, ProducerStatistics, TransformStatistics
from blurqueue.shared.errors import ErrorCode, InfrastructureError

JOIN_TIMEOUT = 10.0


class IdleTransformer:
    """Transformer stand-in that never sees an item in these tests."""

    def process(self, input_path: Path):
        raise AssertionError(f"unexpected item {input_path}")


class TestLifecycle:
    """Test cases for start and shutdown helpers."""

    def setup_method(self) -> None:
        """Set up test fixtures."""
        self.queue = BoundedQueue(capacity=1)
        self.pool = TransformWorkerPool(2, self.queue, IdleTransformer(), TransformStatistics())

    def test_start_failure_is_wrapped(self) -> None:
        """A component that cannot start raises an initialization error."""
        self.pool.start()
        try:
            with pytest.raises(InfrastructureError) as exc_info:
                start_pipeline_components([], self.pool)
            assert exc_info.value.code == ErrorCode.PIPELINE_INITIALIZATION_ERROR
        finally:
            self.pool.stop()
            self.pool.join(timeout=JOIN_TIMEOUT)

    def test_signal_consumer_shutdown_closes_queue(self) -> None:
        """Closing the queue lets idle consumers exit."""
        self.pool.start()

        signal_consumer_shutdown(self.queue)
        self.pool.join(timeout=JOIN_TIMEOUT)

        assert self.queue.closed
        assert not self.pool.is_alive()

    def test_graceful_shutdown_wakes_blocked_producer(self) -> None:
        """A producer blocked on a full queue is released."""
        # Given: the queue is full and nobody consumes
        producer = WorkItemProducer(
            [Path("a.png"), Path("b.png")],
            self.queue,
            ProducerStatistics(),
        )
        producer.start()
        producer.join(timeout=0.2)
        assert producer.is_alive()

        # When
        graceful_shutdown([producer], self.pool, self.queue)
        producer.join(timeout=JOIN_TIMEOUT)

        # Then
        assert not producer.is_alive()
        assert producer.pushed == 1
        assert self.queue.closed

    def test_force_shutdown_joins_live_components(self) -> None:
        """Live consumers are stopped and joined."""
        self.pool.start()
        assert self.pool.is_alive()

        force_shutdown_if_needed([], self.pool, self.queue, join_timeout=JOIN_TIMEOUT)

        assert not self.pool.is_alive()
        assert self.queue.closed

    def test_force_shutdown_is_noop_when_finished(self) -> None:
        """Nothing is closed when every thread already exited."""
        force_shutdown_if_needed([], self.pool, self.queue)

        assert not self.queue.closed

    def test_shutdown_errors_are_logged_not_raised(self, mocker) -> None:
        """Failures while shutting down never mask the original outcome."""
        mocker.patch.object(self.pool, "stop", side_effect=RuntimeError("stuck"))
        log_error = mocker.patch("blurqueue.core.pipeline.domain.lifecycle.log_operation_error")

        graceful_shutdown([], self.pool, self.queue)

        log_error.assert_called_once()
        error = log_error.call_args.kwargs["error"]
        assert error.code == ErrorCode.PIPELINE_SHUTDOWN_ERROR
