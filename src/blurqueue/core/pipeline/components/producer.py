"""Work item producer for the blurqueue pipeline.

This module provides the WorkItemProducer thread, which pushes its share
of the discovered work items onto the bounded queue, blocking whenever the
queue is full.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Sequence
from pathlib import Path

from blurqueue.core.pipeline.utils import BoundedQueue, ProducerStatistics
from blurqueue.shared.errors import QueueClosedError

logger = logging.getLogger(__name__)


def partition_work_items(items: Sequence[Path], num_shards: int) -> list[list[Path]]:
    """Deal work items round-robin into ``num_shards`` disjoint shards.

    Every item lands in exactly one shard, so producers fed from different
    shards never push duplicates. Relative order is kept within a shard.

    Raises:
        ValueError: If num_shards is not positive.
    """
    if num_shards <= 0:
        msg = f"num_shards must be positive, got {num_shards}"
        raise ValueError(msg)
    return [list(items[index::num_shards]) for index in range(num_shards)]


class WorkItemProducer(threading.Thread):
    """Producer thread feeding work items into the bounded queue.

    Args:
        work_items: Items this producer is responsible for, in push order.
        queue: BoundedQueue shared with the consumers.
        stats: ProducerStatistics shared by all producers.
        producer_id: Optional identifier, also used as the thread name.
    """

    def __init__(
        self,
        work_items: Sequence[Path],
        queue: BoundedQueue,
        stats: ProducerStatistics,
        producer_id: str | None = None,
    ) -> None:
        self.producer_id = producer_id or f"producer_{id(self)}"
        super().__init__(name=self.producer_id)
        self.work_items = list(work_items)
        self.queue = queue
        self.stats = stats
        self.pushed = 0
        self.error: BaseException | None = None
        self._stop_event = threading.Event()

    def run(self) -> None:
        """Push every work item, stopping early if the queue closes."""
        try:
            for item in self.work_items:
                if self._stop_event.is_set():
                    logger.info("Producer %s stopped after %d items", self.producer_id, self.pushed)
                    break
                try:
                    self.queue.push(item)
                except QueueClosedError:
                    logger.info(
                        "Producer %s: queue closed, %d of %d items pushed",
                        self.producer_id,
                        self.pushed,
                        len(self.work_items),
                    )
                    break
                self.pushed += 1
                self.stats.increment_items_pushed()
                logger.debug(
                    "Producer %s - produced: %s - queue size: %d",
                    self.producer_id,
                    item,
                    self.queue.size(),
                )
        # pylint: disable-next=broad-exception-caught
        except Exception as e:  # noqa: BLE001
            # Re-raised by the orchestrator after join
            self.error = e
            logger.exception("Producer %s failed", self.producer_id)
            self.queue.close()

    def stop(self) -> None:
        """Ask the producer to stop before its next push."""
        self._stop_event.set()
