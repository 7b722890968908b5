"""Pipeline components: producer, transform workers and the per-item transform."""

from __future__ import annotations

from .consumer import TransformWorker, TransformWorkerPool
from .producer import WorkItemProducer, partition_work_items
from .transform import ImageTransformer, TransformResult, derive_output_path

__all__ = [
    "ImageTransformer",
    "TransformResult",
    "TransformWorker",
    "TransformWorkerPool",
    "WorkItemProducer",
    "derive_output_path",
    "partition_work_items",
]
