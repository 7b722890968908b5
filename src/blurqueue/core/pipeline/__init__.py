"""Producer/consumer pipeline for blurqueue.

This package contains the work pipeline:
- run_pipeline: Main orchestration function for running the complete pipeline
- BoundedQueue: Thread-safe circular buffer providing backpressure
- Statistics classes: For collecting pipeline metrics
- WorkItemProducer: Pushes discovered images onto the queue
- TransformWorker: Blurs images popped from the queue

Recommended imports:
    from blurqueue.core.pipeline import run_pipeline
    from blurqueue.core.pipeline.domain import PipelineFactory
    from blurqueue.core.pipeline.components import WorkItemProducer, TransformWorkerPool
"""

from blurqueue.core.pipeline.domain.orchestrator import PipelineResult, run_pipeline

__all__ = ["PipelineResult", "run_pipeline"]
