"""
blurqueue - Bounded-queue image box-blur pipeline

Producer threads feed image paths through a fixed-capacity circular
queue to a pool of consumer threads, which box-blur each image and write
it to an output directory.
"""

__version__ = "0.1.0"

from .core.pipeline import PipelineResult, run_pipeline
from .core.pipeline.utils import BoundedQueue

__all__ = [
    "BoundedQueue",
    "PipelineResult",
    "run_pipeline",
]
