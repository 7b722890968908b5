"""Pipeline domain logic package.

This package contains domain-specific logic for the pipeline:
- environment: Root directory checks and work item discovery
- lifecycle: Component lifecycle management functions
- orchestrator: Pipeline component factory and orchestration
- statistics: Statistics formatting and aggregation
"""

from __future__ import annotations

from blurqueue.core.pipeline.domain.environment import (
    discover_work_items,
    prepare_environment,
)
from blurqueue.core.pipeline.domain.lifecycle import (
    force_shutdown_if_needed,
    graceful_shutdown,
    signal_consumer_shutdown,
    start_pipeline_components,
    wait_for_consumers_completion,
    wait_for_producers_completion,
)
from blurqueue.core.pipeline.domain.orchestrator import (
    PipelineComponents,
    PipelineFactory,
    PipelineResult,
    run_pipeline,
    run_pipeline_from_settings,
)
from blurqueue.core.pipeline.domain.statistics import (
    StatisticsAggregator,
    format_statistics,
)

__all__ = [
    "PipelineComponents",
    "PipelineFactory",
    "PipelineResult",
    "StatisticsAggregator",
    "discover_work_items",
    "force_shutdown_if_needed",
    "format_statistics",
    "graceful_shutdown",
    "prepare_environment",
    "run_pipeline",
    "run_pipeline_from_settings",
    "signal_consumer_shutdown",
    "start_pipeline_components",
    "wait_for_consumers_completion",
    "wait_for_producers_completion",
]
