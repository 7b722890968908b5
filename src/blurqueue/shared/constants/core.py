"""
Core Pipeline Constants

This module contains constants for the work pipeline, the box filter
and the image codec adapter.
"""


class Application:
    """Application metadata constants."""

    NAME = "blurqueue"
    VERSION = "0.1.0"
    DESCRIPTION = "Bounded-queue image box-blur pipeline"
    ENV_PREFIX = "BLURQUEUE_"


class PipelineDefaults:
    """Default sizing of the producer/consumer pipeline."""

    INPUT_ROOT = "../input"
    OUTPUT_ROOT = "../output"
    NUM_PRODUCERS = 1
    NUM_CONSUMERS = 10
    QUEUE_CAPACITY = 1000


class FilterConfig:
    """Box filter constants."""

    DEFAULT_SIZE = 5
    MIN_CONFIGURED_SIZE = 3


class ImageConfig:
    """Image codec constants."""

    NUM_CHANNELS = 3
    PIL_MODE = "RGB"
    FALLBACK_FORMAT = "PNG"


class RetryConfig:
    """Retry policy for transient I/O failures."""

    DEFAULT_MAX_IO_RETRIES = 1
    MAX_IO_RETRIES_LIMIT = 1
    DEFAULT_RETRY_DELAY_SECONDS = 0.1


class Timeout:
    """Timeouts used while shutting the pipeline down (seconds)."""

    FORCED_SHUTDOWN_JOIN = 5.0
