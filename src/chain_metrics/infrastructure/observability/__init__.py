"""
Observability for the TPS pipeline: structlog-based structured logging and the
pipeline event interface. Every layer gets a logger factory that binds its
architectural context, so ingestion retries, point rejections, store writes and
aggregation anomalies (future or stale readings) can be filtered per layer and
per chain in the log aggregator.
"""

from .events import (
    EventEmitterMixin,
    IEventSink,
    PipelineEvent,
    StructlogEventSink,
)
from .logging import (
    get_api_logger,
    get_infrastructure_logger,
    get_ingestion_logger,
    get_logger,
    get_pipeline_logger,
    get_processing_logger,
    get_storage_logger,
    setup_logging,
)

__all__ = [
    # Setup
    "setup_logging",
    # Base
    "get_logger",
    # Layer-specific
    "get_infrastructure_logger",
    "get_ingestion_logger",
    "get_pipeline_logger",
    "get_processing_logger",
    "get_storage_logger",
    "get_api_logger",
    # Events
    "EventEmitterMixin",
    "IEventSink",
    "PipelineEvent",
    "StructlogEventSink",
]
