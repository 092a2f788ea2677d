"""
Structured logging infrastructure for chain-metrics.
Provides consistent, machine-readable logs across all services.

Log Structure:
    {
        "app": "chain-metrics",        # Application identifier
        "layer": "ingestion",          # Architectural layer
        "component": "metrics-client", # Specific component/service
        "module": "...",               # Python module (optional)
        "chain_id": "...",             # Domain context
        "event": "tps_fetch_failed",   # What happened
        ...
    }

Architectural Layers:
    - infrastructure: Cross-cutting (database, config)
    - ingestion: Metrics provider client, response validation
    - pipeline: Update orchestration, batch refresh
    - processing: Point validation, network aggregation
    - storage: Series store, chain catalog
    - api: REST API and CLI surfaces
"""

import logging
import sys
from typing import Any, Literal

import structlog
from structlog.types import EventDict

APP_NAME = "chain-metrics"

# Define valid architectural layers
Layer = Literal[
    "infrastructure", "ingestion", "pipeline", "processing", "storage", "api"
]


def add_app_context(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """
    Add application-wide context to every log entry.

    Keeps the 'app' identifier on every line so aggregated logs
    can be filtered per application.
    """
    event_dict["app"] = APP_NAME
    return event_dict


def add_severity_level(
    logger: Any, method_name: str, event_dict: EventDict
) -> EventDict:
    """
    Add severity level for cloud logging compatibility.
    Maps Python log levels to standard severity levels.
    """
    level = event_dict.get("level")
    if level:
        severity_map = {
            "debug": "DEBUG",
            "info": "INFO",
            "warning": "WARNING",
            "error": "ERROR",
            "critical": "CRITICAL",
        }
        event_dict["severity"] = severity_map.get(level, "INFO")
    return event_dict


def setup_logging(
    level: str = "INFO",
    json_logs: bool = True,
    include_timestamp: bool = True,
) -> None:
    """
    Configure structured logging for the application.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_logs: If True, output JSON. If False, use human-readable format (dev mode).
        include_timestamp: Whether to include ISO timestamps in logs

    Usage:
        >>> from chain_metrics.infrastructure.observability import setup_logging
        >>> setup_logging(level="DEBUG", json_logs=False)
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=log_level,
    )

    processors = [
        structlog.contextvars.merge_contextvars,
        add_app_context,
        structlog.stdlib.add_log_level,
        add_severity_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if include_timestamp:
        processors.insert(0, structlog.processors.TimeStamper(fmt="iso"))

    if json_logs:
        # Production: JSON for log aggregation
        processors.append(structlog.processors.JSONRenderer())
    else:
        # Development: Pretty console output with colors
        processors.append(
            structlog.dev.ConsoleRenderer(
                colors=True,
                exception_formatter=structlog.dev.plain_traceback,
            )
        )

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(
    name: str | None = None,
    layer: Layer | None = None,
    component: str | None = None,
    **initial_context: Any,
) -> structlog.stdlib.BoundLogger:
    """
    Get a configured logger instance with architectural context.

    Args:
        name: Logger name (typically __name__ of the calling module)
        layer: Architectural layer (infrastructure, ingestion, pipeline, etc.)
        component: Specific component/service within the layer
        **initial_context: Additional context key-value pairs to bind to logger

    Returns:
        Configured structlog logger with bound context
    """
    context = {}

    if layer:
        context["layer"] = layer

    if component:
        context["component"] = component

    if name:
        context["module"] = name

    context.update(initial_context)

    # Lazy proxy: configuration is resolved on first use, not at import
    return structlog.get_logger(name, **context)


# ============================================================================
# Layer-Specific Logger Factories
# ============================================================================


def get_infrastructure_logger(
    component: str,
    **context: Any,
) -> structlog.stdlib.BoundLogger:
    """
    Get a logger for infrastructure layer (database, config).

    Usage:
        >>> log = get_infrastructure_logger("database-adapter")
        >>> log.info("pool_created", max_size=10)
    """
    return get_logger(
        "infrastructure",
        layer="infrastructure",
        component=component,
        **context,
    )


def get_ingestion_logger(
    component: str,
    chain_id: str | None = None,
    **context: Any,
) -> structlog.stdlib.BoundLogger:
    """
    Get a logger for ingestion layer (metrics provider access).

    Args:
        component: Component name (e.g., "metrics-client", "response-validator")
        chain_id: Chain identifier - optional
        **context: Additional context

    Usage:
        >>> log = get_ingestion_logger("metrics-client", chain_id="C-chain")
        >>> log.info("fetching_avg_tps")
    """
    ctx = {}
    if chain_id:
        ctx["chain_id"] = chain_id
    ctx.update(context)

    return get_logger(
        "ingestion",
        layer="ingestion",
        component=component,
        **ctx,
    )


def get_pipeline_logger(
    component: str = "update-orchestrator",
    **context: Any,
) -> structlog.stdlib.BoundLogger:
    """
    Get a logger for pipeline/orchestration layer (per-chain updates, batches).

    Usage:
        >>> log = get_pipeline_logger("batch-runner", batch_id="abc")
        >>> log.info("batch_started")
    """
    return get_logger(
        "pipeline",
        layer="pipeline",
        component=component,
        **context,
    )


def get_processing_logger(
    component: str,
    **context: Any,
) -> structlog.stdlib.BoundLogger:
    """
    Get a logger for processing layer (point validation, aggregation).

    Usage:
        >>> log = get_processing_logger("point-validator")
        >>> log.warning("point_out_of_window", timestamp=0)
    """
    return get_logger(
        "processing",
        layer="processing",
        component=component,
        **context,
    )


def get_storage_logger(
    component: str,
    **context: Any,
) -> structlog.stdlib.BoundLogger:
    """
    Get a logger for storage layer (series store, catalog).

    Usage:
        >>> log = get_storage_logger("tps-repository", table="metrics.tps")
        >>> log.info("batch_upserted", records=30)
    """
    return get_logger(
        "storage",
        layer="storage",
        component=component,
        **context,
    )


def get_api_logger(
    component: str = "fastapi",
    **context: Any,
) -> structlog.stdlib.BoundLogger:
    """
    Get a logger for API layer (REST API services, CLI).

    Usage:
        >>> log = get_api_logger()
        >>> log.info("request_received", method="GET", path="/health")
    """
    return get_logger(
        "api",
        layer="api",
        component=component,
        **context,
    )
