"""
Structured pipeline events.

Pipeline components report what happened as PipelineEvent values pushed to an
IEventSink instead of writing log lines directly. The default sink renders
events through structlog; an external collector (metrics, alerting) can be
plugged in by implementing the same protocol.
"""

from dataclasses import dataclass, field
from typing import Any, Literal, Protocol

import structlog

EventLevel = Literal["debug", "info", "warning", "error"]


@dataclass(frozen=True)
class PipelineEvent:
    """One operational event emitted by a pipeline component."""

    name: str
    level: EventLevel = "info"
    fields: dict[str, Any] = field(default_factory=dict)


class IEventSink(Protocol):
    """Receives pipeline events. Implementations must not raise."""

    def emit(self, event: PipelineEvent) -> None:
        ...


class StructlogEventSink:
    """Renders pipeline events as structlog entries."""

    def __init__(self, logger: structlog.stdlib.BoundLogger):
        self._logger = logger

    def emit(self, event: PipelineEvent) -> None:
        log_method = getattr(self._logger, event.level, self._logger.info)
        log_method(event.name, **event.fields)


class EventEmitterMixin:
    """Helper for components holding an ``_events`` sink."""

    _events: IEventSink

    def _emit(self, level: EventLevel, name: str, **fields: Any) -> None:
        self._events.emit(PipelineEvent(name=name, level=level, fields=fields))
