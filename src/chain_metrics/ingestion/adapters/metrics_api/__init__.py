"""Metrics provider (avgTps) plugin: client, response validation, retry policy."""

from .client import MetricsClient
from .exceptions import FetchFailed, MetricsApiError, ResponseShapeError
from .response_validator import ResponseValidator
from .retry_handler import RetryHandler

__all__ = [
    "FetchFailed",
    "MetricsApiError",
    "MetricsClient",
    "ResponseShapeError",
    "ResponseValidator",
    "RetryHandler",
]
