from .settings import get_settings, reset_settings
from .state import (
    AggregationConfig,
    ApiConfig,
    ConfigLoader,
    ConfigState,
    DatabaseConfig,
    LoggingConfig,
    MetricsApiSettings,
    StorageConfig,
    UpdateConfig,
    get_config,
)

__all__ = [
    "AggregationConfig",
    "ApiConfig",
    "ConfigLoader",
    "ConfigState",
    "DatabaseConfig",
    "LoggingConfig",
    "MetricsApiSettings",
    "StorageConfig",
    "UpdateConfig",
    "get_config",
    "get_settings",
    "reset_settings",
]
