from .value_objects import HttpClientConfig, MetricsApiConfig, RetryConfig

__all__ = ["HttpClientConfig", "MetricsApiConfig", "RetryConfig"]
