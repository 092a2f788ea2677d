"""Configuration value objects for dependency injection.

Instead of injecting the global settings object, inject specific configuration
dataclasses into each component. Enables:
- Easy testing with different configurations
- Clear constructor contracts
- Validation at composition root
"""

from dataclasses import dataclass

from chain_metrics.config.state import ConfigState


@dataclass(frozen=True)
class HttpClientConfig:
    """Configuration for HTTP client."""

    timeout: float = 10.0
    max_connections: int = 10


@dataclass(frozen=True)
class RetryConfig:
    """Configuration for per-chain update retries (linear backoff)."""

    max_attempts: int = 3
    backoff_step_seconds: float = 2.0


@dataclass(frozen=True)
class MetricsApiConfig:
    """Configuration for the metrics provider client."""

    base_url: str
    time_interval: str = "day"
    page_size: int = 30
    user_agent: str = "chain-metrics/0.1"
    http_config: HttpClientConfig = None

    def __post_init__(self):
        """Set defaults for nested configs."""
        if self.http_config is None:
            object.__setattr__(self, "http_config", HttpClientConfig())

    @classmethod
    def from_state(cls, state: ConfigState) -> "MetricsApiConfig":
        api = state.metrics_api
        return cls(
            base_url=api.base_url,
            time_interval=api.time_interval,
            page_size=api.page_size,
            user_agent=api.user_agent,
            http_config=HttpClientConfig(
                timeout=api.timeout, max_connections=api.max_connections
            ),
        )
