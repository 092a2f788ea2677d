"""
Metrics API Retry Handler

Backoff policy for per-chain updates. Every failed attempt is retried while
the attempt budget lasts; the delay grows linearly with the attempt number.
"""

from chain_metrics.ingestion.config.value_objects import RetryConfig


class RetryHandler:
    """Determines retry delays for per-chain update attempts."""

    def __init__(self, config: RetryConfig | None = None):
        self.config = config or RetryConfig()

    @property
    def max_attempts(self) -> int:
        return self.config.max_attempts

    def has_attempts_left(self, attempt: int, max_attempts: int | None = None) -> bool:
        """
        Whether another attempt may follow ``attempt`` (1-indexed).
        """
        budget = max_attempts if max_attempts is not None else self.config.max_attempts
        return attempt < budget

    def get_retry_delay(self, attempt: int) -> float:
        """
        Calculate retry delay with linear backoff.

        Args:
            attempt: Attempt that just failed (1-indexed)

        Returns:
            Number of seconds to wait before retrying (attempt * step)
        """
        return max(0, attempt) * self.config.backoff_step_seconds
