"""
Metrics API Exception Hierarchy

Two failure kinds matter to the update orchestrator: the request itself failed
(FetchFailed) or it succeeded with a body that breaks the expected contract
(ResponseShapeError). Both are retried; they are logged differently because a
shape error may mean the provider changed its contract.
"""


class MetricsApiError(Exception):
    """Base exception for all metrics provider errors."""

    def __init__(
        self,
        message: str,
        chain_id: str | None = None,
        status_code: int | None = None,
    ):
        super().__init__(message)
        self.chain_id = chain_id
        self.status_code = status_code


class FetchFailed(MetricsApiError):
    """Timeout, network failure or non-2xx status."""

    pass


class ResponseShapeError(MetricsApiError):
    """Response body is missing the ``results`` list."""

    pass
