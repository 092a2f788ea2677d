"""Port for the metrics provider as seen by the update orchestrator."""

from typing import Any, Protocol


class IMetricsClient(Protocol):
    """Fetches the raw avgTps payload for one chain.

    Implementations perform exactly one request per call and raise
    FetchFailed on timeout, network failure or non-2xx status. No retries.
    """

    async def fetch_metrics(self, chain_id: str) -> Any:
        ...
