import asyncio
from typing import Any
from urllib.parse import quote

import aiohttp

from chain_metrics.infrastructure.observability import get_ingestion_logger
from chain_metrics.ingestion.adapters.metrics_api.exceptions import FetchFailed
from chain_metrics.ingestion.config.value_objects import MetricsApiConfig
from chain_metrics.ingestion.ports.http import IHttpClient

logger = get_ingestion_logger("metrics-client")


class MetricsClient:
    """Async client for the metrics provider avgTps endpoint.

    Single Responsibility: issue one timed request per call and turn every
    transport-level failure into FetchFailed. Stateless apart from the
    injected HTTP client; retries belong to the update orchestrator.

    Dependencies injected (not instantiated):
    - http_client: Executes HTTP requests
    """

    ENDPOINT = "chains/{chain_id}/metrics/avgTps"

    def __init__(self, config: MetricsApiConfig, http_client: IHttpClient):
        """Initialize MetricsClient with injected dependencies.

        Args:
            config: Base URL, paging parameters, timeout
            http_client: HTTP client implementation (e.g., AiohttpClient)
        """
        self.config = config
        self.http_client = http_client

    def build_url(self, chain_id: str) -> str:
        path = self.ENDPOINT.format(chain_id=quote(chain_id, safe=""))
        return f"{self.config.base_url.rstrip('/')}/{path}"

    def build_params(self) -> dict[str, str]:
        return {
            "timeInterval": self.config.time_interval,
            "pageSize": str(self.config.page_size),
        }

    def build_headers(self) -> dict[str, str]:
        return {
            "Accept": "application/json",
            "User-Agent": self.config.user_agent,
        }

    async def fetch_metrics(self, chain_id: str) -> Any:
        """Fetch the raw avgTps payload for one chain.

        Args:
            chain_id: Chain identifier

        Returns:
            Decoded JSON body (unvalidated)

        Raises:
            FetchFailed: On timeout, network failure or non-2xx status
        """
        url = self.build_url(chain_id)
        logger.debug("fetching_avg_tps", chain_id=chain_id, url=url)

        try:
            response = await self.http_client.get(
                url,
                params=self.build_params(),
                headers=self.build_headers(),
                timeout=self.config.http_config.timeout,
            )
        except asyncio.TimeoutError as e:
            raise FetchFailed(
                f"Timed out after {self.config.http_config.timeout}s fetching {url}",
                chain_id=chain_id,
            ) from e
        except aiohttp.ClientError as e:
            raise FetchFailed(
                f"Network error fetching {url}: {e}", chain_id=chain_id
            ) from e

        if not response.ok:
            raise FetchFailed(
                f"Metrics API returned HTTP {response.status_code} for {url}",
                chain_id=chain_id,
                status_code=response.status_code,
            )

        return response.body
