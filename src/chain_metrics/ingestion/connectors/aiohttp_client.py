"""Concrete HTTP transport for the metrics provider.

Wraps aiohttp behind the IHttpClient abstraction. One pooled session is
shared by every chain refresh in the process; the pool size bounds how many
provider requests are in flight at once.
"""

from typing import Any

import aiohttp

from chain_metrics.ingestion.config.value_objects import HttpClientConfig
from chain_metrics.ingestion.ports.http import HttpResponse, IHttpClient


class AiohttpClient(IHttpClient):
    """Pooled aiohttp session with a total-request timeout."""

    def __init__(self, config: HttpClientConfig):
        """Initialize HTTP client.

        Args:
            config: Timeout and connection pool limits
        """
        self.config = config
        self._session: aiohttp.ClientSession | None = None

    async def __aenter__(self) -> "AiohttpClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def _get_session(self) -> aiohttp.ClientSession:
        """Open the session lazily, reopening it after close()."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.config.timeout),
                connector=aiohttp.TCPConnector(limit=self.config.max_connections),
            )
        return self._session

    async def get(
        self,
        url: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        timeout: float | None = None,
    ) -> HttpResponse:
        """Execute GET request.

        2xx bodies are decoded as JSON regardless of the declared content
        type, falling back to text; error bodies are kept as text.

        Raises:
            aiohttp.ClientError: On connection errors
            asyncio.TimeoutError: When the total timeout elapses
        """
        session = await self._get_session()
        request_timeout = aiohttp.ClientTimeout(total=timeout or self.config.timeout)

        async with session.get(
            url, params=params, headers=headers, timeout=request_timeout
        ) as resp:
            body: Any
            if 200 <= resp.status < 300:
                try:
                    body = await resp.json(content_type=None)
                except ValueError:
                    body = await resp.text()
            else:
                body = await resp.text()

            return HttpResponse(
                status_code=resp.status,
                body=body,
                headers=dict(resp.headers),
                url=str(resp.url),
            )

    async def close(self) -> None:
        if self._session is not None:
            await self._session.close()
            self._session = None
