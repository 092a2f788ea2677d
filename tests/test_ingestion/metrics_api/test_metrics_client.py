"""
Tests for the metrics provider client, response validator and retry policy.
"""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import aiohttp
import pytest

from chain_metrics.ingestion.adapters.metrics_api import (
    FetchFailed,
    MetricsApiError,
    MetricsClient,
    ResponseShapeError,
    ResponseValidator,
    RetryHandler,
)
from chain_metrics.ingestion.config.value_objects import (
    HttpClientConfig,
    MetricsApiConfig,
    RetryConfig,
)
from chain_metrics.ingestion.ports.http import HttpResponse


@pytest.fixture
def config():
    return MetricsApiConfig(
        base_url="https://metrics.example.test/v2/",
        user_agent="chain-metrics-test",
        http_config=HttpClientConfig(timeout=5.0),
    )


@pytest.fixture
def http_client():
    client = MagicMock()
    client.get = AsyncMock()
    client.close = AsyncMock()
    return client


def _response(status_code, body):
    return HttpResponse(status_code=status_code, body=body, headers={}, url="")


class TestMetricsClient:
    @pytest.mark.asyncio
    async def test_request_shape(self, config, http_client):
        http_client.get.return_value = _response(200, {"results": []})
        client = MetricsClient(config, http_client)

        await client.fetch_metrics("C-chain")

        call = http_client.get.await_args
        assert call.args[0] == (
            "https://metrics.example.test/v2/chains/C-chain/metrics/avgTps"
        )
        assert call.kwargs["params"] == {"timeInterval": "day", "pageSize": "30"}
        assert call.kwargs["headers"] == {
            "Accept": "application/json",
            "User-Agent": "chain-metrics-test",
        }
        assert call.kwargs["timeout"] == 5.0

    def test_chain_id_is_path_escaped(self, config, http_client):
        client = MetricsClient(config, http_client)

        assert client.build_url("a/b c").endswith("/chains/a%2Fb%20c/metrics/avgTps")

    @pytest.mark.asyncio
    async def test_returns_raw_body(self, config, http_client):
        body = {"results": [{"timestamp": 1, "value": 2}]}
        http_client.get.return_value = _response(200, body)

        result = await MetricsClient(config, http_client).fetch_metrics("A")

        assert result == body

    @pytest.mark.asyncio
    async def test_non_2xx_raises_fetch_failed(self, config, http_client):
        http_client.get.return_value = _response(503, "unavailable")

        with pytest.raises(FetchFailed) as exc_info:
            await MetricsClient(config, http_client).fetch_metrics("A")

        assert exc_info.value.status_code == 503
        assert exc_info.value.chain_id == "A"

    @pytest.mark.parametrize(
        "error",
        [asyncio.TimeoutError(), aiohttp.ClientConnectionError("refused")],
    )
    @pytest.mark.asyncio
    async def test_transport_errors_raise_fetch_failed(
        self, config, http_client, error
    ):
        http_client.get.side_effect = error

        with pytest.raises(FetchFailed) as exc_info:
            await MetricsClient(config, http_client).fetch_metrics("A")

        assert exc_info.value.status_code is None
        assert isinstance(exc_info.value, MetricsApiError)


class TestResponseValidator:
    def test_valid_response(self):
        is_valid, message = ResponseValidator.validate_avg_tps_response(
            {"results": [], "nextPageToken": None}
        )

        assert is_valid
        assert message == "Valid"

    @pytest.mark.parametrize(
        "data",
        [None, {}, [], "text", {"data": []}, {"results": None}, {"results": {}}],
    )
    def test_invalid_shapes(self, data):
        is_valid, _ = ResponseValidator.validate_avg_tps_response(data)

        assert not is_valid

    def test_extract_points_raises_shape_error(self):
        with pytest.raises(ResponseShapeError) as exc_info:
            ResponseValidator.extract_points({"results": "nope"}, chain_id="A")

        assert exc_info.value.chain_id == "A"

    def test_extract_points_returns_results(self):
        points = [{"timestamp": 1, "value": 2}]

        assert ResponseValidator.extract_points({"results": points}) is points


class TestRetryHandler:
    def test_linear_backoff(self):
        handler = RetryHandler(RetryConfig(max_attempts=3, backoff_step_seconds=2.0))

        assert [handler.get_retry_delay(a) for a in (1, 2, 3)] == [2.0, 4.0, 6.0]

    def test_attempt_budget(self):
        handler = RetryHandler(RetryConfig(max_attempts=3))

        assert handler.has_attempts_left(1)
        assert handler.has_attempts_left(2)
        assert not handler.has_attempts_left(3)
        assert handler.has_attempts_left(3, max_attempts=5)
