"""
Tests for the TpsService facade over the in-memory backend.
"""

import pytest

from chain_metrics.config import ConfigState
from chain_metrics.dependency_container import ChainMetricsContainer
from chain_metrics.storage.repositories import InMemoryTpsRepository
from tests.fakes import FakeClock, FakeMetricsClient, FakeSleep, avg_tps_payload


@pytest.fixture
def container(now, events):
    client = FakeMetricsClient()
    client.per_chain = {
        "A": [avg_tps_payload((now - 10 * 86400, 1), (now - 86400, 4.5))],
        "B": [avg_tps_payload((now - 60, 2))],
    }
    state = ConfigState(
        storage={"backend": "memory", "static_chain_ids": ["A", "B"]}, env="test"
    )
    return ChainMetricsContainer(
        state,
        metrics_client=client,
        store=InMemoryTpsRepository(),
        clock=FakeClock(),
        sleep=FakeSleep(),
        events=events,
    )


class TestHistoryDays:
    @pytest.mark.asyncio
    async def test_chain_history_defaults_to_thirty_days(self, container):
        records = await container.service.chain_history("A")

        assert [r.value for r in records] == [4.5, 1.0]

    @pytest.mark.asyncio
    async def test_chain_history_honours_explicit_days(self, container):
        records = await container.service.chain_history("A", days=5)

        assert [r.value for r in records] == [4.5]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("days", [0, -3])
    async def test_chain_history_rejects_non_positive_days(self, container, days):
        with pytest.raises(ValueError, match="days"):
            await container.service.chain_history("A", days=days)

        assert container.metrics_client.calls == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("days", [0, -3])
    async def test_network_history_rejects_non_positive_days(self, container, days):
        with pytest.raises(ValueError, match="days"):
            await container.service.network_history(days=days)

    @pytest.mark.asyncio
    async def test_network_history_uses_default_window(self, container, now):
        await container.service.start_batch_refresh().wait()

        points = await container.service.network_history()

        assert points
        assert all(p.timestamp >= now - 7 * 86400 for p in points)
