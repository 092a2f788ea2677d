"""
Shared fixtures for chain-metrics tests.

Async tests run under pytest-asyncio and carry @pytest.mark.asyncio.
"""

import pytest

from chain_metrics.storage.repositories import InMemoryTpsRepository
from tests.fakes import (
    NOW,
    FakeClock,
    FakeMetricsClient,
    FakeSleep,
    RecordingEventSink,
)


@pytest.fixture
def now() -> int:
    return NOW


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def sleep() -> FakeSleep:
    return FakeSleep()


@pytest.fixture
def events() -> RecordingEventSink:
    return RecordingEventSink()


@pytest.fixture
def store() -> InMemoryTpsRepository:
    return InMemoryTpsRepository()


@pytest.fixture
def metrics_client() -> FakeMetricsClient:
    return FakeMetricsClient()
