"""Pytest configuration and shared fixtures."""

import asyncio
import sys
from pathlib import Path

import httpx
import pytest

# Add src to Python path so imports work
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from data.clients.gamedata_client import GameDataClient  # noqa: E402
from data.gamedata_provider import GameDataProvider  # noqa: E402
from gamedata_samples import BASE_URL, FakeTableServer  # noqa: E402
from utils.config import GameDataConfig  # noqa: E402
from utils.metrics import MetricsCollector, reset_metrics  # noqa: E402


@pytest.fixture
def gamedata_config():
    return GameDataConfig(base_url=BASE_URL, request_timeout=5.0)


@pytest.fixture
def table_server():
    return FakeTableServer()


@pytest.fixture
def gamedata_client(gamedata_config, table_server):
    client = GameDataClient(
        config=gamedata_config,
        user_agent="ark-gamedata-mirror-tests/1.0",
        transport=httpx.MockTransport(table_server.handler),
    )
    yield client
    asyncio.run(client.close())


@pytest.fixture
def metrics():
    reset_metrics()
    collector = MetricsCollector()
    yield collector
    reset_metrics()


@pytest.fixture
def provider(gamedata_client, metrics):
    return GameDataProvider(gamedata_client, metrics=metrics)
