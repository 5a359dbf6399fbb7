"""Tests for the game data HTTP client."""

import asyncio

import httpx
import pytest

from data.clients import GameDataClient
from gamedata_samples import BASE_URL, STAGE_TABLE
from models.ark import GameDataset
from utils.exceptions import (
    GameDataDownloadError,
    GameDataEmptyResponseError,
    GameDataParseError,
)


def fetch(client: GameDataClient, dataset: GameDataset):
    return asyncio.run(client.fetch_table(dataset))


def test_table_urls_follow_config(gamedata_client):
    assert (
        gamedata_client.table_url(GameDataset.STAGE)
        == f"{BASE_URL}/stage_table.json"
    )
    assert (
        gamedata_client.table_url(GameDataset.TOWER)
        == f"{BASE_URL}/climb_tower_table.json"
    )


def test_fetch_table_returns_document(gamedata_client, table_server):
    document = fetch(gamedata_client, GameDataset.STAGE)

    assert document == STAGE_TABLE
    assert table_server.requested_files() == ["stage_table.json"]
    request = table_server.requests[0]
    assert request.headers["User-Agent"] == "ark-gamedata-mirror-tests/1.0"
    assert request.headers["Accept"] == "application/json"
    assert request.method == "GET"


def test_empty_body_raises_empty_response(gamedata_client, table_server):
    table_server.routes["zone_table.json"] = b""

    with pytest.raises(GameDataEmptyResponseError) as exc_info:
        fetch(gamedata_client, GameDataset.ZONE)

    assert exc_info.value.dataset == "zone"


def test_whitespace_body_raises_empty_response(gamedata_client, table_server):
    table_server.routes["zone_table.json"] = b"  \n"

    with pytest.raises(GameDataEmptyResponseError):
        fetch(gamedata_client, GameDataset.ZONE)


def test_error_status_raises_download_error(gamedata_client, table_server):
    table_server.routes["activity_table.json"] = httpx.Response(503)

    with pytest.raises(GameDataDownloadError) as exc_info:
        fetch(gamedata_client, GameDataset.ACTIVITY)

    assert "503" in str(exc_info.value)
    assert exc_info.value.dataset == "activity"


def test_missing_table_raises_download_error(gamedata_client, table_server):
    del table_server.routes["activity_table.json"]

    with pytest.raises(GameDataDownloadError) as exc_info:
        fetch(gamedata_client, GameDataset.ACTIVITY)

    assert "404" in str(exc_info.value)


def test_transport_error_raises_download_error(gamedata_client, table_server):
    table_server.routes["character_table.json"] = httpx.ConnectError("refused")

    with pytest.raises(GameDataDownloadError) as exc_info:
        fetch(gamedata_client, GameDataset.CHARACTER)

    assert isinstance(exc_info.value.__cause__, httpx.ConnectError)


def test_timeout_raises_download_error(gamedata_client, table_server):
    table_server.routes["character_table.json"] = httpx.ReadTimeout("slow")

    with pytest.raises(GameDataDownloadError):
        fetch(gamedata_client, GameDataset.CHARACTER)


def test_invalid_json_raises_parse_error(gamedata_client, table_server):
    table_server.routes["climb_tower_table.json"] = b"{not json"

    with pytest.raises(GameDataParseError):
        fetch(gamedata_client, GameDataset.TOWER)


def test_non_object_json_raises_parse_error(gamedata_client, table_server):
    table_server.routes["climb_tower_table.json"] = [1, 2, 3]

    with pytest.raises(GameDataParseError) as exc_info:
        fetch(gamedata_client, GameDataset.TOWER)

    assert "list" in str(exc_info.value)


def test_client_works_as_async_context_manager(gamedata_config, table_server):
    async def run_test():
        async with GameDataClient(
            config=gamedata_config,
            transport=httpx.MockTransport(table_server.handler),
        ) as client:
            document = await client.fetch_table(GameDataset.TOWER)
        return client, document

    client, document = asyncio.run(run_test())

    assert "towers" in document
    assert client._http_client is None
