"""Async client for the remote game data tables.

Each table is one JSON document served from ``GameDataConfig.base_url``.
The client only downloads and decodes; turning documents into records is
the parser's job and publishing them is the provider's.

Errors are raised as:

- GameDataDownloadError: transport failure, timeout or non-2xx status
- GameDataEmptyResponseError: the body is empty or whitespace
- GameDataParseError: the body is not a JSON object
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

import httpx

from models.ark import GameDataset
from utils.exceptions import (
    GameDataDownloadError,
    GameDataEmptyResponseError,
    GameDataParseError,
)

if TYPE_CHECKING:
    from utils.config import GameDataConfig

logger = logging.getLogger(__name__)

HTTP_TIMEOUT = 30.0


class GameDataClient:
    """Downloads game data tables over HTTP(S).

    The underlying ``httpx.AsyncClient`` is created lazily and shared by all
    fetches; call ``close()`` when done.
    """

    def __init__(
        self,
        config: GameDataConfig,
        user_agent: str | None = None,
        request_timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config
        self.user_agent = user_agent
        self.request_timeout = request_timeout or config.request_timeout or HTTP_TIMEOUT
        self._transport = transport
        self._http_client: httpx.AsyncClient | None = None

    def table_url(self, dataset: GameDataset) -> str:
        """Return the URL a dataset is fetched from."""
        table_files = {
            GameDataset.STAGE: self.config.stage_table,
            GameDataset.ZONE: self.config.zone_table,
            GameDataset.ACTIVITY: self.config.activity_table,
            GameDataset.CHARACTER: self.config.character_table,
            GameDataset.TOWER: self.config.tower_table,
        }
        return self.config.table_url(table_files[dataset])

    async def fetch_table(self, dataset: GameDataset) -> dict[str, Any]:
        """Download and decode one table.

        Args:
            dataset: Which table to fetch.

        Returns:
            The decoded top-level JSON object.

        Raises:
            GameDataDownloadError: On transport errors or error status codes.
            GameDataEmptyResponseError: When the body is empty.
            GameDataParseError: When the body is not a JSON object.
        """
        self._initialize_http_client()
        assert self._http_client is not None

        url = self.table_url(dataset)
        logger.debug("Fetching %s table from %s", dataset.value, url)

        try:
            response = await self._http_client.get(url)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise GameDataDownloadError(
                f"HTTP {e.response.status_code} fetching {url}",
                dataset=dataset.value,
            ) from e
        except httpx.HTTPError as e:
            raise GameDataDownloadError(
                f"Failed to fetch {url}: {e!r}", dataset=dataset.value
            ) from e

        body = response.content
        if not body or not body.strip():
            raise GameDataEmptyResponseError(
                f"Empty response body from {url}", dataset=dataset.value
            )

        try:
            document = json.loads(body)
        except ValueError as e:
            raise GameDataParseError(
                f"Invalid JSON in {dataset.value} table: {e}", dataset=dataset.value
            ) from e

        if not isinstance(document, dict):
            raise GameDataParseError(
                f"Expected a JSON object for {dataset.value} table, "
                f"got {type(document).__name__}",
                dataset=dataset.value,
            )

        logger.debug(
            "Fetched %s table (%d bytes, %d top-level keys)",
            dataset.value,
            len(body),
            len(document),
        )
        return document

    async def close(self) -> None:
        if self._http_client:
            await self._http_client.aclose()
            self._http_client = None

    async def __aenter__(self) -> GameDataClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    def _initialize_http_client(self) -> None:
        if self._http_client is not None:
            return
        headers = {"Accept": "application/json"}
        if self.user_agent:
            headers["User-Agent"] = self.user_agent
        self._http_client = httpx.AsyncClient(
            timeout=self.request_timeout,
            headers=headers,
            follow_redirects=True,
            transport=self._transport,
        )
