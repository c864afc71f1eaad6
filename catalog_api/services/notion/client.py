"""
Notion database API boundary.

Only the three calls the catalog needs are exposed: filtered query,
schema fetch and a paginated full scan.
"""

from __future__ import annotations

from typing import Any

import httpx

from shared.config.logging import get_logger
from shared.config.settings import settings
from shared.utils.exceptions import ConfigError, NotionAPIError
from shared.utils.text import to_uuid

from catalog_api.services.notion.http import RetryingHttpClient

logger = get_logger(__name__)


class NotionClient:
    """
    Authenticated access to Notion databases.

    Usage:
        async with RetryingHttpClient() as http:
            notion = NotionClient(http, token=settings.notion_token)
            pages = await notion.query_all_pages(database_id)
    """

    def __init__(
        self,
        http: RetryingHttpClient,
        token: str,
        api_url: str | None = None,
        version: str | None = None,
        page_size: int | None = None,
    ):
        self._http = http
        self._token = token
        self.api_url = (api_url or settings.notion_api_url).rstrip("/")
        self.version = version or settings.notion_version
        self.page_size = page_size or settings.notion_page_size

    def _headers(self, with_body: bool = False) -> dict[str, str]:
        headers = {
            "Authorization": f"Bearer {self._token}",
            "Notion-Version": self.version,
        }
        if with_body:
            headers["Content-Type"] = "application/json"
        return headers

    def _database_url(self, database_id: str) -> str:
        try:
            return f"{self.api_url}/databases/{to_uuid(database_id)}"
        except ValueError as e:
            raise ConfigError(str(e)) from e

    @staticmethod
    def _json(response: httpx.Response) -> dict[str, Any]:
        """Decoded JSON object of a 2xx response. Anything else is a ``NotionAPIError``."""
        if not response.is_success:
            raise NotionAPIError(response.status_code, response.text)
        try:
            data = response.json()
        except ValueError:
            raise NotionAPIError(response.status_code, response.text) from None
        if not isinstance(data, dict):
            raise NotionAPIError(response.status_code, response.text)
        return data

    async def query_database(self, database_id: str, payload: dict[str, Any]) -> dict[str, Any]:
        """
        Run one query against a database.

        Raises:
            NotionAPIError: Notion answered with a non-2xx status or a body
                that is not a JSON object.
            NetworkError: Retries were exhausted.
        """
        response = await self._http.request(
            "POST",
            f"{self._database_url(database_id)}/query",
            headers=self._headers(with_body=True),
            json=payload,
        )
        return self._json(response)

    async def get_database_schema(self, database_id: str) -> dict[str, Any]:
        """Fetch a database object, including its property schema."""
        response = await self._http.request(
            "GET",
            self._database_url(database_id),
            headers=self._headers(),
        )
        return self._json(response)

    async def query_all_pages(
        self,
        database_id: str,
        payload: dict[str, Any] | None = None,
    ) -> list[dict[str, Any]]:
        """
        Follow ``has_more`` / ``next_cursor`` until the database is exhausted.
        """
        results: list[dict[str, Any]] = []
        cursor: str | None = None

        while True:
            body: dict[str, Any] = {"page_size": self.page_size, **(payload or {})}
            if cursor:
                body["start_cursor"] = cursor

            data = await self.query_database(database_id, body)
            results.extend(data.get("results") or [])

            cursor = data.get("next_cursor")
            if not data.get("has_more") or not cursor:
                break

        logger.debug("Full database scan finished", database_id=database_id, pages=len(results))
        return results
