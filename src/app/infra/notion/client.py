# src/app/infra/notion/client.py
"""
Notion REST API client.
Thin async wrapper over httpx that turns every failure into RemoteStoreError.
"""
from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from src.app.config import settings
from src.app.domain.errors import RateLimitedError, RemoteStoreError
from src.app.infra.notion.base import RecipeStore

logger = logging.getLogger(__name__)


class NotionClient(RecipeStore):
    """
    Notion API client using httpx.AsyncClient.

    Environment variables used (through Settings):
    - NOTION_API_KEY: integration token, sent as a bearer credential
    - NOTION_API_URL: API root (default https://api.notion.com/v1)
    - NOTION_VERSION: value of the Notion-Version header
    - NOTION_TIMEOUT_SECONDS: per-request timeout
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        notion_version: Optional[str] = None,
        timeout_seconds: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key if api_key is not None else settings.NOTION_API_KEY
        self.base_url = (base_url or settings.NOTION_API_URL).rstrip("/")
        self.notion_version = notion_version or settings.NOTION_VERSION
        self.timeout_seconds = timeout_seconds or settings.NOTION_TIMEOUT_SECONDS

        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            headers={
                "Authorization": f"Bearer {self.api_key}",
                "Notion-Version": self.notion_version,
                "Content-Type": "application/json",
            },
            timeout=self.timeout_seconds,
            transport=transport,
        )

    async def __aenter__(self) -> "NotionClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(
        self,
        operation: str,
        method: str,
        path: str,
        json: Optional[dict[str, Any]] = None,
    ) -> dict[str, Any]:
        try:
            response = await self._client.request(method, path, json=json)
        except httpx.TimeoutException as e:
            logger.error("notion.timeout operation=%s path=%s", operation, path)
            raise RemoteStoreError(
                operation, f"Timed out after {self.timeout_seconds}s"
            ) from e
        except httpx.HTTPError as e:
            logger.error("notion.transport_error operation=%s error=%s", operation, e)
            raise RemoteStoreError(operation, str(e) or e.__class__.__name__) from e

        if response.status_code == 429:
            raise RateLimitedError(operation, _error_message(response))
        if not response.is_success:
            raise RemoteStoreError(
                operation,
                _error_message(response),
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise RemoteStoreError(operation, "Malformed JSON response") from e
        if not isinstance(data, dict):
            raise RemoteStoreError(operation, "Unexpected response shape")
        return data

    async def retrieve_database(self, database_id: str) -> dict[str, Any]:
        return await self._request("retrieve_database", "GET", f"/databases/{database_id}")

    async def query_database(
        self,
        database_id: str,
        filter: Optional[dict[str, Any]] = None,
    ) -> list[dict[str, Any]]:
        body: dict[str, Any] = {}
        if filter:
            body["filter"] = filter
        data = await self._request(
            "query_database", "POST", f"/databases/{database_id}/query", json=body
        )
        results = data.get("results")
        if not isinstance(results, list):
            raise RemoteStoreError("query_database", "Response has no results list")
        return results

    async def create_page(
        self,
        database_id: str,
        properties: dict[str, Any],
    ) -> dict[str, Any]:
        page = await self._request(
            "create_page",
            "POST",
            "/pages",
            json={"parent": {"database_id": database_id}, "properties": properties},
        )
        if not page.get("id"):
            raise RemoteStoreError("create_page", "Created page has no id")
        return page

    async def retrieve_page(self, page_id: str) -> dict[str, Any]:
        return await self._request("retrieve_page", "GET", f"/pages/{page_id}")

    async def update_page(
        self,
        page_id: str,
        properties: dict[str, Any],
    ) -> dict[str, Any]:
        return await self._request(
            "update_page", "PATCH", f"/pages/{page_id}", json={"properties": properties}
        )


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return f"HTTP {response.status_code}"
