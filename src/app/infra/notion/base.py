# src/app/infra/notion/base.py
"""
Abstract interface for the remote page store.
The pipeline only depends on this contract, so tests can swap in a stub.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional


class RecipeStore(ABC):
    """
    Abstract interface for a Notion-shaped database store.

    Implementations:
    - NotionClient: the Notion REST API over httpx
    """

    @abstractmethod
    async def retrieve_database(self, database_id: str) -> dict[str, Any]:
        """
        Fetch a database schema.

        Args:
            database_id: The database to fetch

        Returns:
            The raw database object (title, properties)

        Raises:
            RemoteStoreError: If the call fails
        """
        pass

    @abstractmethod
    async def query_database(
        self,
        database_id: str,
        filter: Optional[dict[str, Any]] = None,
    ) -> list[dict[str, Any]]:
        """
        Run a filtered query against a database.

        Args:
            database_id: The database to query
            filter: Notion filter object, or None for every page

        Returns:
            The `results` list, each item carrying `id` and `properties`
        """
        pass

    @abstractmethod
    async def create_page(
        self,
        database_id: str,
        properties: dict[str, Any],
    ) -> dict[str, Any]:
        """
        Create a page under a parent database.

        Args:
            database_id: Parent database
            properties: Typed property payload

        Returns:
            The created page, including its store-assigned `id`
        """
        pass

    @abstractmethod
    async def retrieve_page(self, page_id: str) -> dict[str, Any]:
        """Fetch one page with its properties."""
        pass

    @abstractmethod
    async def update_page(
        self,
        page_id: str,
        properties: dict[str, Any],
    ) -> dict[str, Any]:
        """Patch the given properties on a page."""
        pass
