# src/app/services/website_resolver.py
"""
Maps a website domain to the id of its page in the Websites database,
creating the page on first use.
"""
from __future__ import annotations

import logging
from typing import Optional

from src.app.domain.errors import RemoteStoreError, WebsiteResolutionError
from src.app.infra.notion import properties as props
from src.app.infra.notion import schema
from src.app.infra.notion.base import RecipeStore

logger = logging.getLogger(__name__)


class WebsiteResolver:
    """
    Read-then-maybe-write lookup of website pages.

    There is no locking: two resolvers racing on the same unseen domain can both
    create a page. Website setup is operator-driven and infrequent, so this is
    accepted rather than guarded against.
    """

    def __init__(self, store: RecipeStore, websites_db_id: str):
        self._store = store
        self.websites_db_id = websites_db_id
        self._known: dict[str, str] = {}

    def cached_id(self, domain: str) -> Optional[str]:
        return self._known.get(domain)

    async def resolve(self, domain: str) -> str:
        """
        Return the relation id for a domain.

        Args:
            domain: Website domain, matched exactly against the page title

        Returns:
            The page id of the website

        Raises:
            WebsiteResolutionError: If the query or the create call fails
        """
        known = self._known.get(domain)
        if known:
            return known

        try:
            results = await self._store.query_database(
                self.websites_db_id,
                filter=props.title_equals(schema.WEBSITE_TITLE, domain),
            )
            if results:
                page_id = str(results[0]["id"])
                if len(results) > 1:
                    logger.warning(
                        "website.duplicate_pages domain=%s count=%d using=%s",
                        domain,
                        len(results),
                        page_id,
                    )
            else:
                logger.info("website.creating domain=%s", domain)
                page = await self._store.create_page(
                    self.websites_db_id,
                    {
                        schema.WEBSITE_TITLE: props.title(domain),
                        schema.WEBSITE_ACTIVE: props.checkbox(True),
                    },
                )
                page_id = str(page["id"])
        except RemoteStoreError as e:
            logger.error("website.resolve_failed domain=%s error=%s", domain, e)
            raise WebsiteResolutionError(domain, e.reason) from e
        except (KeyError, TypeError) as e:
            logger.error("website.resolve_malformed domain=%s error=%s", domain, e)
            raise WebsiteResolutionError(domain, "malformed response") from e

        self._known[domain] = page_id
        return page_id
