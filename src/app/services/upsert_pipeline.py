# src/app/services/upsert_pipeline.py
"""
Writes normalized recipes to the Recipes database.

Records go out in fixed-size chunks. Writes inside a chunk run concurrently and
each one settles on its own; chunks run strictly one after another with a fixed
pause in between to stay under the API rate limit.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional, Sequence

from src.app.config import settings
from src.app.domain.errors import RemoteStoreError
from src.app.domain.models import NormalizedRecipe, UpsertResult, WebsiteContext
from src.app.infra.notion import properties as props
from src.app.infra.notion import schema
from src.app.infra.notion.base import RecipeStore
from src.app.services.website_resolver import WebsiteResolver
from src.app.services.website_stats import WebsiteStatsAggregator
from src.services.pin_urls import is_http_url, is_pin_url, is_pinimg_url

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]


def model_image_url(recipe: NormalizedRecipe) -> Optional[str]:
    """
    Pick the link stored in the "Model Image URL" property.

    Priority: canonical pin URL, then a plain source URL that is not a pinimg
    asset, then an http(s) image URL that is not a pinimg asset, then whatever
    is present.
    """
    if is_pin_url(recipe.source_url):
        return recipe.source_url
    if recipe.source_url and not is_pinimg_url(recipe.source_url):
        return recipe.source_url
    if is_http_url(recipe.image_url) and not is_pinimg_url(recipe.image_url):
        return recipe.image_url
    return recipe.source_url or recipe.image_url or None


def build_recipe_properties(recipe: NormalizedRecipe, website_page_id: str) -> dict[str, Any]:
    properties: dict[str, Any] = {
        schema.RECIPE_TITLE: props.title(recipe.name),
        schema.RECIPE_LINK: props.url(model_image_url(recipe)),
        schema.RECIPE_WEBSITE: props.relation(website_page_id),
    }
    if recipe.description:
        properties[schema.RECIPE_DESCRIPTION] = props.rich_text(recipe.description)
    return properties


def chunked(records: Sequence[NormalizedRecipe], size: int) -> list[Sequence[NormalizedRecipe]]:
    return [records[i:i + size] for i in range(0, len(records), size)]


class RecipeUpsertPipeline:
    """
    Batch writer for recipe pages.

    At-least-once: a record whose write fails is counted and not retried, and
    re-importing the same file creates duplicate pages.
    """

    def __init__(
        self,
        store: RecipeStore,
        resolver: WebsiteResolver,
        stats: WebsiteStatsAggregator,
        recipes_db_id: str,
        chunk_size: int = settings.UPSERT_CHUNK_SIZE,
        pacing_seconds: float = settings.UPSERT_PACING_SECONDS,
        write_timeout_seconds: float = settings.NOTION_TIMEOUT_SECONDS,
        sleep: Sleep = asyncio.sleep,
    ):
        if chunk_size < 1:
            raise ValueError("chunk_size must be at least 1")
        self._store = store
        self._resolver = resolver
        self._stats = stats
        self.recipes_db_id = recipes_db_id
        self.chunk_size = chunk_size
        self.pacing_seconds = pacing_seconds
        self.write_timeout_seconds = write_timeout_seconds
        self._sleep = sleep

    async def upsert(
        self,
        records: Sequence[NormalizedRecipe],
        website: WebsiteContext,
    ) -> UpsertResult:
        """
        Write every record and update the website counters once.

        Args:
            records: Records to write
            website: Website the records belong to

        Returns:
            UpsertResult with succeeded/failed counts

        Raises:
            WebsiteResolutionError: If the website page cannot be found or
                created. Nothing is written in that case.
        """
        website_page_id = await self._resolver.resolve(website.domain)

        result = UpsertResult()
        chunks = chunked(records, self.chunk_size)
        for index, chunk in enumerate(chunks):
            outcomes = await asyncio.gather(
                *(self._write_one(recipe, website_page_id) for recipe in chunk)
            )
            chunk_ok = sum(1 for ok in outcomes if ok)
            result.succeeded += chunk_ok
            result.failed += len(outcomes) - chunk_ok
            logger.info(
                "upsert.chunk_done website=%s chunk=%d/%d succeeded=%d failed=%d",
                website.domain,
                index + 1,
                len(chunks),
                chunk_ok,
                len(outcomes) - chunk_ok,
            )
            if index + 1 < len(chunks):
                await self._sleep(self.pacing_seconds)

        await self._stats.record_run(website, result.succeeded)

        logger.info(
            "upsert.done website=%s succeeded=%d failed=%d",
            website.domain,
            result.succeeded,
            result.failed,
        )
        return result

    async def _write_one(self, recipe: NormalizedRecipe, website_page_id: str) -> bool:
        try:
            await asyncio.wait_for(
                self._store.create_page(
                    self.recipes_db_id,
                    build_recipe_properties(recipe, website_page_id),
                ),
                timeout=self.write_timeout_seconds,
            )
        except asyncio.TimeoutError:
            logger.error(
                "upsert.write_timeout recipe=%r after=%ss", recipe.name, self.write_timeout_seconds
            )
            return False
        except RemoteStoreError as e:
            logger.error("upsert.write_failed recipe=%r error=%s", recipe.name, e)
            return False
        except Exception:
            logger.exception("upsert.write_unexpected_error recipe=%r", recipe.name)
            return False
        logger.debug("upsert.write_ok recipe=%r", recipe.name)
        return True
