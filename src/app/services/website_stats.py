# src/app/services/website_stats.py
"""
Running counters on the website page, updated after each upsert batch.
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable, Optional

from src.app.domain.models import WebsiteContext, WebsiteStats
from src.app.infra.notion import properties as props
from src.app.infra.notion import schema
from src.app.infra.notion.base import RecipeStore
from src.app.services.website_resolver import WebsiteResolver

logger = logging.getLogger(__name__)


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


def stats_from_page(page: dict) -> WebsiteStats:
    return WebsiteStats(
        total_records=props.read_number(page, schema.WEBSITE_TOTAL_RECORDS),
        total_runs=props.read_number(page, schema.WEBSITE_TOTAL_RUNS),
        last_run_count=props.read_number(page, schema.WEBSITE_LAST_RUN_COUNT),
        average_per_run=props.read_number(page, schema.WEBSITE_AVERAGE_PER_RUN),
    )


def stats_to_properties(stats: WebsiteStats) -> dict:
    properties = {
        schema.WEBSITE_TOTAL_RECORDS: props.number(stats.total_records),
        schema.WEBSITE_TOTAL_RUNS: props.number(stats.total_runs),
        schema.WEBSITE_LAST_RUN_COUNT: props.number(stats.last_run_count),
        schema.WEBSITE_AVERAGE_PER_RUN: props.number(stats.average_per_run),
    }
    if stats.last_run_at is not None:
        properties[schema.WEBSITE_LAST_RUN_AT] = props.date(stats.last_run_at)
    return properties


class WebsiteStatsAggregator:
    """
    Best-effort update of a website's cumulative counters.

    A failure here is logged and swallowed: it must never turn an otherwise
    successful batch into a failed one.
    """

    def __init__(
        self,
        store: RecipeStore,
        resolver: WebsiteResolver,
        clock: Callable[[], datetime] = _now_utc,
    ):
        self._store = store
        self._resolver = resolver
        self._clock = clock

    async def record_run(self, website: WebsiteContext, succeeded: int) -> Optional[WebsiteStats]:
        """
        Add one run of `succeeded` records to the website counters.

        Returns:
            The stats written, or None if the update failed
        """
        try:
            page_id = await self._resolver.resolve(website.domain)
            page = await self._store.retrieve_page(page_id)
            updated = stats_from_page(page).after_run(succeeded, self._clock())
            await self._store.update_page(page_id, stats_to_properties(updated))
        except Exception:
            logger.exception("stats.update_failed website=%s succeeded=%d", website.domain, succeeded)
            return None

        logger.info(
            "stats.updated website=%s total=%d runs=%d average=%d",
            website.domain,
            updated.total_records,
            updated.total_runs,
            updated.average_per_run,
        )
        return updated
