# src/app/deps.py (process-wide singletons exposed as FastAPI dependencies)

from __future__ import annotations

import logging

from fastapi import HTTPException, status

from src.app.config import settings
from src.app.domain.errors import ConfigurationError
from src.app.infra.notion.client import NotionClient
from src.app.services.csv_import import CsvImportService
from src.app.services.keywords import KeywordGenerator
from src.app.services.keywords.context_store import CustomContextStore
from src.app.services.upsert_pipeline import RecipeUpsertPipeline
from src.app.services.website_resolver import WebsiteResolver
from src.app.services.website_stats import WebsiteStatsAggregator

logger = logging.getLogger(__name__)

_store: NotionClient | None = None
_import_service: CsvImportService | None = None
_generator: KeywordGenerator | None = None


def get_store() -> NotionClient:
    global _store
    try:
        settings.require_notion()
    except ConfigurationError as e:
        logger.error("notion.not_configured missing=%s", ",".join(e.missing))
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))
    if _store is None:
        _store = NotionClient()
    return _store


def get_import_service() -> CsvImportService:
    global _import_service
    if _import_service is None:
        store = get_store()
        resolver = WebsiteResolver(store, settings.NOTION_WEBSITES_DB_ID)
        stats = WebsiteStatsAggregator(store, resolver)
        pipeline = RecipeUpsertPipeline(store, resolver, stats, settings.NOTION_RECIPES_DB_ID)
        _import_service = CsvImportService(store, pipeline, settings.NOTION_RECIPES_DB_ID)
    return _import_service


def get_keyword_generator() -> KeywordGenerator:
    global _generator
    if _generator is None:
        context_store = None
        if settings.KEYWORD_CONTEXTS_PATH:
            context_store = CustomContextStore(settings.KEYWORD_CONTEXTS_PATH)
        _generator = KeywordGenerator(context_store=context_store)
    return _generator


async def close_store() -> None:
    global _store, _import_service
    if _store is not None:
        await _store.aclose()
    _store = None
    _import_service = None
