# src/app/schemas/recipes.py
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from src.app.domain.models import ImportSummary, WebsiteContext
from src.services.domains import normalize_domain


class WebsiteIn(BaseModel):
    domain: str = Field(..., min_length=1, max_length=253)
    name: str = Field(default="", max_length=200)

    def to_context(self) -> WebsiteContext:
        return WebsiteContext(domain=normalize_domain(self.domain), name=self.name.strip())


class NotionSyncOut(BaseModel):
    succeeded: int = 0
    failed: int = 0


class ImportSummaryOut(BaseModel):
    success: bool
    totalRecipes: int
    rowsProcessed: int = 0
    message: str = ""
    notionSync: Optional[NotionSyncOut] = None
    errors: Optional[list[str]] = None

    @classmethod
    def from_summary(cls, summary: ImportSummary) -> "ImportSummaryOut":
        sync = None
        if summary.notion_sync is not None:
            sync = NotionSyncOut(
                succeeded=summary.notion_sync.succeeded,
                failed=summary.notion_sync.failed,
            )
        return cls(
            success=summary.success,
            totalRecipes=summary.total_recipes,
            rowsProcessed=summary.rows_processed,
            message=summary.message,
            notionSync=sync,
            errors=summary.errors,
        )
