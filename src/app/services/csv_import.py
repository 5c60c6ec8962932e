# src/app/services/csv_import.py
"""
CSV import use case: parse an export, verify Notion is reachable, upload.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Union

from src.app.domain.errors import FileParseError, RemoteStoreError, WebsiteResolutionError
from src.app.domain.models import ImportSummary, UpsertResult, WebsiteContext
from src.app.infra.notion import properties as props
from src.app.infra.notion.base import RecipeStore
from src.app.services.csv_extractor import parse_csv
from src.app.services.upsert_pipeline import RecipeUpsertPipeline

logger = logging.getLogger(__name__)


@dataclass
class BatchImportReport:
    """Outcome of importing several files for one website."""
    files_total: int = 0
    files_processed: int = 0
    recipes: int = 0
    rows: int = 0
    errors: list[str] = field(default_factory=list)
    summaries: dict[str, ImportSummary] = field(default_factory=dict)

    def describe(self) -> str:
        return (
            f"{self.files_processed} of {self.files_total} files processed, "
            f"{self.recipes} recipes from {self.rows} rows, {len(self.errors)} errors"
        )


class CsvImportService:
    def __init__(
        self,
        store: RecipeStore,
        pipeline: RecipeUpsertPipeline,
        recipes_db_id: str,
    ):
        self._store = store
        self._pipeline = pipeline
        self.recipes_db_id = recipes_db_id

    async def check_connection(self) -> str:
        """
        Fetch the Recipes database schema.

        Returns:
            The database title ("Untitled" when it has none)

        Raises:
            RemoteStoreError: If Notion cannot be reached or rejects the credentials
        """
        database = await self._store.retrieve_database(self.recipes_db_id)
        title = props.read_title(database) or "Untitled"
        logger.info("notion.connected database=%s", title)
        return title

    async def import_csv(
        self,
        content: Union[bytes, str],
        website: WebsiteContext,
        filename: str = "upload.csv",
    ) -> ImportSummary:
        """
        Parse one CSV export and upload its recipes.

        Raises:
            FileParseError: If the file is unreadable
            RemoteStoreError: If the Notion connection check fails
        """
        extraction = parse_csv(content, website, filename=filename)
        errors = [skip.describe() for skip in extraction.skipped]

        await self.check_connection()

        if not extraction.recipes:
            return ImportSummary(
                success=True,
                total_recipes=0,
                rows_processed=extraction.rows_processed,
                message="No valid recipes found in CSV file",
                errors=errors or None,
            )

        try:
            sync = await self._pipeline.upsert(extraction.recipes, website)
        except WebsiteResolutionError as e:
            logger.error("import.website_unresolved website=%s error=%s", website.domain, e)
            errors.append(str(e))
            return ImportSummary(
                success=False,
                total_recipes=len(extraction.recipes),
                rows_processed=extraction.rows_processed,
                message=f"Could not resolve website {website.domain} in Notion",
                notion_sync=UpsertResult(succeeded=0, failed=len(extraction.recipes)),
                errors=errors,
            )

        if sync.failed:
            errors.append(f"{sync.failed} of {sync.total} recipes failed to sync")

        return ImportSummary(
            success=True,
            total_recipes=len(extraction.recipes),
            rows_processed=extraction.rows_processed,
            message=f"Successfully processed {len(extraction.recipes)} recipes for {website.display_name}",
            notion_sync=sync,
            errors=errors or None,
        )

    async def import_many(
        self,
        files: Iterable[tuple[str, Union[bytes, str]]],
        website: WebsiteContext,
    ) -> BatchImportReport:
        """Import several files; a file that fails to parse or sync does not stop the rest."""
        report = BatchImportReport()
        for filename, content in files:
            report.files_total += 1
            try:
                summary = await self.import_csv(content, website, filename=filename)
            except FileParseError as e:
                logger.warning("import.file_failed file=%s error=%s", filename, e)
                report.errors.append(str(e))
                continue
            except RemoteStoreError as e:
                logger.error("import.file_sync_failed file=%s error=%s", filename, e)
                report.errors.append(f"{filename}: {e}")
                continue

            report.summaries[filename] = summary
            report.recipes += summary.total_recipes
            report.rows += summary.rows_processed
            report.errors.extend(summary.errors or [])
            if summary.success:
                report.files_processed += 1

        logger.info("import.batch_done website=%s %s", website.domain, report.describe())
        return report
