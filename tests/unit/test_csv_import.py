from __future__ import annotations

import asyncio

import pytest

from notion_stub import RECIPES_DB, WEBSITES_DB, NotionStoreStub, SleepRecorder
from src.app.domain.errors import RemoteStoreError
from src.app.domain.models import WebsiteContext
from src.app.infra.notion import properties as props
from src.app.infra.notion import schema
from src.app.services.csv_import import CsvImportService
from src.app.services.upsert_pipeline import RecipeUpsertPipeline
from src.app.services.website_resolver import WebsiteResolver
from src.app.services.website_stats import WebsiteStatsAggregator

WEBSITE = WebsiteContext(domain="airfryerauthority.com", name="Air Fryer Authority")

SCENARIO_CSV = (
    "Title,Pinterest URL,Image URL,Description\n"
    '"Air Fryer Chicken","https://pinterest.com/pin/123","https://img.example/x.jpg","Crispy and easy"\n'
).encode("utf-8")


def _service(store: NotionStoreStub) -> CsvImportService:
    resolver = WebsiteResolver(store, WEBSITES_DB)
    pipeline = RecipeUpsertPipeline(
        store,
        resolver,
        WebsiteStatsAggregator(store, resolver),
        RECIPES_DB,
        sleep=SleepRecorder(store),
    )
    return CsvImportService(store, pipeline, RECIPES_DB)


class TestImportCsv:
    def test_single_row_end_to_end(self) -> None:
        store = NotionStoreStub()

        summary = asyncio.run(_service(store).import_csv(SCENARIO_CSV, WEBSITE, filename="pins.csv"))

        assert summary.success is True
        assert summary.total_recipes == 1
        assert summary.rows_processed == 1
        assert summary.errors is None
        assert (summary.notion_sync.succeeded, summary.notion_sync.failed) == (1, 0)

        websites = store.pages_in(WEBSITES_DB)
        assert len(websites) == 1
        website_page = websites[0]
        assert props.read_title(website_page, schema.WEBSITE_TITLE) == "airfryerauthority.com"

        recipes = store.created_in(RECIPES_DB)
        assert len(recipes) == 1
        recipe = recipes[0]
        assert recipe[schema.RECIPE_TITLE] == props.title("Air Fryer Chicken")
        assert recipe[schema.RECIPE_LINK] == {"url": "https://pinterest.com/pin/123"}
        assert recipe[schema.RECIPE_DESCRIPTION] == props.rich_text("Crispy and easy")
        assert recipe[schema.RECIPE_WEBSITE] == props.relation(website_page["id"])

        assert props.read_number(website_page, schema.WEBSITE_TOTAL_RECORDS) == 1
        assert props.read_number(website_page, schema.WEBSITE_TOTAL_RUNS) == 1
        assert props.read_number(website_page, schema.WEBSITE_AVERAGE_PER_RUN) == 1

    def test_no_valid_rows_skips_upload(self) -> None:
        store = NotionStoreStub()
        content = b"Title,URL\nSoup,https://example.com/soup\n"

        summary = asyncio.run(_service(store).import_csv(content, WEBSITE))

        assert summary.success is True
        assert summary.total_recipes == 0
        assert summary.message == "No valid recipes found in CSV file"
        assert summary.errors == ["Row 1 skipped: missing pin URL"]
        assert store.created == []

    def test_connection_failure_surfaces(self) -> None:
        store = NotionStoreStub()
        store.database_error = RemoteStoreError("retrieve_database", "API token is invalid.", status_code=401)

        with pytest.raises(RemoteStoreError):
            asyncio.run(_service(store).import_csv(SCENARIO_CSV, WEBSITE))

        assert store.created == []

    def test_unresolvable_website_fails_whole_batch(self) -> None:
        store = NotionStoreStub()
        store.query_error = RemoteStoreError("query_database", "object_not_found", status_code=404)

        summary = asyncio.run(_service(store).import_csv(SCENARIO_CSV, WEBSITE))

        assert summary.success is False
        assert (summary.notion_sync.succeeded, summary.notion_sync.failed) == (0, 1)
        assert store.created_in(RECIPES_DB) == []

    def test_failed_writes_are_reported(self) -> None:
        store = NotionStoreStub()
        store.fail_titles = {"Air Fryer Chicken"}

        summary = asyncio.run(_service(store).import_csv(SCENARIO_CSV, WEBSITE))

        assert summary.success is True
        assert summary.errors == ["1 of 1 recipes failed to sync"]

    def test_check_connection_returns_title(self) -> None:
        store = NotionStoreStub()
        assert asyncio.run(_service(store).check_connection()) == "PinClicks Recipes"


class TestImportMany:
    def test_bad_file_does_not_stop_the_rest(self) -> None:
        store = NotionStoreStub()
        files = [
            ("good.csv", SCENARIO_CSV),
            ("broken.csv", b"\xff\xfe\x00garbage"),
            ("other.csv", b"Title,Pin URL\nFries,https://pinterest.com/pin/77\n"),
        ]

        report = asyncio.run(_service(store).import_many(files, WEBSITE))

        assert report.files_total == 3
        assert report.files_processed == 2
        assert report.recipes == 2
        assert report.rows == 2
        assert len(report.errors) == 1
        assert "broken.csv" in report.errors[0]
        assert report.describe() == "2 of 3 files processed, 2 recipes from 2 rows, 1 errors"
        assert set(report.summaries) == {"good.csv", "other.csv"}

    def test_connection_failure_on_one_file_keeps_report(self) -> None:
        class FlakyConnectionStore(NotionStoreStub):
            def __init__(self) -> None:
                super().__init__()
                self.database_calls = 0

            async def retrieve_database(self, database_id):
                self.database_calls += 1
                if self.database_calls == 2:
                    raise RemoteStoreError("retrieve_database", "bad gateway", status_code=502)
                return await super().retrieve_database(database_id)

        store = FlakyConnectionStore()
        files = [
            ("a.csv", SCENARIO_CSV),
            ("b.csv", b"Title,Pin URL\nFries,https://pinterest.com/pin/77\n"),
            ("c.csv", b"Title,Pin URL\nNuggets,https://pinterest.com/pin/78\n"),
        ]

        report = asyncio.run(_service(store).import_many(files, WEBSITE))

        assert report.files_total == 3
        assert report.files_processed == 2
        assert report.recipes == 2
        assert set(report.summaries) == {"a.csv", "c.csv"}
        assert len(report.errors) == 1
        assert report.errors[0].startswith("b.csv: ")
        assert "bad gateway" in report.errors[0]
        assert len(store.created_in(RECIPES_DB)) == 2
