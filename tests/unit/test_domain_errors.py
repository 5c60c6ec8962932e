from __future__ import annotations

import pytest

from src.app.domain.errors import (
    ConfigurationError,
    FileParseError,
    GenerationError,
    RateLimitedError,
    RecipeSyncError,
    RemoteStoreError,
    WebsiteResolutionError,
)


class TestConfigurationError:
    def test_lists_missing_keys(self) -> None:
        error = ConfigurationError(["NOTION_API_KEY", "NOTION_RECIPES_DB_ID"])

        assert str(error) == "Missing Notion configuration: NOTION_API_KEY, NOTION_RECIPES_DB_ID"
        assert error.missing == ["NOTION_API_KEY", "NOTION_RECIPES_DB_ID"]


class TestFileParseError:
    def test_includes_filename_and_reason(self) -> None:
        error = FileParseError("pins.csv", "no header row")

        assert "pins.csv" in str(error)
        assert error.reason == "no header row"


class TestRemoteStoreError:
    def test_carries_operation_and_status(self) -> None:
        error = RemoteStoreError("create_page", "validation_error", status_code=400)

        assert str(error) == "Notion error during create_page: validation_error"
        assert error.status_code == 400

    def test_rate_limited_is_a_remote_store_error(self) -> None:
        error = RateLimitedError("query_database")

        assert isinstance(error, RemoteStoreError)
        assert error.status_code == 429
        assert error.reason == "Rate limited"

    def test_website_resolution_error(self) -> None:
        error = WebsiteResolutionError("foo.com", "unauthorized")

        assert isinstance(error, RemoteStoreError)
        assert error.domain == "foo.com"
        assert error.operation == "resolve_website"
        assert "foo.com: unauthorized" in str(error)


class TestGenerationError:
    def test_includes_domain(self) -> None:
        error = GenerationError("candy.com", "boom")

        assert "candy.com" in str(error)
        assert error.reason == "boom"


@pytest.mark.parametrize(
    "error",
    [
        ConfigurationError(["X"]),
        FileParseError("a.csv", "bad"),
        RemoteStoreError("op", "bad"),
        GenerationError("a.com", "bad"),
    ],
)
def test_all_errors_share_base(error: Exception) -> None:
    assert isinstance(error, RecipeSyncError)
