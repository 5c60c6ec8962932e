# src/app/services/csv_extractor.py
"""
Turns PinClicks CSV exports into NormalizedRecipe records.

Export headers are not stable, so every logical field is looked up through an
ordered list of column aliases. The first alias with a usable value wins.
"""
from __future__ import annotations

import csv
import io
import logging
from datetime import datetime, timezone
from typing import Callable, Iterable, Mapping, Optional, Union

from src.app.domain.errors import FileParseError
from src.app.domain.models import ExtractionResult, NormalizedRecipe, RowSkip, WebsiteContext
from src.services.pin_urls import is_pin_url

logger = logging.getLogger(__name__)

RawRow = Mapping[str, Optional[str]]

URL_COLUMNS = ("Pinterest URL", "Pin URL", "URL", "Link", "pinterest_url", "Pin Link")
NAME_COLUMNS = ("Title", "Recipe Name", "Name", "Pin Title", "title", "recipe_name", "Pin Name")
IMAGE_COLUMNS = ("Image URL", "Image", "Thumbnail", "image_url", "thumbnail_url", "Pin Image")
DESCRIPTION_COLUMNS = ("Description", "Pin Description", "description", "desc")


def _first_match(
    row: RawRow,
    columns: Iterable[str],
    accept: Callable[[str], bool] = bool,
) -> str:
    for column in columns:
        value = row.get(column)
        if not isinstance(value, str):
            continue
        stripped = value.strip()
        if stripped and accept(stripped):
            return stripped
    return ""


def _missing_fields_reason(source_url: str, name: str) -> str:
    missing = []
    if not source_url:
        missing.append("pin URL")
    if not name:
        missing.append("name")
    return "missing " + " and ".join(missing)


def extract_recipe(
    row: RawRow,
    website: WebsiteContext,
    now: Optional[datetime] = None,
) -> Optional[NormalizedRecipe]:
    """
    Build a NormalizedRecipe from one CSV row.

    Args:
        row: Column name -> cell value, exactly as read from the file
        website: The run's website, copied onto the record
        now: Creation timestamp (defaults to the current UTC time)

    Returns:
        The record, or None when the row has no pin URL or no name
    """
    source_url = _first_match(row, URL_COLUMNS, accept=is_pin_url)
    name = _first_match(row, NAME_COLUMNS)
    if not source_url or not name:
        return None

    image_url = _first_match(row, IMAGE_COLUMNS)
    description = _first_match(row, DESCRIPTION_COLUMNS)

    return NormalizedRecipe(
        name=name,
        source_url=source_url,
        image_url=image_url or source_url,
        description=description,
        website_domain=website.domain,
        website_name=website.display_name,
        created_at=now or datetime.now(timezone.utc),
    )


def _decode(content: Union[bytes, str], filename: str) -> str:
    if isinstance(content, str):
        return content
    try:
        return content.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise FileParseError(filename, f"not valid UTF-8 ({e.reason})") from e


def parse_csv(
    content: Union[bytes, str],
    website: WebsiteContext,
    filename: str = "upload.csv",
) -> ExtractionResult:
    """
    Parse a whole CSV export.

    Rows that lack a pin URL or a name are recorded as skips and parsing moves
    on. Anything that makes the file itself unreadable raises FileParseError
    and no partial record set is returned.

    Raises:
        FileParseError: If the file cannot be decoded or parsed as CSV
    """
    text = _decode(content, filename)
    reader = csv.DictReader(io.StringIO(text, newline=""), strict=True)
    try:
        fieldnames = reader.fieldnames
    except csv.Error as e:
        raise FileParseError(filename, f"unreadable header: {e}") from e
    if not fieldnames:
        raise FileParseError(filename, "no header row")

    now = datetime.now(timezone.utc)
    recipes: list[NormalizedRecipe] = []
    skipped: list[RowSkip] = []
    rows_processed = 0

    try:
        for row in reader:
            rows_processed += 1
            recipe = extract_recipe(row, website, now=now)
            if recipe is None:
                url = _first_match(row, URL_COLUMNS, accept=is_pin_url)
                name = _first_match(row, NAME_COLUMNS)
                skip = RowSkip(rows_processed, _missing_fields_reason(url, name))
                skipped.append(skip)
                logger.debug("csv.row_skipped file=%s %s", filename, skip.describe())
                continue
            recipes.append(recipe)
    except csv.Error as e:
        raise FileParseError(filename, f"line {reader.line_num}: {e}") from e

    logger.info(
        "csv.parsed file=%s website=%s rows=%d recipes=%d skipped=%d",
        filename,
        website.domain,
        rows_processed,
        len(recipes),
        len(skipped),
    )
    return ExtractionResult(recipes=recipes, rows_processed=rows_processed, skipped=skipped)
