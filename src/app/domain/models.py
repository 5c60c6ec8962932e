# src/app/domain/models.py
"""
Domain models for the pin import pipeline and the keyword generator.
These are pure data structures with no infrastructure dependencies.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional


def round_half_up(value: float) -> int:
    """Round .5 upwards, the way the dashboard reports averages."""
    return int(math.floor(value + 0.5))


class VariationCategory(str, Enum):
    """Where a generated keyword came from."""
    PRIMARY = "primary"
    SECONDARY = "secondary"
    SEASONAL = "seasonal"
    TRENDING = "trending"


@dataclass(frozen=True)
class WebsiteContext:
    """The website a run is collecting recipes for."""
    domain: str
    name: str = ""

    @property
    def display_name(self) -> str:
        return self.name or self.domain


@dataclass
class NormalizedRecipe:
    """One recipe extracted from a CSV row, ready to be written to Notion."""
    name: str
    source_url: str
    image_url: str
    website_domain: str
    website_name: str
    description: str = ""
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass(frozen=True)
class RowSkip:
    """A CSV row that did not carry enough data to become a recipe."""
    row_number: int
    reason: str

    def describe(self) -> str:
        return f"Row {self.row_number} skipped: {self.reason}"


@dataclass
class ExtractionResult:
    """Result of parsing one CSV file."""
    recipes: list[NormalizedRecipe]
    rows_processed: int
    skipped: list[RowSkip] = field(default_factory=list)


@dataclass
class UpsertResult:
    """Counters for one upsert batch."""
    succeeded: int = 0
    failed: int = 0

    @property
    def total(self) -> int:
        return self.succeeded + self.failed


@dataclass
class ImportSummary:
    """What a single CSV import reports back to the caller."""
    success: bool
    total_recipes: int
    rows_processed: int = 0
    message: str = ""
    notion_sync: Optional[UpsertResult] = None
    errors: Optional[list[str]] = None


@dataclass
class WebsiteStats:
    """Cumulative run counters stored on a website page."""
    total_records: int = 0
    total_runs: int = 0
    last_run_count: int = 0
    average_per_run: int = 0
    last_run_at: Optional[datetime] = None

    def after_run(self, succeeded: int, now: datetime) -> "WebsiteStats":
        total = self.total_records + succeeded
        runs = self.total_runs + 1
        return WebsiteStats(
            total_records=total,
            total_runs=runs,
            last_run_count=succeeded,
            average_per_run=round_half_up(total / runs),
            last_run_at=now,
        )


@dataclass
class WebsiteTheme:
    """How a website is positioned, used to shape its search keywords."""
    domain: str
    name: str
    primary_theme: str
    secondary_themes: list[str] = field(default_factory=list)
    cuisine_type: Optional[str] = None
    dietary_focus: Optional[str] = None
    cooking_method: Optional[str] = None
    target_audience: Optional[str] = None


@dataclass
class SeasonalModifiers:
    fall: list[str] = field(default_factory=list)
    winter: list[str] = field(default_factory=list)
    summer: list[str] = field(default_factory=list)
    spring: list[str] = field(default_factory=list)


@dataclass
class CustomContext:
    """Operator override that replaces domain auto-detection for one website."""
    primary_theme: str
    custom_keywords: list[str] = field(default_factory=list)
    seasonal_modifiers: SeasonalModifiers = field(default_factory=SeasonalModifiers)
    notes: str = ""


@dataclass
class DomainIntelligence:
    """Result of analysing a domain name against the theme taxonomy."""
    detected_themes: list[str]
    primary_focus: str
    confidence: float
    reasoning: str
    tokens: list[str] = field(default_factory=list)
    # category id -> first pattern that matched
    matched_patterns: dict[str, str] = field(default_factory=dict)


@dataclass
class KeywordVariation:
    keyword: str
    confidence: float
    reasoning: str
    category: VariationCategory = VariationCategory.PRIMARY


@dataclass
class KeywordHistoryEntry:
    website: str
    keywords: list[str]
    timestamp: datetime
    prompt: Optional[str] = None
    results_count: Optional[int] = None


@dataclass
class KeywordCount:
    keyword: str
    count: int
    avg_results: float


@dataclass
class PromptCount:
    prompt: str
    count: int


@dataclass
class KeywordAnalytics:
    total_searches: int
    average_results: float
    top_keywords: list[KeywordCount]
    prompt_breakdown: list[PromptCount]
