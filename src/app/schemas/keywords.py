# src/app/schemas/keywords.py
from __future__ import annotations

from pydantic import BaseModel, Field

from src.app.domain.models import (
    CustomContext,
    KeywordAnalytics,
    KeywordVariation,
    SeasonalModifiers,
    VariationCategory,
)


class GenerateKeywordsRequest(BaseModel):
    domains: list[str] = Field(..., min_length=1)
    prompt: str = Field(default="recipes", max_length=200)
    count: int = Field(default=3, ge=1, le=20)


class KeywordVariationOut(BaseModel):
    keyword: str
    confidence: float
    reasoning: str
    category: VariationCategory

    @classmethod
    def from_variation(cls, variation: KeywordVariation) -> "KeywordVariationOut":
        return cls(
            keyword=variation.keyword,
            confidence=variation.confidence,
            reasoning=variation.reasoning,
            category=variation.category,
        )


class GenerateKeywordsResponse(BaseModel):
    results: dict[str, list[KeywordVariationOut]]


class SeasonalModifiersIn(BaseModel):
    fall: list[str] = Field(default_factory=list)
    winter: list[str] = Field(default_factory=list)
    summer: list[str] = Field(default_factory=list)
    spring: list[str] = Field(default_factory=list)


class CustomContextIn(BaseModel):
    primaryTheme: str = Field(..., min_length=1, max_length=200)
    customKeywords: list[str] = Field(default_factory=list)
    seasonalModifiers: SeasonalModifiersIn = Field(default_factory=SeasonalModifiersIn)
    notes: str = Field(default="", max_length=2000)

    def to_context(self) -> CustomContext:
        keywords = [k.strip() for k in self.customKeywords if k and k.strip()]
        return CustomContext(
            primary_theme=self.primaryTheme.strip(),
            custom_keywords=keywords,
            seasonal_modifiers=SeasonalModifiers(**self.seasonalModifiers.model_dump()),
            notes=self.notes,
        )


class CustomContextOut(CustomContextIn):
    domain: str

    @classmethod
    def from_context(cls, domain: str, context: CustomContext) -> "CustomContextOut":
        modifiers = context.seasonal_modifiers
        return cls(
            domain=domain,
            primaryTheme=context.primary_theme,
            customKeywords=list(context.custom_keywords),
            seasonalModifiers=SeasonalModifiersIn(
                fall=list(modifiers.fall),
                winter=list(modifiers.winter),
                summer=list(modifiers.summer),
                spring=list(modifiers.spring),
            ),
            notes=context.notes,
        )


class KeywordCountOut(BaseModel):
    keyword: str
    count: int
    avgResults: float


class PromptCountOut(BaseModel):
    prompt: str
    count: int


class KeywordAnalyticsOut(BaseModel):
    domain: str
    days: int
    totalSearches: int
    averageResults: float
    topKeywords: list[KeywordCountOut] = Field(default_factory=list)
    promptBreakdown: list[PromptCountOut] = Field(default_factory=list)

    @classmethod
    def from_analytics(cls, domain: str, days: int, analytics: KeywordAnalytics) -> "KeywordAnalyticsOut":
        return cls(
            domain=domain,
            days=days,
            totalSearches=analytics.total_searches,
            averageResults=analytics.average_results,
            topKeywords=[
                KeywordCountOut(keyword=k.keyword, count=k.count, avgResults=k.avg_results)
                for k in analytics.top_keywords
            ],
            promptBreakdown=[PromptCountOut(prompt=p.prompt, count=p.count) for p in analytics.prompt_breakdown],
        )
