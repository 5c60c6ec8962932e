# src/app/services/keywords/generator.py
"""
Search keyword generation for PinClicks runs.

Two modes:
- rotation: no specific prompt ("" or "recipes"); cycle through a
  domain-appropriate category list without repeating recent keywords
- themed: a specific prompt ("thanksgiving"); fuse it with the site's identity
  and add supplementary variations

All per-domain memory lives in a KeywordGeneratorState owned by the generator.
"""
from __future__ import annotations

import logging
import math
import re
from collections import Counter, deque
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Callable, Iterable, Optional

from src.app.domain.errors import GenerationError
from src.app.domain.models import (
    CustomContext,
    DomainIntelligence,
    KeywordAnalytics,
    KeywordCount,
    KeywordHistoryEntry,
    KeywordVariation,
    PromptCount,
    VariationCategory,
    WebsiteTheme,
)
from src.app.services.keywords.context_store import CustomContextStore
from src.app.services.keywords.domain_analysis import (
    analyze_domain,
    build_enhanced_keyword,
    domain_rotation_categories,
    is_sweets_domain,
    normalize_prompt,
    theme_from_intelligence,
)
from src.app.services.keywords.taxonomy import (
    CANDY_SAFE_KEYWORDS,
    DESCRIPTIVE_ADJECTIVES,
    FILLER_WORDS,
    KNOWN_WEBSITE_THEMES,
    MEAL_WORDS,
    MEAT_TERMS,
    PREP_STYLES,
    SEASON_WORDS,
    holidays_for,
    season_for_month,
)
from src.services.domains import normalize_domain

logger = logging.getLogger(__name__)

RECENT_KEYWORDS_LIMIT = 10
HISTORY_LIMIT = 100
FALLBACK_CONFIDENCE = 0.5


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class KeywordGeneratorState:
    """Process-local memory of the generator, keyed by normalized domain."""
    recent_keywords: dict[str, list[str]] = field(default_factory=dict)
    rotation_index: dict[str, int] = field(default_factory=dict)
    custom_contexts: dict[str, CustomContext] = field(default_factory=dict)
    history: dict[str, deque] = field(default_factory=dict)
    next_keyword_index: dict[str, int] = field(default_factory=dict)


def collapse_redundancy(keyword: str) -> str:
    """
    Remove doubled-up words while keeping word order.

    Immediately repeated runs ("air fryer air fryer chicken") lose the repeat,
    and filler words such as "recipes" keep only their last occurrence.
    """
    words = keyword.lower().split()

    changed = True
    while changed:
        changed = False
        for size in (3, 2, 1):
            i = 0
            while i + 2 * size <= len(words):
                if words[i:i + size] == words[i + size:i + 2 * size]:
                    del words[i + size:i + 2 * size]
                    changed = True
                else:
                    i += 1

    kept = [
        word for i, word in enumerate(words)
        if not (word in FILLER_WORDS and word in words[i + 1:])
    ]
    return " ".join(kept)


def combine_category(category: str, primary_theme: str) -> str:
    """
    Put a rotation category in the site's context.

    A category already sharing a word with the primary theme is used as is;
    otherwise the theme's distinctive words are prefixed.
    """
    theme_words = [w for w in primary_theme.lower().split() if w not in FILLER_WORDS]
    category_words = set(re.split(r"[\s\-]+", category.lower()))
    if not theme_words or any(w in category_words for w in theme_words):
        return category
    return f"{' '.join(theme_words)} {category}"


def _overlaps(a: str, b: str) -> bool:
    a, b = a.lower(), b.lower()
    return a in b or b in a


def _dedupe(variations: Iterable[KeywordVariation]) -> list[KeywordVariation]:
    best: dict[str, KeywordVariation] = {}
    order: list[str] = []
    for v in variations:
        if not v.keyword:
            continue
        if v.keyword not in best:
            order.append(v.keyword)
            best[v.keyword] = v
        elif v.confidence > best[v.keyword].confidence:
            best[v.keyword] = v
    return [best[k] for k in order]


def _contains_meat(keyword: str) -> bool:
    lowered = keyword.lower()
    return any(term in lowered for term in MEAT_TERMS)


class KeywordGenerator:
    """
    Generates PinClicks search keywords per website.

    Construct once per process and reuse: rotation cursors, recently used
    keywords and usage history live on the instance's state.
    """

    def __init__(
        self,
        state: Optional[KeywordGeneratorState] = None,
        themes: Iterable[WebsiteTheme] = KNOWN_WEBSITE_THEMES,
        context_store: Optional[CustomContextStore] = None,
        clock: Callable[[], datetime] = _now_utc,
    ):
        self.state = state or KeywordGeneratorState()
        self._themes = {normalize_domain(t.domain): t for t in themes}
        self._context_store = context_store
        self._clock = clock

        if context_store is not None:
            for domain, context in context_store.load().items():
                self.state.custom_contexts.setdefault(normalize_domain(domain), context)

    # ------------------------------------------------------------------
    # Custom contexts
    # ------------------------------------------------------------------

    def set_custom_context(self, domain: str, context: CustomContext) -> None:
        self.state.custom_contexts[normalize_domain(domain)] = context
        self._save_contexts()

    def get_custom_context(self, domain: str) -> Optional[CustomContext]:
        return self.state.custom_contexts.get(normalize_domain(domain))

    def remove_custom_context(self, domain: str) -> bool:
        removed = self.state.custom_contexts.pop(normalize_domain(domain), None) is not None
        if removed:
            self._save_contexts()
        return removed

    def _save_contexts(self) -> None:
        if self._context_store is not None:
            self._context_store.save(self.state.custom_contexts)

    # ------------------------------------------------------------------
    # Generation
    # ------------------------------------------------------------------

    def theme_for(self, domain: str) -> tuple[WebsiteTheme, Optional[DomainIntelligence]]:
        """
        Resolve the theme used for a domain.

        Returns:
            (theme, intelligence); intelligence is None when a custom context
            replaces auto-detection.
        """
        key = normalize_domain(domain)
        context = self.state.custom_contexts.get(key)
        if context is not None:
            theme = WebsiteTheme(
                domain=key,
                name=key,
                primary_theme=context.primary_theme,
                secondary_themes=list(context.custom_keywords),
                target_audience="custom configured",
            )
            return theme, None

        intelligence = analyze_domain(key)
        theme = self._themes.get(key) or theme_from_intelligence(key, intelligence)
        return theme, intelligence

    def generate(self, domain: str, prompt: str = "recipes", count: int = 3) -> list[KeywordVariation]:
        """
        Generate up to `count` keyword variations for a website.

        Args:
            domain: Website domain
            prompt: Operator theme; "" or "recipes" selects rotation mode
            count: Maximum number of variations returned

        Returns:
            Variations sorted by confidence, highest first
        """
        if count < 1:
            return []

        key = normalize_domain(domain)
        context = self.state.custom_contexts.get(key)
        theme, intelligence = self.theme_for(key)
        recent = list(self.state.recent_keywords.get(key, []))

        if normalize_prompt(prompt):
            variations = self._themed_variations(prompt, theme, context, count, recent, intelligence)
        else:
            variations = self._rotated_variations(key, theme, context, count, recent)

        cleaned = _dedupe(
            KeywordVariation(
                keyword=collapse_redundancy(v.keyword),
                confidence=v.confidence,
                reasoning=v.reasoning,
                category=v.category,
            )
            for v in variations
        )

        if is_sweets_domain(key) and any(_contains_meat(v.keyword) for v in cleaned):
            logger.error(
                "keywords.sweets_mismatch domain=%s generated=%s",
                key,
                ", ".join(v.keyword for v in cleaned),
            )
            cleaned = self._candy_safe_variations(prompt)

        cleaned.sort(key=lambda v: v.confidence, reverse=True)
        emitted = cleaned[:count]
        self._remember(key, [v.keyword for v in emitted])

        logger.info(
            "keywords.generated domain=%s prompt=%r keywords=%s",
            key,
            prompt,
            ", ".join(v.keyword for v in emitted),
        )
        return emitted

    def _rotation_categories(self, key: str, context: Optional[CustomContext]) -> list[str]:
        if context is not None:
            return list(context.custom_keywords) or [context.primary_theme]
        return domain_rotation_categories(key)

    def _rotated_variations(
        self,
        key: str,
        theme: WebsiteTheme,
        context: Optional[CustomContext],
        count: int,
        recent: list[str],
        retried: bool = False,
    ) -> list[KeywordVariation]:
        categories = self._rotation_categories(key, context)
        if not categories:
            return []

        size = len(categories)
        cursor = self.state.rotation_index.get(key, 0) % size
        selected: list[KeywordVariation] = []
        last_position = cursor

        for step in range(size):
            position = (cursor + step) % size
            category = categories[position]
            keyword = combine_category(category, theme.primary_theme)
            if any(category.lower() in r.lower() or _overlaps(keyword, r) for r in recent):
                continue
            selected.append(KeywordVariation(
                keyword=keyword,
                confidence=0.95,
                reasoning=f'Rotation category "{category}" for {theme.primary_theme}',
                category=VariationCategory.PRIMARY,
            ))
            last_position = position
            if len(selected) >= count:
                break

        if not selected:
            if retried:
                return []
            logger.info("keywords.rotation_exhausted domain=%s categories=%d", key, size)
            self.state.recent_keywords[key] = []
            return self._rotated_variations(key, theme, context, count, [], retried=True)

        self.state.rotation_index[key] = (last_position + 1) % size
        return selected

    def _themed_variations(
        self,
        prompt: str,
        theme: WebsiteTheme,
        context: Optional[CustomContext],
        count: int,
        recent: list[str],
        intelligence: Optional[DomainIntelligence],
    ) -> list[KeywordVariation]:
        detected = ", ".join(intelligence.detected_themes) if intelligence else "none"
        variations = [KeywordVariation(
            keyword=build_enhanced_keyword(prompt, theme, intelligence),
            confidence=0.95,
            reasoning=f'Enhanced keyword combining "{prompt}" with detected themes: {detected}',
            category=VariationCategory.PRIMARY,
        )]
        variations.extend(self._primary_variations(prompt, theme)[:math.ceil(count * 0.4)])
        variations.extend(self._secondary_variations(prompt, theme)[:math.ceil(count * 0.3)])
        variations.extend(self._seasonal_variations(prompt, theme, context)[:math.ceil(count * 0.1)])

        filtered = [v for v in variations if not any(_overlaps(v.keyword, r) for r in recent)]
        return filtered or variations

    def _primary_variations(self, prompt: str, theme: WebsiteTheme) -> list[KeywordVariation]:
        p = prompt.lower().strip()
        variations = [KeywordVariation(
            keyword=f"{p} {theme.primary_theme}",
            confidence=0.95,
            reasoning=f'Combines "{p}" with primary theme "{theme.primary_theme}"',
        )]
        for secondary in theme.secondary_themes:
            variations.append(KeywordVariation(
                keyword=f"{p} {secondary}",
                confidence=0.85,
                reasoning=f'Combines "{p}" with secondary theme "{secondary}"',
            ))
        if theme.dietary_focus:
            variations.append(KeywordVariation(
                keyword=f"{p} {theme.dietary_focus}",
                confidence=0.9,
                reasoning=f'Combines "{p}" with dietary focus "{theme.dietary_focus}"',
            ))
        if theme.cooking_method:
            variations.append(KeywordVariation(
                keyword=f"{theme.cooking_method} {p}",
                confidence=0.88,
                reasoning=f'Uses cooking method "{theme.cooking_method}" with "{p}"',
            ))
        return variations

    def _secondary_variations(self, prompt: str, theme: WebsiteTheme) -> list[KeywordVariation]:
        p = prompt.lower().strip()
        variations = []
        for adjective in DESCRIPTIVE_ADJECTIVES:
            variations.append(KeywordVariation(
                keyword=f"{adjective} {p} {theme.primary_theme}",
                confidence=0.75,
                reasoning=f'Adds descriptive adjective "{adjective}"',
                category=VariationCategory.SECONDARY,
            ))
        for meal_word in MEAL_WORDS:
            variations.append(KeywordVariation(
                keyword=f"{p} {meal_word} {theme.primary_theme}",
                confidence=0.8,
                reasoning=f'Specifies meal type "{meal_word}"',
                category=VariationCategory.SECONDARY,
            ))
        for style in PREP_STYLES:
            variations.append(KeywordVariation(
                keyword=f"{style} {p} {theme.primary_theme}",
                confidence=0.7,
                reasoning=f'Adds preparation style "{style}"',
                category=VariationCategory.SECONDARY,
            ))
        return variations

    def _seasonal_variations(
        self,
        prompt: str,
        theme: WebsiteTheme,
        context: Optional[CustomContext],
    ) -> list[KeywordVariation]:
        p = prompt.lower().strip()
        today = self._clock()
        variations = []

        for holiday in holidays_for(today.month, today.day):
            if _overlaps(holiday, p):
                variations.append(KeywordVariation(
                    keyword=f"{holiday} {theme.primary_theme}",
                    confidence=0.85,
                    reasoning=f'Matches holiday "{holiday}" with website focus',
                    category=VariationCategory.SEASONAL,
                ))

        season = season_for_month(today.month)
        words: list[str] = []
        if context is not None:
            words = list(getattr(context.seasonal_modifiers, season))
        for word in words or SEASON_WORDS[season]:
            variations.append(KeywordVariation(
                keyword=f"{word} {p} {theme.primary_theme}",
                confidence=0.65,
                reasoning=f'Adds {season} context "{word}"',
                category=VariationCategory.SEASONAL,
            ))
        return variations

    def _candy_safe_variations(self, prompt: str) -> list[KeywordVariation]:
        p = normalize_prompt(prompt)
        if _contains_meat(p):
            p = ""
        return [
            KeywordVariation(
                keyword=collapse_redundancy(f"{p} {keyword}" if p else keyword),
                confidence=confidence,
                reasoning="Sweets site - replaced keywords that mentioned meat",
            )
            for keyword, confidence in CANDY_SAFE_KEYWORDS
        ]

    def _remember(self, key: str, keywords: list[str]) -> None:
        updated = self.state.recent_keywords.get(key, []) + keywords
        self.state.recent_keywords[key] = updated[-RECENT_KEYWORDS_LIMIT:]

    def recent_keywords(self, domain: str) -> list[str]:
        return list(self.state.recent_keywords.get(normalize_domain(domain), []))

    # ------------------------------------------------------------------
    # Multi-website batches
    # ------------------------------------------------------------------

    def generate_many(
        self,
        domains: Iterable[str],
        prompt: str = "recipes",
        count: int = 3,
    ) -> dict[str, list[KeywordVariation]]:
        """
        Generate keywords for several websites, one at a time.

        A failure for one domain is logged and replaced with a single
        low-confidence fallback keyword; the other domains are unaffected.
        """
        results: dict[str, list[KeywordVariation]] = {}
        for domain in domains:
            try:
                variations = self.generate(domain, prompt, count)
            except Exception as exc:
                error = GenerationError(domain, str(exc) or exc.__class__.__name__)
                logger.error("keywords.generation_failed %s", error, exc_info=exc)
                try:
                    fallback = self._fallback_variation(domain, prompt, error)
                except Exception:
                    logger.exception("keywords.fallback_failed domain=%s", domain)
                    fallback = KeywordVariation(
                        keyword=normalize_prompt(prompt) or "recipes",
                        confidence=FALLBACK_CONFIDENCE,
                        reasoning=f"Fallback keyword due to generation error: {error.reason}",
                    )
                results[domain] = [fallback]
                continue
            self.record_usage(domain, [v.keyword for v in variations], prompt)
            results[domain] = variations
        return results

    def _fallback_variation(self, domain: str, prompt: str, error: GenerationError) -> KeywordVariation:
        key = normalize_domain(domain)
        theme = self._themes.get(key)
        p = normalize_prompt(prompt)
        if p:
            keyword = f"{p} {theme.primary_theme}" if theme else p
        elif theme:
            categories = domain_rotation_categories(key)
            category = categories[self.state.rotation_index.get(key, 0) % len(categories)]
            keyword = combine_category(category, theme.primary_theme)
        else:
            keyword = "recipes"
        return KeywordVariation(
            keyword=collapse_redundancy(keyword),
            confidence=FALLBACK_CONFIDENCE,
            reasoning=f"Fallback keyword due to generation error: {error.reason}",
        )

    # ------------------------------------------------------------------
    # Usage history and analytics
    # ------------------------------------------------------------------

    def record_usage(
        self,
        domain: str,
        keywords: list[str],
        prompt: Optional[str] = None,
        results_count: Optional[int] = None,
    ) -> None:
        key = normalize_domain(domain)
        history = self.state.history.setdefault(key, deque(maxlen=HISTORY_LIMIT))
        history.append(KeywordHistoryEntry(
            website=key,
            keywords=list(keywords),
            timestamp=self._clock(),
            prompt=prompt,
            results_count=results_count,
        ))

    def get_analytics(self, domain: str, days: int = 30) -> KeywordAnalytics:
        key = normalize_domain(domain)
        cutoff = self._clock() - timedelta(days=days)
        entries = [h for h in self.state.history.get(key, ()) if h.timestamp >= cutoff]

        total = len(entries)
        average = sum(h.results_count or 0 for h in entries) / total if total else 0.0

        counts: Counter = Counter()
        results_by_keyword: Counter = Counter()
        for entry in entries:
            for keyword in entry.keywords:
                counts[keyword] += 1
                results_by_keyword[keyword] += entry.results_count or 0

        top = [
            KeywordCount(keyword=k, count=c, avg_results=results_by_keyword[k] / c)
            for k, c in counts.most_common(10)
        ]
        prompts = Counter(h.prompt for h in entries if h.prompt)
        breakdown = [PromptCount(prompt=p, count=c) for p, c in prompts.most_common()]

        return KeywordAnalytics(
            total_searches=total,
            average_results=average,
            top_keywords=top,
            prompt_breakdown=breakdown,
        )

    def get_next_keyword(self, domain: str, prompt: Optional[str] = None) -> str:
        """Rotate through the most recently recorded keyword set for a domain and prompt."""
        key = normalize_domain(domain)
        rotation_key = f"{key}_{prompt or 'default'}"
        matching = [
            h for h in self.state.history.get(key, ())
            if h.prompt == prompt or (not h.prompt and not prompt)
        ]
        if not matching or not matching[-1].keywords:
            theme = self._themes.get(key)
            return f"{prompt or 'recipes'} {theme.primary_theme}" if theme else "recipes"

        latest = matching[-1].keywords
        index = self.state.next_keyword_index.get(rotation_key, 0)
        self.state.next_keyword_index[rotation_key] = index + 1
        return latest[index % len(latest)]
