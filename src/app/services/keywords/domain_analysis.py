# src/app/services/keywords/domain_analysis.py
"""
Domain-name analysis: which recipe themes does a website's name suggest?
"""
from __future__ import annotations

import logging
import re
from typing import Iterable, Optional

from src.app.domain.models import DomainIntelligence, WebsiteTheme
from src.app.services.keywords.taxonomy import (
    CATEGORIES_BY_ID,
    COMPOUND_VOCABULARY,
    DOMAIN_CATEGORY_LISTS,
    FOCUS_RULES,
    GENERIC_CONFIDENCE,
    GENERIC_FOCUS,
    KEYWORD_COMBINATIONS,
    KEYWORD_PRIORITY,
    PATTERN_DISPLAY,
    RECIPE_CATEGORIES,
    SUBSTRING_OVERRIDES,
    SWEETS_TOKENS,
    THEME_CATEGORIES,
)
from src.services.domains import normalize_domain, strip_tld

logger = logging.getLogger(__name__)

_SEPARATORS_RE = re.compile(r"[\s\-_.]+")
_VOCABULARY_LONGEST_FIRST = sorted(COMPOUND_VOCABULARY, key=len, reverse=True)


def _unique(items: Iterable[str]) -> list[str]:
    seen: set[str] = set()
    out: list[str] = []
    for item in items:
        if item and item not in seen:
            seen.add(item)
            out.append(item)
    return out


def split_compound_domain(name: str) -> list[str]:
    """
    Split a concatenated name into known words, in reading order.

    Known vocabulary is matched longest first ("cooking" before "cook"); any
    leftover run longer than two characters is kept as its own word.
    """
    remaining = name.lower()
    found: list[tuple[int, str]] = []
    for word in _VOCABULARY_LONGEST_FIRST:
        index = remaining.find(word)
        if index < 0:
            continue
        found.append((index, word))
        remaining = remaining[:index] + " " * len(word) + remaining[index + len(word):]

    for match in re.finditer(r"[^\s\-_.]+", remaining):
        if len(match.group()) > 2:
            found.append((match.start(), match.group()))

    found.sort(key=lambda item: item[0])
    return _unique(word for _, word in found)


def tokenize_domain(domain: str) -> list[str]:
    """
    airfryerauthority.com -> ["airfryerauthority", "airfryer", "authority"]

    The bare name comes first, then its hyphen/underscore parts, then the
    compound split of each part.
    """
    bare = strip_tld(domain)
    parts = [p for p in _SEPARATORS_RE.split(bare) if p]
    tokens = [bare] + parts
    for part in parts:
        tokens.extend(split_compound_domain(part))
    return _unique(tokens)


def _any_token_contains(tokens: Iterable[str], needles: Iterable[str]) -> Optional[str]:
    tokens = list(tokens)
    for needle in needles:
        if any(needle in token for token in tokens):
            return needle
    return None


def display_pattern(pattern: str) -> str:
    return PATTERN_DISPLAY.get(pattern, pattern)


def analyze_domain(domain: str) -> DomainIntelligence:
    """
    Match a domain name against the theme taxonomy.

    Never raises for an unknown name: with no match the result is the generic
    "recipes" focus at low confidence.
    """
    tokens = tokenize_domain(domain)
    bare = tokens[0] if tokens else ""

    matched: dict[str, str] = {}
    for category in THEME_CATEGORIES:
        pattern = _any_token_contains(tokens, category.patterns)
        if pattern:
            matched[category.id] = pattern

    detected = list(matched)
    if not detected:
        logger.debug("keywords.domain_generic domain=%s tokens=%s", domain, tokens)
        return DomainIntelligence(
            detected_themes=[],
            primary_focus=GENERIC_FOCUS,
            confidence=GENERIC_CONFIDENCE,
            reasoning="Generic recipe site",
            tokens=tokens,
        )

    # max() keeps the first of equal confidences, so taxonomy order breaks ties
    best = max((CATEGORIES_BY_ID[c] for c in detected), key=lambda c: c.confidence)
    shown = display_pattern(matched[best.id])
    focus = best.focus.format(match=shown)
    confidence = best.confidence
    reasoning = f'Domain contains "{matched[best.id]}" - detected as {best.label.format(match=shown)}'

    detected_set = set(detected)
    for rule in FOCUS_RULES:
        if detected_set.issuperset(rule.requires):
            focus, confidence = rule.focus, rule.confidence
            reasoning = f"Domain has {rule.reasoning}"
            break

    for override in SUBSTRING_OVERRIDES:
        hit = next((s for s in override.substrings if s in bare), None)
        if hit:
            focus, confidence = override.focus, override.confidence
            reasoning = f'Domain contains "{hit}" - detected as {override.reasoning}'
            break

    logger.debug(
        "keywords.domain_analyzed domain=%s themes=%s focus=%r confidence=%.2f",
        domain,
        ",".join(detected),
        focus,
        confidence,
    )
    return DomainIntelligence(
        detected_themes=detected,
        primary_focus=focus,
        confidence=confidence,
        reasoning=reasoning,
        tokens=tokens,
        matched_patterns=matched,
    )


def is_sweets_domain(domain: str) -> bool:
    return _any_token_contains(tokenize_domain(domain), SWEETS_TOKENS) is not None


def domain_rotation_categories(domain: str) -> list[str]:
    """The rotation list for a domain, narrowed when its name implies a restricted vocabulary."""
    tokens = tokenize_domain(domain)
    for triggers, categories in DOMAIN_CATEGORY_LISTS:
        if _any_token_contains(tokens, triggers):
            return list(categories)
    return list(RECIPE_CATEGORIES)


def theme_from_intelligence(domain: str, intelligence: DomainIntelligence) -> WebsiteTheme:
    """Synthesise a theme for a website that is not in the registry."""
    secondary = []
    for category_id in intelligence.detected_themes:
        category = CATEGORIES_BY_ID[category_id]
        phrase = category.focus.format(match=display_pattern(intelligence.matched_patterns[category_id]))
        if phrase != intelligence.primary_focus:
            secondary.append(phrase)
    return WebsiteTheme(
        domain=domain,
        name=normalize_domain(domain),
        primary_theme=intelligence.primary_focus,
        secondary_themes=_unique(secondary),
        target_audience="recipe enthusiasts",
    )


def most_relevant_term(intelligence: DomainIntelligence) -> Optional[str]:
    for category_id in KEYWORD_PRIORITY:
        if category_id not in intelligence.matched_patterns:
            continue
        term = CATEGORIES_BY_ID[category_id].keyword_term
        if term:
            return term.format(match=display_pattern(intelligence.matched_patterns[category_id]))
    return None


def normalize_prompt(prompt: Optional[str]) -> str:
    """Lowercased prompt, or "" when it asks for nothing specific."""
    p = (prompt or "").lower().strip()
    return "" if p == "recipes" else p


def build_enhanced_keyword(
    prompt: str,
    theme: WebsiteTheme,
    intelligence: Optional[DomainIntelligence],
) -> str:
    """
    Fuse a prompt with the website's detected identity.

    Combination rules first, then the garden/candy/brunch/beverage identities,
    then the highest-priority detected category, then the theme itself.
    """
    p = normalize_prompt(prompt)

    def fuse(phrase: str) -> str:
        return f"{p} {phrase}" if p else phrase

    if intelligence and intelligence.detected_themes:
        detected = set(intelligence.detected_themes)
        for requires, phrase in KEYWORD_COMBINATIONS:
            if detected.issuperset(requires):
                return fuse(phrase)
        if "garden" in detected:
            return fuse("garden recipes")
        if "candy" in detected:
            return fuse("candy recipes")
        if "meal_type" in detected and "brunch" in intelligence.primary_focus:
            return fuse("brunch recipes")
        if "beverages" in detected:
            return fuse("drinks")
        term = most_relevant_term(intelligence)
        if term:
            return fuse(f"{term} recipes")

    return fuse(theme.primary_theme)
