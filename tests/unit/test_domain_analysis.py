from __future__ import annotations

import pytest

from src.app.services.keywords.domain_analysis import (
    analyze_domain,
    build_enhanced_keyword,
    domain_rotation_categories,
    is_sweets_domain,
    normalize_prompt,
    split_compound_domain,
    theme_from_intelligence,
    tokenize_domain,
)
from src.services.domains import normalize_domain, strip_tld


class TestDomainNames:
    def test_normalize_domain(self) -> None:
        assert normalize_domain("https://www.AirFryerAuthority.com/recipes") == "airfryerauthority.com"

    def test_strip_tld(self) -> None:
        assert strip_tld("thesipspot.com") == "thesipspot"
        assert strip_tld("cozy-kitchen.io") == "cozy-kitchen"

    def test_split_compound_domain(self) -> None:
        assert split_compound_domain("airfryerauthority") == ["airfryer", "authority"]
        assert split_compound_domain("frozenmealhq") == ["frozen", "mealhq"]

    def test_tokenize_keeps_bare_name_first(self) -> None:
        tokens = tokenize_domain("balcony-harvest.com")
        assert tokens[0] == "balcony-harvest"
        assert "balcony" in tokens
        assert "harvest" in tokens


class TestAnalyzeDomain:
    @pytest.mark.parametrize(
        ("domain", "focus", "confidence"),
        [
            ("frozenmealhq.com", "frozen meals", 0.95),
            ("balconyharvestkitchen.com", "harvest recipes", 0.95),
            ("airfryerauthority.com", "air fryer recipes", 0.95),
            ("crunchcloudcandy.com", "candy recipes", 0.95),
            ("mocktailmagic.com", "mocktails alcohol-free cocktails", 0.95),
        ],
    )
    def test_primary_focus(self, domain: str, focus: str, confidence: float) -> None:
        intelligence = analyze_domain(domain)

        assert intelligence.primary_focus == focus
        assert intelligence.confidence == confidence

    def test_detected_themes_keep_taxonomy_order(self) -> None:
        intelligence = analyze_domain("frozenmealhq.com")
        assert intelligence.detected_themes[:2] == ["frozen", "meal_prep"]

    def test_unknown_domain_is_generic(self) -> None:
        intelligence = analyze_domain("zzqx.com")

        assert intelligence.detected_themes == []
        assert intelligence.primary_focus == "recipes"
        assert intelligence.confidence == 0.5

    def test_single_category_uses_matched_pattern(self) -> None:
        intelligence = analyze_domain("ketozzqx.com")

        assert intelligence.detected_themes == ["dietary"]
        assert intelligence.primary_focus == "keto recipes"
        assert intelligence.confidence == 0.9


class TestDomainIdentity:
    def test_sweets_domains(self) -> None:
        assert is_sweets_domain("crunchcloudcandy.com") is True
        assert is_sweets_domain("sweettoothhub.com") is True
        assert is_sweets_domain("oliveketokitchen.com") is False

    def test_candy_rotation_has_no_meat(self) -> None:
        categories = domain_rotation_categories("crunchcloudcandy.com")

        assert categories[0] == "dessert recipes"
        assert not any(meat in c for c in categories for meat in ("chicken", "beef", "pork", "meat"))

    def test_unknown_domain_rotates_full_list(self) -> None:
        categories = domain_rotation_categories("zzqx.com")
        assert categories[:3] == ["chicken recipes", "beef recipes", "pork recipes"]

    def test_synthesised_theme(self) -> None:
        theme = theme_from_intelligence("ketozzqx.com", analyze_domain("ketozzqx.com"))

        assert theme.primary_theme == "keto recipes"
        assert theme.secondary_themes == []
        assert theme.target_audience == "recipe enthusiasts"


class TestEnhancedKeyword:
    def test_normalize_prompt(self) -> None:
        assert normalize_prompt("  Recipes ") == ""
        assert normalize_prompt(None) == ""
        assert normalize_prompt("Thanksgiving") == "thanksgiving"

    def test_combination_rule_wins(self) -> None:
        domain = "balconyharvestkitchen.com"
        intelligence = analyze_domain(domain)
        theme = theme_from_intelligence(domain, intelligence)

        assert build_enhanced_keyword("thanksgiving", theme, intelligence) == "thanksgiving harvest recipes"

    def test_candy_identity(self) -> None:
        domain = "crunchcloudcandy.com"
        intelligence = analyze_domain(domain)
        theme = theme_from_intelligence(domain, intelligence)

        assert build_enhanced_keyword("halloween", theme, intelligence) == "halloween candy recipes"

    def test_priority_term(self) -> None:
        domain = "ketozzqx.com"
        intelligence = analyze_domain(domain)
        theme = theme_from_intelligence(domain, intelligence)

        assert build_enhanced_keyword("thanksgiving", theme, intelligence) == "thanksgiving keto recipes"

    def test_without_intelligence_uses_theme(self) -> None:
        domain = "zzqx.com"
        theme = theme_from_intelligence(domain, analyze_domain(domain))

        assert build_enhanced_keyword("brunch", theme, None) == "brunch recipes"
