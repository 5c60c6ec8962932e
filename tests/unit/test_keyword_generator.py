from __future__ import annotations

from datetime import datetime, timedelta, timezone

from src.app.domain.models import CustomContext, SeasonalModifiers, VariationCategory
from src.app.services.keywords import KeywordGenerator, KeywordGeneratorState
from src.app.services.keywords.context_store import CustomContextStore
from src.app.services.keywords.generator import collapse_redundancy, combine_category

MEAT = ("beef", "pork", "chicken", "meat")
THANKSGIVING_WEEK = datetime(2024, 11, 25, 9, 0, tzinfo=timezone.utc)


def _generator(**kwargs) -> KeywordGenerator:
    kwargs.setdefault("clock", lambda: THANKSGIVING_WEEK)
    return KeywordGenerator(**kwargs)


class TestCollapseRedundancy:
    def test_repeated_filler_keeps_last(self) -> None:
        assert collapse_redundancy("recipes keto recipes") == "keto recipes"

    def test_doubled_words(self) -> None:
        assert collapse_redundancy("drinks drinks") == "drinks"
        assert collapse_redundancy("Cooking cooking ideas") == "cooking ideas"

    def test_doubled_phrase(self) -> None:
        assert collapse_redundancy("air fryer air fryer chicken") == "air fryer chicken"

    def test_leaves_clean_keywords_alone(self) -> None:
        assert collapse_redundancy("easy thanksgiving keto recipes") == "easy thanksgiving keto recipes"


class TestCombineCategory:
    def test_prefixes_theme_words(self) -> None:
        assert combine_category("crispy recipes", "air fryer cooking") == "air fryer crispy recipes"

    def test_overlapping_category_is_kept(self) -> None:
        assert combine_category("quick air fryer meals", "air fryer cooking") == "quick air fryer meals"

    def test_generic_theme_adds_nothing(self) -> None:
        assert combine_category("soup recipes", "recipes") == "soup recipes"


class TestRotationMode:
    def test_candy_domain_never_gets_meat(self) -> None:
        generator = _generator()

        for _ in range(12):
            for variation in generator.generate("crunchcloudcandy.com", "recipes", 3):
                assert not any(meat in variation.keyword for meat in MEAT)

    def test_consecutive_calls_do_not_repeat(self) -> None:
        generator = _generator()

        keywords = [generator.generate("airfryerauthority.com", "recipes", 1)[0].keyword for _ in range(5)]

        assert len(set(keywords)) == 5
        assert keywords[0] == "air fryer recipes"
        assert keywords[1] == "air fryer crispy recipes"

    def test_empty_prompt_is_rotation(self) -> None:
        generator = _generator()

        keywords = [v.keyword for v in generator.generate("zzqx.com", "", 3)]

        assert keywords == ["chicken recipes", "beef recipes", "pork recipes"]

    def test_exhausted_rotation_starts_over(self) -> None:
        generator = _generator()
        calls = [
            [v.keyword for v in generator.generate("crunchcloudcandy.com", "recipes", 3)]
            for _ in range(4)
        ]

        assert calls[0] == ["candy dessert recipes", "candy sweet treats", "homemade candy"]
        assert len(calls[2]) == 2
        assert calls[3] == calls[0]

    def test_recent_keywords_are_bounded(self) -> None:
        generator = _generator()

        for _ in range(8):
            generator.generate("zzqx.com", "recipes", 3)

        assert len(generator.recent_keywords("zzqx.com")) == 10

    def test_state_is_per_domain(self) -> None:
        state = KeywordGeneratorState()
        generator = _generator(state=state)

        generator.generate("airfryerauthority.com", "recipes", 2)
        first_other = generator.generate("zzqx.com", "recipes", 1)[0].keyword

        assert first_other == "chicken recipes"
        assert state.rotation_index == {"airfryerauthority.com": 2, "zzqx.com": 1}

    def test_zero_count_returns_nothing(self) -> None:
        assert _generator().generate("zzqx.com", "recipes", 0) == []


class TestThemedMode:
    def test_prompt_is_fused_with_site_theme(self) -> None:
        variations = _generator().generate("oliveketokitchen.com", "thanksgiving", 3)

        assert len(variations) == 3
        assert variations[0].keyword == "thanksgiving keto recipes"
        assert variations[0].confidence == 0.95
        assert all("thanksgiving" in v.keyword for v in variations)
        confidences = [v.confidence for v in variations]
        assert confidences == sorted(confidences, reverse=True)

    def test_prompt_containing_theme_is_collapsed(self) -> None:
        variations = _generator().generate("oliveketokitchen.com", "keto recipes", 3)

        assert variations
        for variation in variations:
            assert "recipes recipes" not in variation.keyword
            assert variation.keyword.split().count("recipes") <= 1

    def test_recent_overlap_never_empties_result(self) -> None:
        generator = _generator()

        for _ in range(5):
            assert generator.generate("oliveketokitchen.com", "thanksgiving", 3)

    def test_meat_prompt_on_candy_site_is_replaced(self) -> None:
        variations = _generator().generate("crunchcloudcandy.com", "chicken", 3)

        assert [v.keyword for v in variations] == ["candy recipes", "sweet treats", "homemade candy"]

    def test_specific_prompt_kept_in_safe_keywords(self) -> None:
        class MeatyGenerator(KeywordGenerator):
            def _themed_variations(self, prompt, theme, context, count, recent, intelligence):
                variations = super()._themed_variations(prompt, theme, context, count, recent, intelligence)
                variations[0].keyword = "halloween beef jerky"
                return variations

        variations = MeatyGenerator(clock=lambda: THANKSGIVING_WEEK).generate("crunchcloudcandy.com", "halloween", 3)

        assert [v.keyword for v in variations] == [
            "halloween candy recipes",
            "halloween sweet treats",
            "halloween homemade candy",
        ]

    def test_seasonal_variations_use_context_modifiers(self) -> None:
        generator = _generator()
        generator.set_custom_context("zzqx.com", CustomContext(
            primary_theme="soup recipes",
            seasonal_modifiers=SeasonalModifiers(fall=["pumpkin"]),
        ))

        variations = generator.generate("zzqx.com", "stew", 10)

        seasonal = [v for v in variations if v.category == VariationCategory.SEASONAL]
        assert [v.keyword for v in seasonal] == ["pumpkin stew soup recipes"]


class TestCustomContext:
    def test_context_replaces_detection(self) -> None:
        generator = _generator()
        generator.set_custom_context("www.Example.com", CustomContext(
            primary_theme="vegan comfort food",
            custom_keywords=["lentil soup", "mac and cheese"],
        ))

        keywords = [v.keyword for v in generator.generate("example.com", "recipes", 2)]

        assert keywords == ["vegan comfort lentil soup", "vegan comfort mac and cheese"]
        assert generator.get_custom_context("example.com").primary_theme == "vegan comfort food"

    def test_remove_context(self) -> None:
        generator = _generator()
        generator.set_custom_context("zzqx.com", CustomContext(primary_theme="tea time"))

        assert generator.remove_custom_context("zzqx.com") is True
        assert generator.remove_custom_context("zzqx.com") is False
        assert generator.generate("zzqx.com", "recipes", 1)[0].keyword == "chicken recipes"

    def test_contexts_survive_restart(self, tmp_path) -> None:
        store = CustomContextStore(tmp_path / "contexts.json")
        _generator(context_store=store).set_custom_context("zzqx.com", CustomContext(
            primary_theme="tea time",
            custom_keywords=["scones"],
            notes="afternoon tea blog",
        ))

        restored = _generator(context_store=CustomContextStore(tmp_path / "contexts.json"))

        context = restored.get_custom_context("zzqx.com")
        assert context is not None
        assert context.custom_keywords == ["scones"]
        assert context.notes == "afternoon tea blog"

    def test_unreadable_context_file_is_ignored(self, tmp_path) -> None:
        path = tmp_path / "contexts.json"
        path.write_text("{not json", encoding="utf-8")

        assert CustomContextStore(path).load() == {}


class TestGenerateMany:
    def test_failure_for_one_domain_uses_fallback(self) -> None:
        class FlakyGenerator(KeywordGenerator):
            def generate(self, domain, prompt="recipes", count=3):
                if domain == "broken.com":
                    raise RuntimeError("taxonomy exploded")
                return super().generate(domain, prompt, count)

        generator = FlakyGenerator(clock=lambda: THANKSGIVING_WEEK)

        results = generator.generate_many(["broken.com", "oliveketokitchen.com"], "thanksgiving", 3)

        fallback = results["broken.com"]
        assert len(fallback) == 1
        assert fallback[0].keyword == "thanksgiving"
        assert fallback[0].confidence == 0.5
        assert "taxonomy exploded" in fallback[0].reasoning
        assert len(results["oliveketokitchen.com"]) == 3
        assert generator.get_analytics("oliveketokitchen.com").total_searches == 1
        assert generator.get_analytics("broken.com").total_searches == 0

    def test_fallback_for_known_site_uses_its_theme(self) -> None:
        class BrokenGenerator(KeywordGenerator):
            def generate(self, domain, prompt="recipes", count=3):
                raise ValueError("nope")

        results = BrokenGenerator().generate_many(["airfryerauthority.com"], "recipes", 3)

        assert results["airfryerauthority.com"][0].keyword == "air fryer recipes"


class TestUsageHistory:
    def test_analytics_window_and_counts(self) -> None:
        now = [THANKSGIVING_WEEK - timedelta(days=40)]
        generator = KeywordGenerator(clock=lambda: now[0])
        generator.record_usage("ketosite.com", ["old keyword"], "old", 10)
        now[0] = THANKSGIVING_WEEK
        generator.record_usage("ketosite.com", ["keto recipes", "keto snacks"], "keto", 20)
        generator.record_usage("ketosite.com", ["keto recipes"], "keto", 40)
        generator.record_usage("othersite.com", ["other"], "keto", 99)

        analytics = generator.get_analytics("ketosite.com", days=30)

        assert analytics.total_searches == 2
        assert analytics.average_results == 30
        assert analytics.top_keywords[0].keyword == "keto recipes"
        assert analytics.top_keywords[0].count == 2
        assert analytics.top_keywords[0].avg_results == 30
        assert [(p.prompt, p.count) for p in analytics.prompt_breakdown] == [("keto", 2)]

    def test_empty_analytics(self) -> None:
        analytics = _generator().get_analytics("nothing.com")

        assert analytics.total_searches == 0
        assert analytics.average_results == 0
        assert analytics.top_keywords == []

    def test_history_is_bounded(self) -> None:
        generator = _generator()

        for i in range(120):
            generator.record_usage("busy.com", [f"k{i}"])

        assert len(generator.state.history["busy.com"]) == 100

    def test_next_keyword_rotates_latest_set(self) -> None:
        generator = _generator()
        generator.record_usage("ketosite.com", ["a", "b"], "keto")

        assert [generator.get_next_keyword("ketosite.com", "keto") for _ in range(3)] == ["a", "b", "a"]

    def test_next_keyword_without_history(self) -> None:
        generator = _generator()

        assert generator.get_next_keyword("airfryerauthority.com") == "recipes air fryer cooking"
        assert generator.get_next_keyword("zzqx.com", "keto") == "recipes"


class TestGenerateManyFallbackFailure:
    def test_broken_fallback_does_not_abort_siblings(self, monkeypatch) -> None:
        from src.app.services.keywords import generator as generator_module

        original = generator_module.domain_rotation_categories

        def rotation_categories(domain: str) -> list[str]:
            if "candy" in domain:
                raise KeyError("rotation table missing")
            return original(domain)

        monkeypatch.setattr(generator_module, "domain_rotation_categories", rotation_categories)
        generator = _generator()

        results = generator.generate_many(["crunchcloudcandy.com", "airfryerauthority.com"], "recipes", 2)

        fallback = results["crunchcloudcandy.com"]
        assert [v.keyword for v in fallback] == ["recipes"]
        assert fallback[0].confidence == 0.5
        assert [v.keyword for v in results["airfryerauthority.com"]] == [
            "air fryer recipes",
            "air fryer crispy recipes",
        ]
