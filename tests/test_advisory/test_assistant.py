"""
Tests for kisan_advisor/advisory/assistant.py.

What we test
------------
analyze_query():
  - Keyword routing: irrigation, crop, image hint, capabilities fallback.
  - Several matching rules combine in a fixed order.
  - Empty recommendation list never breaks a crop question.
  - Language tag prefix.

Assistant:
  - Starts with the greeting.
  - Empty input is ignored; whitespace is answered as typed;
    image-only input becomes a stock prompt.
  - Unsupported language is rejected at construction.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from kisan_advisor.advisory.assistant import (
    CAPABILITIES,
    GREETING,
    IMAGE_HINT,
    IMAGE_ONLY_PROMPT,
    SUPPORTED_LANGUAGES,
    Assistant,
    analyze_query,
    translate,
)
from kisan_advisor.advisory.irrigation import IRRIGATE_ADVICE
from kisan_advisor.models.recommendation import CropRecommendation
from kisan_advisor.recommendations.ranker import build_recommendations
from kisan_advisor.utils.number_format import format_fixed

LEAF = Path("leaf.jpg")


@pytest.fixture
def recommendations(sample_soil, sample_weather, sample_market):
    return build_recommendations(sample_soil, sample_weather, sample_market)


def _top_line(recs) -> str:
    top = recs[0]
    return (
        f"Top recommendation now: {top.crop_name} "
        f"(yield ~{format_fixed(top.expected_yield_t_per_ha, 1)} t/ha, "
        f"profit ~${format_fixed(top.profit_usd_per_ha)}/ha)."
    )


class TestAnalyzeQuery:
    def test_irrigation_question(self, sample_soil, sample_weather, recommendations):
        reply = analyze_query("Should I water today?", sample_soil, sample_weather, recommendations)
        assert reply == IRRIGATE_ADVICE

    def test_irrigation_keyword_case_insensitive(self, sample_soil, sample_weather):
        assert analyze_query("IRRIGATION?", sample_soil, sample_weather, []) == IRRIGATE_ADVICE

    def test_crop_question(self, sample_soil, sample_weather, recommendations):
        reply = analyze_query("Which crop is best?", sample_soil, sample_weather, recommendations)
        assert reply == _top_line(recommendations)
        assert reply.startswith("Top recommendation now: Rice")

    @pytest.mark.parametrize("query", ["What should I plant?", "what can I grow here"])
    def test_crop_synonyms(self, query, sample_soil, sample_weather, recommendations):
        assert analyze_query(query, sample_soil, sample_weather, recommendations).startswith(
            "Top recommendation now:"
        )

    def test_unmatched_gives_capabilities(self, sample_soil, sample_weather, recommendations):
        assert analyze_query("hello", sample_soil, sample_weather, recommendations) == CAPABILITIES

    def test_crop_figures_round_halves_up(self, sample_soil, sample_weather):
        top = CropRecommendation(
            crop_name="Rice",
            suitability="high",
            expected_yield_t_per_ha=6.25,
            profit_usd_per_ha=1270.5,
            sustainability_score=85,
            rationale="",
        )
        reply = analyze_query("Which crop?", sample_soil, sample_weather, [top])
        assert reply == "Top recommendation now: Rice (yield ~6.3 t/ha, profit ~$1271/ha)."

    def test_crop_question_without_recommendations(self, sample_soil, sample_weather):
        assert analyze_query("Which crop?", sample_soil, sample_weather, []) == CAPABILITIES

    def test_image_hint(self, sample_soil, sample_weather, recommendations):
        reply = analyze_query(
            IMAGE_ONLY_PROMPT, sample_soil, sample_weather, recommendations, has_image=True
        )
        assert reply == IMAGE_HINT

    def test_rules_combine_in_order(self, sample_soil, sample_weather, recommendations):
        reply = analyze_query(
            "water and crop advice please",
            sample_soil, sample_weather, recommendations, has_image=True,
        )
        assert reply.split("\n\n") == [IMAGE_HINT, IRRIGATE_ADVICE, _top_line(recommendations)]

    def test_language_tag(self, sample_soil, sample_weather, recommendations):
        reply = analyze_query("hello", sample_soil, sample_weather, recommendations, lang="hi-IN")
        assert reply == "[हिंदी] " + CAPABILITIES

    def test_deterministic(self, sample_soil, sample_weather, recommendations):
        args = ("water crop", sample_soil, sample_weather, recommendations)
        assert analyze_query(*args) == analyze_query(*args)


class TestTranslate:
    def test_english_untagged(self):
        assert translate("Hi", "en-IN") == "Hi"

    @pytest.mark.parametrize(
        "lang, tag",
        [("mr-IN", "[मराठी] "), ("te-IN", "[తెలుగు] "), ("ta-IN", "[தமிழ்] "), ("bn-IN", "[বাংলা] ")],
    )
    def test_tags(self, lang, tag):
        assert translate("Hi", lang) == tag + "Hi"

    def test_unknown_language_passes_through(self):
        assert translate("Hi", "fr-FR") == "Hi"

    def test_six_languages(self):
        assert len(SUPPORTED_LANGUAGES) == 6


class TestAssistant:
    def test_starts_with_greeting(self, sample_soil, sample_weather, recommendations):
        bot = Assistant(sample_soil, sample_weather, recommendations)
        assert len(bot.messages) == 1
        assert bot.messages[0].role == "assistant"
        assert bot.messages[0].content == GREETING

    def test_ask_appends_both_messages(self, sample_soil, sample_weather, recommendations):
        bot = Assistant(sample_soil, sample_weather, recommendations)
        reply = bot.ask("  Should I irrigate?  ")
        assert reply == IRRIGATE_ADVICE
        assert [m.role for m in bot.messages] == ["assistant", "user", "assistant"]
        assert bot.messages[1].content == "  Should I irrigate?  "
        assert bot.messages[2].content == reply

    def test_empty_input_ignored(self, sample_soil, sample_weather, recommendations):
        bot = Assistant(sample_soil, sample_weather, recommendations)
        assert bot.ask("") is None
        assert len(bot.messages) == 1

    def test_whitespace_input_answered(self, sample_soil, sample_weather, recommendations):
        bot = Assistant(sample_soil, sample_weather, recommendations)
        assert bot.ask("   ") == CAPABILITIES
        assert bot.messages[1].content == "   "
        assert len(bot.messages) == 3

    def test_image_only(self, sample_soil, sample_weather, recommendations):
        bot = Assistant(sample_soil, sample_weather, recommendations)
        reply = bot.ask("", image=LEAF)
        user_msg = bot.messages[1]
        assert user_msg.content == IMAGE_ONLY_PROMPT
        assert user_msg.has_image
        assert user_msg.image == LEAF
        assert reply == IMAGE_HINT

    def test_language_applies_to_replies(self, sample_soil, sample_weather, recommendations):
        bot = Assistant(sample_soil, sample_weather, recommendations, lang="ta-IN")
        assert bot.ask("hello").startswith("[தமிழ்] ")

    def test_sessions_do_not_share_history(self, sample_soil, sample_weather, recommendations):
        a = Assistant(sample_soil, sample_weather, recommendations)
        b = Assistant(sample_soil, sample_weather, recommendations)
        a.ask("hello")
        assert len(b.messages) == 1

    def test_unsupported_language_rejected(self, sample_soil, sample_weather, recommendations):
        with pytest.raises(ValueError, match="Unsupported language"):
            Assistant(sample_soil, sample_weather, recommendations, lang="fr-FR")
