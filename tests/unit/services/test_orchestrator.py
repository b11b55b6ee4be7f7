"""Unit tests for the recommendation orchestrator."""

import orjson
import pytest

from sommelier_service.exceptions import UnknownCategoryError
from sommelier_service.infrastructure.catalog import Catalog
from sommelier_service.models import ChatTurn, StrainCategory
from sommelier_service.schemas import ChatContext, RecommendationParams
from sommelier_service.services.candidates import mood_effects
from sommelier_service.services.generation_gateway import GatewayConfig, GenerationGateway
from sommelier_service.services.orchestrator import RecommendationOrchestrator
from sommelier_service.services.prompts import SOMMELIER_SYSTEM_PROMPT
from sommelier_service.services.response_composer import MOOD_HEADLINES


def _orchestrator(config: GatewayConfig, catalog: Catalog, provider) -> RecommendationOrchestrator:
    return RecommendationOrchestrator(GenerationGateway(config, [provider]), catalog)


class TestClassifyAndScore:
    def test_relax_before_bed(self, offline_orchestrator: RecommendationOrchestrator) -> None:
        reply = offline_orchestrator.classify_and_score("I want to relax before bed")

        assert reply.intent == "mood"
        assert reply.message == MOOD_HEADLINES["relax"]
        assert [r.id for r in reply.recommendations] == [
            "northern-lights",
            "granddaddy-purple",
            "purple-punch",
        ]
        for item in reply.recommendations:
            assert 0 <= item.match_score <= 100
            assert item.category == "indica"
            assert "energetic" not in item.effects

    def test_does_not_mutate_profile(self, offline_orchestrator: RecommendationOrchestrator, default_profile) -> None:
        offline_orchestrator.classify_and_score("I want to relax", default_profile)
        assert set(default_profile.effect_weights.values()) == {3}

    def test_match_score_includes_requested_effects(
        self, offline_orchestrator: RecommendationOrchestrator, catalog: Catalog, default_profile
    ) -> None:
        reply = offline_orchestrator.classify_and_score("I want to relax", default_profile)

        top = catalog.get(reply.recommendations[0].id)
        scorer = offline_orchestrator.scorer
        emphasized = scorer.score_product(top, default_profile.with_emphasis(mood_effects("relax")))
        assert reply.recommendations[0].match_score == round(emphasized)
        assert emphasized > scorer.score_product(top, default_profile)


class TestChat:
    @pytest.mark.asyncio
    async def test_generated_reply_verbatim(
        self, keyed_config: GatewayConfig, catalog: Catalog, make_provider
    ) -> None:
        provider = make_provider("anthropic", reply="Northern Lights, friend.")
        orchestrator = _orchestrator(keyed_config, catalog, provider)

        reply = await orchestrator.chat("need sleep", history=[ChatTurn("assistant", "hey")])

        assert reply.message == "Northern Lights, friend."
        assert reply.source == "generated"
        assert reply.provider == "anthropic"
        assert reply.reply is None
        sent = provider.calls[0]
        assert [t.content for t in sent["history"]] == ["hey", "need sleep"]
        assert sent["max_tokens"] == 800
        assert sent["temperature"] == 0.8
        assert sent["model"] == "claude-sonnet-4-20250514"

    @pytest.mark.asyncio
    async def test_full_window_of_prior_turns_plus_new_message(
        self, keyed_config: GatewayConfig, catalog: Catalog, make_provider
    ) -> None:
        provider = make_provider("anthropic", reply="ok")
        orchestrator = _orchestrator(keyed_config, catalog, provider)
        history = [ChatTurn("user" if i % 2 == 0 else "assistant", f"turn {i}") for i in range(10)]

        await orchestrator.chat("new", history=history)

        sent = provider.calls[0]["history"]
        assert [t.content for t in sent] == [f"turn {i}" for i in range(10)] + ["new"]
        assert sent[0].role == "user"
        assert sent[-1].role == "user"

    @pytest.mark.asyncio
    async def test_profile_context_in_instruction(
        self, keyed_config: GatewayConfig, catalog: Catalog, make_provider
    ) -> None:
        provider = make_provider("anthropic", reply="ok")
        orchestrator = _orchestrator(keyed_config, catalog, provider)
        context = ChatContext(tolerance="low", favorite_strains=["Blue Dream"], is_premium=True)

        await orchestrator.chat("hi", context=context)

        instruction = provider.calls[0]["instruction"]
        assert instruction.startswith(SOMMELIER_SYSTEM_PROMPT)
        assert instruction.endswith("## User Profile\nFavorite strains: Blue Dream\nTolerance: low")

    @pytest.mark.asyncio
    async def test_forced_failure_never_surfaces(self, failing_orchestrator: RecommendationOrchestrator) -> None:
        for text in ["I want to relax", "what is zzzz", "", "Explain terpenes", "suggest something"]:
            reply = await failing_orchestrator.chat(text)
            assert reply.source == "fallback"
            assert reply.message
            assert reply.reply is not None

    @pytest.mark.asyncio
    async def test_blank_generation_falls_back(
        self, keyed_config: GatewayConfig, catalog: Catalog, make_provider
    ) -> None:
        orchestrator = _orchestrator(keyed_config, catalog, make_provider("anthropic", reply="   "))
        reply = await orchestrator.chat("I want to relax")
        assert reply.source == "fallback"


class TestStructuredRequests:
    @pytest.mark.asyncio
    async def test_canned_recommendations_idempotent(self, offline_orchestrator: RecommendationOrchestrator) -> None:
        params = RecommendationParams(mood="sleep", time_of_day="night", experience_level="beginner")
        first = await offline_orchestrator.get_recommendations(params)
        second = await offline_orchestrator.get_recommendations(params)

        assert first == second
        assert first.source == "fallback"
        assert len(first.recommendations) == 3
        assert {r.type for r in first.recommendations} <= {"Indica", "Hybrid"}

    @pytest.mark.asyncio
    async def test_default_params_recommendations(self, offline_orchestrator: RecommendationOrchestrator) -> None:
        result = await offline_orchestrator.get_recommendations(RecommendationParams())
        assert [r.name for r in result.recommendations] == [
            "Northern Lights",
            "Jack Herer",
            "Girl Scout Cookies",
        ]

    @pytest.mark.asyncio
    async def test_generated_recommendations_parsed(
        self, keyed_config: GatewayConfig, catalog: Catalog, make_provider
    ) -> None:
        payload = {
            "intro": "Here you go",
            "strains": [
                {"name": "Blue Dream", "type": "Hybrid", "thcRange": "17-24%", "matchScore": 91,},
            ],
            "tips": "Start low",
        }
        text = "Sure!\n```json\n" + orjson.dumps(payload).decode() + "\n```"
        provider = make_provider("anthropic", reply=text)
        orchestrator = _orchestrator(keyed_config, catalog, provider)

        result = await orchestrator.get_recommendations(RecommendationParams(mood="relaxed"))

        assert result.source == "generated"
        assert result.provider == "anthropic"
        assert result.recommendations[0].name == "Blue Dream"
        assert result.recommendations[0].match_score == 91
        assert result.intro == "Here you go"
        assert provider.calls[0]["temperature"] == 0.7

    @pytest.mark.asyncio
    async def test_unparseable_recommendations_fall_back(
        self, keyed_config: GatewayConfig, catalog: Catalog, make_provider
    ) -> None:
        orchestrator = _orchestrator(keyed_config, catalog, make_provider("anthropic", reply="no json, sorry"))
        result = await orchestrator.get_recommendations(RecommendationParams())
        assert result.source == "fallback"
        assert len(result.recommendations) == 3

    @pytest.mark.asyncio
    async def test_analysis_fallback_enriched(self, failing_orchestrator: RecommendationOrchestrator) -> None:
        analysis = await failing_orchestrator.analyze("Northern Lights", "Indica", thc=18.5)

        assert analysis.source == "fallback"
        assert "Insomnia" in analysis.medical_benefits
        assert analysis.experience_level == "beginner"
        assert len(analysis.similar_strains) == 3
        assert "Northern Lights" not in analysis.similar_strains

    @pytest.mark.asyncio
    async def test_analysis_unlisted_strain_gets_top_rated_peers(
        self, offline_orchestrator: RecommendationOrchestrator, catalog: Catalog
    ) -> None:
        analysis = await offline_orchestrator.analyze("Mystery Haze", "sativa")

        assert analysis.similar_strains == [p.name for p in catalog.top_rated(3, category="sativa")]
        assert {catalog.find_by_name(n).category for n in analysis.similar_strains} == {StrainCategory.SATIVA}

    @pytest.mark.asyncio
    async def test_analysis_sativa_template(self, offline_orchestrator: RecommendationOrchestrator) -> None:
        analysis = await offline_orchestrator.analyze("Mystery Haze", "sativa")
        assert "Daytime use" in analysis.best_for
        assert analysis.effects.mental == ["Creative", "Focused", "Uplifted"]

    @pytest.mark.asyncio
    async def test_analysis_unknown_category(self, offline_orchestrator: RecommendationOrchestrator) -> None:
        with pytest.raises(UnknownCategoryError):
            await offline_orchestrator.analyze("X", "ruderalis")

    @pytest.mark.asyncio
    async def test_analysis_generated(self, keyed_config: GatewayConfig, catalog: Catalog, make_provider) -> None:
        payload = {
            "effects": {"physical": ["Heavy"], "mental": ["Calm"], "emotional": ["Content"]},
            "bestFor": ["Sleep"],
            "medicalBenefits": ["Insomnia"],
            "sideEffects": ["Dry mouth"],
            "consumptionTips": "Vaporize",
            "similarStrains": ["Bubba Kush"],
            "experienceLevel": "beginner",
            "duration": "2-4 hours",
            "onset": "5 minutes",
        }
        provider = make_provider("anthropic", reply=orjson.dumps(payload).decode())
        orchestrator = _orchestrator(keyed_config, catalog, provider)

        analysis = await orchestrator.analyze("Northern Lights", "indica", cbd=0.1)

        assert analysis.source == "generated"
        assert analysis.best_for == ["Sleep"]
        assert provider.calls[0]["model"] == "claude-3-5-haiku-20241022"
        assert "CBD: 0.1%" in provider.calls[0]["history"][0].content

    @pytest.mark.asyncio
    async def test_pairing_fallbacks(self, failing_orchestrator: RecommendationOrchestrator) -> None:
        movies = await failing_orchestrator.get_activity_pairing("Netflix night")
        hiking = await failing_orchestrator.get_activity_pairing("hiking")

        assert movies.pairings[0].confidence == "perfect"
        assert "hiking" in hiking.intro
        assert hiking.source == "fallback"

    @pytest.mark.asyncio
    async def test_pairing_generated(self, keyed_config: GatewayConfig, catalog: Catalog, make_provider) -> None:
        payload = {
            "intro": "Hikes call for clear-headed energy.",
            "pairings": [
                {"strain": "Durban Poison", "type": "Sativa", "why": "Clean, focused lift", "confidence": "perfect"},
                {"strain": "Harlequin", "type": "Hybrid", "why": "Gentle and functional", "confidence": "good"},
            ],
            "tips": "Bring water.",
        }
        reply = "Here you go:\n" + orjson.dumps(payload).decode() + "\nEnjoy!"
        provider = make_provider("anthropic", reply=reply)
        orchestrator = _orchestrator(keyed_config, catalog, provider)

        pairing = await orchestrator.get_activity_pairing("hiking")

        assert pairing.source == "generated"
        assert [p.strain for p in pairing.pairings] == ["Durban Poison", "Harlequin"]
        assert pairing.tips == "Bring water."
        sent = provider.calls[0]
        assert sent["model"] == "claude-3-5-haiku-20241022"
        assert sent["max_tokens"] == 500
        assert sent["temperature"] == 0.6
        assert "hiking" in sent["history"][-1].content
