"""Recommendation orchestrator.

Every public operation tries the generation gateway first and falls back
to a deterministic local result on any failure. Generation failures are
logged, never raised; callers always get a usable reply.
"""

from collections.abc import Sequence
from typing import TypeVar

import structlog
from pydantic import BaseModel, ValidationError

from shared.constants import DEFAULT_RECOMMENDATION_LIMIT
from sommelier_service.exceptions import GenerationError, MalformedGenerationOutput
from sommelier_service.infrastructure.catalog import Catalog
from sommelier_service.models import ChatTurn, GatewayResult, ModelTier, UserPreferenceProfile
from sommelier_service.schemas import (
    ActivityPairing,
    ChatContext,
    ChatReply,
    GeneratedRecommendations,
    RecommendationParams,
    RecommendationResult,
    StrainAnalysis,
    StructuredReply,
)
from sommelier_service.services.candidates import emphasized_effects, select_candidates
from sommelier_service.services.generation_gateway import GenerationGateway
from sommelier_service.services.intent_classifier import IntentClassifier
from sommelier_service.services.local_fallbacks import (
    local_activity_pairing,
    local_analysis,
    local_recommendations,
    parse_category,
)
from sommelier_service.services.prompts import (
    ANALYSIS_SYSTEM_PROMPT,
    PAIRING_SYSTEM_PROMPT,
    SOMMELIER_SYSTEM_PROMPT,
    build_analysis_prompt,
    build_chat_instruction,
    build_pairing_prompt,
    build_recommendation_prompt,
)
from sommelier_service.services.response_composer import ResponseComposer
from sommelier_service.services.scoring import ScoringEngine
from sommelier_service.services.structured_output import extract_json_object
from sommelier_service.services.user_preference import create_default_profile

logger = structlog.get_logger()

ModelT = TypeVar("ModelT", bound=BaseModel)


class RecommendationOrchestrator:
    """Entry point for chat, recommendations, analysis and pairings."""

    # (tier, max_tokens, temperature) per operation
    CHAT_GENERATION = (ModelTier.STANDARD, 800, 0.8)
    RECOMMENDATION_GENERATION = (ModelTier.STANDARD, 800, 0.7)
    ANALYSIS_GENERATION = (ModelTier.FAST, 500, 0.5)
    PAIRING_GENERATION = (ModelTier.FAST, 500, 0.6)

    def __init__(
        self,
        gateway: GenerationGateway,
        catalog: Catalog,
        classifier: IntentClassifier | None = None,
        scorer: ScoringEngine | None = None,
        composer: ResponseComposer | None = None,
        recommendation_limit: int = DEFAULT_RECOMMENDATION_LIMIT,
    ):
        self.gateway = gateway
        self.catalog = catalog
        self.classifier = classifier or IntentClassifier()
        self.scorer = scorer or ScoringEngine()
        self.composer = composer or ResponseComposer()
        self.recommendation_limit = recommendation_limit

    # -------------------------------------------------------------------------
    # Deterministic path
    # -------------------------------------------------------------------------

    def classify_and_score(
        self,
        text: str,
        profile: UserPreferenceProfile | None = None,
    ) -> StructuredReply:
        """Classifier -> scorer -> composer, with no network access.

        Mood, activity and time-of-day requests are scored against a copy of
        the profile with the requested effects weighted one step higher, so
        the reported match scores include that emphasis.
        """
        profile = profile or create_default_profile()
        intent = self.classifier.classify(text)
        candidates = select_candidates(self.catalog, intent)

        emphasis = emphasized_effects(intent)
        scoring_profile = profile.with_emphasis(emphasis) if emphasis else profile
        ranked = self.scorer.score(candidates, scoring_profile)

        logger.debug(
            "Local reply composed",
            category=intent.category.value,
            candidates=len(candidates),
        )
        return self.composer.compose(intent, ranked, limit=self.recommendation_limit, profile=profile)

    # -------------------------------------------------------------------------
    # Chat
    # -------------------------------------------------------------------------

    async def chat(
        self,
        text: str,
        history: Sequence[ChatTurn] = (),
        context: ChatContext | None = None,
        profile: UserPreferenceProfile | None = None,
    ) -> ChatReply:
        if context is not None and context.is_premium:
            logger.debug("Premium session chat")

        tier, max_tokens, temperature = self.CHAT_GENERATION
        result = await self.gateway.generate(
            build_chat_instruction(context),
            history,
            message=text,
            tier=tier,
            max_tokens=max_tokens,
            temperature=temperature,
        )

        if result.ok and result.content.strip():
            return ChatReply(
                message=result.content,
                source="generated",
                provider=result.provider,
                model=result.model,
            )

        self._log_fallback("chat", result.error or MalformedGenerationOutput("Empty generated reply"))
        reply = self.classify_and_score(text, profile)
        return ChatReply(message=reply.message, source="fallback", reply=reply)

    # -------------------------------------------------------------------------
    # Structured requests
    # -------------------------------------------------------------------------

    async def get_recommendations(self, params: RecommendationParams) -> RecommendationResult:
        tier, max_tokens, temperature = self.RECOMMENDATION_GENERATION
        result = await self.gateway.generate(
            SOMMELIER_SYSTEM_PROMPT,
            (),
            message=build_recommendation_prompt(params),
            tier=tier,
            max_tokens=max_tokens,
            temperature=temperature,
        )

        generated = self._parse_structured("recommendations", result, GeneratedRecommendations)
        if generated is not None:
            strains = generated.recommendations or generated.strains
            if strains:
                return RecommendationResult(
                    recommendations=strains,
                    intro=generated.intro,
                    tips=generated.tips,
                    source="generated",
                    provider=result.provider,
                )
            self._log_fallback("recommendations", MalformedGenerationOutput("No strains in generated reply"))

        return local_recommendations(
            self.catalog, params, scorer=self.scorer, limit=self.recommendation_limit
        )

    async def analyze(
        self,
        strain_name: str,
        category: str,
        thc: float | None = None,
        cbd: float | None = None,
        terpenes: list[str] | None = None,
    ) -> StrainAnalysis:
        strain_category = parse_category(category)
        tier, max_tokens, temperature = self.ANALYSIS_GENERATION
        prompt = build_analysis_prompt(strain_name, strain_category.value.title(), thc, cbd, terpenes)
        result = await self.gateway.generate(
            ANALYSIS_SYSTEM_PROMPT,
            (),
            message=prompt,
            tier=tier,
            max_tokens=max_tokens,
            temperature=temperature,
        )

        analysis = self._parse_structured("analysis", result, StrainAnalysis)
        if analysis is not None:
            return analysis.model_copy(update={"source": "generated"})
        return local_analysis(self.catalog, strain_name, strain_category.value)

    async def get_activity_pairing(self, activity: str) -> ActivityPairing:
        tier, max_tokens, temperature = self.PAIRING_GENERATION
        result = await self.gateway.generate(
            PAIRING_SYSTEM_PROMPT,
            (),
            message=build_pairing_prompt(activity),
            tier=tier,
            max_tokens=max_tokens,
            temperature=temperature,
        )

        pairing = self._parse_structured("pairing", result, ActivityPairing)
        if pairing is not None:
            return pairing.model_copy(update={"source": "generated"})
        return local_activity_pairing(activity)

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _parse_structured(
        self,
        operation: str,
        result: GatewayResult,
        model: type[ModelT],
    ) -> ModelT | None:
        """Validated model from a generated reply, or None to signal fallback."""
        if not result.ok:
            self._log_fallback(operation, result.error)
            return None
        try:
            return model.model_validate(extract_json_object(result.content))
        except MalformedGenerationOutput as e:
            self._log_fallback(operation, e, provider=result.provider)
        except ValidationError as e:
            self._log_fallback(
                operation,
                MalformedGenerationOutput(f"{e.error_count()} validation errors"),
                provider=result.provider,
            )
        return None

    @staticmethod
    def _log_fallback(
        operation: str,
        error: GenerationError | None,
        provider: str | None = None,
    ) -> None:
        logger.info(
            "Falling back to local result",
            operation=operation,
            reason=type(error).__name__ if error else None,
            error=error.message if error else None,
            provider=provider,
        )
