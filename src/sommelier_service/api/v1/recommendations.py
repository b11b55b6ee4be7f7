"""Recommendation API endpoints."""

from typing import Annotated, Literal

from fastapi import APIRouter, Depends
from pydantic import Field

from shared.constants import MAX_PREFERENCE_WEIGHT, MIN_PREFERENCE_WEIGHT
from sommelier_service.api.deps import get_orchestrator
from sommelier_service.models import PotencyTolerance, StrainCategory, UserPreferenceProfile
from sommelier_service.schemas import (
    CamelModel,
    RecommendationParams,
    RecommendationResult,
    StructuredReply,
)
from sommelier_service.services.orchestrator import RecommendationOrchestrator
from sommelier_service.services.user_preference import create_default_profile

router = APIRouter()

PreferenceWeight = Annotated[int, Field(ge=MIN_PREFERENCE_WEIGHT, le=MAX_PREFERENCE_WEIGHT)]


class ProfilePayload(CamelModel):
    """Preference profile supplied by the caller's session."""

    user_id: str = "anonymous"
    effect_weights: dict[str, PreferenceWeight] = Field(default_factory=dict)
    avoid_effects: list[str] = Field(default_factory=list)
    preferred_category: Literal["indica", "sativa", "hybrid", "any"] = "any"
    potency_tolerance: Literal["low", "medium", "high"] = "medium"
    preferred_aromas: list[str] = Field(default_factory=list)

    def to_profile(self) -> UserPreferenceProfile:
        weights = create_default_profile(self.user_id).effect_weights
        weights.update({k.lower(): v for k, v in self.effect_weights.items()})
        return UserPreferenceProfile(
            user_id=self.user_id,
            effect_weights=weights,
            avoid_effects={e.lower() for e in self.avoid_effects},
            preferred_category=(
                "any" if self.preferred_category == "any" else StrainCategory(self.preferred_category)
            ),
            potency_tolerance=PotencyTolerance(self.potency_tolerance),
            preferred_aromas={a.lower() for a in self.preferred_aromas},
        )


class ClassifyRequest(CamelModel):
    text: str
    profile: ProfilePayload | None = None


@router.post("", response_model=RecommendationResult, response_model_by_alias=True)
async def get_recommendations(
    params: RecommendationParams,
    orchestrator: RecommendationOrchestrator = Depends(get_orchestrator),
) -> RecommendationResult:
    """
    Get three strain recommendations for structured parameters.

    Without a working generation provider the list is derived from the
    catalog and is identical for identical parameters.
    """
    return await orchestrator.get_recommendations(params)


@router.post("/classify", response_model=StructuredReply, response_model_by_alias=True)
async def classify_and_score(
    request: ClassifyRequest,
    orchestrator: RecommendationOrchestrator = Depends(get_orchestrator),
) -> StructuredReply:
    """Run the local classifier and scoring pipeline on free text."""
    profile = request.profile.to_profile() if request.profile else None
    return orchestrator.classify_and_score(request.text, profile)
