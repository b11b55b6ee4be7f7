"""Pydantic models exchanged with collaborators (API, app screens).

Field names are snake_case in Python and camelCase on the wire, matching the
JSON shapes the remote generation providers are asked to produce.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# =============================================================================
# DETERMINISTIC REPLY
# =============================================================================

class ReplyItem(CamelModel):
    """A single ranked recommendation in a composed reply."""

    id: str
    name: str
    category: str
    potency: str = Field(..., description="THC range, e.g. '17-27%'")
    match_score: int = Field(
        ...,
        ge=0,
        le=100,
        description="Score against the session profile with the effects the request names weighted one step higher",
    )
    reason: str
    effects: list[str]
    aromas: list[str]


class StructuredReply(CamelModel):
    """Headline, ranked items and optional follow-up prompts."""

    message: str
    intent: str
    recommendations: list[ReplyItem] = Field(default_factory=list)
    follow_up: list[str] = Field(default_factory=list)


# =============================================================================
# CHAT
# =============================================================================

class ChatMessage(CamelModel):
    role: Literal["user", "assistant"]
    content: str


class ChatContext(CamelModel):
    """Optional profile data folded into the chat system instruction."""

    favorite_strains: list[str] = Field(default_factory=list)
    preferred_effects: list[str] = Field(default_factory=list)
    experience_level: Literal["beginner", "intermediate", "experienced"] | None = None
    medical_needs: list[str] = Field(default_factory=list)
    tolerance: Literal["low", "medium", "high"] | None = None
    avoid_effects: list[str] = Field(default_factory=list)
    is_premium: bool = False


class ChatReply(CamelModel):
    message: str
    source: Literal["generated", "fallback"]
    provider: str | None = None
    model: str | None = None
    reply: StructuredReply | None = None


# =============================================================================
# STRUCTURED RECOMMENDATIONS
# =============================================================================

class RecommendationParams(CamelModel):
    mood: str | None = None
    activity: str | None = None
    time_of_day: Literal["morning", "afternoon", "evening", "night"] | None = None
    desired_effects: list[str] = Field(default_factory=list)
    avoid_effects: list[str] = Field(default_factory=list)
    experience_level: Literal["beginner", "intermediate", "experienced"] | None = None
    medical_needs: list[str] = Field(default_factory=list)
    method: Literal["flower", "edible", "vape", "concentrate", "any"] | None = None


class RecommendedStrain(CamelModel):
    name: str
    type: str
    thc_range: str
    effects: list[str] = Field(default_factory=list)
    reason: str = ""
    terpenes: list[str] = Field(default_factory=list)
    match_score: int = Field(default=0, ge=0, le=100)


class RecommendationResult(CamelModel):
    recommendations: list[RecommendedStrain]
    intro: str | None = None
    tips: str | None = None
    source: Literal["generated", "fallback"] = "fallback"
    provider: str | None = None


class GeneratedRecommendations(CamelModel):
    """Shape the remote side is asked to return for recommendations."""

    intro: str | None = None
    recommendations: list[RecommendedStrain] = Field(default_factory=list)
    strains: list[RecommendedStrain] = Field(default_factory=list)
    tips: str | None = None


# =============================================================================
# ANALYSIS / PAIRING
# =============================================================================

class AnalysisEffects(CamelModel):
    physical: list[str] = Field(default_factory=list)
    mental: list[str] = Field(default_factory=list)
    emotional: list[str] = Field(default_factory=list)


class StrainAnalysis(CamelModel):
    effects: AnalysisEffects
    best_for: list[str]
    medical_benefits: list[str]
    side_effects: list[str]
    consumption_tips: str
    similar_strains: list[str]
    experience_level: Literal["beginner", "intermediate", "experienced"]
    duration: str
    onset: str
    source: Literal["generated", "fallback"] = "fallback"


class Pairing(CamelModel):
    strain: str
    type: str
    why: str
    confidence: Literal["perfect", "great", "good"]


class ActivityPairing(CamelModel):
    intro: str
    pairings: list[Pairing]
    tips: str | None = None
    source: Literal["generated", "fallback"] = "fallback"
