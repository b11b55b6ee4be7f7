"""Domain models for the recommendation core.

Catalog entries are frozen; the preference profile is the only mutable
value and belongs to a single user session.
"""

import time
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Literal

from shared.constants import (
    MAX_PREFERENCE_WEIGHT,
    MIN_PREFERENCE_WEIGHT,
    NEUTRAL_PREFERENCE_WEIGHT,
)
from sommelier_service.exceptions import GenerationError


class Effect(str, Enum):
    RELAXED = "relaxed"
    HAPPY = "happy"
    EUPHORIC = "euphoric"
    UPLIFTED = "uplifted"
    CREATIVE = "creative"
    ENERGETIC = "energetic"
    FOCUSED = "focused"
    GIGGLY = "giggly"
    HUNGRY = "hungry"
    SLEEPY = "sleepy"
    TALKATIVE = "talkative"
    TINGLY = "tingly"
    AROUSED = "aroused"


class StrainCategory(str, Enum):
    INDICA = "indica"
    SATIVA = "sativa"
    HYBRID = "hybrid"


class Difficulty(str, Enum):
    BEGINNER = "beginner"
    MODERATE = "moderate"
    EXPERIENCED = "experienced"


class PotencyTolerance(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ModelTier(str, Enum):
    """Coarse task-complexity bucket used to pick a model per provider."""

    FAST = "fast"
    STANDARD = "standard"
    POWERFUL = "powerful"


class IntentCategory(str, Enum):
    MOOD = "mood"
    ACTIVITY = "activity"
    MEDICAL = "medical"
    TIME_OF_DAY = "time"
    CATEGORY_REQUEST = "type"
    SEARCH = "search"
    EDUCATION = "education"
    RECOMMENDATION = "recommendation"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class Terpene:
    name: str
    aroma: str
    percentage: float | None = None


@dataclass(frozen=True)
class Product:
    """Immutable catalog entry."""

    id: str
    name: str
    category: StrainCategory
    thc_range: tuple[float, float]
    cbd_range: tuple[float, float]
    effect_tags: tuple[str, ...]
    negative_tags: tuple[str, ...]
    aromatic_tags: tuple[str, ...]
    medical_use_tags: tuple[str, ...]
    description: str
    community_rating: float
    rating_count: int
    difficulty: Difficulty
    terpenes: tuple[Terpene, ...] = ()
    lineage: tuple[str, ...] = ()

    @property
    def average_potency(self) -> float:
        low, high = self.thc_range
        return (low + high) / 2

    @property
    def potency_label(self) -> str:
        low, high = self.thc_range
        return f"{low:g}-{high:g}%"


def _neutral_weights() -> dict[str, int]:
    return {effect.value: NEUTRAL_PREFERENCE_WEIGHT for effect in Effect}


@dataclass
class UserPreferenceProfile:
    """Per-session preference state read by the scoring engine."""

    user_id: str
    effect_weights: dict[str, int] = field(default_factory=_neutral_weights)
    avoid_effects: set[str] = field(default_factory=set)
    preferred_category: StrainCategory | Literal["any"] = "any"
    potency_tolerance: PotencyTolerance = PotencyTolerance.MEDIUM
    preferred_aromas: set[str] = field(default_factory=set)
    total_sessions: int = 0
    updated_at: float = field(default_factory=time.time)

    def __post_init__(self) -> None:
        for effect, weight in self.effect_weights.items():
            if not MIN_PREFERENCE_WEIGHT <= weight <= MAX_PREFERENCE_WEIGHT:
                raise ValueError(f"Preference weight for {effect!r} out of range: {weight}")
        if self.preferred_category != "any":
            self.preferred_category = StrainCategory(self.preferred_category)
        self.potency_tolerance = PotencyTolerance(self.potency_tolerance)

    def weight_for(self, effect: str) -> int:
        return self.effect_weights.get(effect, NEUTRAL_PREFERENCE_WEIGHT)

    def with_emphasis(self, effects: list[str] | tuple[str, ...]) -> "UserPreferenceProfile":
        """Copy of the profile with each listed effect nudged up one step."""
        weights = dict(self.effect_weights)
        for effect in effects:
            weights[effect] = min(MAX_PREFERENCE_WEIGHT, self.weight_for(effect) + 1)
        return replace(
            self,
            effect_weights=weights,
            avoid_effects=set(self.avoid_effects),
            preferred_aromas=set(self.preferred_aromas),
        )


@dataclass(frozen=True)
class Intent:
    category: IntentCategory
    entities: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class ScoredCandidate:
    product: Product
    score: float


@dataclass(frozen=True)
class ChatTurn:
    role: Literal["user", "assistant"]
    content: str

    def to_dict(self) -> dict[str, str]:
        return {"role": self.role, "content": self.content}


@dataclass
class GatewayResult:
    """Outcome of one generation attempt across the provider list."""

    content: str = ""
    provider: str | None = None
    model: str | None = None
    error: GenerationError | None = None
    attempts: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.error is None
