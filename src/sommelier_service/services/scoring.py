"""Linear preference scoring over catalog products.

Every rule is additive on top of a base score, the total is clamped to
[0, 100], and ranking is a stable descending sort so equal scores keep
catalog order. No I/O and no randomness.
"""

from collections.abc import Iterable

from shared.constants import MAX_MATCH_SCORE, MIN_MATCH_SCORE, NEUTRAL_PREFERENCE_WEIGHT
from sommelier_service.models import (
    PotencyTolerance,
    Product,
    ScoredCandidate,
    UserPreferenceProfile,
)


class ScoringEngine:
    """Scores products against a user preference profile."""

    BASE_SCORE = 50.0
    EFFECT_WEIGHT_STEP = 5.0

    # Flat adjustments, each applied at most once per product regardless of
    # how many tags overlap. Tunable policy.
    AVOID_PENALTY = 30.0
    CATEGORY_MATCH_BONUS = 10.0
    AROMA_MATCH_BONUS = 10.0

    LOW_TOLERANCE_MAX_POTENCY = 20.0
    LOW_TOLERANCE_PENALTY = 15.0
    HIGH_TOLERANCE_MIN_POTENCY = 18.0
    HIGH_TOLERANCE_PENALTY = 10.0

    RATING_PIVOT = 4.0
    RATING_STEP = 10.0

    def score_product(self, product: Product, profile: UserPreferenceProfile) -> float:
        score = self.BASE_SCORE

        for effect in product.effect_tags:
            score += (profile.weight_for(effect) - NEUTRAL_PREFERENCE_WEIGHT) * self.EFFECT_WEIGHT_STEP

        if profile.avoid_effects.intersection(product.effect_tags):
            score -= self.AVOID_PENALTY

        if profile.preferred_category != "any" and product.category == profile.preferred_category:
            score += self.CATEGORY_MATCH_BONUS

        potency = product.average_potency
        if profile.potency_tolerance == PotencyTolerance.LOW and potency > self.LOW_TOLERANCE_MAX_POTENCY:
            score -= self.LOW_TOLERANCE_PENALTY
        if profile.potency_tolerance == PotencyTolerance.HIGH and potency < self.HIGH_TOLERANCE_MIN_POTENCY:
            score -= self.HIGH_TOLERANCE_PENALTY

        if profile.preferred_aromas.intersection(product.aromatic_tags):
            score += self.AROMA_MATCH_BONUS

        score += (product.community_rating - self.RATING_PIVOT) * self.RATING_STEP

        return float(min(max(score, MIN_MATCH_SCORE), MAX_MATCH_SCORE))

    def score(
        self,
        candidates: Iterable[Product],
        profile: UserPreferenceProfile,
    ) -> list[ScoredCandidate]:
        """Score and rank candidates, highest first; ties keep input order."""
        scored = [ScoredCandidate(product=p, score=self.score_product(p, profile)) for p in candidates]
        return sorted(scored, key=lambda c: c.score, reverse=True)
