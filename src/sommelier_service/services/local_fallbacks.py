"""Network-free results used when generation is unavailable or unparseable.

Recommendations are derived from the catalog through the scoring engine,
analysis starts from a per-category template enriched with catalog data,
and activity pairings are canned. All of it is deterministic.
"""

from shared.constants import DEFAULT_RECOMMENDATION_LIMIT
from sommelier_service.exceptions import UnknownCategoryError
from sommelier_service.infrastructure.catalog import Catalog
from sommelier_service.models import Difficulty, Product, StrainCategory
from sommelier_service.schemas import (
    ActivityPairing,
    AnalysisEffects,
    Pairing,
    RecommendationParams,
    RecommendationResult,
    RecommendedStrain,
    StrainAnalysis,
)
from sommelier_service.services.candidates import time_of_day_profile
from sommelier_service.services.scoring import ScoringEngine
from sommelier_service.services.user_preference import profile_from_params

LOCAL_RECOMMENDATION_INTRO = "Here are a few strains from our catalog that match what you're after:"
LOCAL_RECOMMENDATION_TIPS = "Start low and go slow, especially with a strain you haven't tried before."

SIMILAR_STRAIN_LIMIT = 3

EXPERIENCE_BY_DIFFICULTY = {
    Difficulty.BEGINNER: "beginner",
    Difficulty.MODERATE: "intermediate",
    Difficulty.EXPERIENCED: "experienced",
}


def parse_category(category: str) -> StrainCategory:
    try:
        return StrainCategory(category.strip().lower())
    except ValueError:
        raise UnknownCategoryError(f"Unknown strain category: {category!r}") from None


def _title(values: tuple[str, ...] | list[str]) -> list[str]:
    return [v.title() for v in values]


# =============================================================================
# RECOMMENDATIONS
# =============================================================================

def _recommendation_candidates(catalog: Catalog, params: RecommendationParams) -> list[Product]:
    candidates = list(catalog)
    if params.time_of_day:
        categories = time_of_day_profile(params.time_of_day).categories
        candidates = [p for p in candidates if p.category in categories]
    if params.medical_needs:
        needs = [n.lower() for n in params.medical_needs]
        narrowed = [
            p
            for p in candidates
            if any(need in use.lower() for need in needs for use in p.medical_use_tags)
        ]
        # Only narrow when something actually matches.
        if narrowed:
            candidates = narrowed
    return candidates


def local_recommendations(
    catalog: Catalog,
    params: RecommendationParams,
    scorer: ScoringEngine | None = None,
    limit: int = DEFAULT_RECOMMENDATION_LIMIT,
) -> RecommendationResult:
    scorer = scorer or ScoringEngine()
    profile = profile_from_params(params)
    ranked = scorer.score(_recommendation_candidates(catalog, params), profile)

    strains = [
        RecommendedStrain(
            name=c.product.name,
            type=c.product.category.value.title(),
            thc_range=c.product.potency_label,
            effects=_title(c.product.effect_tags[:3]),
            reason=c.product.description,
            terpenes=_title([t.name for t in c.product.terpenes[:2]]),
            match_score=round(c.score),
        )
        for c in ranked[:limit]
    ]
    return RecommendationResult(
        recommendations=strains,
        intro=LOCAL_RECOMMENDATION_INTRO,
        tips=LOCAL_RECOMMENDATION_TIPS,
        source="fallback",
    )


# =============================================================================
# ANALYSIS
# =============================================================================

def _analysis_template(category: StrainCategory) -> StrainAnalysis:
    analysis = StrainAnalysis(
        effects=AnalysisEffects(
            physical=["Relaxed", "Body high"],
            mental=["Calm", "Peaceful"],
            emotional=["Happy", "Content"],
        ),
        best_for=["Evening use", "Relaxation"],
        medical_benefits=["Stress relief", "Pain management"],
        side_effects=["Dry mouth", "Dry eyes", "Possible drowsiness"],
        consumption_tips="Start with a small amount and wait 15-30 minutes before consuming more.",
        similar_strains=[],
        experience_level="intermediate",
        duration="2-4 hours",
        onset="5-15 minutes for flower, 30-90 minutes for edibles",
        source="fallback",
    )
    if category == StrainCategory.SATIVA:
        analysis.effects = AnalysisEffects(
            physical=["Energized", "Light"],
            mental=["Creative", "Focused", "Uplifted"],
            emotional=["Happy", "Euphoric"],
        )
        analysis.best_for = ["Daytime use", "Creative activities", "Social situations"]
    return analysis


def similar_strains(catalog: Catalog, product: Product, limit: int = SIMILAR_STRAIN_LIMIT) -> list[str]:
    """Same-category strains ranked by shared effects, then rating."""
    effects = set(product.effect_tags)
    peers = [p for p in catalog.by_category(product.category) if p.id != product.id]
    peers.sort(key=lambda p: (len(effects.intersection(p.effect_tags)), p.community_rating), reverse=True)
    return [p.name for p in peers[:limit]]


def local_analysis(catalog: Catalog, strain_name: str, category: str) -> StrainAnalysis:
    strain_category = parse_category(category)
    analysis = _analysis_template(strain_category)

    product = catalog.find_by_name(strain_name)
    if product is None:
        top = catalog.top_rated(SIMILAR_STRAIN_LIMIT, category=strain_category)
        analysis.similar_strains = [p.name for p in top]
        return analysis

    if product.negative_tags:
        analysis.side_effects = [t.capitalize() for t in product.negative_tags]
    if product.medical_use_tags:
        analysis.medical_benefits = [t.capitalize() for t in product.medical_use_tags]
    analysis.experience_level = EXPERIENCE_BY_DIFFICULTY[product.difficulty]
    analysis.similar_strains = similar_strains(catalog, product)
    return analysis


# =============================================================================
# ACTIVITY PAIRING
# =============================================================================

def local_activity_pairing(activity: str) -> ActivityPairing:
    lowered = activity.lower()

    if "movie" in lowered or "netflix" in lowered:
        return ActivityPairing(
            intro=(
                "Movies and cannabis are a classic combo. You want something that enhances "
                "visuals and sound without knocking you out."
            ),
            pairings=[
                Pairing(
                    strain="Blue Dream",
                    type="Hybrid",
                    why="Perfect balance of relaxation and engagement",
                    confidence="perfect",
                ),
                Pairing(
                    strain="Pineapple Express",
                    type="Hybrid",
                    why="Fun, giggly, enhances comedy",
                    confidence="great",
                ),
                Pairing(
                    strain="Granddaddy Purple",
                    type="Indica",
                    why="For late-night movie marathons when you want to sink into the couch",
                    confidence="good",
                ),
            ],
            tips="Have snacks ready before you start. You don't want to miss the good parts!",
            source="fallback",
        )

    return ActivityPairing(
        intro=f"Great choice! Let me suggest some strains that would enhance {activity}.",
        pairings=[
            Pairing(
                strain="Blue Dream",
                type="Hybrid",
                why="Versatile strain that works for almost any activity",
                confidence="great",
            ),
            Pairing(
                strain="Sour Diesel",
                type="Sativa",
                why="Energizing and creative for active experiences",
                confidence="good",
            ),
            Pairing(
                strain="OG Kush",
                type="Hybrid",
                why="Relaxing but not too sedating",
                confidence="good",
            ),
        ],
        tips="Start low, especially if you're trying a new activity while high. You can always consume more!",
        source="fallback",
    )
