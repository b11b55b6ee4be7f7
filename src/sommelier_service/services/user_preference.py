"""User preference profile helpers.

Profiles are owned by the caller's session. These helpers only build new
profiles or describe existing ones; nothing here mutates a profile in place.
"""

from shared.constants import MAX_PREFERENCE_WEIGHT
from sommelier_service.infrastructure.catalog import MOOD_EFFECTS
from sommelier_service.models import Effect, PotencyTolerance, StrainCategory, UserPreferenceProfile
from sommelier_service.schemas import RecommendationParams
from sommelier_service.services.candidates import activity_effects, time_of_day_profile
from sommelier_service.services.intent_classifier import ACTIVITY_KEYWORDS, MOOD_KEYWORDS

EMPHASIS_WEIGHT = 4

EXPERIENCE_TOLERANCE = {
    "beginner": PotencyTolerance.LOW,
    "intermediate": PotencyTolerance.MEDIUM,
    "experienced": PotencyTolerance.HIGH,
}

# Effect weighted >= 4 -> phrase used when summarising a profile
PREFERENCE_PHRASES = (
    ("relaxed", "enjoy relaxing strains"),
    ("energetic", "like energizing effects"),
    ("creative", "appreciate creative strains"),
    ("sleepy", "use cannabis for sleep"),
)

KNOWN_EFFECTS = frozenset(e.value for e in Effect)


def create_default_profile(user_id: str = "anonymous") -> UserPreferenceProfile:
    """Neutral profile: every effect weighted 3, no avoids, any category."""
    return UserPreferenceProfile(user_id=user_id)


def describe_preferences(profile: UserPreferenceProfile) -> str:
    prefs = [
        phrase
        for effect, phrase in PREFERENCE_PHRASES
        if profile.weight_for(effect) >= EMPHASIS_WEIGHT
    ]
    if profile.preferred_category != "any":
        prefs.append(f"prefer {StrainCategory(profile.preferred_category).value}s")
    if not prefs:
        return "have a balanced palate"
    return ", ".join(prefs)


def resolve_mood(text: str) -> str | None:
    """Map free-text mood to a mood key, by exact key first, then keyword."""
    lowered = text.lower().strip()
    if lowered in MOOD_EFFECTS:
        return lowered
    for mood, keywords in MOOD_KEYWORDS:
        if any(k in lowered for k in keywords):
            return mood
    return None


def resolve_activity(text: str) -> str | None:
    lowered = text.lower().strip()
    for activity, keywords in ACTIVITY_KEYWORDS:
        if activity == lowered or any(k in lowered for k in keywords):
            return activity
    return None


def profile_from_params(
    params: RecommendationParams,
    user_id: str = "anonymous",
) -> UserPreferenceProfile:
    """Build a scoring profile from structured recommendation parameters."""
    profile = create_default_profile(user_id)
    weights = profile.effect_weights

    emphasized: list[str] = []
    if params.mood:
        mood = resolve_mood(params.mood)
        if mood:
            emphasized.extend(MOOD_EFFECTS[mood])
        elif params.mood.lower() in KNOWN_EFFECTS:
            emphasized.append(params.mood.lower())
    if params.activity:
        activity = resolve_activity(params.activity)
        if activity:
            emphasized.extend(activity_effects(activity))
    if params.time_of_day:
        emphasized.extend(time_of_day_profile(params.time_of_day).effects)

    for effect in emphasized:
        weights[effect] = max(weights[effect], EMPHASIS_WEIGHT)

    for effect in params.desired_effects:
        effect = effect.lower()
        if effect in KNOWN_EFFECTS:
            weights[effect] = MAX_PREFERENCE_WEIGHT

    profile.avoid_effects = {e.lower() for e in params.avoid_effects if e.lower() in KNOWN_EFFECTS}
    if params.experience_level:
        profile.potency_tolerance = EXPERIENCE_TOLERANCE[params.experience_level]
    return profile
