"""Candidate selection: which catalog products an intent is scored over."""

from dataclasses import dataclass

from sommelier_service.exceptions import UnknownCategoryError
from sommelier_service.infrastructure.catalog import MOOD_EFFECTS, Catalog
from sommelier_service.models import Intent, IntentCategory, Product, StrainCategory

ACTIVITY_EFFECTS: dict[str, tuple[str, ...]] = {
    "movies": ("relaxed", "happy", "euphoric", "giggly"),
    "outdoor": ("energetic", "uplifted", "happy", "creative"),
    "gaming": ("focused", "energetic", "happy", "creative"),
    "food": ("hungry", "happy", "relaxed", "euphoric"),
    "intimate": ("aroused", "relaxed", "euphoric", "happy"),
    "meditation": ("relaxed", "focused", "euphoric", "uplifted"),
    "music": ("euphoric", "happy", "creative", "uplifted"),
}
DEFAULT_ACTIVITY_EFFECTS = ("happy", "relaxed")


@dataclass(frozen=True)
class TimeOfDayProfile:
    categories: tuple[StrainCategory, ...]
    effects: tuple[str, ...]


TIME_OF_DAY: dict[str, TimeOfDayProfile] = {
    "morning": TimeOfDayProfile(
        (StrainCategory.SATIVA, StrainCategory.HYBRID),
        ("energetic", "uplifted", "focused", "creative"),
    ),
    "afternoon": TimeOfDayProfile(
        (StrainCategory.HYBRID, StrainCategory.SATIVA),
        ("happy", "uplifted", "creative", "focused"),
    ),
    "evening": TimeOfDayProfile(
        (StrainCategory.INDICA, StrainCategory.HYBRID),
        ("relaxed", "sleepy", "happy", "euphoric"),
    ),
}
# "night" is accepted from structured parameters and treated as evening.
TIME_OF_DAY["night"] = TIME_OF_DAY["evening"]


def activity_effects(activity: str) -> tuple[str, ...]:
    return ACTIVITY_EFFECTS.get(activity.lower(), DEFAULT_ACTIVITY_EFFECTS)


def time_of_day_profile(time_of_day: str) -> TimeOfDayProfile:
    try:
        return TIME_OF_DAY[time_of_day.lower()]
    except KeyError:
        raise UnknownCategoryError(f"Unknown time of day: {time_of_day!r}") from None


def mood_effects(mood: str) -> tuple[str, ...]:
    try:
        return MOOD_EFFECTS[mood.lower()]
    except KeyError:
        raise UnknownCategoryError(f"Unknown mood: {mood!r}") from None


def emphasized_effects(intent: Intent) -> tuple[str, ...]:
    """Effects an intent asks for explicitly; empty for intents without one."""
    if intent.category == IntentCategory.MOOD:
        return mood_effects(intent.entities["mood"])
    if intent.category == IntentCategory.ACTIVITY:
        return activity_effects(intent.entities["activity"])
    if intent.category == IntentCategory.TIME_OF_DAY:
        return time_of_day_profile(intent.entities["time"]).effects
    return ()


def for_time_of_day(catalog: Catalog, time_of_day: str) -> list[Product]:
    profile = time_of_day_profile(time_of_day)
    wanted = set(profile.effects)
    return [
        p
        for p in catalog
        if p.category in profile.categories and wanted.intersection(p.effect_tags)
    ]


def select_candidates(catalog: Catalog, intent: Intent) -> list[Product]:
    """Catalog subset for an intent, in catalog order."""
    category = intent.category
    entities = intent.entities

    if category == IntentCategory.MOOD:
        mood = entities["mood"]
        if mood.lower() not in MOOD_EFFECTS:
            raise UnknownCategoryError(f"Unknown mood: {mood!r}")
        return catalog.for_mood(mood)
    if category == IntentCategory.ACTIVITY:
        return catalog.with_any_effect(activity_effects(entities["activity"]))
    if category == IntentCategory.MEDICAL:
        return catalog.for_medical_condition(entities["condition"])
    if category == IntentCategory.TIME_OF_DAY:
        return for_time_of_day(catalog, entities["time"])
    if category == IntentCategory.CATEGORY_REQUEST:
        try:
            return catalog.by_category(entities["strain_type"])
        except ValueError:
            raise UnknownCategoryError(f"Unknown strain type: {entities['strain_type']!r}") from None
    if category == IntentCategory.SEARCH:
        return catalog.search(entities["query"])
    if category == IntentCategory.RECOMMENDATION:
        return list(catalog)
    if category in (IntentCategory.EDUCATION, IntentCategory.UNKNOWN):
        return []
    raise UnknownCategoryError(f"No candidate rule for intent {category!r}")
