"""Rule-based intent classification.

Rules are evaluated in a fixed priority order and the first rule with any
keyword hit wins. Matching is plain substring search on lower-cased text,
so "relax while gaming" resolves to a mood, never an activity.
"""

from collections.abc import Callable
from dataclasses import dataclass

from sommelier_service.models import Intent, IntentCategory

# A builder returns the entity mapping for a hit, or None to fall through.
EntityBuilder = Callable[[str, str], dict[str, str] | None]


@dataclass(frozen=True)
class IntentRule:
    category: IntentCategory
    keywords: tuple[str, ...]
    build_entities: EntityBuilder


def _literal(name: str, value: str) -> EntityBuilder:
    return lambda _text, _keyword: {name: value}


def _matched_keyword(name: str) -> EntityBuilder:
    return lambda _text, keyword: {name: keyword}


SEARCH_LEAD_INS = ("what is", "tell me about", "have you heard of", "do you know")


def _search_query(text: str, _keyword: str) -> dict[str, str] | None:
    query = text
    for phrase in SEARCH_LEAD_INS:
        query = query.replace(phrase, "")
    query = query.strip()
    if len(query) <= 2:
        return None
    return {"query": query}


def _topic(text: str, _keyword: str) -> dict[str, str]:
    return {"topic": text}


def _no_entities(_text: str, _keyword: str) -> dict[str, str]:
    return {}


MOOD_KEYWORDS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("relax", ("relax", "chill", "calm", "unwind", "destress")),
    ("energy", ("energy", "energetic", "active", "wake", "productive")),
    ("creative", ("creative", "art", "music", "write", "create")),
    ("social", ("social", "party", "friends", "hangout", "talk")),
    ("sleep", ("sleep", "insomnia", "tired", "bedtime", "night")),
    ("focus", ("focus", "concentrate", "work", "study")),
    ("happy", ("happy", "mood", "depressed", "sad", "anxious", "anxiety")),
)

ACTIVITY_KEYWORDS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("movies", ("movie", "movies", "netflix", "watch", "tv")),
    ("outdoor", ("hike", "hiking", "outdoor", "nature", "walk")),
    ("gaming", ("game", "gaming", "video game", "play")),
    ("food", ("eat", "food", "munchies", "dinner", "cook")),
    ("intimate", ("sex", "intimate", "romance", "partner")),
    ("meditation", ("yoga", "meditat", "mindful")),
    ("music", ("concert", "music", "festival", "show")),
)

MEDICAL_KEYWORDS = (
    "pain",
    "headache",
    "migraine",
    "nausea",
    "appetite",
    "inflammation",
    "cramp",
    "spasm",
)

TIME_KEYWORDS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("morning", ("morning", "wake and bake")),
    ("afternoon", ("afternoon", "daytime")),
    ("evening", ("evening", "night", "before bed")),
)


def _build_rules() -> tuple[IntentRule, ...]:
    rules: list[IntentRule] = []
    for mood, keywords in MOOD_KEYWORDS:
        rules.append(IntentRule(IntentCategory.MOOD, keywords, _literal("mood", mood)))
    for activity, keywords in ACTIVITY_KEYWORDS:
        rules.append(IntentRule(IntentCategory.ACTIVITY, keywords, _literal("activity", activity)))
    for condition in MEDICAL_KEYWORDS:
        rules.append(IntentRule(IntentCategory.MEDICAL, (condition,), _matched_keyword("condition")))
    for time_of_day, keywords in TIME_KEYWORDS:
        rules.append(IntentRule(IntentCategory.TIME_OF_DAY, keywords, _literal("time", time_of_day)))
    for strain_type in ("indica", "sativa", "hybrid"):
        rules.append(
            IntentRule(IntentCategory.CATEGORY_REQUEST, (strain_type,), _literal("strain_type", strain_type))
        )
    rules.append(
        IntentRule(IntentCategory.SEARCH, ("what is", "tell me about", "heard of"), _search_query)
    )
    rules.append(
        IntentRule(IntentCategory.EDUCATION, ("terpene", "thc", "cbd", "difference between"), _topic)
    )
    rules.append(
        IntentRule(
            IntentCategory.RECOMMENDATION,
            ("recommend", "suggest", "what should", "good strain"),
            _no_entities,
        )
    )
    return tuple(rules)


class IntentClassifier:
    """Maps free text to an ``Intent``. Never raises for any string input."""

    def __init__(self, rules: tuple[IntentRule, ...] | None = None):
        self.rules = rules if rules is not None else DEFAULT_RULES

    def classify(self, text: str) -> Intent:
        lowered = text.lower()
        for rule in self.rules:
            keyword = next((k for k in rule.keywords if k in lowered), None)
            if keyword is None:
                continue
            entities = rule.build_entities(lowered, keyword)
            if entities is None:
                continue
            return Intent(category=rule.category, entities=entities)
        return Intent(category=IntentCategory.UNKNOWN)


DEFAULT_RULES = _build_rules()


def classify(text: str) -> Intent:
    return IntentClassifier().classify(text)
