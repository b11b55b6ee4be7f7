"""Turns a ranked candidate list and an intent into a ``StructuredReply``."""

from collections.abc import Sequence

from shared.constants import DEFAULT_RECOMMENDATION_LIMIT, MAX_AROMAS_SHOWN, MAX_EFFECTS_SHOWN
from sommelier_service.exceptions import UnknownCategoryError
from sommelier_service.models import Intent, IntentCategory, ScoredCandidate, UserPreferenceProfile
from sommelier_service.schemas import ReplyItem, StructuredReply
from sommelier_service.services.user_preference import describe_preferences

# =============================================================================
# HEADLINES
# =============================================================================

MOOD_HEADLINES = {
    "relax": "Time to unwind! Here are some strains that'll melt your stress away:",
    "energy": "Let's get you energized! These strains will give you that boost:",
    "creative": "Ready to create? These strains unlock that artistic flow:",
    "social": "Party time! These strains will have you chatting and laughing:",
    "sleep": "Need those Z's? These will send you to dreamland:",
    "focus": "Locked in mode! These strains help you concentrate:",
    "happy": "Mood boost incoming! These strains are known for lifting spirits:",
}

ACTIVITY_HEADLINES = {
    "movies": "Movie night! These strains make everything more entertaining:",
    "outdoor": "Adventure time! These strains pair great with nature:",
    "gaming": "Game on! These strains enhance focus without couch-locking you:",
    "food": "Munchie mode activated! These strains make food taste amazing:",
    "intimate": "Setting the mood! These strains enhance intimacy:",
    "meditation": "Finding your center! These strains deepen your practice:",
    "music": "Feel the music! These strains make every beat hit different:",
}

MEDICAL_HEADLINES = {
    "pain": "For pain relief, these strains have helped many people:",
    "headache": "Headache? These strains may help take the edge off:",
    "nausea": "For nausea, these are commonly recommended:",
    "appetite": "Need to stimulate appetite? These strains are known for the munchies:",
    "insomnia": "Sleep struggles? These heavy hitters may help:",
}

TIME_HEADLINES = {
    "morning": "Rise and shine! Wake and bake with these energizing strains:",
    "afternoon": "Afternoon pick-me-up! These keep you going without the crash:",
    "evening": "Winding down! These strains are perfect for evening relaxation:",
}
TIME_HEADLINES["night"] = TIME_HEADLINES["evening"]

TYPE_HEADLINES = {
    "indica": "Indica lover! Here are some heavy hitters for that body high:",
    "sativa": "Sativa fan! These cerebral strains will lift you up:",
    "hybrid": "Best of both worlds! These hybrids offer balanced effects:",
}

# =============================================================================
# STATIC REPLIES
# =============================================================================

EDUCATION_TOPICS = {
    "terpene": (
        "**Terpenes** are aromatic compounds in cannabis that affect smell, taste, and effects!\n\n"
        "**Common terpenes:**\n"
        "• **Myrcene**: earthy, relaxing, sedating\n"
        "• **Limonene**: citrus, mood elevation, energizing\n"
        "• **Caryophyllene**: spicy, pain relief, anti-anxiety\n"
        "• **Pinene**: pine, alertness, memory\n"
        "• **Linalool**: floral, calming, sleep\n\n"
        "Terpenes work with THC/CBD (the 'entourage effect') to create each strain's unique experience!"
    ),
    "thc": (
        "**THC (Tetrahydrocannabinol)** is the main psychoactive compound in cannabis.\n\n"
        "**THC Levels:**\n"
        "• **Low (10-15%)**: mild, good for beginners\n"
        "• **Medium (15-20%)**: balanced, most common\n"
        "• **High (20-25%)**: strong, experienced users\n"
        "• **Very High (25%+)**: intense, proceed with caution\n\n"
        "Higher THC isn't better. It's about finding what works for YOU."
    ),
    "cbd": (
        "**CBD (Cannabidiol)** is non-psychoactive but has many benefits!\n\n"
        "**CBD effects:**\n"
        "• Anti-anxiety\n"
        "• Pain relief\n"
        "• Anti-inflammatory\n"
        "• Reduces THC anxiety\n"
        "• Helps sleep\n\n"
        "**CBD:THC ratios:**\n"
        "• **1:1**: balanced, mild high\n"
        "• **2:1**: CBD dominant, subtle high\n"
        "• **High CBD**: no high, therapeutic only"
    ),
    "indica sativa": (
        "**Indica vs Sativa**, the classic debate!\n\n"
        "**Indica:**\n"
        "• Body high, 'couch lock'\n"
        "• Relaxing, sedating\n"
        "• Best for: night, sleep, pain\n\n"
        "**Sativa:**\n"
        "• Head high, cerebral\n"
        "• Energizing, uplifting\n"
        "• Best for: day, creativity, social\n\n"
        "**Hybrid:**\n"
        "• Mix of both\n"
        "• Effects depend on genetics\n\n"
        "**Reality check:** Modern science says terpenes matter more than indica/sativa for effects. "
        "But the categories are still useful shortcuts!"
    ),
}
EDUCATION_DEFAULT = (
    "Great question! Try asking about terpenes, THC, CBD, or the difference between indica and sativa."
)

WELCOME_MESSAGE = (
    "Hey! I'm your strain sommelier.\n\n"
    "Tell me what you're looking for and I'll find the perfect strain. Try:\n\n"
    "• 'I want to relax'\n"
    "• 'Something for movie night'\n"
    "• 'Need help sleeping'\n"
    "• 'Best sativa for energy'\n"
    "• 'What is a terpene?'\n\n"
    "Or just tell me how you want to feel!"
)

NOT_FOUND_MESSAGE = (
    "I couldn't find a match for that in my catalog. "
    "Try describing an effect, a flavor, or a strain name!"
)

# =============================================================================
# FOLLOW-UPS
# =============================================================================

MOOD_FOLLOW_UPS = [
    "Want something stronger or milder?",
    "Prefer indica, sativa, or hybrid?",
    "Any flavors you love or hate?",
]
MEDICAL_FOLLOW_UPS = [
    "Always consult a doctor for medical advice",
    "Start low and go slow with new strains",
]
NOT_FOUND_FOLLOW_UPS = [
    "What effects are you looking for?",
    "Want me to recommend something similar?",
]
RECOMMENDATION_FOLLOW_UPS = [
    "What are you in the mood for?",
    "Any specific activity planned?",
    "Indica, sativa, or hybrid?",
]
WELCOME_FOLLOW_UPS = [
    "What effects are you looking for?",
    "Planning any activities?",
    "Morning, afternoon, or evening smoke?",
]


def _lookup(table: dict[str, str], key: str, kind: str) -> str:
    try:
        return table[key]
    except KeyError:
        raise UnknownCategoryError(f"No {kind} headline for {key!r}") from None


def to_reply_item(candidate: ScoredCandidate, reason: str | None = None) -> ReplyItem:
    product = candidate.product
    return ReplyItem(
        id=product.id,
        name=product.name,
        category=product.category.value,
        potency=product.potency_label,
        match_score=round(candidate.score),
        reason=reason or product.description,
        effects=list(product.effect_tags[:MAX_EFFECTS_SHOWN]),
        aromas=list(product.aromatic_tags[:MAX_AROMAS_SHOWN]),
    )


class ResponseComposer:
    """Builds the deterministic reply for each intent category."""

    def compose(
        self,
        intent: Intent,
        ranked: Sequence[ScoredCandidate],
        limit: int = DEFAULT_RECOMMENDATION_LIMIT,
        profile: UserPreferenceProfile | None = None,
    ) -> StructuredReply:
        category = intent.category
        entities = intent.entities

        if category == IntentCategory.EDUCATION:
            return self._reply(intent, self.education_message(entities.get("topic", "")))
        if category == IntentCategory.UNKNOWN:
            return self._reply(intent, WELCOME_MESSAGE, follow_up=WELCOME_FOLLOW_UPS)

        headline, follow_up = self._headline(intent, ranked, profile)
        if not ranked:
            if category == IntentCategory.SEARCH:
                message = (
                    f'I couldn\'t find anything matching "{entities["query"]}" in my database. '
                    "Try searching for a strain name, effect, or flavor!"
                )
            else:
                message = NOT_FOUND_MESSAGE
            return self._reply(intent, message, follow_up=NOT_FOUND_FOLLOW_UPS)

        items = [to_reply_item(c) for c in ranked[:limit]]
        return self._reply(intent, headline, items, follow_up)

    def _headline(
        self,
        intent: Intent,
        ranked: Sequence[ScoredCandidate],
        profile: UserPreferenceProfile | None,
    ) -> tuple[str, list[str]]:
        category = intent.category
        entities = intent.entities

        if category == IntentCategory.MOOD:
            mood = entities["mood"]
            message = MOOD_HEADLINES.get(mood, f"Looking for {mood} vibes? Here's what I recommend:")
            return message, MOOD_FOLLOW_UPS
        if category == IntentCategory.ACTIVITY:
            return ACTIVITY_HEADLINES.get(entities["activity"], "Here's what I'd recommend:"), []
        if category == IntentCategory.MEDICAL:
            condition = entities["condition"]
            message = MEDICAL_HEADLINES.get(condition, f"For {condition}, here's what may help:")
            return message, MEDICAL_FOLLOW_UPS
        if category == IntentCategory.TIME_OF_DAY:
            return _lookup(TIME_HEADLINES, entities["time"], "time of day"), []
        if category == IntentCategory.CATEGORY_REQUEST:
            return _lookup(TYPE_HEADLINES, entities["strain_type"], "strain type"), []
        if category == IntentCategory.SEARCH:
            query = entities["query"]
            return f'Found {len(ranked)} strains matching "{query}"! Here are the best matches for you:', []
        if category == IntentCategory.RECOMMENDATION:
            summary = describe_preferences(profile) if profile else "have a balanced palate"
            message = (
                f"Based on your profile, I know you {summary}.\n\n"
                "Here's what I think you'd love right now:"
            )
            return message, RECOMMENDATION_FOLLOW_UPS
        raise UnknownCategoryError(f"No reply template for intent {category!r}")

    @staticmethod
    def education_message(topic: str) -> str:
        for key, text in EDUCATION_TOPICS.items():
            if key in topic:
                return text
        return EDUCATION_DEFAULT

    @staticmethod
    def _reply(
        intent: Intent,
        message: str,
        items: list[ReplyItem] | None = None,
        follow_up: list[str] | None = None,
    ) -> StructuredReply:
        return StructuredReply(
            message=message,
            intent=intent.category.value,
            recommendations=items or [],
            follow_up=list(follow_up or []),
        )
