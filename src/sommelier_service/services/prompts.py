"""
Prompt templates for the generation gateway.

Three system instructions are used:
- SOMMELIER_SYSTEM_PROMPT for free-text chat and full recommendations
- ANALYSIS_SYSTEM_PROMPT for single-strain analysis (JSON reply)
- PAIRING_SYSTEM_PROMPT for activity pairings (JSON reply)

Builders for the user-side prompts embed only the parameters the caller
actually supplied, each on its own line, in a fixed order.
"""

from sommelier_service.schemas import ChatContext, RecommendationParams

# =============================================================================
# SYSTEM PROMPTS
# =============================================================================

SOMMELIER_SYSTEM_PROMPT = """You are an expert cannabis sommelier (budtender): knowledgeable, friendly, and never preachy.

## Your Expertise
- Cannabis strains: Indica, Sativa, Hybrids. Effects, lineages, and what makes each unique
- Terpene profiles: Myrcene (couch-lock), Limonene (uplifting), Pinene (focused), Caryophyllene (anti-inflammatory), Linalool (calming)
- Cannabinoids: THC, CBD, CBG, CBN, and how ratios affect experience
- Consumption methods: Flower, edibles, vapes, concentrates. Pros and cons of each
- Medical applications: Pain, anxiety, sleep, appetite, creativity
- Harm reduction: Responsible use, tolerance, avoiding overconsumption

## Personality
- Friendly and chill, like a knowledgeable friend at a dispensary
- Non-judgmental about experience level or reasons for use
- Explains science simply without being condescending
- Honest about effects including potential downsides

## Key Knowledge
- THC levels: 10-15% mild, 15-22% moderate, 22%+ potent, 30%+ very strong
- Indica: Body high, relaxing, "in-da-couch". Evening/night
- Sativa: Head high, energizing, creative. Daytime
- Hybrid: Best of both, balanced or leaning one way
- CBD can reduce THC-induced anxiety
- Start low, go slow. Especially with edibles (wait 2 hours!)

## Rules
1. Give specific strain recommendations with reasoning
2. Consider user's experience level, desired effects, and concerns
3. Mention onset time and duration for different methods
4. Include harm reduction tips naturally
5. Never recommend for minors or illegal activity"""

ANALYSIS_SYSTEM_PROMPT = (
    "You are a cannabis strain analyst. Provide detailed, accurate information about strains "
    "based on their genetics, terpene profile, and reported effects. Always respond in valid JSON format."
)

PAIRING_SYSTEM_PROMPT = (
    "You are a cannabis experience designer. Match strains to activities, moods, and occasions "
    "based on their effects profile. Be specific about why certain strains enhance certain experiences."
)

# =============================================================================
# PROMPT BUILDERS
# =============================================================================


def build_profile_context(context: ChatContext | None) -> str:
    """Profile block appended to the chat system prompt; empty if nothing was supplied."""
    if context is None:
        return ""

    parts: list[str] = []
    if context.favorite_strains:
        parts.append(f"Favorite strains: {', '.join(context.favorite_strains)}")
    if context.preferred_effects:
        parts.append(f"Looking for: {', '.join(context.preferred_effects)}")
    if context.experience_level:
        parts.append(f"Experience: {context.experience_level}")
    if context.medical_needs:
        parts.append(f"Medical needs: {', '.join(context.medical_needs)}")
    if context.tolerance:
        parts.append(f"Tolerance: {context.tolerance}")
    if context.avoid_effects:
        parts.append(f"Wants to avoid: {', '.join(context.avoid_effects)}")

    if not parts:
        return ""
    return "\n\n## User Profile\n" + "\n".join(parts)


def build_chat_instruction(context: ChatContext | None = None) -> str:
    return SOMMELIER_SYSTEM_PROMPT + build_profile_context(context)


def build_recommendation_prompt(params: RecommendationParams) -> str:
    conditions: list[str] = []
    if params.mood:
        conditions.append(f"Mood: {params.mood}")
    if params.activity:
        conditions.append(f"Activity: {params.activity}")
    if params.time_of_day:
        conditions.append(f"Time: {params.time_of_day}")
    if params.desired_effects:
        conditions.append(f"Looking for: {', '.join(params.desired_effects)}")
    if params.avoid_effects:
        conditions.append(f"Avoid: {', '.join(params.avoid_effects)}")
    if params.experience_level:
        conditions.append(f"Experience: {params.experience_level}")
    if params.medical_needs:
        conditions.append(f"Medical needs: {', '.join(params.medical_needs)}")
    if params.method and params.method != "any":
        conditions.append(f"Method: {params.method}")

    return f"""Recommend 3 cannabis strains for:
{chr(10).join(conditions)}

Respond in JSON:
{{
  "intro": "Brief friendly intro (1-2 sentences)",
  "recommendations": [
    {{
      "name": "Strain Name",
      "type": "Indica|Sativa|Hybrid",
      "thcRange": "15-20%",
      "effects": ["effect1", "effect2", "effect3"],
      "terpenes": ["terpene1", "terpene2"],
      "reason": "Why this fits (2 sentences)",
      "matchScore": 92
    }}
  ],
  "tips": "One harm reduction or consumption tip"
}}"""


def _percent(value: float | None) -> str:
    return f"{value:g}%" if value else "Unknown"


def build_analysis_prompt(
    strain_name: str,
    category: str,
    thc: float | None = None,
    cbd: float | None = None,
    terpenes: list[str] | None = None,
) -> str:
    return f"""Analyze this cannabis strain:
- Name: {strain_name}
- Type: {category}
- THC: {_percent(thc)}
- CBD: {_percent(cbd)}
- Terpenes: {', '.join(terpenes) if terpenes else 'Unknown'}

Respond in JSON:
{{
  "effects": {{
    "physical": ["effect1", "effect2"],
    "mental": ["effect1", "effect2"],
    "emotional": ["effect1", "effect2"]
  }},
  "bestFor": ["activity1", "activity2"],
  "medicalBenefits": ["benefit1", "benefit2"],
  "sideEffects": ["dry mouth", "etc"],
  "consumptionTips": "Best way to consume this strain",
  "similarStrains": ["Strain1", "Strain2"],
  "experienceLevel": "beginner|intermediate|experienced",
  "duration": "2-4 hours",
  "onset": "5-15 minutes for flower"
}}"""


def build_pairing_prompt(activity: str) -> str:
    return f"""What cannabis strains pair best with: {activity}

Consider:
- How the activity benefits from certain effects
- Timing and duration of the high
- Safety considerations

Respond in JSON:
{{
  "intro": "Brief explanation of what effects enhance this activity",
  "pairings": [
    {{"strain": "Strain Name", "type": "Indica|Sativa|Hybrid", "why": "Why it works", "confidence": "perfect|great|good"}}
  ],
  "tips": "One tip for this activity + cannabis combo"
}}"""
