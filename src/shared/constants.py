"""Shared constants across the application."""

# Preference weights (1-5 scale, 3 is neutral)
MIN_PREFERENCE_WEIGHT = 1
NEUTRAL_PREFERENCE_WEIGHT = 3
MAX_PREFERENCE_WEIGHT = 5

# Reply shaping
DEFAULT_RECOMMENDATION_LIMIT = 3
MAX_EFFECTS_SHOWN = 4
MAX_AROMAS_SHOWN = 3
MOOD_CANDIDATE_LIMIT = 10
SEARCH_RESULT_LIMIT = 20

# Generation
HISTORY_WINDOW_TURNS = 10

# Score bounds
MIN_MATCH_SCORE = 0
MAX_MATCH_SCORE = 100
