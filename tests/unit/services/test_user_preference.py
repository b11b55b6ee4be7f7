"""Unit tests for preference profile helpers."""

from sommelier_service.models import PotencyTolerance, StrainCategory, UserPreferenceProfile
from sommelier_service.schemas import RecommendationParams
from sommelier_service.services.user_preference import (
    create_default_profile,
    describe_preferences,
    profile_from_params,
)


class TestDescribePreferences:
    def test_default_is_balanced(self) -> None:
        assert describe_preferences(create_default_profile("u")) == "have a balanced palate"

    def test_lists_strong_preferences(self) -> None:
        profile = create_default_profile("u")
        profile.effect_weights.update({"relaxed": 4, "sleepy": 5, "creative": 2})
        profile.preferred_category = StrainCategory.INDICA
        assert describe_preferences(profile) == (
            "enjoy relaxing strains, use cannabis for sleep, prefer indicas"
        )

    def test_plain_string_category(self) -> None:
        profile = UserPreferenceProfile(user_id="u", preferred_category="indica")
        assert profile.preferred_category is StrainCategory.INDICA
        assert describe_preferences(profile) == "prefer indicas"

    def test_category_assigned_as_string(self) -> None:
        profile = create_default_profile("u")
        profile.preferred_category = "sativa"
        assert describe_preferences(profile) == "prefer sativas"


class TestProfileFromParams:
    def test_empty_params_neutral(self) -> None:
        profile = profile_from_params(RecommendationParams())
        assert set(profile.effect_weights.values()) == {3}
        assert profile.potency_tolerance == PotencyTolerance.MEDIUM

    def test_desired_effects_max_weight(self) -> None:
        profile = profile_from_params(RecommendationParams(desired_effects=["Creative", "glowing"]))
        assert profile.weight_for("creative") == 5
        assert "glowing" not in profile.effect_weights

    def test_mood_activity_and_time_emphasis(self) -> None:
        params = RecommendationParams(mood="need sleep", activity="watching movies", time_of_day="morning")
        profile = profile_from_params(params)
        assert profile.weight_for("sleepy") == 4
        assert profile.weight_for("giggly") == 4
        assert profile.weight_for("energetic") == 4
        assert profile.weight_for("talkative") == 3

    def test_avoid_and_experience(self) -> None:
        params = RecommendationParams(avoid_effects=["Sleepy"], experience_level="beginner")
        profile = profile_from_params(params)
        assert profile.avoid_effects == {"sleepy"}
        assert profile.potency_tolerance == PotencyTolerance.LOW
