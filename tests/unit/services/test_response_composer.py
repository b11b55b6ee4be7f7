"""Unit tests for reply composition and candidate selection."""

import pytest

from sommelier_service.exceptions import UnknownCategoryError
from sommelier_service.infrastructure.catalog import Catalog
from sommelier_service.models import Intent, IntentCategory, UserPreferenceProfile
from sommelier_service.services.candidates import select_candidates
from sommelier_service.services.response_composer import (
    EDUCATION_DEFAULT,
    EDUCATION_TOPICS,
    MOOD_HEADLINES,
    WELCOME_MESSAGE,
    ResponseComposer,
)
from sommelier_service.services.scoring import ScoringEngine


@pytest.fixture
def composer() -> ResponseComposer:
    return ResponseComposer()


def _ranked(catalog: Catalog, intent: Intent, profile: UserPreferenceProfile):
    return ScoringEngine().score(select_candidates(catalog, intent), profile)


class TestCompose:
    def test_mood_reply(
        self, composer: ResponseComposer, catalog: Catalog, default_profile: UserPreferenceProfile
    ) -> None:
        intent = Intent(IntentCategory.MOOD, {"mood": "sleep"})
        reply = composer.compose(intent, _ranked(catalog, intent, default_profile))

        assert reply.message == MOOD_HEADLINES["sleep"]
        assert reply.intent == "mood"
        assert len(reply.recommendations) == 3
        assert len(reply.follow_up) == 3

    def test_item_fields_truncated(
        self, composer: ResponseComposer, catalog: Catalog, default_profile: UserPreferenceProfile
    ) -> None:
        intent = Intent(IntentCategory.RECOMMENDATION)
        reply = composer.compose(intent, _ranked(catalog, intent, default_profile), limit=5)

        assert len(reply.recommendations) == 5
        for item in reply.recommendations:
            assert len(item.effects) <= 4
            assert len(item.aromas) <= 3
            assert 0 <= item.match_score <= 100
            assert item.potency.endswith("%")
            assert item.reason

    def test_potency_label(
        self, composer: ResponseComposer, catalog: Catalog, default_profile: UserPreferenceProfile
    ) -> None:
        intent = Intent(IntentCategory.SEARCH, {"query": "granddaddy"})
        reply = composer.compose(intent, _ranked(catalog, intent, default_profile))
        assert reply.recommendations[0].potency == "17-27%"
        assert reply.message.startswith('Found 1 strains matching "granddaddy"')

    def test_search_not_found(
        self, composer: ResponseComposer, catalog: Catalog, default_profile: UserPreferenceProfile
    ) -> None:
        intent = Intent(IntentCategory.SEARCH, {"query": "zzzzz"})
        reply = composer.compose(intent, _ranked(catalog, intent, default_profile))

        assert reply.recommendations == []
        assert '"zzzzz"' in reply.message
        assert len(reply.follow_up) == 2

    def test_medical_follow_ups(
        self, composer: ResponseComposer, catalog: Catalog, default_profile: UserPreferenceProfile
    ) -> None:
        intent = Intent(IntentCategory.MEDICAL, {"condition": "nausea"})
        reply = composer.compose(intent, _ranked(catalog, intent, default_profile))
        assert "nausea" in reply.message
        assert reply.follow_up[0] == "Always consult a doctor for medical advice"
        assert all(r.category != "" for r in reply.recommendations)

    def test_recommendation_describes_profile(
        self, composer: ResponseComposer, catalog: Catalog, default_profile: UserPreferenceProfile
    ) -> None:
        intent = Intent(IntentCategory.RECOMMENDATION)
        reply = composer.compose(intent, _ranked(catalog, intent, default_profile), profile=default_profile)
        assert "have a balanced palate" in reply.message

    def test_education(self, composer: ResponseComposer) -> None:
        reply = composer.compose(Intent(IntentCategory.EDUCATION, {"topic": "what are terpenes"}), [])
        assert reply.message == EDUCATION_TOPICS["terpene"]
        assert reply.recommendations == []

    def test_education_default(self, composer: ResponseComposer) -> None:
        reply = composer.compose(Intent(IntentCategory.EDUCATION, {"topic": "difference between"}), [])
        assert reply.message == EDUCATION_DEFAULT

    def test_unknown_is_welcome(self, composer: ResponseComposer) -> None:
        reply = composer.compose(Intent(IntentCategory.UNKNOWN), [])
        assert reply.message == WELCOME_MESSAGE
        assert len(reply.follow_up) == 3

    def test_unknown_time_key_is_contract_violation(self, composer: ResponseComposer) -> None:
        with pytest.raises(UnknownCategoryError):
            composer.compose(Intent(IntentCategory.TIME_OF_DAY, {"time": "brunch"}), [])


class TestCandidates:
    def test_mood_candidates_limited(self, catalog: Catalog) -> None:
        candidates = select_candidates(catalog, Intent(IntentCategory.MOOD, {"mood": "relax"}))
        assert len(candidates) == 10

    def test_time_of_day_filters_category(self, catalog: Catalog) -> None:
        candidates = select_candidates(catalog, Intent(IntentCategory.TIME_OF_DAY, {"time": "morning"}))
        assert candidates
        assert all(p.category.value in ("sativa", "hybrid") for p in candidates)

    def test_category_request(self, catalog: Catalog) -> None:
        candidates = select_candidates(catalog, Intent(IntentCategory.CATEGORY_REQUEST, {"strain_type": "indica"}))
        assert {p.category.value for p in candidates} == {"indica"}

    def test_education_has_no_candidates(self, catalog: Catalog) -> None:
        assert select_candidates(catalog, Intent(IntentCategory.EDUCATION, {"topic": "thc"})) == []

    def test_unknown_mood_rejected(self, catalog: Catalog) -> None:
        with pytest.raises(UnknownCategoryError):
            select_candidates(catalog, Intent(IntentCategory.MOOD, {"mood": "grumpy"}))
