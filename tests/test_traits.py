"""Tests for trait derivation from questionnaire answers."""

import pytest

from fit_scorer.schema import QuizResponse, TraitName
from fit_scorer.traits import (
    TRAIT_DERIVERS,
    TRAIT_SLIDERS,
    derive_communication_confidence,
    derive_consistency,
    derive_motivation,
    derive_risk_tolerance,
    derive_social_comfort,
    derive_structure_preference,
    derive_trait_profile,
    derive_trait_scores,
    scale_likert,
)


class TestLikertScaling:

    @pytest.mark.parametrize("value,expected", [
        (1, 0.0),
        (2, 0.25),
        (3, 0.5),
        (4, 0.75),
        (5, 1.0),
    ])
    def test_scales_onto_unit_interval(self, value, expected):
        assert scale_likert(value) == pytest.approx(expected)

    def test_unanswered_is_none(self):
        assert scale_likert(None) is None

    @pytest.mark.parametrize("value,expected", [(1, 0.0), (3, 0.5), (5, 1.0)])
    def test_risk_tolerance_follows_risk_comfort(self, value, expected):
        response = QuizResponse(risk_comfort_level=value)
        assert derive_risk_tolerance(response) == pytest.approx(expected)


class TestDefaults:

    def test_missing_motivation_is_neutral(self):
        assert derive_motivation(QuizResponse()) == 0.5

    def test_empty_response_is_neutral_everywhere(self):
        profile = derive_trait_profile(QuizResponse())
        assert set(profile) == {t.value for t in TraitName}
        assert all(value == pytest.approx(0.5) for value in profile.values())

    def test_consistency_falls_back_to_motivation(self):
        assert derive_consistency(QuizResponse(self_motivation_level=5)) == 1.0

    def test_consistency_prefers_long_term_answer(self):
        response = QuizResponse(long_term_consistency=2, self_motivation_level=5)
        assert derive_consistency(response) == pytest.approx(0.25)

    def test_consistency_neutral_without_either(self):
        assert derive_consistency(QuizResponse()) == 0.5


class TestCommunicationSignals:

    def test_social_comfort_takes_the_stronger_signal(self):
        response = QuizResponse(direct_communication_enjoyment=2, brand_face_comfort=5)
        assert derive_social_comfort(response) == 1.0

    def test_direct_communication_alone(self):
        response = QuizResponse(direct_communication_enjoyment=4)
        assert derive_social_comfort(response) == pytest.approx(0.75)

    def test_low_brand_comfort_cannot_lower_neutral_default(self):
        response = QuizResponse(brand_face_comfort=1)
        assert derive_social_comfort(response) == 0.5

    def test_both_low(self):
        response = QuizResponse(direct_communication_enjoyment=1, brand_face_comfort=1)
        assert derive_social_comfort(response) == 0.0

    def test_communication_confidence_matches_social_comfort(self):
        response = QuizResponse(direct_communication_enjoyment=3, brand_face_comfort=4)
        assert derive_communication_confidence(response) == derive_social_comfort(response)


class TestStructurePreference:

    @pytest.mark.parametrize("answer,expected", [
        ("clear-steps", 0.1),
        ("some-structure", 0.3),
        ("mostly-flexible", 0.7),
        ("total-freedom", 0.9),
        ("something-else", 0.5),
        (None, 0.5),
    ])
    def test_inverted_structure_scores(self, answer, expected):
        response = QuizResponse(work_structure_preference=answer)
        assert derive_structure_preference(response) == pytest.approx(expected)


class TestTraitScores:

    def test_display_traits_only(self, skilled_response):
        scores = derive_trait_scores(skilled_response).as_dict()
        assert set(scores) == {t.value for t in TraitName.display_traits()}
        assert scores["risk_tolerance"] == 1.0
        assert scores["tech_comfort"] == 1.0

    def test_every_value_bounded(self):
        response = QuizResponse(**{
            "risk_comfort_level": 5,
            "tech_skills_rating": 1,
            "brand_face_comfort": 5,
            "work_structure_preference": "total-freedom",
        })
        for value in derive_trait_profile(response).values():
            assert 0.0 <= value <= 1.0

    def test_every_trait_has_a_deriver(self):
        assert set(TRAIT_DERIVERS) == set(TraitName)

    def test_sliders_cover_display_traits_in_order(self):
        assert [s.trait for s in TRAIT_SLIDERS] == TraitName.display_traits()
        social = TRAIT_SLIDERS[0]
        assert (social.left_label, social.right_label) == ("Introvert", "Extrovert")
