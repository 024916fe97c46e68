"""Trait Deriver - Phase 2 of the Fit Scoring Engine.

Turns a normalized QuizResponse into [0,1] trait scores. Every function is
pure and total: unanswered fields fall back to the neutral midpoint and
results are clamped before being returned.
"""

from typing import Callable, Optional

from .schema import (
    QuizResponse,
    TraitName,
    TraitScores,
    TraitSlider,
    WorkStructurePreference,
)

NEUTRAL = 0.5

# Preliminary "needs structure" scores; inverted by derive_structure_preference
STRUCTURE_SCORES = {
    WorkStructurePreference.CLEAR_STEPS: 0.9,
    WorkStructurePreference.SOME_STRUCTURE: 0.7,
    WorkStructurePreference.MOSTLY_FLEXIBLE: 0.3,
    WorkStructurePreference.TOTAL_FREEDOM: 0.1,
}


def _clamp(value: float) -> float:
    return max(0.0, min(1.0, value))


def scale_likert(value: Optional[int]) -> Optional[float]:
    """Map a 1-5 rating onto [0,1]: 1 -> 0.0, 3 -> 0.5, 5 -> 1.0."""
    if value is None:
        return None
    return _clamp((value - 1) / 4)


def _likert_or_neutral(value: Optional[int]) -> float:
    scaled = scale_likert(value)
    return NEUTRAL if scaled is None else scaled


def _communication_signal(response: QuizResponse) -> float:
    """Direct communication replaces the neutral default; brand-face comfort can only raise it."""
    score = NEUTRAL
    if response.direct_communication_enjoyment is not None:
        score = _likert_or_neutral(response.direct_communication_enjoyment)
    if response.brand_face_comfort is not None:
        score = max(score, _likert_or_neutral(response.brand_face_comfort))
    return _clamp(score)


# =============================================================================
# Display traits
# =============================================================================


def derive_risk_tolerance(response: QuizResponse) -> float:
    return _likert_or_neutral(response.risk_comfort_level)


def derive_motivation(response: QuizResponse) -> float:
    return _likert_or_neutral(response.self_motivation_level)


def derive_tech_comfort(response: QuizResponse) -> float:
    return _likert_or_neutral(response.tech_skills_rating)


def derive_creativity(response: QuizResponse) -> float:
    return _likert_or_neutral(response.creative_work_enjoyment)


def derive_feedback_resilience(response: QuizResponse) -> float:
    return _likert_or_neutral(response.feedback_rejection_response)


def derive_consistency(response: QuizResponse) -> float:
    """Long-term consistency, falling back to self-motivation."""
    if response.long_term_consistency is not None:
        return _likert_or_neutral(response.long_term_consistency)
    return _likert_or_neutral(response.self_motivation_level)


def derive_social_comfort(response: QuizResponse) -> float:
    """One strong signal is enough: the max of direct communication and brand-face comfort."""
    return _communication_signal(response)


def derive_communication_confidence(response: QuizResponse) -> float:
    return _communication_signal(response)


def derive_structure_preference(response: QuizResponse) -> float:
    """High means prefers working freely, low means needs structure."""
    preliminary = STRUCTURE_SCORES.get(response.work_structure_preference or "", NEUTRAL)
    return _clamp(1 - preliminary)


# =============================================================================
# Extended scoring traits
# =============================================================================


def derive_organization(response: QuizResponse) -> float:
    return _likert_or_neutral(response.organization_level)


def derive_competitiveness(response: QuizResponse) -> float:
    return _likert_or_neutral(response.competitiveness_level)


def derive_experimentation(response: QuizResponse) -> float:
    return _likert_or_neutral(response.trial_and_error_comfort)


def derive_resilience(response: QuizResponse) -> float:
    return _likert_or_neutral(response.discouragement_resilience)


def derive_uncertainty_tolerance(response: QuizResponse) -> float:
    return _likert_or_neutral(response.uncertainty_handling)


def derive_brand_presence(response: QuizResponse) -> float:
    return _likert_or_neutral(response.brand_face_comfort)


def derive_passive_income_focus(response: QuizResponse) -> float:
    return _likert_or_neutral(response.passive_income_importance)


def derive_purpose_drive(response: QuizResponse) -> float:
    return _likert_or_neutral(response.meaningful_contribution_importance)


def derive_autonomy(response: QuizResponse) -> float:
    return _likert_or_neutral(response.control_importance)


def derive_social_media_affinity(response: QuizResponse) -> float:
    return _likert_or_neutral(response.social_media_interest)


TRAIT_DERIVERS: dict[TraitName, Callable[[QuizResponse], float]] = {
    TraitName.RISK_TOLERANCE: derive_risk_tolerance,
    TraitName.MOTIVATION: derive_motivation,
    TraitName.TECH_COMFORT: derive_tech_comfort,
    TraitName.COMMUNICATION_CONFIDENCE: derive_communication_confidence,
    TraitName.CREATIVITY: derive_creativity,
    TraitName.STRUCTURE_PREFERENCE: derive_structure_preference,
    TraitName.CONSISTENCY: derive_consistency,
    TraitName.FEEDBACK_RESILIENCE: derive_feedback_resilience,
    TraitName.SOCIAL_COMFORT: derive_social_comfort,
    TraitName.ORGANIZATION: derive_organization,
    TraitName.COMPETITIVENESS: derive_competitiveness,
    TraitName.EXPERIMENTATION: derive_experimentation,
    TraitName.RESILIENCE: derive_resilience,
    TraitName.UNCERTAINTY_TOLERANCE: derive_uncertainty_tolerance,
    TraitName.BRAND_PRESENCE: derive_brand_presence,
    TraitName.PASSIVE_INCOME_FOCUS: derive_passive_income_focus,
    TraitName.PURPOSE_DRIVE: derive_purpose_drive,
    TraitName.AUTONOMY: derive_autonomy,
    TraitName.SOCIAL_MEDIA_AFFINITY: derive_social_media_affinity,
}


def derive_trait(trait: TraitName, response: QuizResponse) -> float:
    """Derive a single trait by name."""
    return TRAIT_DERIVERS[trait](response)


def derive_trait_scores(response: QuizResponse) -> TraitScores:
    """Derive the nine display traits."""
    return TraitScores(**{
        trait.value: derive_trait(trait, response)
        for trait in TraitName.display_traits()
    })


def derive_trait_profile(response: QuizResponse) -> dict[str, float]:
    """Derive every trait, display and extended, keyed by trait name."""
    return {trait.value: derive(response) for trait, derive in TRAIT_DERIVERS.items()}


TRAIT_SLIDERS = [
    TraitSlider(trait=TraitName.SOCIAL_COMFORT, label="Social Comfort",
                left_label="Introvert", right_label="Extrovert"),
    TraitSlider(trait=TraitName.CONSISTENCY, label="Discipline",
                left_label="Low Discipline", right_label="High Discipline"),
    TraitSlider(trait=TraitName.RISK_TOLERANCE, label="Risk Tolerance",
                left_label="Avoids Risks", right_label="Embraces Risks"),
    TraitSlider(trait=TraitName.TECH_COMFORT, label="Tech Comfort",
                left_label="Low Tech Skills", right_label="Tech Savvy"),
    TraitSlider(trait=TraitName.STRUCTURE_PREFERENCE, label="Structure Preference",
                left_label="Needs Structure", right_label="Works Freely"),
    TraitSlider(trait=TraitName.MOTIVATION, label="Motivation",
                left_label="Passive", right_label="Self-Driven"),
    TraitSlider(trait=TraitName.FEEDBACK_RESILIENCE, label="Feedback Resilience",
                left_label="Takes Feedback Personally", right_label="Uses Feedback to Grow"),
    TraitSlider(trait=TraitName.CREATIVITY, label="Creativity",
                left_label="Analytical", right_label="Creative"),
    TraitSlider(trait=TraitName.COMMUNICATION_CONFIDENCE, label="Confidence",
                left_label="Low Confidence", right_label="High Confidence"),
]
