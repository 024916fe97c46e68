"""Explainer - Phase 4 of the Fit Scoring Engine.

Turns a ranking into the report content shown next to it: match quality
labels, personality insights, resource readiness, per-path insights, the
models to avoid and a summary of the result.
"""

from typing import Optional

from .config import ScorerConfig, get_config
from .schema import (
    AvoidanceNote,
    QuizResponse,
    RankedPath,
    ReadinessFactor,
    ResultSummary,
    TraitDirection,
    TraitInsight,
    TraitName,
)
from .traits import derive_trait_profile

# Trait -> (Likert field it is read from, what a requirement on it asks for)
TRAIT_SOURCES = {
    TraitName.TECH_COMFORT: ("tech_skills_rating", "advanced technical skills"),
    TraitName.COMMUNICATION_CONFIDENCE: (
        "direct_communication_enjoyment", "high comfort with direct communication"
    ),
    TraitName.SOCIAL_COMFORT: ("direct_communication_enjoyment", "enjoying regular contact with people"),
    TraitName.BRAND_PRESENCE: ("brand_face_comfort", "comfort being the face of a brand"),
    TraitName.CREATIVITY: ("creative_work_enjoyment", "enjoying creative work"),
    TraitName.RISK_TOLERANCE: ("risk_comfort_level", "comfort with financial risk"),
    TraitName.MOTIVATION: ("self_motivation_level", "strong self-motivation"),
    TraitName.CONSISTENCY: ("long_term_consistency", "long-term consistency"),
    TraitName.FEEDBACK_RESILIENCE: ("feedback_rejection_response", "handling feedback and rejection well"),
    TraitName.ORGANIZATION: ("organization_level", "strong organization"),
    TraitName.EXPERIMENTATION: ("trial_and_error_comfort", "comfort with trial and error"),
}

# Trait -> insight line when the user is strong in a trait the path leans on
SKILL_INSIGHTS = {
    TraitName.TECH_COMFORT: (
        "tech_skills_rating", "Your strong technical skills give you a significant advantage"
    ),
    TraitName.COMMUNICATION_CONFIDENCE: (
        "direct_communication_enjoyment", "Your communication skills are perfectly suited for this path"
    ),
    TraitName.CREATIVITY: (
        "creative_work_enjoyment", "Your creative nature will thrive in this business model"
    ),
}

LOW_SCORE_REASONS = [
    "Requires skills or preferences that don't align with your current profile",
    "Time commitment or income timeline doesn't match your goals",
    "Risk level or investment requirements are misaligned",
]

MODERATE_SCORE_REASONS = [
    "Some aspects align, but key requirements don't match your strengths",
    "Better options available that suit your profile more closely",
    "May require significant skill development before becoming viable",
]

DEFAULT_PATH_INSIGHT = "This business model aligns well with your overall profile and goals"

MAX_PATH_INSIGHTS = 2


def _key_requirements(path: RankedPath):
    """Requirements with a meaningful minimum that the model needs more of."""
    return [
        r for r in path.model.trait_requirements
        if r.weight > 0
        and r.minimum is not None
        and r.minimum >= 0.5
        and r.direction == TraitDirection.HIGHER
    ]


class RecommendationExplainer:
    """Generates report content for scoring results.

    Principles:
    - Every line shown to the user is traceable to an answer or a score
    - Unanswered questions never produce an insight

    Configuration:
    - Match quality and readiness thresholds can be customized via fit-scorer.yaml
    """

    def __init__(self, config: Optional[ScorerConfig] = None):
        """Initialize explainer with configuration."""
        config = config or get_config()
        self.quality = config.match_quality
        self.readiness = config.readiness_thresholds
        self.top_count = config.report.top_matches
        self.avoid_count = config.report.models_to_avoid

    def match_quality(self, score: int) -> str:
        """Label a fit score."""
        if score >= self.quality.excellent_threshold:
            return "Excellent Match"
        if score >= self.quality.great_threshold:
            return "Great Match"
        if score >= self.quality.good_threshold:
            return "Good Match"
        return "Fair Match"

    def personality_insights(self, response: QuizResponse) -> list[TraitInsight]:
        """Notable traits drawn directly from the answers."""
        insights = []

        risk = response.risk_comfort_level
        if risk is not None and risk >= 4:
            insights.append(TraitInsight(
                trait="Risk Taker",
                description="You're comfortable with uncertainty and willing to take calculated risks for potential rewards.",
                strength=True,
            ))
        elif risk is not None and risk <= 2:
            insights.append(TraitInsight(
                trait="Risk Averse",
                description="You prefer stable, predictable opportunities with lower uncertainty.",
                strength=False,
            ))

        if (response.self_motivation_level or 0) >= 4:
            insights.append(TraitInsight(
                trait="Self-Motivated",
                description="You have strong internal drive and don't need external pressure to stay productive.",
                strength=True,
            ))

        if (response.creative_work_enjoyment or 0) >= 4:
            insights.append(TraitInsight(
                trait="Creative",
                description="You thrive on creative work and enjoy bringing new ideas to life.",
                strength=True,
            ))

        if (response.direct_communication_enjoyment or 0) >= 4:
            insights.append(TraitInsight(
                trait="People-Oriented",
                description="You enjoy interacting with others and building relationships.",
                strength=True,
            ))

        if (response.tech_skills_rating or 0) >= 4:
            insights.append(TraitInsight(
                trait="Tech-Savvy",
                description="You're comfortable with technology and quick to learn new tools.",
                strength=True,
            ))

        return insights

    def resource_readiness(self, response: QuizResponse) -> list[ReadinessFactor]:
        """Rate time, budget, technical skills and communication comfort."""
        cfg = self.readiness
        factors = []

        hours = response.weekly_time_commitment
        if hours is None:
            factors.append(ReadinessFactor(factor="Time Availability", level="Unknown", detail="Not answered"))
        else:
            level = "High" if hours >= cfg.high_weekly_hours else "Medium" if hours >= cfg.medium_weekly_hours else "Limited"
            factors.append(ReadinessFactor(
                factor="Time Availability", level=level, detail=f"{hours:g} hours/week"
            ))

        budget = response.upfront_investment
        if budget is None:
            factors.append(ReadinessFactor(factor="Investment Budget", level="Unknown", detail="Not answered"))
        else:
            level = "High" if budget >= cfg.high_budget else "Medium" if budget >= cfg.medium_budget else "Low"
            factors.append(ReadinessFactor(
                factor="Investment Budget", level=level, detail=f"${budget:,.0f} available"
            ))

        factors.append(self._rating_factor(
            "Technical Skills", response.tech_skills_rating, "Basic"
        ))
        factors.append(self._rating_factor(
            "Communication Comfort", response.direct_communication_enjoyment, "Low"
        ))

        return factors

    def _rating_factor(self, factor: str, rating: Optional[int], low_label: str) -> ReadinessFactor:
        if rating is None:
            return ReadinessFactor(factor=factor, level="Unknown", detail="Not answered")
        if rating >= self.readiness.high_rating:
            level = "High"
        elif rating >= self.readiness.medium_rating:
            level = "Medium"
        else:
            level = low_label
        return ReadinessFactor(factor=factor, level=level, detail=f"{rating}/5 self-rating")

    def path_insights(self, path: RankedPath, response: QuizResponse) -> list[str]:
        """Up to two personalized lines on why a path suits the user."""
        insights = []

        hours = response.weekly_time_commitment
        if hours is not None and hours >= 30:
            insights.append("Your high time commitment aligns perfectly with this business model's requirements")
        elif hours is not None and hours <= 10:
            insights.append("This business model works well with your limited time availability")

        required = {r.trait for r in _key_requirements(path)}
        for trait, (field_name, line) in SKILL_INSIGHTS.items():
            rating = response.answer(field_name)
            if trait.value in required and rating is not None and rating >= 4:
                insights.append(line)

        if not insights:
            insights.append(DEFAULT_PATH_INSIGHT)

        return insights[:MAX_PATH_INSIGHTS]

    def avoidance_notes(
        self,
        paths: list[RankedPath],
        response: QuizResponse,
        top_n: Optional[int] = None,
    ) -> list[AvoidanceNote]:
        """The lowest-scoring paths with reasons they don't fit.

        Paths highlighted as top matches are never listed, so a short
        catalog yields fewer notes rather than contradicting itself.

        Args:
            paths: Ranked paths, highest score first
            response: Answers the paths were scored against
            top_n: Number of top matches shown (config default when omitted)

        Returns:
            Notes for the bottom paths, lowest score first
        """
        if top_n is None:
            top_n = self.top_count
        if self.avoid_count <= 0 or not paths:
            return []

        profile = derive_trait_profile(response)
        start = max(len(paths) - self.avoid_count, top_n, 0)
        bottom = list(reversed(paths[start:]))
        return [self._avoidance_note(path, response, profile) for path in bottom]

    def _avoidance_note(
        self,
        path: RankedPath,
        response: QuizResponse,
        profile: dict[str, float],
    ) -> AvoidanceNote:
        if path.fit_score < 30:
            reasons = list(LOW_SCORE_REASONS)
        elif path.fit_score < 50:
            reasons = list(MODERATE_SCORE_REASONS)
        else:
            reasons = ["Other business models fit your profile more closely"]

        for req in _key_requirements(path):
            value = profile.get(req.trait)
            source = TRAIT_SOURCES.get(req.trait)
            if value is None or source is None or value >= req.minimum:
                continue
            field_name, needs = source
            rating = response.answer(field_name)
            if rating is None:
                continue
            reasons.append(f"Requires {needs} (your current level: {rating}/5)")

        return AvoidanceNote(
            model_id=path.id,
            name=path.name,
            fit_score=path.fit_score,
            reasons=reasons,
        )

    def generate_summary(self, paths: list[RankedPath], response: QuizResponse) -> ResultSummary:
        """Generate a summary of the ranking.

        Args:
            paths: Ranked paths, highest score first
            response: Answers the paths were scored against

        Returns:
            Summary with the primary recommendation, its strengths and gaps
        """
        answered = len(response.answered_fields())

        if not paths:
            return ResultSummary(
                key_gaps=["No business models available to rank"],
                answered_count=answered,
            )

        primary = paths[0]
        return ResultSummary(
            primary_recommendation=primary.name,
            primary_recommendation_id=primary.id,
            primary_fit_score=primary.fit_score,
            match_quality=self.match_quality(primary.fit_score),
            key_strengths=list(primary.fit_summary[:3]),
            key_gaps=list(primary.struggle_summary[:3]),
            answered_count=answered,
        )
