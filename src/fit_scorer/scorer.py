"""Fit Scorer - Phase 3 of the Fit Scoring Engine.

Scores every business model in the catalog against a normalized
QuizResponse. Produces an integer 0-100 fit score with a detailed breakdown
by dimension, then ranks the catalog by score.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Optional, Union

from business_catalog.schema import canonical_choice

from .config import ScoringWeightsConfig
from .schema import (
    BusinessCatalog,
    BusinessModelDefinition,
    IncomeTimeline,
    MatchedDimension,
    MismatchedDimension,
    QuizResponse,
    RankedPath,
    ScoringDimension,
    TraitDirection,
    TraitRequirement,
)
from .traits import NEUTRAL, derive_trait_profile

logger = logging.getLogger(__name__)

# Score assigned to an entry that could not be scored at all
FALLBACK_FIT_SCORE = 50


@dataclass
class ScoringWeights:
    """Weights for scoring dimensions."""
    trait_alignment: float = 0.50
    budget_fit: float = 0.12
    time_fit: float = 0.12
    income_timeline_fit: float = 0.08
    income_goal_fit: float = 0.08
    preference_fit: float = 0.10

    @classmethod
    def from_config(cls, config: ScoringWeightsConfig) -> "ScoringWeights":
        return cls(**config.model_dump())


def requirement_score(trait_value: float, minimum: Optional[float]) -> float:
    """Score one trait against a requirement, in [0,1].

    Below the minimum the score climbs linearly to 0.6; at or above it the
    remaining 0.4 is earned on the way to 1.0. Non-decreasing in trait_value.
    """
    t = max(0.0, min(1.0, trait_value))
    if minimum is None:
        return t
    m = max(0.0, min(1.0, minimum))
    if m == 0:
        return 0.6 + 0.4 * t
    if t < m:
        return 0.6 * t / m
    if m >= 1.0:
        return 1.0
    return 0.6 + 0.4 * (t - m) / (1 - m)


def _shortfall_score(available: Optional[float], required: float) -> float:
    """1.0 when available covers required, sliding down to 0.2 at zero."""
    if available is None:
        return NEUTRAL
    if required <= 0 or available >= required:
        return 1.0
    return 0.2 + 0.8 * (available / required)


class FitScorer:
    """Scores business models against questionnaire answers.

    Scoring principles:
    - Trait alignment carries half the weight
    - Resource checks (budget, time, timeline, income) are soft, never gates
    - Unanswered questions score neutrally rather than for or against
    - One broken catalog entry never stops the rest from being ranked
    """

    # Desired first-income timeline -> months the user is willing to wait
    INCOME_TIMELINE_MONTHS = {
        IncomeTimeline.UNDER_1_MONTH: 1,
        IncomeTimeline.ONE_TO_TWO_MONTHS: 2,
        IncomeTimeline.THREE_TO_SIX_MONTHS: 6,
        IncomeTimeline.NO_RUSH: 24,
    }

    PREFERENCE_MATCH = 1.0
    PREFERENCE_MISMATCH = 0.4
    FLAG_DECLINED = 0.2

    def __init__(self, weights: Optional[ScoringWeights] = None):
        """Initialize scorer with optional custom weights."""
        self.weights = weights or ScoringWeights()

    def rank(
        self,
        response: QuizResponse,
        catalog: Union[BusinessCatalog, Iterable[BusinessModelDefinition]],
    ) -> list[RankedPath]:
        """Score every business model and return them ranked.

        Args:
            response: Normalized questionnaire answers
            catalog: Catalog (or models in catalog order)

        Returns:
            Ranked paths, highest fit score first; ties keep catalog order
        """
        models = catalog.models if isinstance(catalog, BusinessCatalog) else list(catalog)
        profile = derive_trait_profile(response)

        paths = [self.score_safely(model, response, profile) for model in models]

        # Sort by fit score descending (stable)
        paths.sort(key=lambda p: p.fit_score, reverse=True)

        for rank, path in enumerate(paths, 1):
            path.rank = rank

        return paths

    def score_safely(
        self,
        model: BusinessModelDefinition,
        response: QuizResponse,
        profile: Optional[dict[str, float]] = None,
    ) -> RankedPath:
        """Score a model, falling back to the neutral score if scoring fails."""
        try:
            return self.score_model(model, response, profile)
        except Exception:
            logger.exception(
                "Scoring failed for business model '%s'; using fallback score",
                getattr(model, "id", "?"),
            )
            return self._fallback_path(model)

    def score_model(
        self,
        model: BusinessModelDefinition,
        response: QuizResponse,
        profile: Optional[dict[str, float]] = None,
    ) -> RankedPath:
        """Score a single business model."""
        if profile is None:
            profile = derive_trait_profile(response)

        matched: list[MatchedDimension] = []
        mismatched: list[MismatchedDimension] = []

        dimensions = [
            self._score_trait_alignment(model, profile, matched, mismatched),
            self._score_budget_fit(model, response, matched, mismatched),
            self._score_time_fit(model, response, matched, mismatched),
            self._score_income_timeline(model, response, matched, mismatched),
            self._score_income_goal(model, response, matched, mismatched),
            self._score_preferences(model, response, matched, mismatched),
        ]

        total_weighted = sum(d.weighted_score for d in dimensions)
        total_weights = sum(d.weight for d in dimensions)
        if total_weights > 0:
            base_score = total_weighted / total_weights * 100
        else:
            base_score = FALLBACK_FIT_SCORE

        fit_score = int(max(0, min(100, round(base_score))))

        logger.debug("Scored %s: %d (%s)", model.id, fit_score,
                     ", ".join(f"{d.dimension}={d.raw_score:.0f}% x{d.weight:.2f}" for d in dimensions))

        return RankedPath(
            model=model,
            fit_score=fit_score,
            dimensions=dimensions,
            matched=matched,
            mismatched=mismatched,
            fit_summary=self._generate_fit_summary(matched),
            struggle_summary=self._generate_struggle_summary(mismatched),
        )

    def _dimension(self, name: str, weight: float, score: float, reasoning: str) -> ScoringDimension:
        score = max(0.0, min(1.0, score))
        return ScoringDimension(
            dimension=name,
            weight=weight,
            raw_score=score * 100,
            weighted_score=score * weight,
            reasoning=reasoning,
        )

    def _score_trait_alignment(
        self,
        model: BusinessModelDefinition,
        profile: dict[str, float],
        matched: list[MatchedDimension],
        mismatched: list[MismatchedDimension],
    ) -> ScoringDimension:
        """Score how well the trait profile meets the model's requirements."""
        requirements = [r for r in model.trait_requirements if r.weight > 0]
        if not requirements:
            return self._dimension(
                "trait_alignment", self.weights.trait_alignment, NEUTRAL,
                "No trait requirements defined; neutral score",
            )

        total_weight = 0.0
        total_score = 0.0
        for req in requirements:
            score = self._score_requirement(model, req, profile, matched, mismatched)
            total_weight += req.weight
            total_score += req.weight * score

        alignment = total_score / total_weight
        return self._dimension(
            "trait_alignment", self.weights.trait_alignment, alignment,
            f"{len(requirements)} trait requirements, weighted alignment {alignment:.0%}",
        )

    def _score_requirement(
        self,
        model: BusinessModelDefinition,
        req: TraitRequirement,
        profile: dict[str, float],
        matched: list[MatchedDimension],
        mismatched: list[MismatchedDimension],
    ) -> float:
        """Score one trait requirement."""
        value = profile.get(req.trait)
        if value is None:
            logger.warning("Business model '%s' references unknown trait '%s'", model.id, req.trait)
            return NEUTRAL

        label = req.trait.replace("_", " ").title()
        if req.direction == TraitDirection.LOWER:
            value = 1 - value
            label = f"Low {label}"

        score = requirement_score(value, req.minimum)

        if req.minimum is not None and value < req.minimum:
            mismatched.append(MismatchedDimension(
                dimension=label,
                expected=f">= {req.minimum:.0%}",
                actual=f"{value:.0%}",
                impact="Below the level this business model relies on",
            ))
        elif value >= 0.75:
            matched.append(MatchedDimension(
                dimension=label,
                value=f"{value:.0%}",
                reasoning="Strong fit for this business model",
            ))

        return score

    def _score_budget_fit(
        self,
        model: BusinessModelDefinition,
        response: QuizResponse,
        matched: list[MatchedDimension],
        mismatched: list[MismatchedDimension],
    ) -> ScoringDimension:
        """Score upfront investment against the minimum budget."""
        required = model.thresholds.min_budget
        available = response.upfront_investment
        score = _shortfall_score(available, required)

        if available is None:
            reasoning = "Investment budget not answered"
        elif score >= 1.0:
            reasoning = f"Budget ${available:,.0f} covers ${required:,.0f} minimum"
            if required > 0:
                matched.append(MatchedDimension(
                    dimension="Budget",
                    value=f"${available:,.0f}",
                    reasoning=f"Covers the ${required:,.0f} startup minimum",
                ))
        else:
            reasoning = f"Budget ${available:,.0f} below ${required:,.0f} minimum"
            mismatched.append(MismatchedDimension(
                dimension="Budget",
                expected=f">= ${required:,.0f}",
                actual=f"${available:,.0f}",
                impact="May need to save up or start smaller",
            ))

        return self._dimension("budget_fit", self.weights.budget_fit, score, reasoning)

    def _score_time_fit(
        self,
        model: BusinessModelDefinition,
        response: QuizResponse,
        matched: list[MatchedDimension],
        mismatched: list[MismatchedDimension],
    ) -> ScoringDimension:
        """Score weekly hours against the model's minimum commitment."""
        required = model.thresholds.min_weekly_hours
        available = response.weekly_time_commitment
        score = _shortfall_score(available, required)

        if available is None:
            reasoning = "Weekly time commitment not answered"
        elif score >= 1.0:
            reasoning = f"{available:g} hours/week meets {required:g} hour minimum"
            if required > 0:
                matched.append(MatchedDimension(
                    dimension="Time",
                    value=f"{available:g} hours/week",
                    reasoning=f"Meets the {required:g} hours/week this model needs",
                ))
        else:
            reasoning = f"{available:g} hours/week below {required:g} hour minimum"
            mismatched.append(MismatchedDimension(
                dimension="Time",
                expected=f">= {required:g} hours/week",
                actual=f"{available:g} hours/week",
                impact="Progress will be slower than typical",
            ))

        return self._dimension("time_fit", self.weights.time_fit, score, reasoning)

    def _score_income_timeline(
        self,
        model: BusinessModelDefinition,
        response: QuizResponse,
        matched: list[MatchedDimension],
        mismatched: list[MismatchedDimension],
    ) -> ScoringDimension:
        """Score the desired first-income timeline against the model's typical one."""
        wanted = self.INCOME_TIMELINE_MONTHS.get(response.first_income_timeline or "")
        typical = model.thresholds.months_to_first_income

        if wanted is None:
            return self._dimension(
                "income_timeline_fit", self.weights.income_timeline_fit, NEUTRAL,
                "First income timeline not answered",
            )

        if typical <= wanted:
            score = 1.0
            matched.append(MatchedDimension(
                dimension="Income Timeline",
                value=response.first_income_timeline,
                reasoning=f"First income typically within {typical:g} months",
            ))
        else:
            gap = typical - wanted
            score = max(0.3, 1.0 - 0.1 * gap)
            mismatched.append(MismatchedDimension(
                dimension="Income Timeline",
                expected=response.first_income_timeline,
                actual=f"~{typical:g} months",
                impact="First income likely later than you want",
            ))

        return self._dimension(
            "income_timeline_fit", self.weights.income_timeline_fit, score,
            f"Wants income within {wanted} months, typical {typical:g}",
        )

    def _score_income_goal(
        self,
        model: BusinessModelDefinition,
        response: QuizResponse,
        matched: list[MatchedDimension],
        mismatched: list[MismatchedDimension],
    ) -> ScoringDimension:
        """Score the monthly income goal against the model's realistic ceiling."""
        goal = response.success_income_goal
        ceiling = model.thresholds.max_monthly_income

        if goal is None or ceiling is None:
            return self._dimension(
                "income_goal_fit", self.weights.income_goal_fit, NEUTRAL,
                "Income goal or ceiling unknown",
            )

        if goal <= ceiling:
            score = 1.0
            if goal > 0:
                matched.append(MatchedDimension(
                    dimension="Income Potential",
                    value=f"${goal:,.0f}/month",
                    reasoning=f"Within the ${ceiling:,.0f}/month ceiling",
                ))
        else:
            score = max(0.3, ceiling / goal)
            mismatched.append(MismatchedDimension(
                dimension="Income Potential",
                expected=f"${goal:,.0f}/month",
                actual=f"up to ${ceiling:,.0f}/month",
                impact="Goal is above what this model typically earns",
            ))

        return self._dimension(
            "income_goal_fit", self.weights.income_goal_fit, score,
            f"Goal ${goal:,.0f}/month, ceiling ${ceiling:,.0f}/month",
        )

    def _score_preferences(
        self,
        model: BusinessModelDefinition,
        response: QuizResponse,
        matched: list[MatchedDimension],
        mismatched: list[MismatchedDimension],
    ) -> ScoringDimension:
        """Score enumerated work-style answers and yes/no requirements."""
        scores: list[float] = []

        for field_name, accepted in model.preferred_answers.items():
            answer = response.answer(field_name)
            if answer is None:
                scores.append(NEUTRAL)
            elif canonical_choice(answer) in accepted:
                scores.append(self.PREFERENCE_MATCH)
                matched.append(MatchedDimension(
                    dimension="Preference",
                    value=str(answer),
                    reasoning=f"Suits your {field_name.replace('_', ' ')}",
                ))
            else:
                scores.append(self.PREFERENCE_MISMATCH)
                mismatched.append(MismatchedDimension(
                    dimension="Preference",
                    expected=", ".join(accepted),
                    actual=str(answer),
                    impact=f"Different {field_name.replace('_', ' ')} than this model usually needs",
                ))

        for flag in model.required_flags:
            answer = response.answer(flag)
            if answer is None:
                scores.append(NEUTRAL)
            elif answer is True:
                scores.append(1.0)
            else:
                scores.append(self.FLAG_DECLINED)
                mismatched.append(MismatchedDimension(
                    dimension="Requirement",
                    expected=f"{flag.replace('_', ' ')}: yes",
                    actual="no",
                    impact="This model depends on something you said you'd rather avoid",
                ))

        if not scores:
            return self._dimension(
                "preference_fit", self.weights.preference_fit, NEUTRAL,
                "No preference requirements defined",
            )

        score = sum(scores) / len(scores)
        return self._dimension(
            "preference_fit", self.weights.preference_fit, score,
            f"{len(scores)} preference checks",
        )

    def _fallback_path(self, model: BusinessModelDefinition) -> RankedPath:
        """Neutral result for an entry that could not be scored."""
        return RankedPath(
            model=model,
            fit_score=FALLBACK_FIT_SCORE,
            fallback=True,
            struggle_summary=["Could not be scored against your answers"],
        )

    def _generate_fit_summary(self, matched: list[MatchedDimension]) -> list[str]:
        """Generate human-readable fit summary."""
        summaries = []
        for m in matched[:5]:  # Top 5 matches
            summaries.append(f"{m.dimension}: {m.reasoning}")
        return summaries

    def _generate_struggle_summary(self, mismatched: list[MismatchedDimension]) -> list[str]:
        """Generate human-readable struggle summary."""
        summaries = []
        for m in mismatched[:3]:  # Top 3 mismatches
            summaries.append(f"{m.dimension}: {m.impact}")
        return summaries
