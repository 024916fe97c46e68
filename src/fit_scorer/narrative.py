"""Narrative boundary for AI-written analysis.

The scoring engine never writes prose itself. It packages what a writer
needs into a NarrativeRequest; any object satisfying NarrativeProvider can
turn that into text. When no provider is available, or it fails, the
canned fallback analysis is shown instead.
"""

import logging
from typing import Any, Optional, Protocol

from pydantic import BaseModel, Field

from .config import get_config
from .schema import QuizResponse, ScoringResult, TraitScores

logger = logging.getLogger(__name__)


class NarrativeEntry(BaseModel):
    """A ranked business model as presented to the narrative writer."""
    id: str
    name: str
    fit_score: int
    match_quality: str


class NarrativeRequest(BaseModel):
    """Everything a narrative writer is given about one user."""
    answers: dict[str, Any] = Field(default_factory=dict)
    trait_scores: TraitScores
    top_paths: list[NarrativeEntry] = Field(default_factory=list)

    def prompt(self) -> str:
        """Render the request as plain text."""
        lines = ["Questionnaire answers:"]
        for name, value in self.answers.items():
            lines.append(f"- {name}: {value}")

        lines.append("")
        lines.append("Trait scores (0-1):")
        for name, value in self.trait_scores.as_dict().items():
            lines.append(f"- {name}: {value:.2f}")

        lines.append("")
        lines.append("Top business models:")
        for entry in self.top_paths:
            lines.append(f"- {entry.name} ({entry.id}): {entry.fit_score}% {entry.match_quality}")

        return "\n".join(lines)


class NarrativeAnalysis(BaseModel):
    """Structured analysis shown alongside the top recommendation."""
    full_analysis: str
    key_insights: list[str] = Field(default_factory=list)
    personalized_recommendations: list[str] = Field(default_factory=list)
    risk_factors: list[str] = Field(default_factory=list)
    success_predictors: list[str] = Field(default_factory=list)


class NarrativeProvider(Protocol):
    """Protocol for narrative writers (typically an LLM client)."""

    def generate(self, request: NarrativeRequest) -> str:
        """Write an analysis for the request."""
        ...


def build_narrative_request(
    result: ScoringResult,
    response: QuizResponse,
    top_n: Optional[int] = None,
) -> NarrativeRequest:
    """Package a scoring result for a narrative writer.

    Args:
        result: Output of the scoring engine
        response: The answers the result was computed from
        top_n: How many ranked paths to include (config default when omitted)

    Returns:
        Request with the answered fields, trait scores and top paths
    """
    if top_n is None:
        top_n = get_config().report.narrative_top_n
    answers = {
        name: getattr(response, name)
        for name in response.answered_fields()
    }
    top_paths = [
        NarrativeEntry(
            id=path.id,
            name=path.name,
            fit_score=path.fit_score,
            match_quality=path.match_quality,
        )
        for path in result.ranked_paths[:max(top_n, 0)]
    ]
    return NarrativeRequest(
        answers=answers,
        trait_scores=result.trait_scores,
        top_paths=top_paths,
    )


def fallback_narrative(request: Optional[NarrativeRequest] = None) -> NarrativeAnalysis:
    """The analysis shown when no narrative writer is available."""
    return NarrativeAnalysis(
        full_analysis="This business model aligns well with your profile and goals.",
        key_insights=[
            "Good fit for your skills",
            "Matches your time availability",
            "Aligns with income goals",
        ],
        personalized_recommendations=[
            "Start with basic tools",
            "Focus on learning",
            "Build gradually",
        ],
        risk_factors=[
            "Initial learning curve",
            "Time investment required",
        ],
        success_predictors=[
            "Strong motivation",
            "Good skill match",
            "Realistic expectations",
        ],
    )


def generate_narrative(
    request: NarrativeRequest,
    provider: Optional[NarrativeProvider] = None,
) -> NarrativeAnalysis:
    """Ask a provider for an analysis, falling back to the canned one.

    The provider's text replaces the full analysis; the list sections keep
    their fallback content.
    """
    fallback = fallback_narrative(request)
    if provider is None:
        return fallback

    try:
        text = provider.generate(request)
    except Exception:
        logger.exception("Narrative provider failed; using fallback analysis")
        return fallback

    if not text or not text.strip():
        logger.warning("Narrative provider returned no text; using fallback analysis")
        return fallback

    return fallback.model_copy(update={"full_analysis": text.strip()})
