"""Scoring Engine - orchestrates the fit scoring pipeline.

raw answers -> ResponseNormalizer -> trait derivation -> FitScorer ranking
-> RecommendationExplainer report content -> ScoringResult
"""

import json
import logging
from pathlib import Path
from typing import Any, Optional, Union

import yaml

from business_catalog.loader import find_model, load_catalog, load_default_catalog

from .config import ScorerConfig, get_config
from .explainer import RecommendationExplainer
from .normalizer import ResponseNormalizer
from .schema import (
    BusinessCatalog,
    QuizResponse,
    RankedPath,
    RawQuizResponse,
    ScoringResult,
)
from .scorer import FitScorer, ScoringWeights
from .traits import derive_trait_scores

logger = logging.getLogger(__name__)

ResponseInput = Union[dict, RawQuizResponse, QuizResponse, str, Path]


class ResponseLoadError(Exception):
    """Raised when a questionnaire response file cannot be loaded."""


def load_response_file(path: Union[str, Path]) -> dict[str, Any]:
    """Load raw questionnaire answers from a JSON or YAML file.

    Args:
        path: Path to the response file.

    Returns:
        The raw answers mapping.

    Raises:
        ResponseLoadError: If the file is missing, unparseable or not a mapping.
    """
    path = Path(path)
    if not path.exists():
        raise ResponseLoadError(f"Response file not found: {path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            if path.suffix.lower() in (".yaml", ".yml"):
                data = yaml.safe_load(f)
            else:
                data = json.load(f)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError, yaml.YAMLError) as e:
        raise ResponseLoadError(f"Could not parse response file {path}: {e}")

    # Exports from the questionnaire flow wrap a single response in a list
    if isinstance(data, list) and len(data) == 1:
        data = data[0]

    if not isinstance(data, dict):
        raise ResponseLoadError(
            f"Response file {path} must contain a mapping of answers, got {type(data).__name__}"
        )
    return data


def validate_response_file(path: Union[str, Path]) -> tuple[bool, list[str]]:
    """Validate a questionnaire response file.

    Returns:
        Tuple of (is_valid, issues). Values the normalizer had to adjust are
        reported as issues but do not make the response invalid.
    """
    try:
        raw = load_response_file(path)
    except ResponseLoadError as e:
        return False, [str(e)]

    response, warnings = ResponseNormalizer().normalize_with_warnings(raw)
    issues = list(warnings)

    if not response.answered_fields():
        issues.append("No recognized questionnaire answers")
        return False, issues

    return True, issues


class ScoringEngine:
    """Main scoring engine.

    Usage:
        engine = ScoringEngine()
        result = engine.score("response.json")
    """

    def __init__(
        self,
        catalog: Optional[BusinessCatalog] = None,
        config: Optional[ScorerConfig] = None,
    ):
        """Initialize the scoring engine.

        Args:
            catalog: Catalog to rank against; the bundled catalog when omitted
            config: Scorer configuration; the global configuration when omitted
        """
        self.config = config or get_config()
        self.catalog = catalog
        self.normalizer = ResponseNormalizer()
        self.scorer = FitScorer(ScoringWeights.from_config(self.config.scoring_weights))
        self.explainer = RecommendationExplainer(self.config)

    def load_catalog(self, catalog_path: Union[str, Path]) -> BusinessCatalog:
        """Load a business model catalog from file."""
        self.catalog = load_catalog(catalog_path)
        logger.info("Loaded catalog %s with %d models", catalog_path, self.catalog.total_models)
        return self.catalog

    def use_catalog(self, catalog: BusinessCatalog) -> BusinessCatalog:
        """Rank against an already loaded catalog."""
        self.catalog = catalog
        return self.catalog

    def get_catalog(self) -> BusinessCatalog:
        """The active catalog, loading the bundled one on first use."""
        if self.catalog is None:
            self.catalog = load_default_catalog()
        return self.catalog

    def prepare_response(self, response: ResponseInput) -> tuple[QuizResponse, list[str]]:
        """Load (if a path) and normalize a response.

        Returns:
            Tuple of (normalized response, processing warnings)
        """
        if isinstance(response, (str, Path)):
            response = load_response_file(response)
        return self.normalizer.normalize_with_warnings(response)

    def rank(self, response: QuizResponse) -> list[RankedPath]:
        """Rank the catalog and annotate each path for display."""
        catalog = self.get_catalog()
        paths = self.scorer.rank(response, catalog)
        for path in paths:
            path.match_quality = self.explainer.match_quality(path.fit_score)
            path.insights = self.explainer.path_insights(path, response)
        return paths

    def score(self, response: ResponseInput, top_n: Optional[int] = None) -> ScoringResult:
        """Score questionnaire answers against the catalog.

        Args:
            response: Raw answers as a dict or model, or a path to a JSON/YAML file
            top_n: Number of top matches to highlight (config default when omitted)

        Returns:
            Complete scoring result with ranking and report content
        """
        catalog = self.get_catalog()
        quiz, warnings = self.prepare_response(response)

        if top_n is None:
            top_n = self.config.report.top_matches

        paths = self.rank(quiz)

        for path in paths:
            if path.fallback:
                warnings.append(f"{path.id}: could not be scored, assigned neutral score")
            for warning in path.model.load_warnings:
                warnings.append(f"{path.id}: {warning}")

        return ScoringResult(
            catalog_version=catalog.version,
            catalog_model_count=catalog.total_models,
            trait_scores=derive_trait_scores(quiz),
            ranked_paths=paths,
            top_matches=paths[:max(top_n, 0)],
            models_to_avoid=self.explainer.avoidance_notes(paths, quiz, top_n=top_n),
            personality_insights=self.explainer.personality_insights(quiz),
            resource_readiness=self.explainer.resource_readiness(quiz),
            summary=self.explainer.generate_summary(paths, quiz),
            processing_warnings=warnings,
        )


def generate_personalized_paths(
    response: ResponseInput,
    catalog: Optional[BusinessCatalog] = None,
) -> list[RankedPath]:
    """Rank the catalog for one set of answers."""
    engine = ScoringEngine(catalog=catalog)
    quiz, _ = engine.prepare_response(response)
    return engine.rank(quiz)


def calculate_fit_score(
    model_id: str,
    response: ResponseInput,
    catalog: Optional[BusinessCatalog] = None,
) -> int:
    """Fit score of a single business model.

    Raises:
        KeyError: If the catalog has no model with this id.
    """
    engine = ScoringEngine(catalog=catalog)
    model = find_model(engine.get_catalog(), model_id)
    if model is None:
        raise KeyError(f"Business model not found: {model_id}")

    quiz, _ = engine.prepare_response(response)
    return engine.scorer.score_safely(model, quiz).fit_score
