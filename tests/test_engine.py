"""Tests for the scoring engine pipeline."""

import json

import pytest
import yaml

from business_catalog.loader import parse_catalog
from fit_scorer.config import ScorerConfig, ScoringWeightsConfig, ReportConfig
from fit_scorer.engine import (
    ResponseLoadError,
    ScoringEngine,
    calculate_fit_score,
    generate_personalized_paths,
    load_response_file,
    validate_response_file,
)
from fit_scorer.schema import BusinessCatalog, ScoringResult


@pytest.fixture
def engine(bundled_catalog):
    return ScoringEngine(catalog=bundled_catalog, config=ScorerConfig())


@pytest.fixture
def response_file(tmp_path, skilled_answers):
    path = tmp_path / "response.json"
    path.write_text(json.dumps(skilled_answers), encoding="utf-8")
    return path


class TestScoringEngine:

    def test_score_dict(self, engine, skilled_answers):
        result = engine.score(skilled_answers)

        assert isinstance(result, ScoringResult)
        assert result.catalog_model_count == 10
        assert len(result.ranked_paths) == 10
        assert [p.rank for p in result.ranked_paths] == list(range(1, 11))
        assert len(result.top_matches) == 3
        assert len(result.models_to_avoid) == 3
        assert result.trait_scores.tech_comfort == 1.0
        assert result.summary.primary_recommendation_id == result.ranked_paths[0].id
        assert result.processing_warnings == []

    def test_paths_are_annotated(self, engine, skilled_answers):
        result = engine.score(skilled_answers)
        for path in result.ranked_paths:
            assert path.match_quality.endswith("Match")
            assert 1 <= len(path.insights) <= 2

    def test_score_from_file(self, engine, response_file, skilled_answers):
        from_file = engine.score(response_file)
        from_dict = engine.score(skilled_answers)
        assert [(p.id, p.fit_score) for p in from_file.ranked_paths] == \
            [(p.id, p.fit_score) for p in from_dict.ranked_paths]

    def test_top_n(self, engine, skilled_answers):
        assert len(engine.score(skilled_answers, top_n=5).top_matches) == 5
        assert engine.score(skilled_answers, top_n=0).top_matches == []

    def test_report_config(self, bundled_catalog, skilled_answers):
        config = ScorerConfig(report=ReportConfig(top_matches=1, models_to_avoid=2))
        result = ScoringEngine(catalog=bundled_catalog, config=config).score(skilled_answers)
        assert len(result.top_matches) == 1
        assert len(result.models_to_avoid) == 2

    def test_normalizer_warnings_reported(self, engine):
        result = engine.score({"riskComfortLevel": 11})
        assert any("risk_comfort_level" in w for w in result.processing_warnings)

    def test_models_to_avoid_worst_first_and_not_top(self, engine, skilled_answers):
        result = engine.score(skilled_answers)
        avoid_ids = [n.model_id for n in result.models_to_avoid]
        assert avoid_ids == [p.id for p in reversed(result.ranked_paths[-3:])]
        assert not set(avoid_ids) & {p.id for p in result.top_matches}

    def test_short_catalog_keeps_top_pick_out_of_avoid_list(self):
        catalog = parse_catalog({"models": [
            {"id": "a", "trait_requirements": [{"trait": "tech_comfort"}]},
            {"id": "b", "trait_requirements": [{"trait": "tech_comfort", "direction": "lower"}]},
        ]})
        result = ScoringEngine(catalog=catalog, config=ScorerConfig()).score({"techSkillsRating": 5}, top_n=1)
        assert [p.id for p in result.top_matches] == ["a"]
        assert [n.model_id for n in result.models_to_avoid] == ["b"]

    def test_scored_at_is_timezone_aware(self, engine, skilled_answers):
        assert engine.score(skilled_answers).scored_at.tzinfo is not None

    def test_placeholder_entries_reported(self, skilled_answers):
        catalog = parse_catalog({"models": [{"id": "ok"}, {"id": "bad", "thresholds": "x"}]})
        result = ScoringEngine(catalog=catalog, config=ScorerConfig()).score(skilled_answers)
        assert len(result.ranked_paths) == 2
        assert any(w.startswith("bad:") for w in result.processing_warnings)

    def test_empty_catalog(self, skilled_answers):
        result = ScoringEngine(catalog=BusinessCatalog(models=[]), config=ScorerConfig()).score(skilled_answers)
        assert result.ranked_paths == []
        assert result.models_to_avoid == []
        assert result.summary.primary_recommendation is None

    def test_custom_weights(self, skilled_answers):
        catalog = parse_catalog({"models": [
            {"id": "tech", "trait_requirements": [{"trait": "tech_comfort"}]},
        ]})
        weights = ScoringWeightsConfig(
            trait_alignment=1, budget_fit=0, time_fit=0,
            income_timeline_fit=0, income_goal_fit=0, preference_fit=0,
        )
        engine = ScoringEngine(catalog=catalog, config=ScorerConfig(scoring_weights=weights))
        result = engine.score({"techSkillsRating": 4})
        assert result.ranked_paths[0].fit_score == 75

    def test_default_catalog_loaded_lazily(self, skilled_answers):
        engine = ScoringEngine(config=ScorerConfig())
        assert engine.catalog is None
        engine.score(skilled_answers)
        assert engine.catalog.source == "bundled"

    def test_load_catalog(self, tmp_path):
        path = tmp_path / "catalog.yaml"
        path.write_text(yaml.safe_dump({"models": [{"id": "only"}]}), encoding="utf-8")
        engine = ScoringEngine(config=ScorerConfig())
        assert engine.load_catalog(path).ids() == ["only"]


class TestModuleFunctions:

    def test_generate_personalized_paths(self, skilled_answers, contrast_catalog):
        paths = generate_personalized_paths(skilled_answers, contrast_catalog)
        assert [p.id for p in paths] == ["high-skill", "low-skill"]
        assert paths[0].match_quality == "Excellent Match"

    def test_calculate_fit_score(self, skilled_answers, bundled_catalog):
        assert calculate_fit_score("app-saas-development", skilled_answers, bundled_catalog) == 79

    def test_calculate_fit_score_unknown_model(self, skilled_answers, bundled_catalog):
        with pytest.raises(KeyError):
            calculate_fit_score("space-tourism", skilled_answers, bundled_catalog)


class TestResponseFiles:

    def test_load_yaml(self, tmp_path):
        path = tmp_path / "response.yaml"
        path.write_text("techSkillsRating: 4\nfirstIncomeTimeline: no-rush\n", encoding="utf-8")
        assert load_response_file(path) == {"techSkillsRating": 4, "firstIncomeTimeline": "no-rush"}

    def test_single_item_list_unwrapped(self, tmp_path):
        path = tmp_path / "response.json"
        path.write_text(json.dumps([{"techSkillsRating": 4}]), encoding="utf-8")
        assert load_response_file(path) == {"techSkillsRating": 4}

    def test_missing_file(self, tmp_path):
        with pytest.raises(ResponseLoadError, match="not found"):
            load_response_file(tmp_path / "nope.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "response.json"
        path.write_text("{oops", encoding="utf-8")
        with pytest.raises(ResponseLoadError, match="Could not parse"):
            load_response_file(path)

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "response.json"
        path.write_text(json.dumps([1, 2]), encoding="utf-8")
        with pytest.raises(ResponseLoadError, match="mapping"):
            load_response_file(path)

    def test_validate_good_file(self, response_file):
        assert validate_response_file(response_file) == (True, [])

    def test_validate_reports_adjustments(self, tmp_path):
        path = tmp_path / "response.json"
        path.write_text(json.dumps({"techSkillsRating": 8}), encoding="utf-8")
        is_valid, issues = validate_response_file(path)
        assert is_valid
        assert len(issues) == 1

    def test_validate_no_recognized_answers(self, tmp_path):
        path = tmp_path / "response.json"
        path.write_text(json.dumps({"favouriteColour": "blue"}), encoding="utf-8")
        is_valid, issues = validate_response_file(path)
        assert not is_valid
        assert "No recognized" in issues[-1]
