"""Tests for business model catalog loading and validation."""

import json
import logging

import pytest
import yaml

from business_catalog import loader
from business_catalog.loader import (
    MAX_MODEL_COUNT,
    CatalogLoadError,
    _validate_catalog_structure,
    find_model,
    load_catalog,
    load_default_catalog,
    parse_catalog,
    validate_catalog_file,
)
from business_catalog.schema import (
    BusinessModelDefinition,
    Difficulty,
    TraitDirection,
    TraitRequirement,
)


# --- Minimal valid catalog for tests ---

def _make_catalog(model_count: int = 3, **overrides) -> dict:
    """Build a minimal valid catalog dict."""
    base = {
        "version": "1.0.0",
        "generated_at": "2025-01-15T10:00:00",
        "models": [
            {
                "id": f"model-{i}",
                "name": f"Model {i}",
                "description": f"Test business model {i}",
                "trait_requirements": [{"trait": "tech_comfort", "weight": 1}],
            }
            for i in range(model_count)
        ],
    }
    base.update(overrides)
    return base


# === Structure validation tests ===


class TestValidateCatalogStructure:
    """Tests for _validate_catalog_structure."""

    def test_accepts_valid_catalog(self):
        _validate_catalog_structure(_make_catalog())

    def test_accepts_empty_models(self):
        _validate_catalog_structure({"models": []})

    def test_rejects_non_dict(self):
        with pytest.raises(CatalogLoadError, match="object"):
            _validate_catalog_structure([1, 2, 3])

    def test_rejects_missing_models(self):
        with pytest.raises(CatalogLoadError, match="'models' field"):
            _validate_catalog_structure({"version": "1.0.0"})

    def test_rejects_non_list_models(self):
        with pytest.raises(CatalogLoadError, match="must be a list"):
            _validate_catalog_structure({"models": "not a list"})

    def test_rejects_too_many_models(self):
        with pytest.raises(CatalogLoadError, match="exceeds"):
            _validate_catalog_structure(_make_catalog(MAX_MODEL_COUNT + 1))


# === Entry parsing ===


class TestEntryParsing:

    def test_legacy_keys_resolved(self):
        model = BusinessModelDefinition.model_validate({
            "id": "legacy",
            "title": "Legacy Model",
            "timeToStart": "2-4 weeks",
            "initialInvestment": "$0-500",
            "requiredSkills": ["Writing"],
        })
        assert model.name == "Legacy Model"
        assert model.time_to_profit == "2-4 weeks"
        assert model.startup_cost == "$0-500"
        assert model.skills == ["Writing"]

    def test_canonical_key_wins_over_legacy(self):
        model = BusinessModelDefinition.model_validate({
            "id": "both", "title": "Old", "name": "New",
        })
        assert model.name == "New"

    def test_camel_case_fields(self):
        model = BusinessModelDefinition.model_validate({
            "id": "camel",
            "traitRequirements": [{"trait": "techComfort", "weight": 2}],
            "thresholds": {"minBudget": 250, "maxMonthlyIncome": 5000},
            "preferredAnswers": {"workStructurePreference": ["Clear-Steps"]},
            "requiredFlags": ["clientCallsComfort"],
        })
        assert model.trait_requirements[0].trait == "tech_comfort"
        assert model.thresholds.min_budget == 250
        assert model.thresholds.max_monthly_income == 5000
        assert model.preferred_answers == {"work_structure_preference": ["clear-steps"]}
        assert model.required_flags == ["client_calls_comfort"]

    def test_preferred_answers_share_answer_spelling(self):
        model = BusinessModelDefinition.model_validate({
            "id": "prefs",
            "preferredAnswers": {
                "workStructurePreference": ["Some Structure", "mostly_flexible"],
                "clientCallsComfort": True,
            },
        })
        assert model.preferred_answers == {
            "work_structure_preference": ["some-structure", "mostly-flexible"],
            "client_calls_comfort": ["true"],
        }

    def test_name_defaults_from_id(self):
        model = BusinessModelDefinition.model_validate({"id": "print-on-demand"})
        assert model.name == "Print On Demand"

    @pytest.mark.parametrize("raw,expected", [
        ("Easy", Difficulty.EASY),
        ("beginner", Difficulty.EASY),
        ("advanced", Difficulty.HARD),
        ("unknown", Difficulty.MEDIUM),
        (None, Difficulty.MEDIUM),
    ])
    def test_difficulty_parsing(self, raw, expected):
        assert Difficulty.from_string(raw) == expected

    def test_requirement_clamping(self):
        req = TraitRequirement(trait="risk_tolerance", weight=-2, minimum=1.5)
        assert req.weight == 0.0
        assert req.minimum == 1.0
        assert req.direction == TraitDirection.HIGHER


# === Catalog parsing ===


class TestParseCatalog:

    def test_keeps_curation_order(self):
        catalog = parse_catalog(_make_catalog(4))
        assert catalog.ids() == ["model-0", "model-1", "model-2", "model-3"]
        assert catalog.total_models == 4

    def test_malformed_entry_becomes_placeholder(self, caplog):
        data = _make_catalog(2)
        data["models"].insert(1, {"id": "broken", "thresholds": {"min_budget": -10}})

        with caplog.at_level(logging.WARNING, logger="business_catalog.loader"):
            catalog = parse_catalog(data)

        assert catalog.ids() == ["model-0", "broken", "model-1"]
        broken = catalog.get("broken")
        assert broken.trait_requirements == []
        assert "failed validation" in broken.load_warnings[0]
        assert "malformed" in caplog.text

    def test_entry_without_id_gets_positional_id(self):
        data = {"models": [{"name": "No Id"}, "not even a mapping"]}
        catalog = parse_catalog(data)
        assert catalog.ids() == ["entry-0", "entry-1"]
        assert catalog.models[0].name == "No Id"

    def test_duplicate_ids_warn(self, caplog):
        data = {"models": [{"id": "twin"}, {"id": "twin"}]}
        with caplog.at_level(logging.WARNING, logger="business_catalog.loader"):
            catalog = parse_catalog(data)
        assert catalog.total_models == 2
        assert "Duplicate" in caplog.text

    def test_empty_catalog(self):
        catalog = parse_catalog({"models": []})
        assert catalog.models == []
        assert catalog.total_models == 0


# === File loading ===


class TestLoadCatalog:

    def test_load_yaml(self, tmp_path):
        path = tmp_path / "catalog.yaml"
        path.write_text(yaml.safe_dump(_make_catalog()), encoding="utf-8")
        catalog = load_catalog(path)
        assert catalog.total_models == 3
        assert catalog.source == str(path)

    def test_load_json(self, tmp_path):
        path = tmp_path / "catalog.json"
        path.write_text(json.dumps(_make_catalog(2)), encoding="utf-8")
        assert load_catalog(str(path)).total_models == 2

    def test_missing_file(self, tmp_path):
        with pytest.raises(CatalogLoadError, match="not found"):
            load_catalog(tmp_path / "missing.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(CatalogLoadError, match="not valid"):
            load_catalog(path)

    def test_oversized_file(self, tmp_path, monkeypatch):
        monkeypatch.setattr(loader, "MAX_CATALOG_BYTES", 10)
        path = tmp_path / "catalog.json"
        path.write_text(json.dumps(_make_catalog()), encoding="utf-8")
        with pytest.raises(CatalogLoadError, match="maximum allowed size"):
            load_catalog(path)

    def test_bundled_catalog(self):
        catalog = load_default_catalog()
        assert catalog.source == "bundled"
        assert catalog.total_models == 10
        assert catalog.ids()[0] == "content-creation-ugc"
        assert all(m.trait_requirements for m in catalog.models)

    def test_find_model_ignores_case(self):
        catalog = load_default_catalog()
        assert find_model(catalog, "Freelancing").id == "freelancing"
        assert find_model(catalog, "nope") is None


class TestValidateCatalogFile:

    def test_valid_file(self, tmp_path):
        path = tmp_path / "catalog.yaml"
        path.write_text(yaml.safe_dump(_make_catalog()), encoding="utf-8")
        is_valid, issues = validate_catalog_file(path)
        assert is_valid
        assert issues == []

    def test_malformed_entry_is_invalid(self, tmp_path):
        data = _make_catalog(1)
        data["models"].append({"id": "broken", "trait_requirements": "oops"})
        path = tmp_path / "catalog.json"
        path.write_text(json.dumps(data), encoding="utf-8")

        is_valid, issues = validate_catalog_file(path)
        assert not is_valid
        assert any(issue.startswith("broken:") for issue in issues)

    def test_missing_requirements_is_only_a_note(self, tmp_path):
        path = tmp_path / "catalog.json"
        path.write_text(json.dumps({"models": [{"id": "bare"}]}), encoding="utf-8")
        is_valid, issues = validate_catalog_file(path)
        assert is_valid
        assert "neutrally" in issues[0]

    def test_unloadable_file(self, tmp_path):
        is_valid, issues = validate_catalog_file(tmp_path / "missing.yaml")
        assert not is_valid
        assert "not found" in issues[0]
