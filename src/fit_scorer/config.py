"""Centralized configuration management for the fit scorer."""

import os
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field


class ScoringWeightsConfig(BaseModel):
    """Weights for different scoring dimensions.

    These weights control how much each factor contributes to the final
    fit score. They are normalized by their sum, so only their ratios matter.
    """
    trait_alignment: float = Field(
        0.50,
        ge=0,
        description="Weight for how well the user's traits match the model's trait requirements"
    )
    budget_fit: float = Field(
        0.12,
        ge=0,
        description="Weight for upfront investment versus the model's minimum budget"
    )
    time_fit: float = Field(
        0.12,
        ge=0,
        description="Weight for weekly hours versus the model's minimum commitment"
    )
    income_timeline_fit: float = Field(
        0.08,
        ge=0,
        description="Weight for desired first-income timeline versus the model's typical timeline"
    )
    income_goal_fit: float = Field(
        0.08,
        ge=0,
        description="Weight for monthly income goal versus the model's realistic ceiling"
    )
    preference_fit: float = Field(
        0.10,
        ge=0,
        description="Weight for work-style answers and yes/no requirements"
    )


class MatchQualityConfig(BaseModel):
    """Score thresholds for the match quality label shown with each fit score."""
    excellent_threshold: int = Field(85, description="Minimum fit score for 'Excellent Match'")
    great_threshold: int = Field(70, description="Minimum fit score for 'Great Match'")
    good_threshold: int = Field(60, description="Minimum fit score for 'Good Match'")


class ReadinessThresholdsConfig(BaseModel):
    """Break points for the resource readiness section of the report."""
    high_weekly_hours: float = Field(30, description="Hours per week for High time availability")
    medium_weekly_hours: float = Field(15, description="Hours per week for Medium time availability")
    high_budget: float = Field(1000, description="Upfront budget for a High investment rating")
    medium_budget: float = Field(250, description="Upfront budget for a Medium investment rating")
    high_rating: int = Field(4, description="Self-rating (1-5) for a High skill level")
    medium_rating: int = Field(3, description="Self-rating (1-5) for a Medium skill level")


class ReportConfig(BaseModel):
    """Configuration for the report sections built from a ranking."""
    top_matches: int = Field(3, description="Number of top matches to highlight")
    models_to_avoid: int = Field(3, description="Number of lowest-fit models to list as ones to avoid")
    narrative_top_n: int = Field(3, description="Number of ranked models handed to the narrative writer")


class ScorerConfig(BaseModel):
    """Complete configuration for the fit scorer."""
    scoring_weights: ScoringWeightsConfig = Field(default_factory=ScoringWeightsConfig)
    match_quality: MatchQualityConfig = Field(default_factory=MatchQualityConfig)
    readiness_thresholds: ReadinessThresholdsConfig = Field(default_factory=ReadinessThresholdsConfig)
    report: ReportConfig = Field(default_factory=ReportConfig)


# Global config instance
_config: Optional[ScorerConfig] = None


def get_config() -> ScorerConfig:
    """Get the current configuration.

    Returns the global config, initializing with defaults if not yet loaded.
    """
    global _config
    if _config is None:
        _config = ScorerConfig()
    return _config


def load_config(path: Path) -> ScorerConfig:
    """Load configuration from a YAML file.

    Args:
        path: Path to the YAML configuration file.

    Returns:
        The loaded ScorerConfig.
    """
    global _config

    with open(path, 'r', encoding='utf-8') as f:
        data = yaml.safe_load(f)

    _config = ScorerConfig.model_validate(data or {})
    return _config


def reset_config() -> None:
    """Reset configuration to defaults."""
    global _config
    _config = ScorerConfig()


def find_config_file() -> Optional[Path]:
    """Find a scorer configuration file.

    Looks in (order of priority):
    1. FIT_SCORER_CONFIG environment variable
    2. ./fit-scorer.yaml
    3. ./fit-scorer.yml
    4. ~/.config/fit-scorer/config.yaml
    """
    # Environment variable
    env_path = os.environ.get("FIT_SCORER_CONFIG")
    if env_path:
        path = Path(env_path)
        if path.exists():
            return path

    # Current directory
    for name in ["fit-scorer.yaml", "fit-scorer.yml"]:
        path = Path(name)
        if path.exists():
            return path

    # User config directory
    user_config = Path.home() / ".config" / "fit-scorer" / "config.yaml"
    if user_config.exists():
        return user_config

    return None


def save_default_config(path: Path) -> None:
    """Save the default configuration to a YAML file.

    Args:
        path: Path where to save the configuration.
    """
    config = ScorerConfig()
    data = config.model_dump()

    yaml_content = """# Fit Scorer Configuration
# ========================
#
# This file configures the fit scoring weights, match quality labels,
# resource readiness break points and report section sizes.
#
# Copy this file to one of these locations:
#   - ./fit-scorer.yaml (current directory)
#   - ~/.config/fit-scorer/config.yaml (user config)
#
# Or set the FIT_SCORER_CONFIG environment variable.

"""
    yaml_content += yaml.dump(data, default_flow_style=False, sort_keys=False, allow_unicode=True)

    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        f.write(yaml_content)
