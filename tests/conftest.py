"""Shared fixtures for the fit scorer and business catalog tests."""

import logging

import pytest

from business_catalog.app_logging import LOGGER_NAMES
from business_catalog.loader import load_default_catalog, parse_catalog
from fit_scorer.config import reset_config
from fit_scorer.normalizer import normalize_response


@pytest.fixture(autouse=True)
def _isolate_global_state():
    """CLI runs configure package loggers and the global config; undo both."""
    reset_config()
    yield
    for name in LOGGER_NAMES:
        logger = logging.getLogger(name)
        logger.handlers.clear()
        logger.setLevel(logging.NOTSET)
        logger.propagate = True
    reset_config()


@pytest.fixture(scope="session")
def bundled_catalog():
    return load_default_catalog()


@pytest.fixture
def skilled_answers() -> dict:
    """High risk, motivation and tech; plenty of time and budget."""
    return {
        "riskComfortLevel": 5,
        "selfMotivationLevel": 5,
        "techSkillsRating": 5,
        "weeklyTimeCommitment": 30,
        "upfrontInvestment": 1000,
    }


@pytest.fixture
def skilled_response(skilled_answers):
    return normalize_response(skilled_answers)


@pytest.fixture
def contrast_catalog():
    """A demanding high-skill entry and an entry suited to low-risk, low-tech users."""
    return parse_catalog({
        "version": "test",
        "models": [
            {
                "id": "low-skill",
                "name": "Low Skill Path",
                "traitRequirements": [
                    {"trait": "risk_tolerance", "weight": 2, "minimum": 0.5, "direction": "lower"},
                    {"trait": "tech_comfort", "weight": 1, "direction": "lower"},
                ],
                "thresholds": {
                    "minBudget": 0,
                    "minWeeklyHours": 5,
                    "monthsToFirstIncome": 1,
                    "maxMonthlyIncome": 3000,
                },
            },
            {
                "id": "high-skill",
                "name": "High Skill Path",
                "traitRequirements": [
                    {"trait": "tech_comfort", "weight": 3, "minimum": 0.75},
                    {"trait": "risk_tolerance", "weight": 2, "minimum": 0.5},
                    {"trait": "motivation", "weight": 2, "minimum": 0.5},
                ],
                "thresholds": {
                    "minBudget": 500,
                    "minWeeklyHours": 20,
                    "monthsToFirstIncome": 6,
                    "maxMonthlyIncome": 20000,
                },
            },
        ],
    }, source="test")
