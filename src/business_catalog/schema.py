"""Pydantic models for the business model catalog schema."""

import re
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator, model_validator


class Difficulty(str, Enum):
    """How hard a business model is to get off the ground."""
    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"

    @classmethod
    def from_string(cls, value: Any) -> "Difficulty":
        """Parse difficulty from string (handles beginner/advanced wording)."""
        if isinstance(value, cls):
            return value
        if not value:
            return cls.MEDIUM
        mapping = {
            "easy": cls.EASY,
            "beginner": cls.EASY,
            "medium": cls.MEDIUM,
            "intermediate": cls.MEDIUM,
            "hard": cls.HARD,
            "advanced": cls.HARD,
        }
        return mapping.get(str(value).strip().lower(), cls.MEDIUM)


class TraitDirection(str, Enum):
    """Which end of a trait scale the business model favours."""
    HIGHER = "higher"  # Needs more of the trait
    LOWER = "lower"  # Suits people with less of the trait


# Keys used by older catalog exports, resolved once at load time
LEGACY_ALIASES = {
    "title": "name",
    "time_to_start": "time_to_profit",
    "initial_investment": "startup_cost",
    "required_skills": "skills",
}


def _to_snake(key: str) -> str:
    """Convert a camelCase or kebab-case key to snake_case."""
    key = key.replace("-", "_")
    return re.sub(r"(?<=[a-z0-9])([A-Z])", r"_\1", key).lower()


def canonical_choice(value: Any) -> str:
    """Canonical spelling of an enumerated answer: lowercase, hyphen-separated.

    Used for catalog preferred answers and questionnaire answers alike, so
    "Clear Steps", "clear_steps" and "clear-steps" compare equal.
    """
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return re.sub(r"[\s_]+", "-", str(value).strip().lower())


def _resolve_keys(data: Any) -> Any:
    """Rename camelCase and legacy keys to the canonical field names."""
    if not isinstance(data, dict):
        return data
    resolved: dict[str, Any] = {}
    for key, value in data.items():
        name = _to_snake(str(key))
        name = LEGACY_ALIASES.get(name, name)
        # Canonical keys win over legacy spellings of the same field
        if name in resolved and name != str(key):
            continue
        resolved[name] = value
    return resolved


class TraitRequirement(BaseModel):
    """How much a business model relies on one trait."""
    trait: str = Field(..., description="Trait name, e.g. risk_tolerance")
    weight: float = Field(1.0, description="Relative importance of the trait")
    minimum: Optional[float] = Field(
        None,
        description="Trait level (0-1) below which the fit drops off sharply"
    )
    direction: TraitDirection = TraitDirection.HIGHER

    class Config:
        frozen = True

    @model_validator(mode="before")
    @classmethod
    def _canonical_keys(cls, data: Any) -> Any:
        return _resolve_keys(data)

    @field_validator("trait", mode="before")
    @classmethod
    def _normalize_trait(cls, value: Any) -> Any:
        if isinstance(value, str):
            return _to_snake(value.strip())
        return value

    @field_validator("weight", mode="before")
    @classmethod
    def _non_negative_weight(cls, value: Any) -> Any:
        if isinstance(value, (int, float)) and value < 0:
            return 0.0
        return value

    @field_validator("minimum", mode="before")
    @classmethod
    def _clamp_minimum(cls, value: Any) -> Any:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return max(0.0, min(1.0, float(value)))
        return value


class ResourceThresholds(BaseModel):
    """Numeric break points used when checking a user's resources."""
    min_budget: float = Field(0.0, ge=0, description="Upfront budget needed to start")
    min_weekly_hours: float = Field(0.0, ge=0, description="Hours per week needed")
    months_to_first_income: float = Field(3.0, ge=0, description="Typical months until first income")
    max_monthly_income: Optional[float] = Field(
        None, ge=0, description="Realistic monthly income ceiling for an experienced operator"
    )

    class Config:
        frozen = True

    @model_validator(mode="before")
    @classmethod
    def _canonical_keys(cls, data: Any) -> Any:
        return _resolve_keys(data)


class IncomeRange(BaseModel):
    """Typical monthly income by experience level."""
    beginner: str = ""
    intermediate: str = ""
    advanced: str = ""

    class Config:
        frozen = True


class ActionPlan(BaseModel):
    """Multi-phase plan for getting started."""
    phase1: list[str] = Field(default_factory=list)
    phase2: list[str] = Field(default_factory=list)
    phase3: list[str] = Field(default_factory=list)

    class Config:
        frozen = True

    @model_validator(mode="before")
    @classmethod
    def _canonical_keys(cls, data: Any) -> Any:
        # phase_1 / phase1 / Phase1 all name the same phase
        if isinstance(data, dict):
            return {_to_snake(str(k)).replace("_", ""): v for k, v in data.items()}
        return data


class LearningResources(BaseModel):
    """Courses and platforms recommended for a business model."""
    learning: list[str] = Field(default_factory=list)
    platforms: list[str] = Field(default_factory=list)

    class Config:
        frozen = True


class BusinessModelDefinition(BaseModel):
    """Complete business model catalog entry."""

    # Identity
    id: str = Field(..., description="Stable identifier, e.g. content-creation-ugc")
    name: str = Field("", description="Display name")
    description: str = Field("", description="One-line description")
    detailed_description: Optional[str] = None
    difficulty: Difficulty = Difficulty.MEDIUM

    # Display descriptors
    time_to_profit: Optional[str] = None
    startup_cost: Optional[str] = None
    potential_income: Optional[str] = None
    market_size: Optional[str] = None
    average_income: IncomeRange = Field(default_factory=IncomeRange)

    # Scoring inputs
    trait_requirements: list[TraitRequirement] = Field(
        default_factory=list,
        description="Traits the model relies on, with weights and thresholds"
    )
    thresholds: ResourceThresholds = Field(default_factory=ResourceThresholds)
    preferred_answers: dict[str, list[str]] = Field(
        default_factory=dict,
        description="Quiz field -> enumerated answers that suit this model"
    )
    required_flags: list[str] = Field(
        default_factory=list,
        description="Yes/no quiz fields that should not be answered 'no'"
    )

    # Supplementary content
    pros: list[str] = Field(default_factory=list)
    cons: list[str] = Field(default_factory=list)
    tools: list[str] = Field(default_factory=list)
    skills: list[str] = Field(default_factory=list)
    best_fit_personality: list[str] = Field(default_factory=list)
    resources: LearningResources = Field(default_factory=LearningResources)
    action_plan: ActionPlan = Field(default_factory=ActionPlan)

    # Problems recovered while loading this entry
    load_warnings: list[str] = Field(default_factory=list)

    class Config:
        frozen = True
        extra = "ignore"

    @model_validator(mode="before")
    @classmethod
    def _canonical_keys(cls, data: Any) -> Any:
        data = _resolve_keys(data)
        if isinstance(data, dict):
            if not data.get("name") and data.get("id"):
                data["name"] = str(data["id"]).replace("-", " ").title()
            preferred = data.get("preferred_answers")
            if isinstance(preferred, dict):
                data["preferred_answers"] = {
                    _to_snake(str(k)): [canonical_choice(v) for v in (vals if isinstance(vals, list) else [vals])]
                    for k, vals in preferred.items()
                }
            flags = data.get("required_flags")
            if isinstance(flags, list):
                data["required_flags"] = [_to_snake(str(f)) for f in flags]
        return data

    @field_validator("difficulty", mode="before")
    @classmethod
    def _parse_difficulty(cls, value: Any) -> Difficulty:
        return Difficulty.from_string(value)


class BusinessCatalog(BaseModel):
    """Complete business model catalog."""
    version: str = Field(default="1.0.0", description="Catalog schema version")
    generated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Generation timestamp"
    )
    source: str = Field(default="bundled", description="Where the catalog was loaded from")
    total_models: int = Field(default=0, description="Total number of business models")
    models: list[BusinessModelDefinition] = Field(
        default_factory=list,
        description="Business model entries in curation order"
    )

    def model_post_init(self, __context) -> None:
        """Update total count after initialization."""
        self.total_models = len(self.models)

    def get(self, model_id: str) -> Optional[BusinessModelDefinition]:
        """Find a business model by id."""
        return next((m for m in self.models if m.id == model_id), None)

    def ids(self) -> list[str]:
        """Business model ids in catalog order."""
        return [m.id for m in self.models]
