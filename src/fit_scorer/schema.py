"""Pydantic models for the Fit Scoring Engine.

Input schemas for questionnaire answers and output schemas for ranked
business model recommendations.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field

# Re-export catalog models for convenience
from business_catalog.schema import (
    BusinessCatalog,
    BusinessModelDefinition,
    Difficulty,
    TraitDirection,
    TraitRequirement,
)


# =============================================================================
# Trait Enums
# =============================================================================


class TraitName(str, Enum):
    """Normalized [0,1] traits derived from questionnaire answers."""
    # Display traits
    RISK_TOLERANCE = "risk_tolerance"
    MOTIVATION = "motivation"
    TECH_COMFORT = "tech_comfort"
    COMMUNICATION_CONFIDENCE = "communication_confidence"
    CREATIVITY = "creativity"
    STRUCTURE_PREFERENCE = "structure_preference"  # High = works freely
    CONSISTENCY = "consistency"
    FEEDBACK_RESILIENCE = "feedback_resilience"
    SOCIAL_COMFORT = "social_comfort"

    # Extended scoring traits
    ORGANIZATION = "organization"
    COMPETITIVENESS = "competitiveness"
    EXPERIMENTATION = "experimentation"
    RESILIENCE = "resilience"
    UNCERTAINTY_TOLERANCE = "uncertainty_tolerance"
    BRAND_PRESENCE = "brand_presence"
    PASSIVE_INCOME_FOCUS = "passive_income_focus"
    PURPOSE_DRIVE = "purpose_drive"
    AUTONOMY = "autonomy"
    SOCIAL_MEDIA_AFFINITY = "social_media_affinity"

    @classmethod
    def display_traits(cls) -> list["TraitName"]:
        """The nine traits shown on the personality report."""
        return [
            cls.SOCIAL_COMFORT,
            cls.CONSISTENCY,
            cls.RISK_TOLERANCE,
            cls.TECH_COMFORT,
            cls.STRUCTURE_PREFERENCE,
            cls.MOTIVATION,
            cls.FEEDBACK_RESILIENCE,
            cls.CREATIVITY,
            cls.COMMUNICATION_CONFIDENCE,
        ]


class IncomeTimeline(str, Enum):
    """How soon the user wants first income."""
    UNDER_1_MONTH = "under-1-month"
    ONE_TO_TWO_MONTHS = "1-2-months"
    THREE_TO_SIX_MONTHS = "3-6-months"
    NO_RUSH = "no-rush"


class WorkStructurePreference(str, Enum):
    """How much structure the user wants in their work."""
    CLEAR_STEPS = "clear-steps"
    SOME_STRUCTURE = "some-structure"
    MOSTLY_FLEXIBLE = "mostly-flexible"
    TOTAL_FREEDOM = "total-freedom"


# =============================================================================
# Questionnaire Field Groups
# =============================================================================

# snake_case field -> camelCase key used by the questionnaire flow
LIKERT_FIELDS = {
    "risk_comfort_level": "riskComfortLevel",
    "self_motivation_level": "selfMotivationLevel",
    "tech_skills_rating": "techSkillsRating",
    "direct_communication_enjoyment": "directCommunicationEnjoyment",
    "creative_work_enjoyment": "creativeWorkEnjoyment",
    "brand_face_comfort": "brandFaceComfort",
    "organization_level": "organizationLevel",
    "long_term_consistency": "longTermConsistency",
    "feedback_rejection_response": "feedbackRejectionResponse",
    "competitiveness_level": "competitivenessLevel",
    "trial_and_error_comfort": "trialAndErrorComfort",
    "discouragement_resilience": "discouragementResilience",
    "uncertainty_handling": "uncertaintyHandling",
    "passive_income_importance": "passiveIncomeImportance",
    "passion_identity_alignment": "passionIdentityAlignment",
    "meaningful_contribution_importance": "meaningfulContributionImportance",
    "control_importance": "controlImportance",
    "social_media_interest": "socialMediaInterest",
}

NUMERIC_FIELDS = {
    "weekly_time_commitment": "weeklyTimeCommitment",
    "upfront_investment": "upfrontInvestment",
    "success_income_goal": "successIncomeGoal",
}

CHOICE_FIELDS = {
    "learning_preference": "learningPreference",
    "work_structure_preference": "workStructurePreference",
    "work_collaboration_preference": "workCollaborationPreference",
    "decision_making_style": "decisionMakingStyle",
    "main_motivation": "mainMotivation",
    "first_income_timeline": "firstIncomeTimeline",
    "business_exit_plan": "businessExitPlan",
    "business_growth_size": "businessGrowthSize",
    "repetitive_tasks_feeling": "repetitiveTasksFeeling",
    "path_preference": "pathPreference",
    "teach_vs_solve": "teachVsSolve",
    "workstyle_preference": "workstylePreference",
}

FLAG_FIELDS = {
    "tool_learning_willingness": "toolLearningWillingness",
    "workspace_availability": "workspaceAvailability",
    "online_presence_comfort": "onlinePresenceComfort",
    "client_calls_comfort": "clientCallsComfort",
    "physical_shipping_openness": "physicalShippingOpenness",
    "existing_audience": "existingAudience",
    "promote_others_openness": "promoteOthersOpenness",
    "ecosystem_participation": "ecosystemParticipation",
}

ALL_FIELDS = {**LIKERT_FIELDS, **NUMERIC_FIELDS, **CHOICE_FIELDS, **FLAG_FIELDS}


# =============================================================================
# Raw Input Model (matching the questionnaire payload)
# =============================================================================


class RawQuizResponse(BaseModel):
    """Raw questionnaire answers as submitted.

    Values are kept exactly as received; the ResponseNormalizer turns them
    into a typed QuizResponse.
    """
    answers: dict[str, Any] = Field(default_factory=dict)

    class Config:
        extra = "allow"

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "RawQuizResponse":
        """Wrap a flat questionnaire payload."""
        return cls(answers=dict(payload))


# =============================================================================
# Normalized QuizResponse
# =============================================================================


class QuizResponse(BaseModel):
    """Typed questionnaire answers.

    Every field is optional; None means unanswered. Likert values are
    guaranteed to be integers in [1,5] and numeric values non-negative
    once produced by the ResponseNormalizer.
    """

    # Likert (1-5)
    risk_comfort_level: Optional[int] = Field(None, ge=1, le=5, alias="riskComfortLevel")
    self_motivation_level: Optional[int] = Field(None, ge=1, le=5, alias="selfMotivationLevel")
    tech_skills_rating: Optional[int] = Field(None, ge=1, le=5, alias="techSkillsRating")
    direct_communication_enjoyment: Optional[int] = Field(None, ge=1, le=5, alias="directCommunicationEnjoyment")
    creative_work_enjoyment: Optional[int] = Field(None, ge=1, le=5, alias="creativeWorkEnjoyment")
    brand_face_comfort: Optional[int] = Field(None, ge=1, le=5, alias="brandFaceComfort")
    organization_level: Optional[int] = Field(None, ge=1, le=5, alias="organizationLevel")
    long_term_consistency: Optional[int] = Field(None, ge=1, le=5, alias="longTermConsistency")
    feedback_rejection_response: Optional[int] = Field(None, ge=1, le=5, alias="feedbackRejectionResponse")
    competitiveness_level: Optional[int] = Field(None, ge=1, le=5, alias="competitivenessLevel")
    trial_and_error_comfort: Optional[int] = Field(None, ge=1, le=5, alias="trialAndErrorComfort")
    discouragement_resilience: Optional[int] = Field(None, ge=1, le=5, alias="discouragementResilience")
    uncertainty_handling: Optional[int] = Field(None, ge=1, le=5, alias="uncertaintyHandling")
    passive_income_importance: Optional[int] = Field(None, ge=1, le=5, alias="passiveIncomeImportance")
    passion_identity_alignment: Optional[int] = Field(None, ge=1, le=5, alias="passionIdentityAlignment")
    meaningful_contribution_importance: Optional[int] = Field(
        None, ge=1, le=5, alias="meaningfulContributionImportance"
    )
    control_importance: Optional[int] = Field(None, ge=1, le=5, alias="controlImportance")
    social_media_interest: Optional[int] = Field(None, ge=1, le=5, alias="socialMediaInterest")

    # Numeric
    weekly_time_commitment: Optional[float] = Field(None, ge=0, alias="weeklyTimeCommitment")
    upfront_investment: Optional[float] = Field(None, ge=0, alias="upfrontInvestment")
    success_income_goal: Optional[float] = Field(None, ge=0, alias="successIncomeGoal")

    # Enumerated choices
    learning_preference: Optional[str] = Field(None, alias="learningPreference")
    work_structure_preference: Optional[str] = Field(None, alias="workStructurePreference")
    work_collaboration_preference: Optional[str] = Field(None, alias="workCollaborationPreference")
    decision_making_style: Optional[str] = Field(None, alias="decisionMakingStyle")
    main_motivation: Optional[str] = Field(None, alias="mainMotivation")
    first_income_timeline: Optional[str] = Field(None, alias="firstIncomeTimeline")
    business_exit_plan: Optional[str] = Field(None, alias="businessExitPlan")
    business_growth_size: Optional[str] = Field(None, alias="businessGrowthSize")
    repetitive_tasks_feeling: Optional[str] = Field(None, alias="repetitiveTasksFeeling")
    path_preference: Optional[str] = Field(None, alias="pathPreference")
    teach_vs_solve: Optional[str] = Field(None, alias="teachVsSolve")
    workstyle_preference: Optional[str] = Field(None, alias="workstylePreference")

    # Yes/no flags
    tool_learning_willingness: Optional[bool] = Field(None, alias="toolLearningWillingness")
    workspace_availability: Optional[bool] = Field(None, alias="workspaceAvailability")
    online_presence_comfort: Optional[bool] = Field(None, alias="onlinePresenceComfort")
    client_calls_comfort: Optional[bool] = Field(None, alias="clientCallsComfort")
    physical_shipping_openness: Optional[bool] = Field(None, alias="physicalShippingOpenness")
    existing_audience: Optional[bool] = Field(None, alias="existingAudience")
    promote_others_openness: Optional[bool] = Field(None, alias="promoteOthersOpenness")
    ecosystem_participation: Optional[bool] = Field(None, alias="ecosystemParticipation")

    class Config:
        populate_by_name = True
        frozen = True

    def answered_fields(self) -> list[str]:
        """Names of fields that carry an answer."""
        return [name for name in ALL_FIELDS if getattr(self, name) is not None]

    def answer(self, field_name: str) -> Any:
        """Look up an answer by snake_case or camelCase field name."""
        if field_name in ALL_FIELDS:
            return getattr(self, field_name)
        for name, alias in ALL_FIELDS.items():
            if alias == field_name:
                return getattr(self, name)
        return None


# =============================================================================
# Trait Models
# =============================================================================


class TraitScores(BaseModel):
    """The nine display traits, each in [0,1]."""
    social_comfort: float = Field(0.5, ge=0, le=1)
    consistency: float = Field(0.5, ge=0, le=1)
    risk_tolerance: float = Field(0.5, ge=0, le=1)
    tech_comfort: float = Field(0.5, ge=0, le=1)
    motivation: float = Field(0.5, ge=0, le=1)
    feedback_resilience: float = Field(0.5, ge=0, le=1)
    structure_preference: float = Field(0.5, ge=0, le=1)
    creativity: float = Field(0.5, ge=0, le=1)
    communication_confidence: float = Field(0.5, ge=0, le=1)

    def as_dict(self) -> dict[str, float]:
        """Trait name -> score."""
        return self.model_dump()


class TraitSlider(BaseModel):
    """Display metadata for one trait on the personality report."""
    trait: TraitName
    label: str
    left_label: str
    right_label: str


# =============================================================================
# Scoring and Output Models
# =============================================================================


class ScoringDimension(BaseModel):
    """A single scoring dimension."""
    dimension: str
    weight: float
    raw_score: float  # 0-100 before weighting
    weighted_score: float
    reasoning: str


class MatchedDimension(BaseModel):
    """A dimension where the business model matched the user."""
    dimension: str
    value: str
    reasoning: str


class MismatchedDimension(BaseModel):
    """A dimension where the business model didn't match well."""
    dimension: str
    expected: str
    actual: str
    impact: str  # How this affects the recommendation


class RankedPath(BaseModel):
    """A business model annotated with its fit score and rank."""
    model: BusinessModelDefinition
    fit_score: int = Field(..., ge=0, le=100)
    rank: int = 0
    match_quality: str = "Fair Match"

    # Detailed scoring breakdown
    dimensions: list[ScoringDimension] = Field(default_factory=list)
    matched: list[MatchedDimension] = Field(default_factory=list)
    mismatched: list[MismatchedDimension] = Field(default_factory=list)

    # Explanation
    fit_summary: list[str] = Field(default_factory=list)
    struggle_summary: list[str] = Field(default_factory=list)
    insights: list[str] = Field(default_factory=list)

    # Set when scoring fell back to the neutral score
    fallback: bool = False

    @property
    def id(self) -> str:
        return self.model.id

    @property
    def name(self) -> str:
        return self.model.name


class TraitInsight(BaseModel):
    """A personality observation drawn from the answers."""
    trait: str
    description: str
    strength: bool


class ReadinessFactor(BaseModel):
    """How ready the user's resources are along one axis."""
    factor: str
    level: str  # e.g. High, Medium, Limited
    detail: str


class AvoidanceNote(BaseModel):
    """A poorly fitting business model with reasons."""
    model_id: str
    name: str
    fit_score: int
    reasons: list[str] = Field(default_factory=list)

    class Config:
        protected_namespaces = ()


class ResultSummary(BaseModel):
    """Summary of the recommendation results."""
    primary_recommendation: Optional[str] = None
    primary_recommendation_id: Optional[str] = None
    primary_fit_score: Optional[int] = None
    match_quality: Optional[str] = None
    key_strengths: list[str] = Field(default_factory=list)
    key_gaps: list[str] = Field(default_factory=list)
    answered_count: int = 0


class ScoringResult(BaseModel):
    """Complete output from the scoring engine."""
    # Metadata
    scoring_version: str = Field(default="1.0.0")
    scored_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    catalog_version: str
    catalog_model_count: int

    # Traits
    trait_scores: TraitScores

    # Results
    ranked_paths: list[RankedPath] = Field(default_factory=list)
    top_matches: list[RankedPath] = Field(default_factory=list)
    models_to_avoid: list[AvoidanceNote] = Field(default_factory=list)
    personality_insights: list[TraitInsight] = Field(default_factory=list)
    resource_readiness: list[ReadinessFactor] = Field(default_factory=list)

    # Summary
    summary: ResultSummary = Field(default_factory=ResultSummary)

    # Debug/audit info
    processing_warnings: list[str] = Field(default_factory=list)
