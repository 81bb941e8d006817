"""Contextual relevance models and enums."""

from enum import Enum
from typing import Any

from pydantic import Field, field_validator

from medads.schema import WireModel, clamp


class QuestionIntent(str, Enum):
    """What the physician is trying to accomplish."""

    DIAGNOSIS = "diagnosis"
    TREATMENT = "treatment"
    MECHANISM = "mechanism"
    RESEARCH = "research"
    GUIDELINE = "guideline"
    DIFFERENTIAL = "differential"
    MANAGEMENT = "management"
    PREVENTION = "prevention"
    PROGNOSIS = "prognosis"
    TESTING = "testing"


class ClinicalContext(str, Enum):
    """Clinical setting the question arises from."""

    EMERGENCY = "emergency"
    ACUTE = "acute"
    CHRONIC = "chronic"
    PREVENTATIVE = "preventative"
    FOLLOW_UP = "follow_up"
    RESEARCH = "research"
    EDUCATION = "education"


class ComplexityLevel(str, Enum):
    """Ordered question complexity, basic < intermediate < advanced < expert."""

    BASIC = "basic"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"
    EXPERT = "expert"

    @property
    def rank(self) -> int:
        return list(ComplexityLevel).index(self)


class ContentFormat(str, Enum):
    """Presentation formats sponsored content can take."""

    TEXT = "text"
    VIDEO = "video"
    INTERACTIVE = "interactive"
    MICROSIMULATION = "microsimulation"
    CLINICAL_TRIAL = "clinical_trial"
    DECISION_TREE = "decision_tree"
    CASE_STUDY = "case_study"
    INFOGRAPHIC = "infographic"


def _clamp_score(value: Any) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError) as e:
        raise ValueError(f"score must be a number, got {value!r}") from e
    return clamp(number, 0.0, 100.0)


class PatientDemographics(WireModel):
    """Patient details mentioned in the question."""

    age: str | None = None
    gender: str | None = None
    risk_factors: list[str] = Field(default_factory=list)


class ContextualRelevanceResult(WireModel):
    """Question-level scoring of intent, complexity, urgency and format fit."""

    question_intent: QuestionIntent
    clinical_context: ClinicalContext
    complexity_level: ComplexityLevel
    specificity: float
    practicality_score: float
    urgency_score: float
    content_relevance_scores: dict[ContentFormat, float]
    estimated_response_time: float = Field(ge=0)
    key_contextual_factors: list[str] = Field(default_factory=list)
    target_specialties: list[str] = Field(default_factory=list)
    detected_patient_demographics: PatientDemographics | None = None

    @field_validator("specificity", "practicality_score", "urgency_score", mode="before")
    @classmethod
    def _clamp_scores(cls, value: Any) -> float:
        return _clamp_score(value)

    @field_validator("content_relevance_scores", mode="before")
    @classmethod
    def _check_formats(cls, value: Any) -> Any:
        if not isinstance(value, dict):
            raise ValueError("contentRelevanceScores must be an object")
        scores = {
            key.value if isinstance(key, ContentFormat) else str(key): score
            for key, score in value.items()
        }
        known = {f.value for f in ContentFormat}
        missing = known - scores.keys()
        if missing:
            raise ValueError(f"contentRelevanceScores is missing formats: {sorted(missing)}")
        return {key: _clamp_score(score) for key, score in scores.items() if key in known}

    @field_validator("key_contextual_factors", "target_specialties", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    def format_score(self, content_format: ContentFormat) -> float:
        """Relevance of one content format, 0 when absent."""
        return self.content_relevance_scores.get(content_format, 0.0)