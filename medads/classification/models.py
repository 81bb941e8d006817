"""Classification models and data structures."""

from typing import Any

from pydantic import ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from medads.schema import WireModel, clamp

CLASSIFICATION_ERROR_INTENT = "error_in_classification"
UNKNOWN_CATEGORY_ID = "unknown"


class CategoryAssignment(WireModel):
    """A taxonomy position with the classifier's confidence in it."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str
    name: str = ""
    confidence: float = 0.0

    @field_validator("confidence", mode="before")
    @classmethod
    def _clamp_confidence(cls, value: Any) -> float:
        if value is None:
            return 0.0
        return clamp(float(value))


class DemographicRelevance(WireModel):
    """Patient demographics the question refers to, if any."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    age_groups: list[str] = Field(default_factory=list)
    gender: str | None = None


class Classification(WireModel):
    """Structured classification of a medical question.

    Produced once per question and never mutated. Confidence values outside
    [0, 1] are clamped on construction. ``relevant_medications`` and
    ``categories`` are empty lists when the classifier reported none.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    primary_category: CategoryAssignment
    subcategory: CategoryAssignment
    keywords: list[str] = Field(default_factory=list)
    relevant_medications: list[str] = Field(default_factory=list)
    categories: list[str] = Field(default_factory=list)
    possible_intents: list[str] = Field(default_factory=list)
    demographic_relevance: DemographicRelevance | None = None

    @field_validator(
        "keywords", "relevant_medications", "categories", "possible_intents", mode="before"
    )
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        if value is None:
            return []
        return value

    @property
    def is_fallback(self) -> bool:
        """Whether this is the degraded result of a failed classification."""
        return CLASSIFICATION_ERROR_INTENT in self.possible_intents

    def topic_terms(self) -> list[str]:
        """Lowercased topical ``categories``; taxonomy ids and intents are not topics."""
        return [c.lower() for c in self.categories]

    @classmethod
    def fallback(cls) -> "Classification":
        """Build the sentinel classification returned when classification fails."""
        return cls(
            primary_category=CategoryAssignment(id=UNKNOWN_CATEGORY_ID, name="Unknown"),
            subcategory=CategoryAssignment(id=UNKNOWN_CATEGORY_ID, name="Unknown"),
            keywords=[],
            possible_intents=[CLASSIFICATION_ERROR_INTENT],
        )
