"""Sponsor catalog and mapping result models."""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from pydantic import ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from medads.classification.models import Classification
from medads.schema import WireModel

DEFAULT_MIN_KEYWORD_LENGTH = 3


def unique(values: list[str] | tuple[str, ...]) -> list[str]:
    """De-duplicate strings case-insensitively, keeping first-seen order and spelling."""
    seen: set[str] = set()
    result = []
    for value in values:
        key = value.lower()
        if value and key not in seen:
            seen.add(key)
            result.append(value)
    return result


class TreatmentArea(WireModel):
    """A sponsor's clinical focus area.

    ``keywords`` holds the derived matching vocabulary: the explicit keywords,
    then the subcategory ids in plain words, then the flagship medications,
    de-duplicated case-insensitively.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str
    category: str
    subcategories: tuple[str, ...] = ()
    flagship_medications: tuple[str, ...] = ()
    keywords: tuple[str, ...] = ()
    priority: int = 5

    @model_validator(mode="before")
    @classmethod
    def _derive_keywords(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        explicit = list(data.get("keywords") or [])
        subcategories = data.get("subcategories") or []
        medications = data.get("flagship_medications", data.get("flagshipMedications")) or []
        humanized = [sub.replace("_", " ") for sub in subcategories]
        data["keywords"] = tuple(unique(explicit + humanized + list(medications)))
        return data


class Company(WireModel):
    """A pharmaceutical sponsor and its treatment areas."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str
    name: str
    logo_url: str | None = None
    keywords: tuple[str, ...] = ()
    treatment_areas: tuple[TreatmentArea, ...] = ()

    @property
    def keyword_set(self) -> list[str]:
        """Company keywords plus every treatment-area keyword."""
        combined = list(self.keywords)
        for area in self.treatment_areas:
            combined.extend(area.keywords)
        return unique(combined)


class CompanySummary(WireModel):
    """Company identity as carried on a match."""

    id: str
    name: str
    logo_url: str | None = None


class CompanyMatch(WireModel):
    """One (company, treatment area) pair that cleared the minimum score."""

    company: CompanySummary
    treatment_area: TreatmentArea
    score: int
    category_match: bool = False
    subcategory_match: bool = False
    keyword_matches: list[str] = Field(default_factory=list)
    medication_matches: list[str] = Field(default_factory=list)


class PharmaMappingResult(WireModel):
    """Ranked sponsor matches for a single classification."""

    matches: list[CompanyMatch] = Field(default_factory=list)
    top_match: CompanyMatch | None = None
    classification_input: Classification
    total_matches: int = 0
    primary_category: str
    subcategory: str
    keywords_used: list[str] = Field(default_factory=list)
    medications_used: list[str] = Field(default_factory=list)
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass
class MappingOptions:
    """Options for a single mapping call."""

    min_score: int = 20
    max_results: int | None = 10
    require_subcategory_match: bool = False
    min_keyword_length: int = DEFAULT_MIN_KEYWORD_LENGTH
