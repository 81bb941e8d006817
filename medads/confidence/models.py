"""Confidence scoring models."""

from dataclasses import dataclass

from pydantic import Field

from medads.config import Settings
from medads.mapping.models import CompanyMatch, PharmaMappingResult
from medads.schema import WireModel

DEFAULT_CONFIDENCE_THRESHOLD = 0.65


class ConfidenceFactors(WireModel):
    """The six independent signals behind a match's confidence, each in [0, 1]."""

    category_match_score: float
    semantic_similarity_score: float
    question_specificity_score: float
    clinical_context_score: float
    keyword_relevance_score: float
    medication_match_score: float


class EnhancedCompanyMatch(CompanyMatch):
    """A company match with its calibrated confidence."""

    confidence_score: float
    confidence_factors: ConfidenceFactors
    should_show_ad: bool


class EnhancedMappingResult(PharmaMappingResult):
    """Mapping result re-ranked by confidence, with the show/hide decision."""

    matches: list[EnhancedCompanyMatch] = Field(default_factory=list)
    top_match: EnhancedCompanyMatch | None = None
    overall_confidence: float = 0.0
    ad_recommended: bool = False
    original_question_text: str = ""
    question_embedding: list[float] | None = None
    confidence_threshold: float = DEFAULT_CONFIDENCE_THRESHOLD


@dataclass
class ConfidenceScoringOptions:
    """Options for a single scoring call."""

    confidence_threshold: float = DEFAULT_CONFIDENCE_THRESHOLD
    semantic_analysis: bool = True
    debug: bool = False

    @classmethod
    def from_settings(cls, settings: Settings) -> "ConfidenceScoringOptions":
        """Build options from the configured defaults."""
        return cls(
            confidence_threshold=settings.confidence_threshold,
            semantic_analysis=settings.enable_semantic_analysis,
            debug=settings.enable_debug,
        )
