"""Confidence scoring module."""

from .models import (
    ConfidenceFactors,
    ConfidenceScoringOptions,
    EnhancedCompanyMatch,
    EnhancedMappingResult,
)
from .scorer import ConfidenceScorer, overall_confidence, should_show_ad
from .similarity import (
    EmbeddingSimilarity,
    NeutralSimilarity,
    SimilarityScores,
    SimilarityStrategy,
    cosine_similarity,
)

__all__ = [
    "ConfidenceFactors",
    "ConfidenceScorer",
    "ConfidenceScoringOptions",
    "EmbeddingSimilarity",
    "EnhancedCompanyMatch",
    "EnhancedMappingResult",
    "NeutralSimilarity",
    "SimilarityScores",
    "SimilarityStrategy",
    "cosine_similarity",
    "overall_confidence",
    "should_show_ad",
]
