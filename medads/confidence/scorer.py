"""Confidence scoring for sponsored-content relevance."""

import logging

from medads.classification.models import Classification
from medads.confidence.models import (
    ConfidenceFactors,
    ConfidenceScoringOptions,
    EnhancedCompanyMatch,
    EnhancedMappingResult,
)
from medads.confidence.similarity import NeutralSimilarity, SimilarityScores, SimilarityStrategy
from medads.mapping.models import CompanyMatch, PharmaMappingResult
from medads.schema import clamp

logger = logging.getLogger(__name__)

SPECIFICITY_INDICATORS = (
    "specific", "exact", "precise", "particular", "detailed",
    "dosage", "protocol", "regimen", "guideline", "procedure",
)

GENERALITY_INDICATORS = (
    "general", "overview", "broad", "basics", "introduction",
    "summary", "primer", "background", "fundamentals", "common", "typical",
)

CLINICAL_CONTEXT_INDICATORS = (
    "treatment", "therapy", "medication", "drug", "dose",
    "diagnosis", "prognosis", "management", "care", "patient",
    "clinical", "trial", "evidence", "study", "guideline",
    "contraindication", "side effect", "adverse", "efficacy",
    "effectiveness", "prescription", "administer", "therapeutic",
)

FACTOR_WEIGHTS = {
    "category_match_score": 0.25,
    "semantic_similarity_score": 0.20,
    "question_specificity_score": 0.15,
    "clinical_context_score": 0.20,
    "keyword_relevance_score": 0.10,
    "medication_match_score": 0.10,
}


def question_specificity_score(question: str, classification: Classification) -> float:
    """How specific a question reads, in [0, 1]."""
    lowered = question.lower()
    score = 0.5
    score += 0.1 * sum(1 for word in SPECIFICITY_INDICATORS if word in lowered)
    score -= 0.1 * sum(1 for word in GENERALITY_INDICATORS if word in lowered)

    word_count = len(question.split())
    if word_count > 20:
        score += 0.1
    elif word_count < 5:
        score -= 0.1

    score += (classification.primary_category.confidence - 0.5) * 0.2
    score += (classification.subcategory.confidence - 0.5) * 0.2
    return clamp(score)


def clinical_context_score(question: str, classification: Classification) -> float:
    """How clinically grounded a question is, in [0, 1]."""
    lowered = question.lower()
    score = 0.1 * sum(1 for word in CLINICAL_CONTEXT_INDICATORS if word in lowered)
    if classification.relevant_medications:
        score += 0.3
    return clamp(score)


def overall_confidence(factors: ConfidenceFactors) -> float:
    """Weighted mean of the confidence factors."""
    values = factors.model_dump()
    weighted_sum = sum(values[name] * weight for name, weight in FACTOR_WEIGHTS.items())
    return clamp(weighted_sum / sum(FACTOR_WEIGHTS.values()))


def should_show_ad(result: EnhancedMappingResult, threshold: float | None = None) -> bool:
    """Whether sponsored content should be shown for a scored mapping.

    Requires both the overall confidence to reach the threshold and at least
    one match to have cleared it during scoring.

    Args:
        result: Scored mapping result
        threshold: Override threshold; the one used for scoring when omitted
    """
    effective = result.confidence_threshold if threshold is None else threshold
    return result.overall_confidence >= effective and result.ad_recommended


class ConfidenceScorer:
    """Combines independent relevance signals into a per-match confidence."""

    def __init__(
        self,
        similarity: SimilarityStrategy | None = None,
        default_options: ConfidenceScoringOptions | None = None,
    ):
        """Initialize the scorer.

        Args:
            similarity: Semantic similarity strategy; neutral when omitted
            default_options: Options used when a call passes none
        """
        self.similarity = similarity or NeutralSimilarity()
        self.default_options = default_options or ConfidenceScoringOptions()

    def calculate_confidence_factors(
        self,
        match: CompanyMatch,
        question: str,
        classification: Classification,
        similarity: SimilarityScores,
    ) -> ConfidenceFactors:
        """Compute the six confidence factors for one match."""
        if not match.category_match:
            category_score = 0.3
        elif match.subcategory_match:
            category_score = 0.8 + 0.2 * classification.subcategory.confidence
        else:
            category_score = 0.5 + 0.3 * classification.primary_category.confidence

        if match.keyword_matches and classification.keywords:
            keyword_score = min(1.0, len(match.keyword_matches) / len(classification.keywords) * 1.5)
        else:
            keyword_score = 0.2

        expected_medications = classification.relevant_medications
        if match.medication_matches:
            medication_score = min(
                1.0, len(match.medication_matches) / (len(expected_medications) or 1) * 1.5
            )
        elif expected_medications:
            # Named medications that do not match count against the sponsor
            medication_score = 0.1
        else:
            medication_score = 0.5

        return ConfidenceFactors(
            category_match_score=clamp(category_score),
            semantic_similarity_score=clamp(similarity.get(match.treatment_area.id)),
            question_specificity_score=question_specificity_score(question, classification),
            clinical_context_score=clinical_context_score(question, classification),
            keyword_relevance_score=clamp(keyword_score),
            medication_match_score=clamp(medication_score),
        )

    async def enhance_with_confidence(
        self,
        mapping_result: PharmaMappingResult,
        question: str,
        options: ConfidenceScoringOptions | None = None,
    ) -> EnhancedMappingResult:
        """Score every match of a mapping result.

        Args:
            mapping_result: Output of the treatment-area mapper
            question: Original question text
            options: Scoring options; the scorer defaults when omitted

        Returns:
            Matches re-ranked by confidence with the show/hide decision
        """
        options = options or self.default_options
        classification = mapping_result.classification_input

        similarity = SimilarityScores()
        if options.semantic_analysis and mapping_result.matches:
            similarity = await self.similarity.score(
                question, [m.treatment_area for m in mapping_result.matches]
            )

        enhanced = []
        for match in mapping_result.matches:
            factors = self.calculate_confidence_factors(match, question, classification, similarity)
            confidence = overall_confidence(factors)
            enhanced.append(
                EnhancedCompanyMatch(
                    **dict(match),
                    confidence_score=confidence,
                    confidence_factors=factors,
                    should_show_ad=confidence >= options.confidence_threshold,
                )
            )

        enhanced.sort(key=lambda m: m.confidence_score, reverse=True)
        top_confidence = enhanced[0].confidence_score if enhanced else 0.0
        ad_recommended = any(m.should_show_ad for m in enhanced)

        logger.info(
            f"Scored {len(enhanced)} matches, overall confidence {top_confidence:.2f}, "
            f"ad recommended: {ad_recommended}"
        )

        return EnhancedMappingResult(
            **{k: v for k, v in mapping_result if k not in ("matches", "top_match")},
            matches=enhanced,
            top_match=enhanced[0] if enhanced else None,
            overall_confidence=top_confidence,
            ad_recommended=ad_recommended,
            original_question_text=question,
            question_embedding=similarity.question_embedding if options.debug else None,
            confidence_threshold=options.confidence_threshold,
        )
