"""Response time estimation for answer generation."""

import logging

from medads.classification.models import Classification
from medads.relevance.models import ComplexityLevel, ContextualRelevanceResult
from medads.timing.models import BASE_TIME, EstimationFactors, TimeEstimationResult

logger = logging.getLogger(__name__)

LENGTH_FACTOR = 0.02
COMPLEXITY_MULTIPLIER = 0.05
SPECIALTY_MULTIPLIER = 1.2
DEFAULT_SPECIALTY_FACTOR = 1.3
DEFAULT_MODEL_FACTOR = 1.4

COMPLEXITY_INDICATORS = (
    "why", "how", "explain", "compare", "contrast", "difference",
    "mechanism", "pathophysiology", "etiology", "evidence",
    "complicated", "complex", "rare", "unusual",
)

COMPLEX_SPECIALTIES = (
    "oncology", "neurology", "immunology", "endocrinology",
    "rheumatology", "genetics", "hematology",
)


def round_half_up(value: float) -> int:
    return int(value + 0.5)


def model_factor(model_name: str | None) -> float:
    """Relative generation speed of a chat model."""
    match model_name:
        case "gpt-3.5-turbo":
            return 1.0
        case "gpt-4":
            return 1.8
        case "gpt-4o":
            return 1.3
        case "gpt-4-turbo":
            return 1.5
        case _:
            return DEFAULT_MODEL_FACTOR


def specialty_factor(category_id: str | None) -> float:
    """Answer difficulty of a medical specialty."""
    match category_id:
        case "cardiology" | "infectious_diseases" | "psychiatry" | "pulmonology":
            return 1.4
        case "dermatology":
            return 1.2
        case "endocrinology" | "immunology" | "rheumatology":
            return 1.6
        case "gastroenterology" | "pediatrics":
            return 1.3
        case "genetics" | "neurology":
            return 1.7
        case "hematology" | "nephrology" | "surgery":
            return 1.5
        case "oncology":
            return 1.8
        case _:
            return DEFAULT_SPECIALTY_FACTOR


def complexity_from_level(level: ComplexityLevel) -> int:
    match level:
        case ComplexityLevel.BASIC:
            return 30
        case ComplexityLevel.INTERMEDIATE:
            return 50
        case ComplexityLevel.ADVANCED:
            return 80
        case ComplexityLevel.EXPERT:
            return 95
        case _:
            return 60


class TimeEstimator:
    """Predicts how long an answer will take to generate."""

    def __init__(self, model_name: str | None = None):
        """Initialize the estimator.

        Args:
            model_name: Chat model used for answers; unknown models use a default factor
        """
        self.model_name = model_name

    def estimate_time(
        self,
        question: str,
        classification: Classification | None = None,
        contextual_relevance: ContextualRelevanceResult | None = None,
    ) -> TimeEstimationResult:
        """Estimate response time for a question.

        A positive ``estimated_response_time`` from contextual analysis is used
        directly; otherwise the estimate is computed from question features.
        """
        if contextual_relevance is not None and contextual_relevance.estimated_response_time > 0:
            return self._refine_from_context(question, contextual_relevance)

        complexity = self.calculate_complexity_score(question, classification)
        category_id = classification.primary_category.id if classification else None
        specialty = specialty_factor(category_id)
        model = model_factor(self.model_name)

        length_component = len(question) * LENGTH_FACTOR
        complexity_component = complexity * COMPLEXITY_MULTIPLIER
        specialty_component = specialty * SPECIALTY_MULTIPLIER

        raw = BASE_TIME + (length_component + complexity_component) * specialty_component * model
        initial = max(round_half_up(raw), BASE_TIME)
        minimum = min(max(round_half_up(initial * 0.7), BASE_TIME), initial)
        maximum = max(round_half_up(initial * 1.5), initial)

        result = TimeEstimationResult(
            initial_estimate=initial,
            min_estimate=minimum,
            max_estimate=maximum,
            confidence_level=self._confidence_level(len(question), complexity),
            complexity_score=complexity,
            detailed_factors=EstimationFactors(
                question_length_factor=length_component,
                topic_complexity_factor=complexity_component,
                specialty_difficulty_factor=specialty_component,
                model_performance_factor=model,
            ),
        )
        logger.debug(f"Estimated {initial}s ({minimum}-{maximum}s), complexity {complexity}")
        return result

    def calculate_complexity_score(
        self, question: str, classification: Classification | None = None
    ) -> int:
        """Question complexity on a 0-100 scale."""
        lowered = question.lower()
        score = min(len(question) / 20, 40)
        score += question.count("?") * 5
        score += 3 * sum(1 for word in COMPLEXITY_INDICATORS if word in lowered)

        if classification is not None:
            score += (1 - classification.primary_category.confidence) * 20
            if classification.primary_category.id in COMPLEX_SPECIALTIES:
                score += 15

        return min(round_half_up(score), 100)

    def _confidence_level(self, question_length: int, complexity: int) -> float:
        confidence = 0.7
        normalized_length = min(question_length / 200, 1)
        if normalized_length < 0.2 or normalized_length > 0.8:
            confidence -= 0.1
        if complexity / 100 > 0.8:
            confidence -= 0.15
        return max(0.4, min(confidence, 0.95))

    def _refine_from_context(
        self, question: str, relevance: ContextualRelevanceResult
    ) -> TimeEstimationResult:
        initial = max(relevance.estimated_response_time, BASE_TIME)
        minimum = min(max(round_half_up(initial * 0.8), BASE_TIME), initial)
        maximum = max(round_half_up(initial * 1.3), initial)

        confidence = 0.8
        if relevance.specificity > 85:
            confidence += 0.1
        elif relevance.specificity < 50:
            confidence -= 0.1

        complexity = complexity_from_level(relevance.complexity_level)

        return TimeEstimationResult(
            initial_estimate=initial,
            min_estimate=minimum,
            max_estimate=maximum,
            confidence_level=min(confidence, 0.95),
            complexity_score=complexity,
            detailed_factors=EstimationFactors(
                question_length_factor=len(question) * LENGTH_FACTOR,
                topic_complexity_factor=complexity * COMPLEXITY_MULTIPLIER,
                specialty_difficulty_factor=1.5 if relevance.urgency_score > 80 else 1.3,
                model_performance_factor=model_factor(self.model_name),
            ),
        )
