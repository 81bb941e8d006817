"""Content adaptation parameters derived from contextual relevance."""

from dataclasses import dataclass
from enum import Enum

from medads.relevance.models import (
    ComplexityLevel,
    ContentFormat,
    ContextualRelevanceResult,
    QuestionIntent,
)
from medads.schema import WireModel


class ContentDepth(str, Enum):
    BASIC = "basic"
    STANDARD = "standard"
    DETAILED = "detailed"
    COMPREHENSIVE = "comprehensive"
    EXPERT = "expert"


class ContentLength(str, Enum):
    BRIEF = "brief"
    MODERATE = "moderate"
    DETAILED = "detailed"
    COMPREHENSIVE = "comprehensive"


class InteractiveComplexity(str, Enum):
    SIMPLE = "simple"
    MODERATE = "moderate"
    COMPLEX = "complex"
    ADVANCED = "advanced"


class ContentAdaptationParams(WireModel):
    """How sponsored content should be shaped for a question."""

    depth: ContentDepth
    length: ContentLength
    interactive_complexity: InteractiveComplexity
    prioritized_formats: list[ContentFormat]
    educational_level: ComplexityLevel
    estimated_engagement_time: int
    key_points: int
    include_evidence: bool
    include_visuals: bool
    include_clinical_cases: bool
    primary_intent: QuestionIntent


@dataclass
class ContentAdaptationOptions:
    max_prioritized_formats: int = 3
    enable_dynamic_length: bool = True
    enable_complexity_adjustment: bool = True
    enable_intent_based_prioritization: bool = True


KEY_POINTS_BY_DEPTH = {
    ContentDepth.BASIC: 3,
    ContentDepth.STANDARD: 5,
    ContentDepth.DETAILED: 7,
    ContentDepth.COMPREHENSIVE: 10,
    ContentDepth.EXPERT: 12,
}

LENGTH_MULTIPLIERS = {
    ContentLength.BRIEF: 0.7,
    ContentLength.MODERATE: 1.0,
    ContentLength.DETAILED: 1.3,
    ContentLength.COMPREHENSIVE: 1.5,
}


class ContentAdaptationService:
    """Turns a contextual relevance result into content adaptation parameters."""

    def __init__(self, options: ContentAdaptationOptions | None = None):
        self.options = options or ContentAdaptationOptions()

    def generate_adaptation_params(self, relevance: ContextualRelevanceResult) -> ContentAdaptationParams:
        """Derive depth, length, interactivity and format priorities for a question."""
        depth = self.determine_content_depth(relevance.complexity_level, relevance.specificity)
        length = self.determine_content_length(
            relevance.estimated_response_time, relevance.question_intent
        )
        interactive = self.determine_interactive_complexity(
            relevance.complexity_level, relevance.question_intent
        )
        formats = self.prioritize_content_formats(relevance)

        return ContentAdaptationParams(
            depth=depth,
            length=length,
            interactive_complexity=interactive,
            prioritized_formats=formats,
            educational_level=relevance.complexity_level,
            estimated_engagement_time=self.estimate_engagement_time(
                depth, interactive, relevance.estimated_response_time
            ),
            key_points=int(KEY_POINTS_BY_DEPTH[depth] * LENGTH_MULTIPLIERS[length] + 0.5),
            include_evidence=self._include_evidence(relevance),
            include_visuals=(
                ContentFormat.INFOGRAPHIC in formats
                or ContentFormat.VIDEO in formats
                or relevance.question_intent == QuestionIntent.MECHANISM
            ),
            include_clinical_cases=self._include_clinical_cases(relevance),
            primary_intent=relevance.question_intent,
        )

    def determine_content_depth(self, complexity: ComplexityLevel, specificity: float) -> ContentDepth:
        match complexity:
            case ComplexityLevel.EXPERT:
                return ContentDepth.EXPERT
            case ComplexityLevel.ADVANCED:
                return ContentDepth.COMPREHENSIVE if specificity > 80 else ContentDepth.DETAILED
            case ComplexityLevel.INTERMEDIATE:
                return ContentDepth.DETAILED if specificity > 70 else ContentDepth.STANDARD
            case _:
                return ContentDepth.STANDARD if specificity > 80 else ContentDepth.BASIC

    def determine_content_length(self, response_time: float, intent: QuestionIntent) -> ContentLength:
        """Content length from the expected response time, adjusted by intent.

        The intent adjustments apply only with dynamic length enabled; other
        intents keep the response-time length.
        """
        if self.options.enable_dynamic_length:
            match intent:
                case QuestionIntent.DIAGNOSIS | QuestionIntent.DIFFERENTIAL if response_time > 120:
                    return ContentLength.COMPREHENSIVE
                case QuestionIntent.MECHANISM:
                    return ContentLength.MODERATE if response_time < 90 else ContentLength.DETAILED
                case QuestionIntent.TREATMENT:
                    return ContentLength.MODERATE if response_time < 120 else ContentLength.DETAILED
                case _:
                    pass

        if response_time < 60:
            return ContentLength.BRIEF
        if response_time < 180:
            return ContentLength.MODERATE
        if response_time < 300:
            return ContentLength.DETAILED
        return ContentLength.COMPREHENSIVE

    def determine_interactive_complexity(
        self, complexity: ComplexityLevel, intent: QuestionIntent
    ) -> InteractiveComplexity:
        if not self.options.enable_complexity_adjustment:
            match complexity:
                case ComplexityLevel.EXPERT:
                    return InteractiveComplexity.ADVANCED
                case ComplexityLevel.ADVANCED:
                    return InteractiveComplexity.COMPLEX
                case ComplexityLevel.INTERMEDIATE:
                    return InteractiveComplexity.MODERATE
                case _:
                    return InteractiveComplexity.SIMPLE

        diagnostic = intent in (QuestionIntent.DIFFERENTIAL, QuestionIntent.DIAGNOSIS)
        match complexity:
            case ComplexityLevel.EXPERT:
                return InteractiveComplexity.ADVANCED
            case ComplexityLevel.ADVANCED:
                if diagnostic or intent == QuestionIntent.MECHANISM:
                    return InteractiveComplexity.ADVANCED
                return InteractiveComplexity.COMPLEX
            case ComplexityLevel.INTERMEDIATE:
                if intent in (QuestionIntent.TREATMENT, QuestionIntent.MANAGEMENT):
                    return InteractiveComplexity.COMPLEX
                return InteractiveComplexity.MODERATE
            case _:
                return InteractiveComplexity.MODERATE if diagnostic else InteractiveComplexity.SIMPLE

    def prioritize_content_formats(self, relevance: ContextualRelevanceResult) -> list[ContentFormat]:
        """Top content formats by relevance, boosted by intent."""
        scores = {fmt: relevance.format_score(fmt) for fmt in ContentFormat}

        if self.options.enable_intent_based_prioritization:
            match relevance.question_intent:
                case QuestionIntent.DIAGNOSIS | QuestionIntent.DIFFERENTIAL:
                    scores[ContentFormat.DECISION_TREE] *= 1.2
                    scores[ContentFormat.CASE_STUDY] *= 1.15
                case QuestionIntent.TREATMENT | QuestionIntent.MANAGEMENT:
                    scores[ContentFormat.CLINICAL_TRIAL] *= 1.25
                    scores[ContentFormat.MICROSIMULATION] *= 1.2
                case QuestionIntent.MECHANISM:
                    scores[ContentFormat.VIDEO] *= 1.3
                    scores[ContentFormat.INFOGRAPHIC] *= 1.25
                case QuestionIntent.RESEARCH:
                    scores[ContentFormat.TEXT] *= 1.15
                    scores[ContentFormat.CLINICAL_TRIAL] *= 1.3
                case _:
                    pass

        ranked = sorted(scores, key=lambda fmt: scores[fmt], reverse=True)
        return ranked[: self.options.max_prioritized_formats]

    def estimate_engagement_time(
        self, depth: ContentDepth, interactive: InteractiveComplexity, base_seconds: float
    ) -> int:
        match depth:
            case ContentDepth.COMPREHENSIVE | ContentDepth.EXPERT:
                multiplier = 2.0
            case ContentDepth.DETAILED:
                multiplier = 1.5
            case ContentDepth.STANDARD:
                multiplier = 1.2
            case _:
                multiplier = 1.0

        match interactive:
            case InteractiveComplexity.ADVANCED:
                additional = 180
            case InteractiveComplexity.COMPLEX:
                additional = 120
            case InteractiveComplexity.MODERATE:
                additional = 60
            case _:
                additional = 30

        return int(base_seconds * multiplier + additional + 0.5)

    def _include_evidence(self, relevance: ContextualRelevanceResult) -> bool:
        if relevance.complexity_level in (ComplexityLevel.ADVANCED, ComplexityLevel.EXPERT):
            return True
        return relevance.question_intent in (
            QuestionIntent.TREATMENT,
            QuestionIntent.RESEARCH,
            QuestionIntent.GUIDELINE,
        )

    def _include_clinical_cases(self, relevance: ContextualRelevanceResult) -> bool:
        if relevance.question_intent in (QuestionIntent.DIAGNOSIS, QuestionIntent.DIFFERENTIAL):
            return True
        return relevance.question_intent == QuestionIntent.TREATMENT and relevance.complexity_level in (
            ComplexityLevel.ADVANCED,
            ComplexityLevel.EXPERT,
        )
