"""Contextual relevance analysis and content adaptation module."""

from .adaptation import (
    ContentAdaptationOptions,
    ContentAdaptationParams,
    ContentAdaptationService,
    ContentDepth,
    ContentLength,
    InteractiveComplexity,
)
from .analyzer import (
    ContextualAnalysisError,
    ContextualRelevanceAnalyzer,
    calculate_content_relevance,
)
from .models import (
    ClinicalContext,
    ComplexityLevel,
    ContentFormat,
    ContextualRelevanceResult,
    PatientDemographics,
    QuestionIntent,
)

__all__ = [
    "ClinicalContext",
    "ComplexityLevel",
    "ContentAdaptationOptions",
    "ContentAdaptationParams",
    "ContentAdaptationService",
    "ContentDepth",
    "ContentFormat",
    "ContentLength",
    "ContextualAnalysisError",
    "ContextualRelevanceAnalyzer",
    "ContextualRelevanceResult",
    "InteractiveComplexity",
    "PatientDemographics",
    "QuestionIntent",
    "calculate_content_relevance",
]
