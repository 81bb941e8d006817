"""Contextual relevance analysis of medical questions."""

import logging

from medads.classification.models import Classification
from medads.llm.base import LLMProvider, parse_json_object
from medads.relevance.models import (
    ClinicalContext,
    ComplexityLevel,
    ContentFormat,
    ContextualRelevanceResult,
    QuestionIntent,
)

logger = logging.getLogger(__name__)


class ContextualAnalysisError(RuntimeError):
    """Contextual relevance could not be determined for a question."""


def _choices(enum_type) -> str:
    return ", ".join(member.value for member in enum_type)


def calculate_content_relevance(
    result: ContextualRelevanceResult,
    categories: list[str],
    content_format: ContentFormat,
) -> int:
    """Weighted 0-100 relevance of a content format for an analyzed question.

    ``categories`` is accepted for ad-category aware callers and does not
    currently change the score.
    """
    score = result.format_score(content_format) * (result.practicality_score / 100)

    match result.question_intent:
        case QuestionIntent.TREATMENT:
            if content_format in (ContentFormat.CLINICAL_TRIAL, ContentFormat.DECISION_TREE):
                score *= 1.2
        case QuestionIntent.DIAGNOSIS:
            if content_format in (ContentFormat.DECISION_TREE, ContentFormat.CASE_STUDY):
                score *= 1.15
        case QuestionIntent.MECHANISM:
            if content_format in (ContentFormat.VIDEO, ContentFormat.INFOGRAPHIC):
                score *= 1.1
        case QuestionIntent.RESEARCH:
            if content_format == ContentFormat.CLINICAL_TRIAL:
                score *= 1.3
        case _:
            pass

    match result.complexity_level:
        case ComplexityLevel.BASIC:
            if content_format in (ContentFormat.INFOGRAPHIC, ContentFormat.TEXT):
                score *= 1.1
        case ComplexityLevel.ADVANCED | ComplexityLevel.EXPERT:
            if content_format in (ContentFormat.MICROSIMULATION, ContentFormat.CLINICAL_TRIAL):
                score *= 1.2
        case _:
            pass

    return min(int(score + 0.5), 100)


class ContextualRelevanceAnalyzer:
    """Scores a question's intent, complexity, urgency and content-format fit."""

    def __init__(self, llm_provider: LLMProvider, temperature: float = 0.1):
        self.llm_provider = llm_provider
        self.temperature = temperature

    def build_prompt(self, question: str, classification: Classification | None = None) -> str:
        """Build the analysis prompt, including a prior classification when given."""
        classification_block = ""
        if classification is not None and not classification.is_fallback:
            medications = ", ".join(classification.relevant_medications)
            classification_block = f"""
PREVIOUS CLASSIFICATION DATA:
Primary Category: {classification.primary_category.name} ({classification.primary_category.id})
Subcategory: {classification.subcategory.name} ({classification.subcategory.id})
Keywords: {", ".join(classification.keywords)}
{f"Relevant Medications: {medications}" if medications else ""}
"""

        return f"""
As a medical contextual analysis system for a physician-focused educational platform, analyze the following medical question:

QUESTION: "{question}"
{classification_block}
Provide a detailed contextual analysis in JSON format with the following structure:
{{
  "questionIntent": "diagnosis",
  "clinicalContext": "acute",
  "complexityLevel": "intermediate",
  "specificity": 85,
  "practicalityScore": 90,
  "urgencyScore": 70,
  "contentRelevanceScores": {{
    "text": 85,
    "video": 60,
    "interactive": 70,
    "microsimulation": 80,
    "clinical_trial": 50,
    "decision_tree": 75,
    "case_study": 65,
    "infographic": 55
  }},
  "estimatedResponseTime": 120,
  "keyContextualFactors": ["factor1", "factor2", "factor3"],
  "targetSpecialties": ["specialty1", "specialty2"],
  "detectedPatientDemographics": {{
    "age": "65+",
    "gender": "female",
    "riskFactors": ["hypertension", "diabetes"]
  }}
}}

Allowed values:
- questionIntent: {_choices(QuestionIntent)}
- clinicalContext: {_choices(ClinicalContext)}
- complexityLevel: {_choices(ComplexityLevel)}
- contentRelevanceScores keys: {_choices(ContentFormat)}

Instructions:
1. Carefully analyze the question's intent, clinical context, and complexity level
2. specificity, practicalityScore, urgencyScore and every content relevance score are on a 0-100 scale
3. Evaluate which content formats would be most effective for this type of question
4. estimatedResponseTime is the number of seconds needed to properly answer the question
5. List 3-5 key contextual factors and 1-3 target specialties
6. Include detectedPatientDemographics only if the question mentions them

Your response must be valid JSON with the exact structure shown above.
"""

    async def analyze_contextual_relevance(
        self,
        question: str,
        classification: Classification | None = None,
    ) -> ContextualRelevanceResult:
        """Analyze a question for contextual relevance.

        Args:
            question: The medical question to analyze
            classification: Optional prior classification to include in the prompt

        Returns:
            Validated contextual relevance result

        Raises:
            ContextualAnalysisError: If the provider fails or returns unusable JSON
        """
        try:
            result = await self.llm_provider.generate_structured(
                self.build_prompt(question, classification),
                temperature=self.temperature,
            )
            data = parse_json_object(result.content)
            relevance = ContextualRelevanceResult.model_validate(data)

        except Exception as e:
            logger.error(f"Error analyzing contextual relevance: {e}")
            raise ContextualAnalysisError(f"Contextual relevance analysis failed: {e}") from e

        logger.info(
            f"Contextual relevance: intent={relevance.question_intent.value}, "
            f"complexity={relevance.complexity_level.value}, "
            f"estimated {relevance.estimated_response_time:.0f}s"
        )
        return relevance
