"""Tests for contextual relevance analysis and content adaptation."""

import pytest
from conftest import HER2_QUESTION, structured_response
from pydantic import ValidationError

from medads.classification.models import Classification
from medads.relevance import (
    ComplexityLevel,
    ContentAdaptationOptions,
    ContentAdaptationService,
    ContentDepth,
    ContentFormat,
    ContentLength,
    ContextualAnalysisError,
    ContextualRelevanceAnalyzer,
    ContextualRelevanceResult,
    InteractiveComplexity,
    QuestionIntent,
    calculate_content_relevance,
)


class TestContextualRelevanceResult:
    """Test validation of analysis results."""

    def test_parses_camel_case_payload(self, relevance_payload):
        result = ContextualRelevanceResult.model_validate(relevance_payload)

        assert result.question_intent == QuestionIntent.TREATMENT
        assert result.complexity_level == ComplexityLevel.ADVANCED
        assert result.format_score(ContentFormat.CLINICAL_TRIAL) == 90
        assert result.detected_patient_demographics is None

    def test_scores_are_clamped(self, relevance_payload):
        relevance_payload["specificity"] = 150
        relevance_payload["urgencyScore"] = -5
        relevance_payload["contentRelevanceScores"]["video"] = 120

        result = ContextualRelevanceResult.model_validate(relevance_payload)

        assert result.specificity == 100
        assert result.urgency_score == 0
        assert result.format_score(ContentFormat.VIDEO) == 100

    def test_missing_format_is_rejected(self, relevance_payload):
        del relevance_payload["contentRelevanceScores"]["infographic"]

        with pytest.raises(ValidationError, match="infographic"):
            ContextualRelevanceResult.model_validate(relevance_payload)

    def test_unknown_format_is_dropped(self, relevance_payload):
        relevance_payload["contentRelevanceScores"]["podcast"] = 40

        result = ContextualRelevanceResult.model_validate(relevance_payload)

        assert set(result.content_relevance_scores) == set(ContentFormat)

    def test_negative_response_time_is_rejected(self, relevance_payload):
        relevance_payload["estimatedResponseTime"] = -1

        with pytest.raises(ValidationError):
            ContextualRelevanceResult.model_validate(relevance_payload)

    def test_non_numeric_score_is_rejected(self, relevance_payload):
        relevance_payload["practicalityScore"] = "high"

        with pytest.raises(ValidationError):
            ContextualRelevanceResult.model_validate(relevance_payload)

    def test_complexity_rank(self):
        assert ComplexityLevel.BASIC.rank < ComplexityLevel.EXPERT.rank


class TestContextualRelevanceAnalyzer:
    """Test the LLM-backed analyzer."""

    @pytest.mark.asyncio
    async def test_analyze_success(self, mock_llm, relevance_payload, her2_classification):
        mock_llm.generate_structured.return_value = structured_response(relevance_payload)
        analyzer = ContextualRelevanceAnalyzer(mock_llm)

        result = await analyzer.analyze_contextual_relevance(HER2_QUESTION, her2_classification)

        assert result.estimated_response_time == 12
        prompt = mock_llm.generate_structured.call_args[0][0]
        assert "PREVIOUS CLASSIFICATION DATA" in prompt
        assert "Relevant Medications: trastuzumab" in prompt

    def test_prompt_skips_fallback_classification(self, mock_llm):
        prompt = ContextualRelevanceAnalyzer(mock_llm).build_prompt(
            HER2_QUESTION, Classification.fallback()
        )

        assert "PREVIOUS CLASSIFICATION DATA" not in prompt
        assert HER2_QUESTION in prompt

    @pytest.mark.asyncio
    async def test_malformed_response_raises(self, mock_llm):
        mock_llm.generate_structured.return_value = structured_response("not json")

        with pytest.raises(ContextualAnalysisError):
            await ContextualRelevanceAnalyzer(mock_llm).analyze_contextual_relevance(HER2_QUESTION)

    @pytest.mark.asyncio
    async def test_provider_error_raises(self, mock_llm):
        """Test provider failures are wrapped, never swallowed."""
        mock_llm.generate_structured.side_effect = RuntimeError("timeout")

        with pytest.raises(ContextualAnalysisError, match="timeout"):
            await ContextualRelevanceAnalyzer(mock_llm).analyze_contextual_relevance(HER2_QUESTION)


class TestContentRelevance:
    """Test per-format content relevance."""

    @pytest.fixture
    def relevance(self, relevance_payload):
        return ContextualRelevanceResult.model_validate(relevance_payload)

    def test_boosts_are_capped(self, relevance):
        # 90 * 0.9 * 1.2 * 1.2 exceeds 100
        assert calculate_content_relevance(relevance, [], ContentFormat.CLINICAL_TRIAL) == 100

    def test_rounds_half_up(self, relevance):
        # 85 * 0.9 = 76.5
        assert calculate_content_relevance(relevance, [], ContentFormat.TEXT) == 77

    def test_unboosted_format(self, relevance):
        assert calculate_content_relevance(relevance, ["oncology"], ContentFormat.VIDEO) == 54


class TestContentAdaptationService:
    """Test content adaptation parameters."""

    @pytest.fixture
    def service(self):
        return ContentAdaptationService()

    def test_generate_adaptation_params(self, service, relevance_payload):
        relevance = ContextualRelevanceResult.model_validate(relevance_payload)

        params = service.generate_adaptation_params(relevance)

        assert params.depth == ContentDepth.COMPREHENSIVE
        assert params.length == ContentLength.MODERATE
        assert params.interactive_complexity == InteractiveComplexity.COMPLEX
        assert params.prioritized_formats == [
            ContentFormat.CLINICAL_TRIAL,
            ContentFormat.MICROSIMULATION,
            ContentFormat.TEXT,
        ]
        assert params.estimated_engagement_time == 144
        assert params.key_points == 10
        assert params.include_evidence
        assert not params.include_visuals
        assert params.include_clinical_cases
        assert params.primary_intent == QuestionIntent.TREATMENT

    def test_content_depth(self, service):
        assert service.determine_content_depth(ComplexityLevel.EXPERT, 0) == ContentDepth.EXPERT
        assert service.determine_content_depth(ComplexityLevel.INTERMEDIATE, 75) == ContentDepth.DETAILED
        assert service.determine_content_depth(ComplexityLevel.BASIC, 50) == ContentDepth.BASIC

    def test_length_from_response_time(self, service):
        assert service.determine_content_length(30, QuestionIntent.PREVENTION) == ContentLength.BRIEF
        assert service.determine_content_length(200, QuestionIntent.PREVENTION) == ContentLength.DETAILED
        assert service.determine_content_length(400, QuestionIntent.PREVENTION) == ContentLength.COMPREHENSIVE

    def test_length_intent_overrides(self, service):
        """Test intent adjustments take precedence over response time."""
        assert service.determine_content_length(150, QuestionIntent.DIAGNOSIS) == ContentLength.COMPREHENSIVE
        assert service.determine_content_length(100, QuestionIntent.DIAGNOSIS) == ContentLength.MODERATE
        assert service.determine_content_length(100, QuestionIntent.MECHANISM) == ContentLength.DETAILED
        assert service.determine_content_length(30, QuestionIntent.TREATMENT) == ContentLength.MODERATE

    def test_length_without_dynamic_adjustment(self):
        service = ContentAdaptationService(ContentAdaptationOptions(enable_dynamic_length=False))

        assert service.determine_content_length(30, QuestionIntent.TREATMENT) == ContentLength.BRIEF

    def test_interactive_complexity(self, service):
        assert (
            service.determine_interactive_complexity(ComplexityLevel.BASIC, QuestionIntent.DIAGNOSIS)
            == InteractiveComplexity.MODERATE
        )
        assert (
            service.determine_interactive_complexity(ComplexityLevel.ADVANCED, QuestionIntent.MECHANISM)
            == InteractiveComplexity.ADVANCED
        )

    def test_format_prioritization_without_intent(self, relevance_payload):
        service = ContentAdaptationService(
            ContentAdaptationOptions(enable_intent_based_prioritization=False, max_prioritized_formats=2)
        )
        relevance = ContextualRelevanceResult.model_validate(relevance_payload)

        assert service.prioritize_content_formats(relevance) == [
            ContentFormat.CLINICAL_TRIAL,
            ContentFormat.TEXT,
        ]
