"""Tests for experience selection."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from conftest import HER2_QUESTION

from medads.classification.models import CategoryAssignment, Classification
from medads.confidence import ConfidenceScorer
from medads.experience import (
    TRANSITION_DURATION_MS,
    DeviceCapabilities,
    ExperienceContext,
    ExperienceSelector,
    ExperienceType,
    detect_device_capabilities,
    generate_experience_options,
)
from medads.mapping import PharmaAdMapper
from medads.relevance.analyzer import ContextualAnalysisError
from medads.relevance.models import ContextualRelevanceResult
from medads.timing import TimeEstimator

FAST_DEVICE = DeviceCapabilities(is_high_performance=True, is_mobile=False)
SLOW_PHONE = DeviceCapabilities(is_high_performance=False, is_mobile=True)


def classification_with(categories, intents=None):
    return Classification(
        primary_category=CategoryAssignment(id="oncology", confidence=0.9),
        subcategory=CategoryAssignment(id="breast_cancer", confidence=0.85),
        categories=categories,
        possible_intents=intents or [],
    )


@pytest.fixture
def classifier():
    classifier = MagicMock()
    classifier.classify = AsyncMock()
    return classifier


@pytest.fixture
def analyzer():
    analyzer = MagicMock()
    analyzer.analyze_contextual_relevance = AsyncMock()
    return analyzer


@pytest.fixture
def selector(classifier, analyzer):
    return ExperienceSelector(classifier, analyzer, TimeEstimator("gpt-4o"))


class TestDeviceDetection:
    """Test device capability detection."""

    def test_mobile_user_agent(self):
        ua = "Mozilla/5.0 (iPhone; CPU iPhone OS 17_0 like Mac OS X)"

        assert detect_device_capabilities(ua).is_mobile

    def test_high_performance_hints(self):
        assert detect_device_capabilities(device_memory_gb=8).is_high_performance
        assert detect_device_capabilities(hardware_concurrency=8).is_high_performance
        assert not detect_device_capabilities(device_memory_gb=4, hardware_concurrency=4).is_high_performance

    def test_no_hints(self):
        assert detect_device_capabilities() == DeviceCapabilities(is_high_performance=False, is_mobile=False)


class TestExperienceOptions:
    """Test candidate generation."""

    def test_treatment_question(self, her2_classification):
        options = generate_experience_options(her2_classification, 12000, FAST_DEVICE)

        assert [o.type for o in options] == [ExperienceType.MICROSIMULATION, ExperienceType.STANDARD]
        assert options[-1].settings == {"adType": "sponsored_content"}

    def test_mechanism_and_diagnosis_question(self):
        options = generate_experience_options(
            classification_with(["mechanism", "diagnosis"]), 2000, SLOW_PHONE
        )

        assert [o.type for o in options] == [
            ExperienceType.KNOWLEDGE_GRAPH,
            ExperienceType.EVIDENCE_CARD,
            ExperienceType.STANDARD,
        ]
        assert options[0].settings["interactive"] is False
        assert options[1].settings["compact"] is True

    def test_no_classification(self):
        assert [o.type for o in generate_experience_options(None, None, None)] == [ExperienceType.STANDARD]


class TestScoreAndSelect:
    """Test scoring of candidates."""

    def test_best_and_fallback(self, selector, her2_classification):
        options = generate_experience_options(her2_classification, 12000, FAST_DEVICE)

        selection = selector.score_and_select(options, 12000, FAST_DEVICE)

        assert selection.selected_type == ExperienceType.MICROSIMULATION
        assert selection.fallback_type == ExperienceType.STANDARD
        assert "microsimulation scored 8" in selection.reasoning

    def test_short_wait_downgrades_microsimulation(self, selector, her2_classification):
        options = generate_experience_options(her2_classification, 1000, SLOW_PHONE)

        selection = selector.score_and_select(options, 1000, SLOW_PHONE)

        assert selection.selected_type == ExperienceType.STANDARD
        assert selection.fallback_type == ExperienceType.MICROSIMULATION
        assert any("below minimum" in reason for reason in selection.reasoning)
        assert any("device performance" in reason for reason in selection.reasoning)

    def test_ties_keep_generation_order(self, selector):
        options = generate_experience_options(
            classification_with(["mechanism", "diagnosis"]), 12000, SLOW_PHONE
        )

        selection = selector.score_and_select(options, 12000, SLOW_PHONE)

        # knowledge graph 9-2-1, evidence card 7-2, standard 5
        assert selection.selected_type == ExperienceType.KNOWLEDGE_GRAPH
        assert selection.fallback_type == ExperienceType.EVIDENCE_CARD


class TestSelectExperience:
    """Test end-to-end selection."""

    @pytest.mark.asyncio
    async def test_resolved_context_makes_no_calls(
        self, selector, classifier, analyzer, her2_classification, relevance_payload
    ):
        relevance = ContextualRelevanceResult.model_validate(relevance_payload)
        mapping = await ConfidenceScorer().enhance_with_confidence(
            PharmaAdMapper().map_to_companies(her2_classification), HER2_QUESTION
        )

        selection = await selector.select_experience(
            ExperienceContext(
                question=HER2_QUESTION,
                classification=her2_classification,
                contextual_relevance=relevance,
                estimated_wait_time_ms=12000,
                mapping=mapping,
                device_capabilities=FAST_DEVICE,
            )
        )

        classifier.classify.assert_not_called()
        analyzer.analyze_contextual_relevance.assert_not_called()
        assert selection.selected_type == ExperienceType.MICROSIMULATION
        sponsor = selection.config.settings["sponsor"]
        assert sponsor["companyId"] == "genentech"
        assert sponsor["treatmentAreaId"] == "genentech_oncology"

    @pytest.mark.asyncio
    async def test_missing_pieces_are_resolved(
        self, selector, classifier, analyzer, her2_classification, relevance_payload
    ):
        classifier.classify.return_value = her2_classification
        analyzer.analyze_contextual_relevance.return_value = ContextualRelevanceResult.model_validate(
            relevance_payload
        )

        selection = await selector.select_experience(
            ExperienceContext(question=HER2_QUESTION, user_agent="Mozilla/5.0 (Android 14)")
        )

        classifier.classify.assert_awaited_once_with(HER2_QUESTION)
        assert selection.estimated_wait_time_ms == 12000
        assert "sponsor" not in selection.config.settings

    @pytest.mark.asyncio
    async def test_analysis_failure_falls_back_to_standard(self, selector, analyzer, her2_classification):
        analyzer.analyze_contextual_relevance.side_effect = ContextualAnalysisError("bad JSON")

        selection = await selector.select_experience(
            ExperienceContext(question=HER2_QUESTION, classification=her2_classification)
        )

        assert selection.selected_type == ExperienceType.STANDARD
        assert selection.fallback_type is None
        assert "bad JSON" in selection.reasoning[0]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "classification",
        [
            Classification.fallback(),
            classification_with(["billing", "insurance"]),
            classification_with([], ["treatment_options", "mechanism_of_action"]),
        ],
    )
    async def test_topicless_classification_selects_standard(
        self, selector, classification, relevance_payload
    ):
        selection = await selector.select_experience(
            ExperienceContext(
                question="How do I bill for this visit?",
                classification=classification,
                contextual_relevance=ContextualRelevanceResult.model_validate(relevance_payload),
                estimated_wait_time_ms=12000,
                device_capabilities=FAST_DEVICE,
            )
        )

        assert selection.selected_type == ExperienceType.STANDARD


class TestTransition:
    """Test switching between experiences."""

    def test_transition_marks_previous_type(self, selector, her2_classification):
        context = ExperienceContext(
            question=HER2_QUESTION,
            classification=her2_classification,
            estimated_wait_time_ms=12000,
            device_capabilities=FAST_DEVICE,
        )

        config = selector.transition_to_experience(
            ExperienceType.STANDARD, ExperienceType.MICROSIMULATION, context
        )

        assert config.type == ExperienceType.MICROSIMULATION
        assert config.settings["isTransitioning"] is True
        assert config.settings["previousType"] == "standard"
        assert config.settings["transitionDurationMs"] == TRANSITION_DURATION_MS
        assert config.settings["interactive"] is True

    def test_same_type_is_unchanged(self, selector, her2_classification):
        context = ExperienceContext(question=HER2_QUESTION, classification=her2_classification)

        config = selector.transition_to_experience(
            ExperienceType.STANDARD, ExperienceType.STANDARD, context
        )

        assert "isTransitioning" not in config.settings

    def test_unlisted_type_gets_default_config(self, selector):
        context = ExperienceContext(question=HER2_QUESTION)

        config = selector.transition_to_experience(
            ExperienceType.STANDARD, ExperienceType.KNOWLEDGE_GRAPH, context
        )

        assert config.priority == 5
        assert config.settings["previousType"] == "standard"
