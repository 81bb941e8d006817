"""Tests for response time estimation."""

import pytest
from conftest import HER2_QUESTION

from medads.relevance.models import ContextualRelevanceResult
from medads.timing import BASE_TIME, TimeEstimator, model_factor, specialty_factor


@pytest.fixture
def estimator():
    return TimeEstimator("gpt-4o")


class TestFactorTables:
    """Test the model and specialty lookup tables."""

    def test_model_factor(self):
        assert model_factor("gpt-3.5-turbo") == 1.0
        assert model_factor("gpt-4") == 1.8
        assert model_factor("gpt-4o") == 1.3
        assert model_factor("gpt-4-turbo") == 1.5
        assert model_factor("llama3.2") == 1.4
        assert model_factor(None) == 1.4

    def test_specialty_factor(self):
        assert specialty_factor("oncology") == 1.8
        assert specialty_factor("infectious_diseases") == 1.4
        assert specialty_factor("dermatology") == 1.2
        assert specialty_factor("unknown") == 1.3
        assert specialty_factor(None) == 1.3


class TestTimeEstimator:
    """Test time estimates."""

    def test_estimate_from_question_features(self, estimator, her2_classification):
        result = estimator.estimate_time(HER2_QUESTION, her2_classification)

        assert result.complexity_score == 26
        assert result.initial_estimate == 10
        assert result.min_estimate == 7
        assert result.max_estimate == 15
        assert result.confidence_level == pytest.approx(0.7)
        assert result.detailed_factors.model_performance_factor == 1.3
        assert result.detailed_factors.specialty_difficulty_factor == pytest.approx(2.16)

    def test_estimate_from_contextual_relevance(self, estimator, relevance_payload):
        """Test the analyzed response time is used directly."""
        relevance_payload["estimatedResponseTime"] = 120
        relevance = ContextualRelevanceResult.model_validate(relevance_payload)

        result = estimator.estimate_time(HER2_QUESTION, None, relevance)

        assert result.initial_estimate == 120
        assert result.min_estimate == 96
        assert result.max_estimate == 156
        assert result.complexity_score == 80
        assert result.confidence_level == pytest.approx(0.8)

    def test_zero_response_time_falls_back(self, estimator, relevance_payload, her2_classification):
        relevance_payload["estimatedResponseTime"] = 0
        relevance = ContextualRelevanceResult.model_validate(relevance_payload)

        result = estimator.estimate_time(HER2_QUESTION, her2_classification, relevance)

        assert result.initial_estimate == 10

    def test_short_response_time_is_floored(self, estimator, relevance_payload):
        relevance_payload["estimatedResponseTime"] = 1
        relevance = ContextualRelevanceResult.model_validate(relevance_payload)

        result = estimator.estimate_time("Dose?", None, relevance)

        assert result.initial_estimate == BASE_TIME
        assert result.min_estimate == BASE_TIME
        assert result.max_estimate == 3

    @pytest.mark.parametrize(
        "question",
        [
            "?",
            "Dose?",
            HER2_QUESTION,
            "Explain the mechanism and pathophysiology of a rare, complicated autoimmune "
            "disorder and compare the evidence for how and why treatments differ? " * 4,
        ],
    )
    def test_estimates_are_ordered(self, question):
        for model in (None, "gpt-3.5-turbo", "gpt-4"):
            result = TimeEstimator(model).estimate_time(question)

            assert result.min_estimate <= result.initial_estimate <= result.max_estimate
            assert result.initial_estimate >= BASE_TIME
            assert 0 <= result.complexity_score <= 100

    def test_complexity_is_capped(self, estimator):
        question = "Why and how? " * 100

        assert estimator.calculate_complexity_score(question) == 100
