"""Shared fixtures for the medads test suite."""

import json
from unittest.mock import AsyncMock, MagicMock

import pytest

from medads.classification.models import CategoryAssignment, Classification
from medads.llm.base import LLMProvider, ResponseResult

HER2_QUESTION = "What are the latest treatment options for HER2+ metastatic breast cancer?"
VAGUE_QUESTION = "What are common side effects?"

RELEVANCE_PAYLOAD = {
    "questionIntent": "treatment",
    "clinicalContext": "chronic",
    "complexityLevel": "advanced",
    "specificity": 85,
    "practicalityScore": 90,
    "urgencyScore": 40,
    "contentRelevanceScores": {
        "text": 85,
        "video": 60,
        "interactive": 70,
        "microsimulation": 80,
        "clinical_trial": 90,
        "decision_tree": 75,
        "case_study": 65,
        "infographic": 55,
    },
    "estimatedResponseTime": 12,
    "keyContextualFactors": ["HER2 status", "metastatic disease"],
    "targetSpecialties": ["oncology"],
}


@pytest.fixture
def her2_classification():
    """Classification of the HER2+ breast cancer treatment question."""
    return Classification(
        primary_category=CategoryAssignment(id="oncology", name="Oncology", confidence=0.9),
        subcategory=CategoryAssignment(id="breast_cancer", name="Breast Cancer", confidence=0.85),
        keywords=["HER2", "metastatic breast cancer", "treatment options"],
        relevant_medications=["trastuzumab"],
        categories=["treatment", "medication"],
    )


@pytest.fixture
def vague_classification():
    """Low-confidence classification of a question with no clear topic."""
    return Classification(
        primary_category=CategoryAssignment(id="dermatology", name="Dermatology", confidence=0.45),
        subcategory=CategoryAssignment(id="acne", name="Acne", confidence=0.45),
        keywords=["side effects"],
    )


@pytest.fixture
def relevance_payload():
    return json.loads(json.dumps(RELEVANCE_PAYLOAD))


def structured_response(payload) -> ResponseResult:
    """Wrap a payload as a structured-output provider response."""
    content = payload if isinstance(payload, str) else json.dumps(payload)
    return ResponseResult(content=content, model="test-model")


@pytest.fixture
def mock_llm():
    """LLM provider double with async methods and a two-chunk stream."""
    provider = MagicMock(spec=LLMProvider)
    provider.generate_structured = AsyncMock()
    provider.generate_response = AsyncMock(
        return_value=ResponseResult(content="Trastuzumab-based regimens remain first line.", model="test-model")
    )
    provider.generate_embedding = AsyncMock()
    provider.health_check = AsyncMock(return_value=True)

    async def stream_response(prompt, history=None):
        for delta in ("Trastuzumab-based ", "regimens remain first line."):
            yield delta

    provider.stream_response = stream_response
    return provider
