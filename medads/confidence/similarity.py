"""Semantic similarity strategies for confidence scoring."""

import asyncio
import logging
import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from medads.llm.base import LLMProvider
from medads.mapping.models import TreatmentArea

logger = logging.getLogger(__name__)

NEUTRAL_SIMILARITY = 0.5


def cosine_similarity(vec_a: list[float], vec_b: list[float]) -> float:
    """Cosine similarity of two vectors.

    Raises:
        ValueError: If the vectors have different dimensions
    """
    if len(vec_a) != len(vec_b):
        raise ValueError(
            f"Vectors must have the same dimensions ({len(vec_a)} != {len(vec_b)})"
        )

    dot_product = sum(a * b for a, b in zip(vec_a, vec_b))
    norm_a = math.sqrt(sum(a * a for a in vec_a))
    norm_b = math.sqrt(sum(b * b for b in vec_b))

    if norm_a == 0 or norm_b == 0:
        return 0.0

    return dot_product / (norm_a * norm_b)


def treatment_area_text(area: TreatmentArea) -> str:
    """Text embedded to represent a treatment area."""
    return " ".join(
        [
            area.category,
            " ".join(area.subcategories),
            " ".join(area.keywords),
            " ".join(area.flagship_medications),
        ]
    )


@dataclass
class SimilarityScores:
    """Per-treatment-area similarity to the question."""

    by_area: dict[str, float] = field(default_factory=dict)
    question_embedding: list[float] | None = None

    def get(self, area_id: str) -> float:
        """Similarity for an area, neutral when it was not scored."""
        return self.by_area.get(area_id, NEUTRAL_SIMILARITY)


class SimilarityStrategy(ABC):
    """Scores how close a question is to a set of treatment areas."""

    @abstractmethod
    async def score(self, question: str, areas: list[TreatmentArea]) -> SimilarityScores:
        """Score the question against each area.

        Implementations must not raise for upstream failures; unscored areas
        read as neutral.
        """
        pass


class NeutralSimilarity(SimilarityStrategy):
    """Always neutral, for deployments without an embeddings service."""

    async def score(self, question: str, areas: list[TreatmentArea]) -> SimilarityScores:
        return SimilarityScores()


class EmbeddingSimilarity(SimilarityStrategy):
    """Cosine similarity between embeddings of the question and each area."""

    def __init__(self, provider: LLMProvider):
        self.provider = provider

    async def score(self, question: str, areas: list[TreatmentArea]) -> SimilarityScores:
        unique_areas = list({area.id: area for area in areas}.values())

        try:
            embeddings = await asyncio.gather(
                self.provider.generate_embedding(question),
                *(self.provider.generate_embedding(treatment_area_text(a)) for a in unique_areas),
            )
        except Exception as e:
            logger.warning(f"Error generating embeddings for semantic analysis: {e}")
            return SimilarityScores()

        question_embedding = embeddings[0].embedding
        by_area = {}
        for area, result in zip(unique_areas, embeddings[1:]):
            similarity = cosine_similarity(question_embedding, result.embedding)
            by_area[area.id] = max(0.0, min(1.0, similarity))

        logger.debug(f"Scored semantic similarity for {len(by_area)} treatment areas")
        return SimilarityScores(by_area=by_area, question_embedding=question_embedding)
