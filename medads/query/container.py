"""Explicit wiring of the pipeline's services."""

import logging
from dataclasses import dataclass

from medads.classification.classifier import MedicalQuestionClassifier
from medads.config import Settings, get_settings
from medads.confidence.models import ConfidenceScoringOptions
from medads.confidence.scorer import ConfidenceScorer
from medads.confidence.similarity import EmbeddingSimilarity, NeutralSimilarity, SimilarityStrategy
from medads.experience.selector import ExperienceSelector
from medads.llm.base import LLMProvider
from medads.llm.factory import create_embedding_provider, create_llm_provider
from medads.mapping.catalog import load_catalog
from medads.mapping.mapper import PharmaAdMapper
from medads.mapping.models import MappingOptions
from medads.relevance.adaptation import ContentAdaptationService
from medads.relevance.analyzer import ContextualRelevanceAnalyzer
from medads.timing.estimator import TimeEstimator

logger = logging.getLogger(__name__)


@dataclass
class ServiceContainer:
    """Holds one instance of every service a request needs."""

    settings: Settings
    llm_provider: LLMProvider
    classifier: MedicalQuestionClassifier
    mapper: PharmaAdMapper
    scorer: ConfidenceScorer
    analyzer: ContextualRelevanceAnalyzer
    adaptation: ContentAdaptationService
    estimator: TimeEstimator
    selector: ExperienceSelector

    @classmethod
    def from_settings(
        cls,
        settings: Settings | None = None,
        llm_provider: LLMProvider | None = None,
        similarity: SimilarityStrategy | None = None,
    ) -> "ServiceContainer":
        """Build every service from configuration.

        Args:
            settings: Settings to build from, defaults to the global settings
            llm_provider: Provider override, otherwise created from settings
            similarity: Similarity strategy override

        Raises:
            ValueError: If the configured LLM provider cannot be created
        """
        settings = settings or get_settings()
        llm_provider = llm_provider or create_llm_provider(settings=settings)
        if similarity is None:
            similarity = _build_similarity(settings)

        classifier = MedicalQuestionClassifier(llm_provider)
        analyzer = ContextualRelevanceAnalyzer(llm_provider)
        estimator = TimeEstimator(settings.chat_model)

        container = cls(
            settings=settings,
            llm_provider=llm_provider,
            classifier=classifier,
            mapper=PharmaAdMapper(
                load_catalog(settings.catalog_path),
                MappingOptions(min_keyword_length=settings.mapping_min_keyword_length),
            ),
            scorer=ConfidenceScorer(similarity, ConfidenceScoringOptions.from_settings(settings)),
            analyzer=analyzer,
            adaptation=ContentAdaptationService(),
            estimator=estimator,
            selector=ExperienceSelector(classifier, analyzer, estimator),
        )
        logger.info(
            f"Services ready (provider={settings.llm_provider.value}, "
            f"similarity={type(similarity).__name__})"
        )
        return container


def _build_similarity(settings: Settings) -> SimilarityStrategy:
    if not settings.enable_semantic_analysis:
        return NeutralSimilarity()
    try:
        return EmbeddingSimilarity(create_embedding_provider(settings=settings))
    except ValueError as e:
        logger.warning(f"Semantic analysis disabled, no embedding provider: {e}")
        return NeutralSimilarity()
