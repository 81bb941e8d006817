"""Chooses the interactive experience shown while an answer is generated."""

import logging
from dataclasses import replace
from typing import Any

from medads.classification.classifier import MedicalQuestionClassifier
from medads.classification.models import Classification
from medads.confidence.models import EnhancedMappingResult
from medads.confidence.scorer import should_show_ad
from medads.experience.device import detect_device_capabilities
from medads.experience.models import (
    DeviceCapabilities,
    ExperienceConfig,
    ExperienceContext,
    ExperienceSelection,
    ExperienceType,
)
from medads.relevance.analyzer import ContextualRelevanceAnalyzer
from medads.timing.estimator import TimeEstimator

logger = logging.getLogger(__name__)

TRANSITION_DURATION_MS = 300
SCORE_FLOOR = -1

TREATMENT_TERMS = ("treatment", "medication")
MECHANISM_TERMS = ("mechanism", "pathophysiology", "relationship")
DIAGNOSIS_TERMS = ("diagnosis", "symptoms", "evidence")


def _mentions(terms: list[str], needles: tuple[str, ...]) -> bool:
    return any(needle in term for term in terms for needle in needles)


def standard_config() -> ExperienceConfig:
    return ExperienceConfig(
        type=ExperienceType.STANDARD,
        priority=5,
        settings={"adType": "sponsored_content"},
    )


def generate_experience_options(
    classification: Classification | None,
    wait_time_ms: int | None,
    device: DeviceCapabilities | None,
) -> list[ExperienceConfig]:
    """Candidate experiences for a question, STANDARD always last."""
    terms = classification.topic_terms() if classification else []
    options = []

    if _mentions(terms, TREATMENT_TERMS):
        options.append(
            ExperienceConfig(
                type=ExperienceType.MICROSIMULATION,
                priority=8,
                min_wait_time_ms=3000,
                settings={"interactive": True, "showDecisionTree": True},
            )
        )

    if _mentions(terms, MECHANISM_TERMS):
        options.append(
            ExperienceConfig(
                type=ExperienceType.KNOWLEDGE_GRAPH,
                priority=9,
                min_wait_time_ms=2000,
                settings={
                    "interactive": device.is_high_performance if device else True,
                    "focusOnRelationships": True,
                },
            )
        )

    if _mentions(terms, DIAGNOSIS_TERMS):
        options.append(
            ExperienceConfig(
                type=ExperienceType.EVIDENCE_CARD,
                priority=7,
                max_wait_time_ms=5000,
                settings={
                    "compact": wait_time_ms is not None and wait_time_ms < 3000,
                    "focusOnEvidence": True,
                },
            )
        )

    options.append(standard_config())
    return options


def _sponsor_settings(mapping: EnhancedMappingResult | None) -> dict[str, Any] | None:
    if mapping is None or mapping.top_match is None or not should_show_ad(mapping):
        return None
    top = mapping.top_match
    return {
        "companyId": top.company.id,
        "companyName": top.company.name,
        "treatmentAreaId": top.treatment_area.id,
        "confidence": top.confidence_score,
    }


class ExperienceSelector:
    """Scores candidate experiences against wait time and device constraints."""

    def __init__(
        self,
        classifier: MedicalQuestionClassifier,
        analyzer: ContextualRelevanceAnalyzer,
        estimator: TimeEstimator,
    ):
        self.classifier = classifier
        self.analyzer = analyzer
        self.estimator = estimator

    async def resolve_context(self, context: ExperienceContext) -> ExperienceContext:
        """Fill in whatever the context does not already carry.

        Raises:
            ContextualAnalysisError: If contextual relevance cannot be computed
        """
        classification = context.classification
        if classification is None:
            classification = await self.classifier.classify(context.question)

        relevance = context.contextual_relevance
        if relevance is None:
            relevance = await self.analyzer.analyze_contextual_relevance(
                context.question, classification
            )

        wait_time_ms = context.estimated_wait_time_ms
        if wait_time_ms is None:
            estimate = self.estimator.estimate_time(context.question, classification, relevance)
            wait_time_ms = int(estimate.initial_estimate * 1000)

        device = context.device_capabilities or detect_device_capabilities(
            context.user_agent, context.device_memory_gb, context.hardware_concurrency
        )

        return replace(
            context,
            classification=classification,
            contextual_relevance=relevance,
            estimated_wait_time_ms=wait_time_ms,
            device_capabilities=device,
        )

    async def select_experience(self, context: ExperienceContext) -> ExperienceSelection:
        """Select the experience for a question.

        Never raises for upstream failures: if the context cannot be resolved
        the STANDARD experience is returned with the failure in its reasoning.
        """
        try:
            resolved = await self.resolve_context(context)
        except Exception as e:
            logger.warning(f"Falling back to standard experience: {e}")
            return self.standard_selection(
                f"Context resolution failed ({e}); using standard experience",
                context.mapping,
                context.estimated_wait_time_ms,
            )

        options = generate_experience_options(
            resolved.classification,
            resolved.estimated_wait_time_ms,
            resolved.device_capabilities,
        )
        selection = self.score_and_select(
            options, resolved.estimated_wait_time_ms, resolved.device_capabilities
        )
        self._attach_sponsor(selection.config, resolved.mapping)

        logger.info(
            f"Selected {selection.selected_type.value} experience"
            f" (fallback {selection.fallback_type.value if selection.fallback_type else 'none'})"
        )
        return selection

    def standard_selection(
        self,
        reason: str,
        mapping: EnhancedMappingResult | None = None,
        wait_time_ms: int | None = None,
    ) -> ExperienceSelection:
        """The STANDARD experience, used when nothing better can be chosen."""
        config = standard_config()
        self._attach_sponsor(config, mapping)
        return ExperienceSelection(
            selected_type=ExperienceType.STANDARD,
            config=config,
            reasoning=[reason],
            estimated_wait_time_ms=wait_time_ms,
        )

    def score_and_select(
        self,
        options: list[ExperienceConfig],
        wait_time_ms: int | None,
        device: DeviceCapabilities | None,
    ) -> ExperienceSelection:
        """Score candidates and pick the best plus a fallback."""
        reasoning: list[str] = []
        scored: list[tuple[int, ExperienceConfig]] = []

        for option in options:
            name = option.type.value
            score = option.priority

            if wait_time_ms is not None:
                if option.min_wait_time_ms is not None and wait_time_ms < option.min_wait_time_ms:
                    score -= 3
                    reasoning.append(
                        f"{name} downgraded: wait time {wait_time_ms}ms below minimum "
                        f"{option.min_wait_time_ms}ms"
                    )
                if option.max_wait_time_ms is not None and wait_time_ms > option.max_wait_time_ms:
                    score -= 2
                    reasoning.append(
                        f"{name} downgraded: wait time {wait_time_ms}ms above maximum "
                        f"{option.max_wait_time_ms}ms"
                    )

            if device is not None:
                if not device.is_high_performance and option.type in (
                    ExperienceType.MICROSIMULATION,
                    ExperienceType.KNOWLEDGE_GRAPH,
                ):
                    score -= 2
                    reasoning.append(f"{name} downgraded: device performance not optimal")
                if device.is_mobile and option.type == ExperienceType.KNOWLEDGE_GRAPH:
                    score -= 1
                    reasoning.append(f"{name} slightly downgraded: mobile device has smaller screen")

            reasoning.append(f"{name} scored {score}")
            scored.append((score, option))

        # sorted() is stable, so ties keep generation order
        ranked = sorted(
            (entry for entry in scored if entry[0] > SCORE_FLOOR),
            key=lambda entry: entry[0],
            reverse=True,
        )

        if not ranked:
            reasoning.append("Defaulted to standard ad experience as no options were viable")
            config = standard_config()
            return ExperienceSelection(
                selected_type=config.type,
                config=config,
                reasoning=reasoning,
                estimated_wait_time_ms=wait_time_ms,
            )

        best_score, best = ranked[0]
        reasoning.append(f"{best.type.value} selected as best option with score {best_score}")

        fallback = None
        if len(ranked) > 1:
            fallback_score, fallback = ranked[1]
            reasoning.append(
                f"{fallback.type.value} selected as fallback option with score {fallback_score}"
            )

        return ExperienceSelection(
            selected_type=best.type,
            fallback_type=fallback.type if fallback else None,
            config=best,
            reasoning=reasoning,
            estimated_wait_time_ms=wait_time_ms,
        )

    def transition_to_experience(
        self,
        current_type: ExperienceType,
        new_type: ExperienceType,
        context: ExperienceContext,
    ) -> ExperienceConfig:
        """Config for switching to ``new_type``.

        When the type changes, settings carry ``isTransitioning`` and
        ``previousType`` for the presentation layer's transition window.
        """
        options = generate_experience_options(
            context.classification, context.estimated_wait_time_ms, context.device_capabilities
        )
        config = next((option for option in options if option.type == new_type), None)
        if config is None:
            config = ExperienceConfig(type=new_type, priority=5)

        if current_type == new_type:
            return config

        return config.model_copy(
            update={
                "settings": {
                    **config.settings,
                    "isTransitioning": True,
                    "previousType": current_type.value,
                    "transitionDurationMs": TRANSITION_DURATION_MS,
                }
            }
        )

    def _attach_sponsor(self, config: ExperienceConfig, mapping: EnhancedMappingResult | None) -> None:
        sponsor = _sponsor_settings(mapping)
        if sponsor is not None:
            config.settings["sponsor"] = sponsor
