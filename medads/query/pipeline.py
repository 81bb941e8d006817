"""Question pipeline: classification, sponsor decisions and answer generation."""

import asyncio
import logging
import time
from collections.abc import AsyncIterator, Callable
from typing import Any

from medads.classification.models import Classification
from medads.confidence.models import EnhancedMappingResult
from medads.confidence.scorer import should_show_ad
from medads.experience.models import ExperienceContext
from medads.query.container import ServiceContainer
from medads.query.models import PipelineResult, QueryContext, QuestionAnalysis, StreamEvent
from medads.relevance.adaptation import ContentAdaptationParams
from medads.relevance.analyzer import ContextualAnalysisError
from medads.relevance.models import ContextualRelevanceResult
from medads.timing.progress import ProgressSubscription, ProgressTracker

logger = logging.getLogger(__name__)

_DONE = object()


def validate_question(question: str | None) -> str:
    """Return the trimmed question.

    Raises:
        ValueError: If the question is missing or blank
    """
    if not question or not question.strip():
        raise ValueError("Question is required")
    return question.strip()


def build_answer_prompt(question: str, adaptation: ContentAdaptationParams | None = None) -> str:
    """Create the prompt used to answer a medical question."""
    guidance = ""
    if adaptation is not None:
        guidance = (
            f"\nAudience level: {adaptation.educational_level.value}"
            f"\nAnswer depth: {adaptation.depth.value}, length: {adaptation.length.value}"
            f"\nCover about {adaptation.key_points} key points"
        )
        if adaptation.include_evidence:
            guidance += "\nReference the supporting clinical evidence"

    return f"""You are a medical information assistant for healthcare professionals.
Answer the question accurately and concisely, based on current clinical guidelines.
{guidance}

Question: {question}

Instructions:
- Lead with the direct answer
- Use bullet points for options or steps
- State uncertainty or gaps in evidence briefly
- Do not mention sponsors or specific companies

Answer:"""


class QuestionPipeline:
    """Runs a question through every service in the container."""

    def __init__(
        self,
        container: ServiceContainer,
        tracker_factory: Callable[[], ProgressTracker] = ProgressTracker,
    ):
        """Initialize the pipeline.

        Args:
            container: Services used for each request
            tracker_factory: Creates the per-request progress tracker
        """
        self.container = container
        self.tracker_factory = tracker_factory

    async def analyze(
        self,
        question: str,
        context: QueryContext | None = None,
        classification: Classification | None = None,
    ) -> QuestionAnalysis:
        """Decide sponsorship, timing and experience for a question.

        Contextual analysis runs concurrently with mapping and confidence
        scoring. If it fails the STANDARD experience is used.
        """
        context = context or QueryContext()
        if classification is None:
            classification = await self.container.classifier.classify(question, context.history)

        relevance, mapping = await asyncio.gather(
            self._analyze_relevance(question, classification),
            self._score_sponsors(question, classification),
        )

        time_estimate = self.container.estimator.estimate_time(question, classification, relevance)
        wait_time_ms = int(time_estimate.initial_estimate * 1000)

        if relevance is None:
            experience = self.container.selector.standard_selection(
                "Contextual analysis unavailable; using standard experience",
                mapping,
                wait_time_ms,
            )
            adaptation = None
        else:
            experience = await self.container.selector.select_experience(
                ExperienceContext(
                    question=question,
                    classification=classification,
                    contextual_relevance=relevance,
                    estimated_wait_time_ms=wait_time_ms,
                    mapping=mapping,
                    user_agent=context.user_agent,
                    device_memory_gb=context.device_memory_gb,
                    hardware_concurrency=context.hardware_concurrency,
                )
            )
            adaptation = self.container.adaptation.generate_adaptation_params(relevance)

        return QuestionAnalysis(
            classification=classification,
            mapping=mapping,
            time_estimate=time_estimate,
            experience=experience,
            contextual_relevance=relevance,
            adaptation=adaptation,
        )

    async def process(self, question: str, context: QueryContext | None = None) -> PipelineResult:
        """Process a question end to end.

        Raises:
            ValueError: If the question is blank
            RuntimeError: If the LLM provider fails to answer
        """
        start_time = time.time()
        question = validate_question(question)
        context = context or QueryContext()

        logger.info(f"Processing question: {question}")

        analysis = await self.analyze(question, context)
        answer = await self.container.llm_provider.generate_response(
            prompt=build_answer_prompt(question, analysis.adaptation),
            history=context.history,
        )

        processing_time = time.time() - start_time
        show_sponsored = should_show_ad(analysis.mapping)
        logger.info(
            f"Question processed in {processing_time:.2f}s "
            f"({len(analysis.mapping.matches)} sponsor matches, show={show_sponsored})"
        )

        return PipelineResult(
            question=question,
            answer=answer.content,
            classification=analysis.classification,
            mapping=analysis.mapping,
            contextual_relevance=analysis.contextual_relevance,
            adaptation=analysis.adaptation,
            time_estimate=analysis.time_estimate,
            experience=analysis.experience,
            show_sponsored_content=show_sponsored,
            processing_time=processing_time,
        )

    async def stream_answer(
        self,
        question: str,
        context: QueryContext | None = None,
    ) -> AsyncIterator[StreamEvent]:
        """Stream a question's processing as events.

        Events arrive in the order ``classification``, ``contextual`` (when
        available), ``timeEstimate``, ``experience``, interleaved ``progress``
        and ``chunk``, then ``complete``. Any failure ends the stream with an
        ``error`` event.
        """
        start_time = time.time()
        context = context or QueryContext()
        tracker = self.tracker_factory()
        tasks: list[asyncio.Task] = []

        try:
            question = validate_question(question)

            classification = await self.container.classifier.classify(question, context.history)
            yield StreamEvent(event="classification", data=classification.to_wire())

            analysis = await self.analyze(question, context, classification)
            if analysis.contextual_relevance is not None:
                yield StreamEvent(event="contextual", data=analysis.contextual_relevance.to_wire())
            yield StreamEvent(event="timeEstimate", data=analysis.time_estimate.to_wire())
            yield StreamEvent(event="experience", data=analysis.experience.to_wire())

            tracker.start_progress_tracking(analysis.time_estimate.initial_estimate)
            queue: asyncio.Queue = asyncio.Queue()
            tasks = [
                asyncio.create_task(self._pump_progress(tracker.subscribe(), queue)),
                asyncio.create_task(
                    self._pump_chunks(question, analysis.adaptation, context, tracker, queue)
                ),
            ]

            parts: list[str] = []
            finished = 0
            while finished < len(tasks):
                kind, payload = await queue.get()
                match kind:
                    case "progress":
                        yield StreamEvent(event="progress", data=payload.to_wire())
                    case "chunk":
                        parts.append(payload)
                        yield StreamEvent(
                            event="chunk",
                            data={"content": payload, "responseText": "".join(parts)},
                        )
                    case "error":
                        raise payload
                    case _:
                        finished += 1

            yield StreamEvent(
                event="complete",
                data=self._complete_payload("".join(parts), analysis.mapping, start_time),
            )

        except Exception as e:
            logger.error(f"Streaming answer failed: {e}")
            yield StreamEvent(event="error", data={"message": str(e)})

        finally:
            tracker.stop_progress_tracking()
            for task in tasks:
                task.cancel()

    async def _analyze_relevance(
        self, question: str, classification: Classification
    ) -> ContextualRelevanceResult | None:
        try:
            return await self.container.analyzer.analyze_contextual_relevance(question, classification)
        except ContextualAnalysisError as e:
            logger.warning(f"Continuing without contextual relevance: {e}")
            return None

    async def _score_sponsors(self, question: str, classification: Classification) -> EnhancedMappingResult:
        mapping = self.container.mapper.map_to_companies(classification)
        return await self.container.scorer.enhance_with_confidence(mapping, question)

    async def _pump_progress(self, subscription: ProgressSubscription, queue: asyncio.Queue) -> None:
        try:
            async for event in subscription:
                await queue.put(("progress", event))
        finally:
            await queue.put((_DONE, None))

    async def _pump_chunks(
        self,
        question: str,
        adaptation: ContentAdaptationParams | None,
        context: QueryContext,
        tracker: ProgressTracker,
        queue: asyncio.Queue,
    ) -> None:
        try:
            async for delta in self.container.llm_provider.stream_response(
                build_answer_prompt(question, adaptation), history=context.history
            ):
                await queue.put(("chunk", delta))
            tracker.complete_progress()
        except Exception as e:
            await queue.put(("error", e))
        finally:
            await queue.put((_DONE, None))

    def _complete_payload(
        self, response_text: str, mapping: EnhancedMappingResult, start_time: float
    ) -> dict[str, Any]:
        processing_time = time.time() - start_time
        logger.info(f"Streamed answer in {processing_time:.2f}s")
        return {
            "responseText": response_text,
            "showSponsoredContent": should_show_ad(mapping),
            "mapping": mapping.to_wire(),
            "processingTime": processing_time,
        }
