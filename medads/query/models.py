"""Question pipeline models and data structures."""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from pydantic import Field

from medads.classification.models import Classification
from medads.confidence.models import EnhancedMappingResult
from medads.experience.models import ExperienceSelection
from medads.llm.base import Message
from medads.relevance.adaptation import ContentAdaptationParams
from medads.relevance.models import ContextualRelevanceResult
from medads.schema import WireModel
from medads.timing.models import TimeEstimationResult


@dataclass
class QueryContext:
    """Request-scoped information that travels with a question."""

    history: list[Message] | None = None
    user_agent: str | None = None
    device_memory_gb: float | None = None
    hardware_concurrency: int | None = None
    user_id: str | None = None
    timestamp: str | None = None


@dataclass
class QuestionAnalysis:
    """Everything decided about a question before its answer is generated."""

    classification: Classification
    mapping: EnhancedMappingResult
    time_estimate: TimeEstimationResult
    experience: ExperienceSelection
    contextual_relevance: ContextualRelevanceResult | None = None
    adaptation: ContentAdaptationParams | None = None


class PipelineResult(WireModel):
    """Complete result of processing one question."""

    question: str
    answer: str
    classification: Classification
    mapping: EnhancedMappingResult
    contextual_relevance: ContextualRelevanceResult | None = None
    adaptation: ContentAdaptationParams | None = None
    time_estimate: TimeEstimationResult
    experience: ExperienceSelection
    show_sponsored_content: bool = False
    processing_time: float = 0.0
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class StreamEvent(WireModel):
    """One message of the streaming answer endpoint."""

    event: str
    data: dict[str, Any] = Field(default_factory=dict)

    def to_ndjson(self) -> bytes:
        """Encode as a single newline-terminated JSON line."""
        return (self.model_dump_json(by_alias=True) + "\n").encode("utf-8")
