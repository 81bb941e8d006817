"""Experience selection models."""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import Field

from medads.classification.models import Classification
from medads.confidence.models import EnhancedMappingResult
from medads.relevance.models import ContextualRelevanceResult
from medads.schema import WireModel


class ExperienceType(str, Enum):
    """Interactive presentations shown while an answer streams in."""

    MICROSIMULATION = "microsimulation"
    KNOWLEDGE_GRAPH = "knowledge_graph"
    EVIDENCE_CARD = "evidence_card"
    STANDARD = "standard"


class DeviceCapabilities(WireModel):
    is_high_performance: bool = False
    is_mobile: bool = False


class ExperienceConfig(WireModel):
    """A candidate experience with its wait-time window and presentation settings."""

    type: ExperienceType
    priority: int
    min_wait_time_ms: int | None = None
    max_wait_time_ms: int | None = None
    settings: dict[str, Any] = Field(default_factory=dict)


class ExperienceSelection(WireModel):
    """The chosen experience, an optional fallback and why they were chosen."""

    selected_type: ExperienceType
    fallback_type: ExperienceType | None = None
    config: ExperienceConfig
    reasoning: list[str] = Field(default_factory=list)
    estimated_wait_time_ms: int | None = None


@dataclass
class ExperienceContext:
    """Everything known about a question when choosing its experience.

    Missing classification, contextual relevance, wait time and device
    capabilities are resolved by the selector.
    """

    question: str
    classification: Classification | None = None
    contextual_relevance: ContextualRelevanceResult | None = None
    estimated_wait_time_ms: int | None = None
    mapping: EnhancedMappingResult | None = None
    device_capabilities: DeviceCapabilities | None = None
    user_agent: str | None = None
    device_memory_gb: float | None = None
    hardware_concurrency: int | None = None
