"""Time estimation and progress models."""

from enum import Enum

from medads.schema import WireModel

BASE_TIME = 2


class EstimationFactors(WireModel):
    """Components that went into a time estimate."""

    question_length_factor: float
    topic_complexity_factor: float
    specialty_difficulty_factor: float
    model_performance_factor: float


class TimeEstimationResult(WireModel):
    """Predicted response latency in seconds, with ``min <= initial <= max``."""

    initial_estimate: float
    min_estimate: float
    max_estimate: float
    confidence_level: float
    complexity_score: int
    detailed_factors: EstimationFactors


class ProgressStage(str, Enum):
    ANALYZING = "analyzing"
    GENERATING = "generating"
    REFINING = "refining"


class ProgressEvent(WireModel):
    """One simulated progress update."""

    progress: int
    estimated_time_remaining: int
    stage: ProgressStage
