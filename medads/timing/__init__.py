"""Time estimation and progress tracking module."""

from .estimator import TimeEstimator, model_factor, specialty_factor
from .models import (
    BASE_TIME,
    EstimationFactors,
    ProgressEvent,
    ProgressStage,
    TimeEstimationResult,
)
from .progress import ProgressSubscription, ProgressTracker, simulate_progress

__all__ = [
    "BASE_TIME",
    "EstimationFactors",
    "ProgressEvent",
    "ProgressStage",
    "ProgressSubscription",
    "ProgressTracker",
    "TimeEstimationResult",
    "TimeEstimator",
    "model_factor",
    "simulate_progress",
    "specialty_factor",
]
