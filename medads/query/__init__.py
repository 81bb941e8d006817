"""Question processing pipeline module."""

from .container import ServiceContainer
from .models import PipelineResult, QueryContext, QuestionAnalysis, StreamEvent
from .pipeline import QuestionPipeline, build_answer_prompt, validate_question

__all__ = [
    "PipelineResult",
    "QueryContext",
    "QuestionAnalysis",
    "QuestionPipeline",
    "ServiceContainer",
    "StreamEvent",
    "build_answer_prompt",
    "validate_question",
]
