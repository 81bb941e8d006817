"""Medical question classification module."""

from .classifier import MedicalQuestionClassifier
from .models import (
    CLASSIFICATION_ERROR_INTENT,
    UNKNOWN_CATEGORY_ID,
    CategoryAssignment,
    Classification,
    DemographicRelevance,
)

__all__ = [
    "CLASSIFICATION_ERROR_INTENT",
    "UNKNOWN_CATEGORY_ID",
    "CategoryAssignment",
    "Classification",
    "DemographicRelevance",
    "MedicalQuestionClassifier",
]
