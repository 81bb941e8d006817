"""Sponsor catalog and treatment-area mapping module."""

from .catalog import Catalog, load_catalog
from .mapper import PharmaAdMapper, keywords_match
from .models import (
    Company,
    CompanyMatch,
    CompanySummary,
    MappingOptions,
    PharmaMappingResult,
    TreatmentArea,
)

__all__ = [
    "Catalog",
    "Company",
    "CompanyMatch",
    "CompanySummary",
    "MappingOptions",
    "PharmaAdMapper",
    "PharmaMappingResult",
    "TreatmentArea",
    "keywords_match",
    "load_catalog",
]
