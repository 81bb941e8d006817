"""Maps a question classification onto sponsor treatment areas."""

import logging

from medads.classification.models import Classification
from medads.mapping.catalog import Catalog, load_catalog
from medads.mapping.models import (
    CompanyMatch,
    CompanySummary,
    MappingOptions,
    PharmaMappingResult,
    unique,
)

logger = logging.getLogger(__name__)

CATEGORY_SCORE = 50
SUBCATEGORY_SCORE = 30
PEER_CATEGORY_SCORE = 20
AREA_KEYWORD_SCORE = 5
COMPANY_KEYWORD_SCORE = 2
MEDICATION_SCORE = 15


def keywords_match(left: str, right: str, min_length: int) -> bool:
    """Case-insensitive match in either direction.

    Equal strings always match. A substring match only counts when the
    contained string has at least ``min_length`` characters.
    """
    a, b = left.lower(), right.lower()
    if not a or not b:
        return False
    if a == b:
        return True
    shorter, longer = (a, b) if len(a) <= len(b) else (b, a)
    return len(shorter) >= min_length and shorter in longer


def apply_priority(score: int, priority: int) -> int:
    """Scale a raw score by ``1 + priority/20``, rounding halves up."""
    return (score * (20 + priority) + 10) // 20


class PharmaAdMapper:
    """Scores every (company, treatment area) pair against a classification."""

    def __init__(self, catalog: Catalog | None = None, default_options: MappingOptions | None = None):
        """Initialize the mapper.

        Args:
            catalog: Sponsor catalog; the built-in catalog when omitted
            default_options: Options used when a call passes none
        """
        self.catalog = catalog or load_catalog()
        self.default_options = default_options or MappingOptions()

    def map_to_companies(
        self,
        classification: Classification,
        options: MappingOptions | None = None,
    ) -> PharmaMappingResult:
        """Map a classification to ranked sponsor matches.

        Args:
            classification: Classification of the question
            options: Mapping options; the mapper defaults when omitted

        Returns:
            Matches sorted by score, truncated to ``max_results``
        """
        options = options or self.default_options
        primary_id = classification.primary_category.id
        subcategory_id = classification.subcategory.id
        keywords = [k for k in classification.keywords if k]
        medications = [m for m in classification.relevant_medications if m]

        matches: list[CompanyMatch] = []
        for company in self.catalog.companies:
            company_keywords = company.keyword_set

            for area in company.treatment_areas:
                score = 0
                category_match = False
                subcategory_match = False
                keyword_matches: list[str] = []
                medication_matches: list[str] = []

                if area.category == primary_id:
                    score += CATEGORY_SCORE
                    category_match = True
                    if subcategory_id in area.subcategories:
                        score += SUBCATEGORY_SCORE
                        subcategory_match = True
                elif subcategory_id in self.catalog.peer_subcategories(area.category):
                    score += PEER_CATEGORY_SCORE
                    category_match = True

                if options.require_subcategory_match and not subcategory_match:
                    continue

                for keyword in keywords:
                    if any(
                        keywords_match(keyword, k, options.min_keyword_length)
                        for k in area.keywords
                    ):
                        score += AREA_KEYWORD_SCORE
                        keyword_matches.append(keyword)

                    if any(
                        keywords_match(keyword, k, options.min_keyword_length)
                        for k in company_keywords
                    ):
                        score += COMPANY_KEYWORD_SCORE
                        keyword_matches.append(keyword)

                for medication in medications:
                    lowered = medication.lower()
                    if any(
                        lowered == flagship.lower() or flagship.lower() in lowered
                        for flagship in area.flagship_medications
                    ):
                        score += MEDICATION_SCORE
                        medication_matches.append(medication)

                score = apply_priority(score, area.priority)
                if score < options.min_score:
                    continue

                matches.append(
                    CompanyMatch(
                        company=CompanySummary(
                            id=company.id, name=company.name, logo_url=company.logo_url
                        ),
                        treatment_area=area,
                        score=score,
                        category_match=category_match,
                        subcategory_match=subcategory_match,
                        keyword_matches=unique(keyword_matches),
                        medication_matches=unique(medication_matches),
                    )
                )

        # sorted() is stable, so equal scores keep catalog order
        matches = sorted(matches, key=lambda m: m.score, reverse=True)
        total_matches = len(matches)
        if options.max_results is not None:
            matches = matches[: options.max_results]

        logger.info(
            f"Mapped {primary_id}/{subcategory_id} to {total_matches} treatment areas"
            + (f", top {matches[0].treatment_area.id} ({matches[0].score})" if matches else "")
        )

        return PharmaMappingResult(
            matches=matches,
            top_match=matches[0] if matches else None,
            classification_input=classification,
            total_matches=total_matches,
            primary_category=primary_id,
            subcategory=subcategory_id,
            keywords_used=unique(keywords),
            medications_used=unique(medications),
        )

    def get_targeting_categories(self, result: PharmaMappingResult) -> list[str]:
        """Treatment-area ids of the matches, in ranking order."""
        return [match.treatment_area.id for match in result.matches]

    def get_targeting_companies(self, result: PharmaMappingResult) -> list[str]:
        """Unique company ids of the matches, first-seen order."""
        return unique([match.company.id for match in result.matches])
