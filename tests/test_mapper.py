"""Tests for sponsor treatment-area mapping."""

import json

import pytest

from medads.classification.models import CategoryAssignment, Classification
from medads.mapping import (
    Catalog,
    MappingOptions,
    PharmaAdMapper,
    TreatmentArea,
    keywords_match,
    load_catalog,
)
from medads.mapping.mapper import apply_priority


def make_classification(primary, subcategory, keywords=(), medications=(), confidence=0.9):
    return Classification(
        primary_category=CategoryAssignment(id=primary, confidence=confidence),
        subcategory=CategoryAssignment(id=subcategory, confidence=confidence),
        keywords=list(keywords),
        relevant_medications=list(medications),
    )


class TestKeywordMatching:
    """Test keyword comparison rules."""

    def test_equal_terms_match_regardless_of_length(self):
        assert keywords_match("MS", "ms", min_length=3)

    def test_substring_in_either_direction(self):
        assert keywords_match("metastatic breast cancer", "breast cancer", min_length=3)
        assert keywords_match("breast cancer", "metastatic breast cancer", min_length=3)

    def test_short_substring_is_ignored(self):
        """Test a short term does not match inside an unrelated word."""
        assert not keywords_match("RA", "migraine", min_length=3)
        assert keywords_match("RA", "migraine", min_length=0)

    def test_empty_never_matches(self):
        assert not keywords_match("", "oncology", min_length=0)


class TestCatalog:
    """Test the sponsor catalog."""

    def test_builtin_catalog(self):
        catalog = load_catalog()

        assert [c.id for c in catalog.companies] == ["pfizer", "genentech", "gsk", "lilly"]
        assert catalog.get_company_by_id("gsk").name == "GlaxoSmithKline"
        assert catalog.get_company_by_id("unknown") is None

    def test_treatment_area_keywords_are_derived(self):
        """Test subcategories and flagship medications join the keywords."""
        area = TreatmentArea(
            id="acme_neuro",
            category="neurology",
            subcategories=["multiple_sclerosis"],
            keywords=["MS", "ms"],
            flagship_medications=["Ocrevus"],
        )

        assert area.keywords == ("MS", "multiple sclerosis", "Ocrevus")

    def test_lookups_by_category(self):
        catalog = load_catalog()

        areas = catalog.get_treatment_areas_by_category("rheumatology")
        assert [a.id for a in areas] == ["pfizer_immunology", "gsk_immunology", "lilly_immunology"]
        assert [c.id for c in catalog.get_companies_by_category("oncology")] == ["pfizer", "genentech"]
        assert catalog.peer_subcategories("dermatology") == ()

    def test_load_from_file(self, tmp_path):
        path = tmp_path / "catalog.json"
        path.write_text(
            json.dumps(
                {
                    "companies": [
                        {
                            "id": "acme",
                            "name": "Acme",
                            "logo_url": "/logos/acme.png",
                            "treatment_areas": [
                                {"id": "acme_derm", "category": "dermatology", "subcategories": ["acne"]}
                            ],
                        }
                    ],
                    "category_map": {"dermatology": ["acne"]},
                }
            )
        )

        catalog = load_catalog(path)

        assert catalog.companies[0].treatment_areas[0].keywords == ("acne",)
        assert catalog.peer_subcategories("dermatology") == ("acne",)


class TestPharmaAdMapper:
    """Test scoring and ranking of treatment areas."""

    @pytest.fixture
    def mapper(self):
        return PharmaAdMapper()

    def test_priority_scaling_rounds_half_up(self):
        assert apply_priority(109, 10) == 164
        assert apply_priority(87, 9) == 126
        assert apply_priority(10, 5) == 13  # 12.5

    def test_her2_question_ranks_genentech_first(self, mapper, her2_classification):
        """Test the trastuzumab sponsor surfaces on top."""
        result = mapper.map_to_companies(her2_classification)

        assert result.total_matches == 2
        top = result.top_match
        assert top.treatment_area.id == "genentech_oncology"
        assert top.score == 164
        assert top.category_match and top.subcategory_match
        assert top.keyword_matches == ["HER2", "metastatic breast cancer"]
        assert top.medication_matches == ["trastuzumab"]
        assert top.score >= apply_priority(50 + 15, top.treatment_area.priority)

        second = result.matches[1]
        assert second.treatment_area.id == "pfizer_oncology"
        assert second.score == 126
        assert second.medication_matches == []

    def test_result_metadata(self, mapper, her2_classification):
        result = mapper.map_to_companies(her2_classification)

        assert result.primary_category == "oncology"
        assert result.subcategory == "breast_cancer"
        assert result.medications_used == ["trastuzumab"]
        assert result.classification_input == her2_classification
        assert mapper.get_targeting_categories(result) == ["genentech_oncology", "pfizer_oncology"]
        assert mapper.get_targeting_companies(result) == ["genentech", "pfizer"]

    def test_mapping_is_deterministic(self, mapper, her2_classification):
        first = mapper.map_to_companies(her2_classification)
        second = mapper.map_to_companies(her2_classification)

        assert [(m.treatment_area.id, m.score) for m in first.matches] == [
            (m.treatment_area.id, m.score) for m in second.matches
        ]

    def test_taxonomic_peer_match(self, mapper):
        """Test a subcategory listed under a category earns partial credit."""
        classification = make_classification("internal_medicine", "asthma", confidence=0.0)

        result = mapper.map_to_companies(classification)

        assert [m.treatment_area.id for m in result.matches] == ["gsk_respiratory"]
        match = result.top_match
        assert match.score == 30
        assert match.category_match
        assert not match.subcategory_match

    def test_unmatched_classification(self, mapper, vague_classification):
        result = mapper.map_to_companies(vague_classification)

        assert result.matches == []
        assert result.top_match is None
        assert result.total_matches == 0

    def test_require_subcategory_match(self, mapper):
        classification = make_classification("rheumatology", "gout")

        loose = mapper.map_to_companies(classification)
        strict = mapper.map_to_companies(
            classification, MappingOptions(require_subcategory_match=True)
        )

        assert loose.total_matches == 3
        assert strict.matches == []

    def test_max_results_truncates_but_counts_all(self, mapper):
        classification = make_classification("rheumatology", "rheumatoid_arthritis")

        result = mapper.map_to_companies(classification, MappingOptions(max_results=1))

        assert len(result.matches) == 1
        assert result.total_matches == 3
        assert result.top_match.treatment_area.id == "pfizer_immunology"

    def test_min_score_filters(self, mapper, her2_classification):
        result = mapper.map_to_companies(her2_classification, MappingOptions(min_score=150))

        assert [m.treatment_area.id for m in result.matches] == ["genentech_oncology"]

    def test_custom_catalog(self):
        catalog = Catalog(
            companies=[
                {
                    "id": "acme",
                    "name": "Acme",
                    "logo_url": "/logos/acme.png",
                    "treatment_areas": [
                        {"id": "acme_derm", "category": "dermatology", "subcategories": ["acne"]}
                    ],
                }
            ],
        )
        classification = make_classification("dermatology", "acne")

        result = PharmaAdMapper(catalog).map_to_companies(classification)

        # (50 + 30) * 1.25
        assert result.top_match.score == 100
