"""Static sponsor catalog.

The catalog is read-only at request time. It is loaded once per process,
either from the built-in data below or from a JSON file with the same shape.
"""

import logging
from functools import lru_cache
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from medads.mapping.models import Company, TreatmentArea

logger = logging.getLogger(__name__)


class Catalog(BaseModel):
    """Sponsors plus the category-to-subcategory table used for partial matches."""

    model_config = ConfigDict(frozen=True)

    companies: tuple[Company, ...] = ()
    category_map: dict[str, tuple[str, ...]] = Field(default_factory=dict)

    def peer_subcategories(self, category: str) -> tuple[str, ...]:
        """Subcategories the taxonomy places under a category (empty if unknown)."""
        return self.category_map.get(category, ())

    def get_company_by_id(self, company_id: str) -> Company | None:
        """Find a company by id."""
        for company in self.companies:
            if company.id == company_id:
                return company
        return None

    def get_treatment_areas_by_category(self, category: str) -> list[TreatmentArea]:
        """All treatment areas in a category, across companies."""
        return [
            area
            for company in self.companies
            for area in company.treatment_areas
            if area.category == category
        ]

    def get_companies_by_category(self, category: str) -> list[Company]:
        """Companies with at least one treatment area in a category."""
        return [
            company
            for company in self.companies
            if any(area.category == category for area in company.treatment_areas)
        ]


BUILTIN_CATALOG = {
    "companies": [
        {
            "id": "pfizer",
            "name": "Pfizer",
            "logo_url": "/logos/pfizer.png",
            "keywords": ["pfizer", "pfe", "xeljanz", "ibrance", "prevnar", "xtandi"],
            "treatment_areas": [
                {
                    "id": "pfizer_oncology",
                    "category": "oncology",
                    "subcategories": ["breast_cancer", "lung_cancer", "prostate_cancer"],
                    "keywords": [
                        "breast cancer", "lung cancer", "metastatic", "carcinoma",
                        "ibrance", "xtandi",
                    ],
                    "flagship_medications": ["Ibrance", "Xtandi", "Xalkori"],
                    "priority": 9,
                },
                {
                    "id": "pfizer_immunology",
                    "category": "rheumatology",
                    "subcategories": ["rheumatoid_arthritis", "psoriatic_arthritis"],
                    "keywords": [
                        "rheumatoid arthritis", "psoriatic arthritis", "RA", "joint pain",
                        "autoimmune", "xeljanz",
                    ],
                    "flagship_medications": ["Xeljanz", "Enbrel"],
                    "priority": 8,
                },
                {
                    "id": "pfizer_vaccines",
                    "category": "infectious_diseases",
                    "subcategories": ["covid19", "pneumonia"],
                    "keywords": ["vaccine", "immunization", "covid", "pneumonia", "prevnar"],
                    "flagship_medications": ["Prevnar", "Comirnaty"],
                    "priority": 7,
                },
            ],
        },
        {
            "id": "genentech",
            "name": "Genentech",
            "logo_url": "/logos/genentech.png",
            "keywords": ["genentech", "roche", "avastin", "herceptin", "tecentriq", "ocrevus"],
            "treatment_areas": [
                {
                    "id": "genentech_oncology",
                    "category": "oncology",
                    "subcategories": ["breast_cancer", "pancreatic_cancer", "lung_cancer"],
                    "keywords": [
                        "breast cancer", "pancreatic cancer", "targeted therapy", "HER2",
                        "herceptin", "avastin",
                    ],
                    "flagship_medications": [
                        "Herceptin", "Trastuzumab", "Avastin", "Tecentriq", "Kadcyla",
                    ],
                    "priority": 10,
                },
                {
                    "id": "genentech_ophthalmology",
                    "category": "ophthalmology",
                    "subcategories": ["macular_degeneration", "diabetic_retinopathy"],
                    "keywords": [
                        "macular degeneration", "AMD", "wet AMD", "vision loss", "lucentis",
                    ],
                    "flagship_medications": ["Lucentis", "Vabysmo"],
                    "priority": 8,
                },
                {
                    "id": "genentech_neurology",
                    "category": "neurology",
                    "subcategories": ["multiple_sclerosis"],
                    "keywords": ["multiple sclerosis", "MS", "ocrevus"],
                    "flagship_medications": ["Ocrevus", "Rituxan"],
                    "priority": 7,
                },
            ],
        },
        {
            "id": "gsk",
            "name": "GlaxoSmithKline",
            "logo_url": "/logos/gsk.png",
            "keywords": ["gsk", "glaxosmithkline", "advair", "trelegy", "nucala", "benlysta"],
            "treatment_areas": [
                {
                    "id": "gsk_respiratory",
                    "category": "pulmonology",
                    "subcategories": ["asthma", "copd"],
                    "keywords": [
                        "asthma", "COPD", "chronic obstructive pulmonary disease",
                        "respiratory", "breathing", "advair", "trelegy", "nucala",
                    ],
                    "flagship_medications": ["Advair", "Trelegy", "Nucala"],
                    "priority": 10,
                },
                {
                    "id": "gsk_immunology",
                    "category": "rheumatology",
                    "subcategories": ["lupus"],
                    "keywords": [
                        "lupus", "SLE", "systemic lupus erythematosus", "autoimmune", "benlysta",
                    ],
                    "flagship_medications": ["Benlysta"],
                    "priority": 8,
                },
                {
                    "id": "gsk_vaccines",
                    "category": "infectious_diseases",
                    "subcategories": ["influenza", "meningitis", "shingles"],
                    "keywords": ["vaccine", "shingles", "flu", "influenza", "shingrix"],
                    "flagship_medications": ["Shingrix", "Bexsero", "Fluarix"],
                    "priority": 9,
                },
            ],
        },
        {
            "id": "lilly",
            "name": "Eli Lilly",
            "logo_url": "/logos/lilly.png",
            "keywords": [
                "eli lilly", "lilly", "trulicity", "humalog", "jardiance", "taltz", "olumiant",
            ],
            "treatment_areas": [
                {
                    "id": "lilly_endocrinology",
                    "category": "endocrinology",
                    "subcategories": ["diabetes", "obesity"],
                    "keywords": [
                        "diabetes", "type 2 diabetes", "T2D", "insulin", "GLP-1",
                        "trulicity", "humalog", "jardiance", "mounjaro",
                    ],
                    "flagship_medications": ["Trulicity", "Humalog", "Jardiance", "Mounjaro"],
                    "priority": 10,
                },
                {
                    "id": "lilly_neurology",
                    "category": "neurology",
                    "subcategories": ["alzheimers", "migraine"],
                    "keywords": [
                        "alzheimer's", "dementia", "cognitive decline", "amyloid",
                        "donanemab", "migraine", "emgality",
                    ],
                    "flagship_medications": ["Donanemab", "Emgality"],
                    "priority": 9,
                },
                {
                    "id": "lilly_immunology",
                    "category": "rheumatology",
                    "subcategories": ["rheumatoid_arthritis", "psoriasis"],
                    "keywords": [
                        "rheumatoid arthritis", "psoriasis", "psoriatic arthritis",
                        "taltz", "olumiant",
                    ],
                    "flagship_medications": ["Taltz", "Olumiant"],
                    "priority": 7,
                },
            ],
        },
    ],
    # Taxonomic peers for partial matches when the primary category differs
    "category_map": {
        "oncology": [
            "breast_cancer", "lung_cancer", "pancreatic_cancer", "prostate_cancer",
            "colorectal_cancer",
        ],
        "rheumatology": [
            "rheumatoid_arthritis", "osteoarthritis", "lupus", "gout", "psoriatic_arthritis",
        ],
        "pulmonology": ["asthma", "copd", "pneumonia", "pulmonary_fibrosis", "sleep_apnea"],
        "endocrinology": [
            "diabetes", "thyroid_disorders", "adrenal_disorders", "obesity",
            "pituitary_disorders",
        ],
        "neurology": [
            "alzheimers", "multiple_sclerosis", "parkinsons", "migraine", "epilepsy", "stroke",
        ],
        "ophthalmology": [
            "macular_degeneration", "glaucoma", "diabetic_retinopathy", "cataracts", "dry_eye",
        ],
        "infectious_diseases": [
            "covid19", "influenza", "hiv", "hepatitis_c", "tuberculosis", "meningitis",
            "shingles",
        ],
    },
}


@lru_cache
def load_catalog(path: Path | None = None) -> Catalog:
    """Load the sponsor catalog once per path.

    Args:
        path: Optional JSON file with ``companies`` and ``category_map`` keys;
            the built-in catalog is used when omitted

    Returns:
        The validated, immutable catalog
    """
    if path is None:
        catalog = Catalog.model_validate(BUILTIN_CATALOG)
    else:
        catalog = Catalog.model_validate_json(Path(path).read_text(encoding="utf-8"))
        logger.info(f"Loaded sponsor catalog from {path}")

    area_count = sum(len(company.treatment_areas) for company in catalog.companies)
    logger.debug(f"Catalog has {len(catalog.companies)} companies, {area_count} treatment areas")
    return catalog
