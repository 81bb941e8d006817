"""Fixed clinical taxonomy presented to the classifier."""

from dataclasses import dataclass


@dataclass(frozen=True)
class TaxonomyEntry:
    """A primary medical category with its subcategories."""

    id: str
    name: str
    subcategories: tuple[tuple[str, str], ...]


MEDICAL_CATEGORIES: tuple[TaxonomyEntry, ...] = (
    TaxonomyEntry(
        "cardiology",
        "Cardiology",
        (
            ("hypertension", "Hypertension"),
            ("arrhythmia", "Arrhythmia"),
            ("heart_failure", "Heart Failure"),
            ("coronary_artery_disease", "Coronary Artery Disease"),
            ("valvular_disease", "Valvular Heart Disease"),
        ),
    ),
    TaxonomyEntry(
        "dermatology",
        "Dermatology",
        (
            ("acne", "Acne"),
            ("psoriasis", "Psoriasis"),
            ("eczema", "Eczema"),
            ("melanoma", "Melanoma"),
            ("rosacea", "Rosacea"),
        ),
    ),
    TaxonomyEntry(
        "endocrinology",
        "Endocrinology",
        (
            ("diabetes", "Diabetes"),
            ("thyroid_disorders", "Thyroid Disorders"),
            ("adrenal_disorders", "Adrenal Disorders"),
            ("osteoporosis", "Osteoporosis"),
            ("pituitary_disorders", "Pituitary Disorders"),
        ),
    ),
    TaxonomyEntry(
        "gastroenterology",
        "Gastroenterology",
        (
            ("ibs", "Irritable Bowel Syndrome"),
            ("gerd", "Gastroesophageal Reflux Disease"),
            ("inflammatory_bowel_disease", "Inflammatory Bowel Disease"),
            ("hepatitis", "Hepatitis"),
            ("pancreatitis", "Pancreatitis"),
        ),
    ),
    TaxonomyEntry(
        "neurology",
        "Neurology",
        (
            ("migraine", "Migraine"),
            ("epilepsy", "Epilepsy"),
            ("multiple_sclerosis", "Multiple Sclerosis"),
            ("parkinsons", "Parkinson's Disease"),
            ("stroke", "Stroke"),
        ),
    ),
    TaxonomyEntry(
        "oncology",
        "Oncology",
        (
            ("breast_cancer", "Breast Cancer"),
            ("lung_cancer", "Lung Cancer"),
            ("prostate_cancer", "Prostate Cancer"),
            ("colorectal_cancer", "Colorectal Cancer"),
            ("pancreatic_cancer", "Pancreatic Cancer"),
        ),
    ),
    TaxonomyEntry(
        "pulmonology",
        "Pulmonology",
        (
            ("asthma", "Asthma"),
            ("copd", "COPD"),
            ("pneumonia", "Pneumonia"),
            ("pulmonary_fibrosis", "Pulmonary Fibrosis"),
            ("sleep_apnea", "Sleep Apnea"),
        ),
    ),
    TaxonomyEntry(
        "rheumatology",
        "Rheumatology",
        (
            ("rheumatoid_arthritis", "Rheumatoid Arthritis"),
            ("osteoarthritis", "Osteoarthritis"),
            ("lupus", "Lupus"),
            ("gout", "Gout"),
            ("fibromyalgia", "Fibromyalgia"),
        ),
    ),
    TaxonomyEntry(
        "psychiatry",
        "Psychiatry",
        (
            ("depression", "Depression"),
            ("anxiety", "Anxiety"),
            ("bipolar", "Bipolar Disorder"),
            ("schizophrenia", "Schizophrenia"),
            ("adhd", "ADHD"),
        ),
    ),
    TaxonomyEntry(
        "infectious_diseases",
        "Infectious Diseases",
        (
            ("covid19", "COVID-19"),
            ("hiv", "HIV/AIDS"),
            ("tuberculosis", "Tuberculosis"),
            ("lyme_disease", "Lyme Disease"),
            ("hepatitis_c", "Hepatitis C"),
        ),
    ),
)

# Topical tags the classifier may attach; the experience selector keys off these
TOPIC_TAGS: tuple[str, ...] = (
    "treatment",
    "medication",
    "diagnosis",
    "symptoms",
    "evidence",
    "mechanism",
    "pathophysiology",
    "relationship",
    "prevention",
    "prognosis",
)


def category_ids() -> list[str]:
    """List the primary category ids."""
    return [entry.id for entry in MEDICAL_CATEGORIES]


def subcategory_ids(category_id: str) -> list[str]:
    """List the subcategory ids of a primary category (empty if unknown)."""
    for entry in MEDICAL_CATEGORIES:
        if entry.id == category_id:
            return [sub_id for sub_id, _ in entry.subcategories]
    return []


def format_for_prompt() -> str:
    """Render the taxonomy as an indented list for the classification prompt."""
    lines = []
    for entry in MEDICAL_CATEGORIES:
        lines.append(f"- {entry.name} ({entry.id})")
        lines.append("  Subcategories:")
        lines.extend(f"    - {name} ({sub_id})" for sub_id, name in entry.subcategories)
    return "\n".join(lines)
