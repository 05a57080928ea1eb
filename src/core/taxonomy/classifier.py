"""
Product taxonomy: classifies products into therapeutic categories.

Classification is a static lookup: first by product code, then by
designation keyword fragments. Anything unmatched is "other".
"""

from typing import Literal

from src.utils.text import fold_text

TherapeuticCategory = Literal["antimalarial", "antibiotic", "analgesic", "other"]

ANTIMALARIAL: TherapeuticCategory = "antimalarial"
ANTIBIOTIC: TherapeuticCategory = "antibiotic"
ANALGESIC: TherapeuticCategory = "analgesic"
OTHER: TherapeuticCategory = "other"

CATEGORIES: tuple[TherapeuticCategory, ...] = (ANTIMALARIAL, ANTIBIOTIC, ANALGESIC, OTHER)

# Point-of-sale codes whose designation alone is not conclusive
CODE_CATEGORIES: dict[str, TherapeuticCategory] = {
    "ARTEFAN": ANTIMALARIAL,
    "PLUFENTRINE": ANTIMALARIAL,
}

# Accent-folded designation fragments, checked in category order
KEYWORD_CATEGORIES: tuple[tuple[TherapeuticCategory, tuple[str, ...]], ...] = (
    (ANTIMALARIAL, (
        "artefan",
        "plufentrine",
        "coartem",
        "coarsucam",
        "artemether",
        "lumefantrine",
        "artesunate",
        "dihydroartemisinin",
        "amodiaquine",
        "arsucam",
        "camoquin",
        "quinimax",
        "quinine",
        "chloroquine",
        "malarone",
        "atovaquone",
        "sulfadoxine",
        "fansidar",
        "p-alaxin",
        "lonart",
        "maloxine",
    )),
    (ANTIBIOTIC, (
        "amoxicilline",
        "amoxicillin",
        "augmentin",
        "clamoxyl",
        "ampicilline",
        "penicilline",
        "ciprofloxacine",
        "norfloxacine",
        "ofloxacine",
        "azithromycine",
        "erythromycine",
        "metronidazole",
        "flagyl",
        "doxycycline",
        "tetracycline",
        "ceftriaxone",
        "cefixime",
        "cotrimoxazole",
        "bactrim",
        "gentamicine",
    )),
    (ANALGESIC, (
        "paracetamol",
        "doliprane",
        "efferalgan",
        "dafalgan",
        "ibuprofene",
        "ibuprofen",
        "diclofenac",
        "ketoprofene",
        "profenid",
        "tramadol",
        "aspirine",
        "aspegic",
        "metamizole",
        "novalgin",
    )),
)


def classify(code: str | None, designation: str | None) -> TherapeuticCategory:
    """
    Classify a product into a therapeutic category.

    Args:
        code: Point-of-sale product code
        designation: Product name as printed in the export

    Returns:
        "antimalarial", "antibiotic", "analgesic" or "other"
    """
    if code:
        by_code = CODE_CATEGORIES.get(code.strip().upper())
        if by_code:
            return by_code

    folded = fold_text(designation)
    if not folded:
        return OTHER

    for category, keywords in KEYWORD_CATEGORIES:
        if any(keyword in folded for keyword in keywords):
            return category

    return OTHER
