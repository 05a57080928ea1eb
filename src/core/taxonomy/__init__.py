"""
Product taxonomy classifier.
"""

from .classifier import (
    ANALGESIC,
    ANTIBIOTIC,
    ANTIMALARIAL,
    CATEGORIES,
    OTHER,
    TherapeuticCategory,
    classify,
)

__all__ = [
    "classify",
    "TherapeuticCategory",
    "CATEGORIES",
    "ANTIMALARIAL",
    "ANTIBIOTIC",
    "ANALGESIC",
    "OTHER",
]
