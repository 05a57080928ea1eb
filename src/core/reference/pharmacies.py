"""
Pharmacy reference table and identity detection.

Identity is an explicit enumerated lookup: the first export lines are
searched for known name/location tokens. Text that matches no token is
"unmapped"; nothing is guessed.
"""

from collections.abc import Mapping

from src.core.models import PharmacyProfile

PHARMACIES: Mapping[str, PharmacyProfile] = {
    profile.id: profile
    for profile in (
        PharmacyProfile(
            id="tanda",
            name="Grande Pharmacie de Tanda",
            region="gontougo",
            location="Tanda, Gontougo",
            region_label="Gontougo (cocoa)",
        ),
        PharmacyProfile(
            id="prolife",
            name="Pharmacie Prolife",
            region="gontougo",
            location="Tabagne, Gontougo",
            region_label="Gontougo (cocoa)",
        ),
        PharmacyProfile(
            id="olympique",
            name="Pharmacie Olympique",
            region="abidjan",
            location="Abidjan",
            region_label="Abidjan (urban)",
        ),
        PharmacyProfile(
            id="attobrou",
            name="Pharmacie Attobrou",
            region="la_me",
            location="La Mé",
            region_label="La Mé (cocoa)",
        ),
    )
}

# Checked in order; the first pharmacy with a matching token wins.
IDENTITY_TOKENS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("tanda", ("grande pharmacie de tanda", "tanda")),
    ("prolife", ("pharmacie prolife", "prolife", "tabagne")),
    ("olympique", ("olympique",)),
    ("attobrou", ("attobrou",)),
)

IDENTITY_SCAN_LINES = 5


def detect_pharmacy(lines: list[str], scan_lines: int = IDENTITY_SCAN_LINES) -> str | None:
    """
    Detect the pharmacy an export belongs to.

    Args:
        lines: Lines of the export
        scan_lines: How many leading lines to search

    Returns:
        Pharmacy id, or None when no known token is present
    """
    text = " ".join(lines[:scan_lines]).lower()
    for pharmacy_id, tokens in IDENTITY_TOKENS:
        if any(token in text for token in tokens):
            return pharmacy_id
    return None


def get_profile(pharmacy_id: str) -> PharmacyProfile | None:
    return PHARMACIES.get(pharmacy_id)
