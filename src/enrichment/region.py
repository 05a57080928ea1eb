"""
Region normalization stage: pharmacy id -> region id and display label.
"""

from typing import Any

from src.core.models import PeriodRecord
from src.observability.logger import get_logger

from .registry import ProfileLookup

logger = get_logger(__name__)

STAGE_NAME = "region_normalization"
PROVIDES = ("region_id", "region_display_label")

UNMAPPED_REGION = "unmapped"


def normalize_region(record: PeriodRecord, profiles: ProfileLookup) -> dict[str, Any]:
    """
    Resolve the region of a record's pharmacy.

    Pharmacies missing from the profile table get the explicit
    "unmapped" region rather than a guess.
    """
    profile = profiles.get(record.pharmacy_id)
    if profile is None:
        logger.warning(f"No pharmacy profile for '{record.pharmacy_id}'")
        return {"region_id": UNMAPPED_REGION, "region_display_label": UNMAPPED_REGION}

    return {"region_id": profile.region, "region_display_label": profile.region_label}
