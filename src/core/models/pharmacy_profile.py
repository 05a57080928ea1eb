"""
PharmacyProfile model (static reference data, not derived from exports).
"""

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel


class PharmacyProfile(BaseModel):
    """
    Reference entry for a surveilled pharmacy.

    Attributes:
        id: Pharmacy identifier used as pharmacyId in period records
        name: Commercial name
        region: Region identifier (e.g. "gontougo")
        location: Town and region
        region_label: Region display label (e.g. "Gontougo (cocoa)")
    """

    id: str = Field(..., min_length=1)
    name: str
    region: str
    location: str
    region_label: str

    class Config:
        frozen = True
        alias_generator = to_camel
        populate_by_name = True
