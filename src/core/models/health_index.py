"""
Derived health-signal models computed by the health index enrichment stage.
"""

from pydantic import BaseModel, Field, model_validator
from pydantic.alias_generators import to_camel


class CategoryBreakdown(BaseModel):
    """
    Quantities (and product counts) per therapeutic category for one period.

    The four quantities always sum to the period's total quantity.
    """

    antimalarial: int = Field(0, ge=0)
    antibiotic: int = Field(0, ge=0)
    analgesic: int = Field(0, ge=0)
    other: int = Field(0, ge=0)
    antimalarial_products: int = Field(0, ge=0)
    antibiotic_products: int = Field(0, ge=0)
    analgesic_products: int = Field(0, ge=0)
    other_products: int = Field(0, ge=0)

    @property
    def total(self) -> int:
        return self.antimalarial + self.antibiotic + self.analgesic + self.other

    class Config:
        frozen = True
        alias_generator = to_camel
        populate_by_name = True


class HealthIndexPoint(BaseModel):
    """
    Antimalarial share for one canonical period record.

    Recomputed on every run; never persisted as pipeline state.
    """

    pharmacy_id: str
    period_label: str
    year: int
    antimalarial_quantity: int = Field(..., ge=0)
    total_quantity: int = Field(..., ge=0)
    antimalarial_share: float = Field(..., ge=0.0, le=1.0)

    @model_validator(mode="after")
    def check_share(self) -> "HealthIndexPoint":
        """A zero total must always yield a zero share."""
        if self.total_quantity == 0 and self.antimalarial_share != 0.0:
            raise ValueError("antimalarial_share must be 0 when total_quantity is 0")
        if self.antimalarial_quantity > self.total_quantity:
            raise ValueError("antimalarial_quantity cannot exceed total_quantity")
        return self

    class Config:
        frozen = True
        alias_generator = to_camel
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "pharmacyId": "tanda",
                "periodLabel": "Aug–Dec 2024",
                "year": 2024,
                "antimalarialQuantity": 300,
                "totalQuantity": 1500,
                "antimalarialShare": 0.2
            }
        }


class RegionalHealthPoint(BaseModel):
    """
    Antimalarial share of one region and year, from summed pharmacy quantities.
    """

    region_id: str
    region_display_label: str
    year: int
    pharmacy_ids: tuple[str, ...]
    antimalarial_quantity: int = Field(..., ge=0)
    total_quantity: int = Field(..., ge=0)
    antimalarial_share: float = Field(..., ge=0.0, le=1.0)

    class Config:
        frozen = True
        alias_generator = to_camel
        populate_by_name = True


def compute_share(antimalarial_quantity: int, total_quantity: int) -> float:
    """Antimalarial share, defined as exactly 0 when the total is 0."""
    if total_quantity <= 0:
        return 0.0
    return antimalarial_quantity / total_quantity
