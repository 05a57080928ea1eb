"""
PeriodRecord model representing one parsed export file (pharmacy × period).
"""

from datetime import date
from typing import Any, Literal

from pydantic import BaseModel, Field, model_validator
from pydantic.alias_generators import to_camel

from .product_sale import ProductSale


class SourceRef(BaseModel):
    """Provenance of a PeriodRecord: which dialect and file produced it."""

    dialect: Literal["rank_limited", "full_catalog"]
    path: str

    class Config:
        frozen = True


class PeriodRecord(BaseModel):
    """
    Sales of one pharmacy over one reporting period.

    One record is produced per successfully parsed source file. Records are
    never mutated: deduplication replaces a record by a richer candidate.

    Attributes:
        pharmacy_id: Identifier from the pharmacy reference table
        period_label: Display label (e.g. "Aug–Dec 2025")
        period_start: First day of the period
        period_end: Last day of the period
        year: Calendar year of the period end
        products: Ordered product lines
        total_quantity: Sum of quantity_sold over products
        source: Provenance (not serialized)
    """

    pharmacy_id: str = Field(..., min_length=1)
    period_label: str
    period_start: date
    period_end: date
    year: int
    products: tuple[ProductSale, ...] = ()
    total_quantity: int = Field(0, ge=0)
    source: SourceRef | None = Field(default=None, exclude=True)

    @model_validator(mode="after")
    def check_total_quantity(self) -> "PeriodRecord":
        """Validate that total_quantity equals the sum of product quantities."""
        expected = sum(p.quantity_sold for p in self.products)
        if self.total_quantity != expected:
            raise ValueError(
                f"total_quantity ({self.total_quantity}) must equal the sum of "
                f"product quantities ({expected})"
            )
        return self

    @classmethod
    def build(
        cls,
        pharmacy_id: str,
        period_label: str,
        period_start: date,
        period_end: date,
        year: int,
        products: list[ProductSale],
        source: SourceRef | None = None,
    ) -> "PeriodRecord":
        """Create a record, deriving total_quantity from the products."""
        return cls(
            pharmacy_id=pharmacy_id,
            period_label=period_label,
            period_start=period_start,
            period_end=period_end,
            year=year,
            products=tuple(products),
            total_quantity=sum(p.quantity_sold for p in products),
            source=source,
        )

    @property
    def key(self) -> tuple[str, int]:
        """Deduplication key."""
        return (self.pharmacy_id, self.year)

    def to_output(self) -> dict[str, Any]:
        """Serialize to the artifact's camelCase period object."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    class Config:
        frozen = True
        alias_generator = to_camel
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "pharmacyId": "tanda",
                "periodLabel": "Aug–Dec 2025",
                "periodStart": "2025-08-01",
                "periodEnd": "2025-12-10",
                "year": 2025,
                "products": [
                    {"code": "3400936", "designation": "ARTEFAN 20/120", "quantitySold": 300}
                ],
                "totalQuantity": 300
            }
        }
