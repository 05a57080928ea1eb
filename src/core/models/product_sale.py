"""
ProductSale model representing one product row of a point-of-sale export.
"""

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel


class ProductSale(BaseModel):
    """
    A single product line parsed from an export (immutable).

    Attributes:
        code: Product code from the point-of-sale catalog
        designation: Product name as printed in the export
        quantity_sold: Units sold over the period (non-negative integer)
        stock: Stock on hand at export time (full-catalog exports only)
        price: Unit price (full-catalog exports only)
    """

    code: str = Field(..., min_length=1)
    designation: str = ""
    quantity_sold: int = Field(..., ge=0)
    stock: int | float | None = None
    price: int | float | None = None

    class Config:
        frozen = True
        alias_generator = to_camel
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "code": "3400936",
                "designation": "ARTEFAN 20/120 CPR B/24",
                "quantitySold": 2561,
                "stock": 140,
                "price": 2150
            }
        }
