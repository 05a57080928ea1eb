"""
Health index stage: antimalarial share of a period's sales.

Products are partitioned by therapeutic category; the antimalarial share
is antimalarial quantity over total quantity, and exactly 0 when nothing
was sold. Downstream loaders computing stored aggregates must use the
same formulas (compute_category_breakdown / compute_health_index).
"""

from typing import Any

from src.core.models import CategoryBreakdown, HealthIndexPoint, PeriodRecord, compute_share
from src.core.taxonomy import classify

from .registry import ProfileLookup

STAGE_NAME = "health_index"
PROVIDES = ("health_index", "category_breakdown")


def compute_category_breakdown(record: PeriodRecord) -> CategoryBreakdown:
    """
    Sum quantities and count products per therapeutic category.

    Raises:
        ValueError: If the category sums do not add up to record.total_quantity
    """
    quantities = {"antimalarial": 0, "antibiotic": 0, "analgesic": 0, "other": 0}
    counts = dict.fromkeys(quantities, 0)

    for product in record.products:
        category = classify(product.code, product.designation)
        quantities[category] += product.quantity_sold
        counts[category] += 1

    breakdown = CategoryBreakdown(
        **quantities,
        **{f"{category}_products": count for category, count in counts.items()},
    )

    if breakdown.total != record.total_quantity:
        raise ValueError(
            f"{record.pharmacy_id}/{record.year}: category quantities sum to "
            f"{breakdown.total}, record total is {record.total_quantity}"
        )
    return breakdown


def compute_health_index(record: PeriodRecord) -> HealthIndexPoint:
    """Compute the HealthIndexPoint of one canonical record."""
    breakdown = compute_category_breakdown(record)
    return _to_point(record, breakdown)


def _to_point(record: PeriodRecord, breakdown: CategoryBreakdown) -> HealthIndexPoint:
    return HealthIndexPoint(
        pharmacy_id=record.pharmacy_id,
        period_label=record.period_label,
        year=record.year,
        antimalarial_quantity=breakdown.antimalarial,
        total_quantity=breakdown.total,
        antimalarial_share=compute_share(breakdown.antimalarial, breakdown.total),
    )


def health_index_stage(record: PeriodRecord, profiles: ProfileLookup) -> dict[str, Any]:
    breakdown = compute_category_breakdown(record)
    return {
        "health_index": _to_point(record, breakdown),
        "category_breakdown": breakdown,
    }
