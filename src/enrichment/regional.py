"""
Region-keyed rollup of enriched periods.

Consumes the region_normalization and health_index outputs, so both stages
must have run on the input.
"""

from src.core.models import EnrichedPeriod, RegionalHealthPoint, compute_share

from . import health_index, region


def aggregate_by_region(enriched: list[EnrichedPeriod]) -> list[RegionalHealthPoint]:
    """
    Sum antimalarial and total quantities per (region, year).

    The share is recomputed from the sums, never averaged across pharmacies.

    Args:
        enriched: Enriched canonical periods

    Returns:
        One point per (region_id, year), sorted by region_id asc then year desc

    Raises:
        ValueError: If a period lacks the region or health index stage output
    """
    groups: dict[tuple[str, int], dict] = {}

    for item in enriched:
        missing = [
            name for name in (region.STAGE_NAME, health_index.STAGE_NAME)
            if name not in item.derived
        ]
        if missing:
            raise ValueError(
                f"{item.period.pharmacy_id}/{item.period.year} is missing stage output {missing}"
            )

        region_fields = item.derived[region.STAGE_NAME]
        point = item.derived[health_index.STAGE_NAME]["health_index"]

        key = (region_fields["region_id"], item.period.year)
        group = groups.setdefault(key, {
            "label": region_fields["region_display_label"],
            "pharmacies": [],
            "antimalarial": 0,
            "total": 0,
        })
        if item.period.pharmacy_id not in group["pharmacies"]:
            group["pharmacies"].append(item.period.pharmacy_id)
        group["antimalarial"] += point.antimalarial_quantity
        group["total"] += point.total_quantity

    points = [
        RegionalHealthPoint(
            region_id=region_id,
            region_display_label=group["label"],
            year=year,
            pharmacy_ids=tuple(sorted(group["pharmacies"])),
            antimalarial_quantity=group["antimalarial"],
            total_quantity=group["total"],
            antimalarial_share=compute_share(group["antimalarial"], group["total"]),
        )
        for (region_id, year), group in groups.items()
    ]
    points.sort(key=lambda p: p.year, reverse=True)
    points.sort(key=lambda p: p.region_id)
    return points
