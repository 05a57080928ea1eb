"""
Enrichment layers - registry and built-in stages.

Add new derived metrics by appending a stage in default_registry().
"""

from . import health_index, region
from .health_index import compute_category_breakdown, compute_health_index
from .regional import aggregate_by_region
from .registry import EnrichmentRegistry, EnrichmentStage, ProfileLookup


def default_registry() -> EnrichmentRegistry:
    """Build the registry of built-in stages, in execution order."""
    registry = EnrichmentRegistry()
    registry.register(
        region.STAGE_NAME,
        region.normalize_region,
        provides=region.PROVIDES,
        description="Pharmacy id to region id and display label",
    )
    registry.register(
        health_index.STAGE_NAME,
        health_index.health_index_stage,
        provides=health_index.PROVIDES,
        description="Per-category quantities and antimalarial share",
    )
    return registry


__all__ = [
    "EnrichmentRegistry",
    "EnrichmentStage",
    "ProfileLookup",
    "default_registry",
    "compute_health_index",
    "compute_category_breakdown",
    "aggregate_by_region",
]
