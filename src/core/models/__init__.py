"""
Core data models for the VRAC pharmacy surveillance pipeline.

All models use Pydantic for runtime validation and type safety.
"""

from .enriched_period import EnrichedPeriod
from .health_index import CategoryBreakdown, HealthIndexPoint, RegionalHealthPoint, compute_share
from .period_record import PeriodRecord, SourceRef
from .pharmacy_profile import PharmacyProfile
from .pipeline_options import PipelineOptions
from .processed_output import ProcessedOutput
from .product_sale import ProductSale
from .source_mapping import (
    DIALECTS,
    FULL_CATALOG,
    RANK_LIMITED,
    Dialect,
    SourceCandidate,
    SourceMapping,
)

__all__ = [
    "ProductSale",
    "PeriodRecord",
    "SourceRef",
    "PharmacyProfile",
    "HealthIndexPoint",
    "CategoryBreakdown",
    "RegionalHealthPoint",
    "compute_share",
    "EnrichedPeriod",
    "ProcessedOutput",
    "PipelineOptions",
    "SourceMapping",
    "SourceCandidate",
    "Dialect",
    "DIALECTS",
    "RANK_LIMITED",
    "FULL_CATALOG",
]
