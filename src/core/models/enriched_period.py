"""
EnrichedPeriod model: a canonical record with derived fields layered alongside.
"""

from typing import Any

from pydantic import BaseModel, Field

from .period_record import PeriodRecord


class EnrichedPeriod(BaseModel):
    """
    Output of the enrichment stages for one canonical PeriodRecord.

    The original record is kept untouched; each stage's output lives under
    its own name in derived, preserving provenance and allowing any stage
    to be recomputed independently.
    """

    period: PeriodRecord
    derived: dict[str, dict[str, Any]] = Field(default_factory=dict)

    def field(self, name: str) -> Any:
        """Look up a derived field by name across all stage outputs."""
        for output in self.derived.values():
            if name in output:
                return output[name]
        raise KeyError(name)
