"""
ProcessedOutput model: the serialized artifact of a pipeline run.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel
from pydantic.alias_generators import to_camel

from .period_record import PeriodRecord


class ProcessedOutput(BaseModel):
    """
    Artifact consumed by downstream loaders and dashboards.

    Exactly two top-level fields: periods and processedAt.
    """

    periods: list[PeriodRecord]
    processed_at: datetime | None = None

    def to_document(self) -> dict[str, Any]:
        return {
            "periods": [period.to_output() for period in self.periods],
            "processedAt": self.processed_at.isoformat() if self.processed_at else None,
        }

    class Config:
        alias_generator = to_camel
        populate_by_name = True
