"""
Enrichment registry: named, ordered, pure transform stages.

Stages run in registration order. Each stage declares the derived fields
it provides and the derived fields it requires from earlier stages, so a
misordered registry fails at startup instead of producing partial output.
"""

from collections.abc import Callable, Mapping
from typing import Any

from pydantic import BaseModel, Field

from src.core.models import EnrichedPeriod, PeriodRecord, PharmacyProfile
from src.observability.logger import get_logger
from src.observability.metrics import enrichment_duration_seconds, track_duration

logger = get_logger(__name__)

ProfileLookup = Mapping[str, PharmacyProfile]
StageFunction = Callable[[PeriodRecord, ProfileLookup], dict[str, Any]]


class EnrichmentStage(BaseModel):
    """
    A registered enrichment stage.

    Attributes:
        name: Unique stage name
        function: Pure function (PeriodRecord, profile lookup) -> derived fields
        requires: Derived fields that earlier stages must provide
        provides: Exact set of fields the function returns
        description: Human-readable summary
    """

    name: str = Field(..., min_length=1)
    function: StageFunction
    requires: tuple[str, ...] = ()
    provides: tuple[str, ...] = Field(..., min_length=1)
    description: str = ""

    def apply(self, record: PeriodRecord, profiles: ProfileLookup) -> dict[str, Any]:
        """
        Run the stage on one record and check its output contract.

        Raises:
            ValueError: If the returned fields differ from the declared ones
        """
        output = self.function(record, profiles)
        if set(output) != set(self.provides):
            raise ValueError(
                f"Stage '{self.name}' returned fields {sorted(output)}, "
                f"declared {sorted(self.provides)}"
            )
        return output

    class Config:
        frozen = True


class EnrichmentRegistry:
    """
    Ordered collection of enrichment stages.

    Usage:
        registry = EnrichmentRegistry()
        registry.register("region_normalization", normalize_region,
                          provides=("region_id", "region_display_label"))
        enriched = registry.run(records, PHARMACIES)
    """

    def __init__(self):
        self._stages: dict[str, EnrichmentStage] = {}

    def register(
        self,
        name: str,
        function: StageFunction,
        provides: tuple[str, ...],
        requires: tuple[str, ...] = (),
        description: str = "",
    ) -> EnrichmentStage:
        """
        Register a stage after all previously registered ones.

        Args:
            name: Unique stage name
            function: Stage function
            provides: Fields the stage returns
            requires: Fields earlier stages must provide
            description: Optional description

        Returns:
            The registered EnrichmentStage

        Raises:
            ValueError: On duplicate names, unmet requirements or field clashes
        """
        if name in self._stages:
            raise ValueError(f"Enrichment stage '{name}' is already registered")

        available = self.provided_fields()
        missing = [field for field in requires if field not in available]
        if missing:
            raise ValueError(
                f"Stage '{name}' requires {missing}, which no earlier stage provides"
            )

        clashes = [field for field in provides if field in available]
        if clashes:
            raise ValueError(f"Stage '{name}' redefines fields {clashes}")

        stage = EnrichmentStage(
            name=name,
            function=function,
            requires=tuple(requires),
            provides=tuple(provides),
            description=description,
        )
        self._stages[name] = stage
        return stage

    def get(self, name: str) -> EnrichmentStage:
        """
        Look up a stage by name.

        Raises:
            KeyError: If no stage has that name
        """
        try:
            return self._stages[name]
        except KeyError:
            raise KeyError(f"Unknown enrichment stage: {name}") from None

    def list_stages(self) -> list[EnrichmentStage]:
        """Stages in execution order."""
        return list(self._stages.values())

    def order(self) -> list[str]:
        """Stage names in execution order."""
        return list(self._stages)

    def provided_fields(self) -> set[str]:
        return {field for stage in self._stages.values() for field in stage.provides}

    def run(self, records: list[PeriodRecord], profiles: ProfileLookup) -> list[EnrichedPeriod]:
        """
        Run every stage, in registration order, over the canonical records.

        Records are never modified; each stage's output is stored under its
        name next to the original record.

        Args:
            records: Canonical period records
            profiles: Pharmacy profile lookup

        Returns:
            One EnrichedPeriod per input record, in input order
        """
        derived: list[dict[str, dict[str, Any]]] = [{} for _ in records]

        for stage in self._stages.values():
            with track_duration(enrichment_duration_seconds, stage=stage.name):
                for idx, record in enumerate(records):
                    derived[idx][stage.name] = stage.apply(record, profiles)
            logger.debug(f"Enrichment stage '{stage.name}' applied to {len(records)} records")

        return [
            EnrichedPeriod(period=record, derived=fields)
            for record, fields in zip(records, derived)
        ]

    def __len__(self) -> int:
        return len(self._stages)

    def __contains__(self, name: str) -> bool:
        return name in self._stages

    list = list_stages
