"""
Batch processing pipeline orchestration.

Coordinates the flow: discover → read → parse → deduplicate → enrich → write
"""

import os
import time
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

from src.batch.dedup import Deduplicator
from src.batch.errors import ArtifactWriteError, InputRootError
from src.batch.readers import SourceReader
from src.batch.writers import ArtifactWriter
from src.core.models import (
    EnrichedPeriod,
    PeriodRecord,
    PipelineOptions,
    ProcessedOutput,
    SourceCandidate,
)
from src.core.parsers import get_parser
from src.core.reference import PHARMACIES
from src.core.sources import SourceRegistry
from src.enrichment import EnrichmentRegistry, ProfileLookup, default_registry
from src.observability.logger import get_logger, log_operation
from src.observability.metrics import record_candidate, record_run

logger = get_logger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class PipelineResult(BaseModel):
    """
    Outcome of one pipeline run.

    Attributes:
        periods: Canonical records, as written to the artifact
        enriched: Enrichment outputs (empty unless enrichment was requested)
        processed_at: Run timestamp
        output_path: Artifact path (None on dry runs)
        candidates: Candidates in the source table
        missing: Candidates with no file on disk
        unreadable: Candidates whose file could not be read
        discarded: Candidates the parsers rejected
        parsed: Candidates that produced a record
        superseded: Records dropped by deduplication
    """

    periods: list[PeriodRecord]
    enriched: list[EnrichedPeriod] = Field(default_factory=list)
    processed_at: datetime
    output_path: Path | None = None
    candidates: int = 0
    missing: int = 0
    unreadable: int = 0
    discarded: int = 0
    parsed: int = 0
    superseded: int = 0


class VracPipeline:
    """
    Orchestrates one batch run over a VRAC export tree.

    Flow:
    1. Check the input root
    2. Resolve candidates through the Source Registry (pinned order)
    3. Read and parse each candidate, optionally on a thread pool
    4. Deduplicate the complete candidate list
    5. Optionally run the enrichment stages
    6. Write the artifact atomically
    """

    def __init__(
        self,
        options: PipelineOptions,
        source_registry: SourceRegistry | None = None,
        enrichment_registry: EnrichmentRegistry | None = None,
        profiles: ProfileLookup | None = None,
        reader: SourceReader | None = None,
        writer: ArtifactWriter | None = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        """
        Initialize batch pipeline.

        Args:
            options: Run options
            source_registry: Source mappings (loaded from options.mappings_path,
                else the built-in table)
            enrichment_registry: Enrichment stages (built-in stages by default)
            profiles: Pharmacy profile lookup (built-in table by default)
            reader: Export file reader
            writer: Artifact writer
            clock: Source of the run timestamp
        """
        self.options = options

        if source_registry is not None:
            self.source_registry = source_registry
        elif options.mappings_path is not None:
            self.source_registry = SourceRegistry.from_yaml(options.mappings_path)
        else:
            self.source_registry = SourceRegistry()

        self.enrichment_registry = (
            default_registry() if enrichment_registry is None else enrichment_registry
        )
        self.profiles = PHARMACIES if profiles is None else profiles
        self.reader = reader or SourceReader()
        self.writer = writer or ArtifactWriter()
        self.deduplicator = Deduplicator()
        self.clock = clock

    def run(self) -> PipelineResult:
        """
        Run the pipeline once.

        Returns:
            PipelineResult with the canonical periods and run counters

        Raises:
            InputRootError: If the input root is missing or unreadable
            ArtifactWriteError: If the artifact cannot be written
        """
        started = time.monotonic()
        root = Path(self.options.vrac_root)

        try:
            with log_operation("VRAC pipeline run", logger=logger, vrac_root=str(root)):
                result = self._run(root)
        except InputRootError:
            record_run("input_error", time.monotonic() - started)
            raise
        except ArtifactWriteError:
            record_run("write_error", time.monotonic() - started)
            raise
        except Exception:
            record_run("failure", time.monotonic() - started)
            raise

        record_run("success", time.monotonic() - started, periods=len(result.periods))
        return result

    def _run(self, root: Path) -> PipelineResult:
        # Step 1: Input root
        self._check_input_root(root)

        # Step 2: Candidates
        candidates = self.source_registry.candidates(root)
        located, missing = self._locate(candidates)
        logger.info(
            f"Resolved {len(candidates)} candidates: {len(located)} present, {missing} missing"
        )

        # Step 3: Parse (complete before deduplication starts)
        outcomes = self._parse_all(located)
        parsed = [record for record in outcomes if isinstance(record, PeriodRecord)]
        unreadable = sum(1 for outcome in outcomes if outcome is _UNREADABLE)
        discarded = len(located) - len(parsed) - unreadable

        # Step 4: Deduplicate
        canonical = self.deduplicator.deduplicate(parsed)

        # Step 5: Enrich
        enriched = []
        if self.options.enrich:
            enriched = self.enrichment_registry.run(canonical, self.profiles)
            self._log_health_index(enriched)

        # Step 6: Write
        processed_at = self.clock()
        output = ProcessedOutput(periods=canonical, processed_at=processed_at)
        output_path = None
        if self.options.dry_run:
            logger.info("DRY RUN: artifact not written")
        else:
            output_path = self.writer.write(output, self.options.output_path)

        return PipelineResult(
            periods=canonical,
            enriched=enriched,
            processed_at=processed_at,
            output_path=output_path,
            candidates=len(candidates),
            missing=missing,
            unreadable=unreadable,
            discarded=discarded,
            parsed=len(parsed),
            superseded=self.deduplicator.superseded_count,
        )

    def _check_input_root(self, root: Path) -> None:
        """
        Raises:
            InputRootError: If root is not a readable directory
        """
        if not root.exists():
            raise InputRootError(str(root), "does not exist")
        if not root.is_dir():
            raise InputRootError(str(root), "is not a directory")
        if not os.access(root, os.R_OK | os.X_OK):
            raise InputRootError(str(root), "is not readable")
        try:
            with os.scandir(root):
                pass
        except OSError as e:
            raise InputRootError(str(root), f"cannot be listed ({e})") from e

    def _locate(self, candidates: list[SourceCandidate]) -> tuple[list[tuple[SourceCandidate, Path]], int]:
        """Pair each candidate with its first existing path; count the rest as missing."""
        located = []
        missing = 0
        for candidate in candidates:
            path = candidate.existing_path()
            if path is None:
                missing += 1
                record_candidate(candidate.dialect, "missing")
                logger.info(
                    f"Source file not found: {candidate.mapping.file}",
                    extra={
                        "pharmacy_id": candidate.mapping.pharmacy_id,
                        "year": candidate.mapping.year,
                        "dialect": candidate.dialect,
                    },
                )
                continue
            located.append((candidate, path))
        return located, missing

    def _parse_all(self, located: list[tuple[SourceCandidate, Path]]) -> list[Any]:
        """
        Parse every located candidate.

        Results keep the candidate order even when parsing runs on several
        threads, so deduplication tie-breaks do not depend on scheduling.
        """
        workers = min(self.options.max_workers, max(len(located), 1))
        with log_operation("Parsing candidates", logger=logger, candidates=len(located), workers=workers):
            if workers <= 1:
                return [self._parse_candidate(candidate, path) for candidate, path in located]

            with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="vrac-parse") as executor:
                return list(executor.map(lambda item: self._parse_candidate(*item), located))

    def _parse_candidate(self, candidate: SourceCandidate, path: Path) -> Any:
        try:
            text = self.reader.read(path)
        except OSError as e:
            record_candidate(candidate.dialect, "unreadable")
            logger.warning(f"Could not read {path}: {e}", extra={"source_path": str(path)})
            return _UNREADABLE

        record = get_parser(candidate.dialect).parse(text, candidate.mapping, source_path=str(path))
        if record is None:
            record_candidate(candidate.dialect, "discarded")
            logger.info(f"Discarded candidate {path}", extra={"source_path": str(path)})
            return None

        record_candidate(candidate.dialect, "parsed")
        logger.debug(
            f"Parsed {path}: {record.pharmacy_id}/{record.year}, {len(record.products)} products",
            extra={"source_path": str(path)},
        )
        return record

    def _log_health_index(self, enriched) -> None:
        for item in enriched:
            point = item.derived["health_index"]["health_index"]
            logger.info(
                f"{point.pharmacy_id} {point.period_label}: antimalarial share "
                f"{point.antimalarial_share * 100:.2f}%",
                extra={
                    "pharmacy_id": point.pharmacy_id,
                    "year": point.year,
                    "antimalarial_quantity": point.antimalarial_quantity,
                    "total_quantity": point.total_quantity,
                },
            )


# Marker for candidates whose file could not be read
_UNREADABLE = object()
