"""
Deduplication of parsed period records.

Several exports can cover the same (pharmacy, year): a top-20 file and a
full product list, or the same file under two directories. Exactly one
canonical record is kept per key.
"""

from collections.abc import Iterable

from src.core.models import PeriodRecord
from src.observability.logger import get_logger
from src.observability.metrics import increment_counter, superseded_candidates_total

logger = get_logger(__name__)


def deduplicate_periods(records: Iterable[PeriodRecord]) -> tuple[list[PeriodRecord], int]:
    """
    Keep one record per (pharmacy_id, year).

    The record with strictly more products wins; on a tie the record seen
    first in input order is kept. The input must be the complete candidate
    list of a run.

    Args:
        records: All parsed candidates, in pinned discovery order

    Returns:
        Tuple of (canonical records sorted by pharmacy_id asc then year desc,
        number of superseded candidates)
    """
    by_key: dict[tuple[str, int], PeriodRecord] = {}
    superseded = 0

    for record in records:
        existing = by_key.get(record.key)
        if existing is None:
            by_key[record.key] = record
            continue

        superseded += 1
        if len(record.products) > len(existing.products):
            logger.debug(
                f"{record.pharmacy_id}/{record.year}: replacing {len(existing.products)}-product "
                f"record with {len(record.products)}-product record",
                extra={"source_path": record.source.path if record.source else None},
            )
            by_key[record.key] = record

    canonical = sorted(by_key.values(), key=lambda r: r.year, reverse=True)
    canonical.sort(key=lambda r: r.pharmacy_id)

    return canonical, superseded


class Deduplicator:
    """
    Resolves competing candidates to canonical records and reports what it dropped.
    """

    def __init__(self):
        self.superseded_count = 0

    def deduplicate(self, records: list[PeriodRecord]) -> list[PeriodRecord]:
        """
        Deduplicate a fully materialized candidate list.

        Args:
            records: All parsed candidates of the run

        Returns:
            Canonical records, one per (pharmacy_id, year)
        """
        canonical, superseded = deduplicate_periods(records)
        self.superseded_count = superseded

        if superseded:
            increment_counter(superseded_candidates_total, superseded)
        logger.info(
            f"Deduplicated {len(records)} candidates into {len(canonical)} canonical periods",
            extra={"candidates": len(records), "canonical": len(canonical), "superseded": superseded},
        )
        return canonical
