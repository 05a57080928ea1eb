"""
Base parser interface for point-of-sale export dialects.

All dialect parsers inherit from BaseParser and implement parse_products().
parse() itself is total: any input text yields a PeriodRecord or None.
"""

from abc import ABC, abstractmethod

from src.core.models import Dialect, PeriodRecord, ProductSale, SourceMapping, SourceRef
from src.core.reference import detect_pharmacy
from src.observability.logger import get_logger
from src.observability.metrics import (
    record_mapping_mismatch,
    record_row_skipped,
    record_rows_parsed,
)
from src.utils.dates import default_window, extract_period, period_label

logger = get_logger(__name__)


class RowRejected(Exception):
    """Raised inside a parser when a product row must be skipped."""

    def __init__(self, reason: str, message: str = ""):
        self.reason = reason
        super().__init__(f"{reason}: {message}" if message else reason)


class BaseParser(ABC):
    """
    Abstract base class for export dialect parsers.

    Subclasses locate the product table and turn its rows into ProductSale
    objects; the base class handles identity, period and record assembly.
    """

    def parse(
        self,
        raw_text: str,
        mapping_hints: SourceMapping | None = None,
        source_path: str | None = None,
    ) -> PeriodRecord | None:
        """
        Parse one export into a PeriodRecord.

        Args:
            raw_text: Full text of the export
            mapping_hints: Source mapping row the file was found through (optional)
            source_path: Path of the file, for provenance and logs

        Returns:
            PeriodRecord, or None when the pharmacy cannot be identified,
            no valid product rows exist, or the period cannot be established
        """
        try:
            return self._parse(raw_text, mapping_hints, source_path)
        except Exception as e:
            logger.warning(
                f"Discarding {self.dialect} export after unexpected parse error: {e}",
                extra={"source_path": source_path},
                exc_info=True,
            )
            return None

    def _parse(
        self,
        raw_text: str,
        hints: SourceMapping | None,
        source_path: str | None,
    ) -> PeriodRecord | None:
        lines = (raw_text or "").splitlines()

        pharmacy_id = detect_pharmacy(lines)
        if pharmacy_id is None:
            logger.info(
                "Export does not name a known pharmacy; treating as unmapped",
                extra={"source_path": source_path, "dialect": self.dialect},
            )
            return None

        products = self.parse_products(lines)
        record_rows_parsed(self.dialect, len(products))
        if not products:
            logger.info(
                "Export has no valid product rows",
                extra={"source_path": source_path, "dialect": self.dialect},
            )
            return None

        period = extract_period(lines)
        if period is None:
            if hints is None:
                logger.info(
                    "Export has no period statement and no mapping year",
                    extra={"source_path": source_path},
                )
                return None
            period = default_window(hints.year)
            logger.debug(
                f"No period statement; using default window for {hints.year}",
                extra={"source_path": source_path},
            )

        start, end = period
        year = end.year

        label = period_label(start, end)
        if hints is not None:
            if hints.pharmacy_id != pharmacy_id:
                record_mapping_mismatch("pharmacy_id")
                logger.warning(
                    f"Export names pharmacy '{pharmacy_id}' but is mapped to '{hints.pharmacy_id}'",
                    extra={"source_path": source_path},
                )
            if hints.year != year:
                record_mapping_mismatch("year")
                logger.warning(
                    f"Export covers {year} but is mapped to {hints.year}",
                    extra={"source_path": source_path},
                )
            else:
                label = hints.period_label

        source = SourceRef(dialect=self.dialect, path=source_path) if source_path else None
        return PeriodRecord.build(
            pharmacy_id=pharmacy_id,
            period_label=label,
            period_start=start,
            period_end=end,
            year=year,
            products=products,
            source=source,
        )

    def collect_rows(self, rows: list[list[str]], build) -> list[ProductSale]:
        """
        Apply a row builder to every row, skipping rejected rows.

        Args:
            rows: Tokenized table rows
            build: Callable turning one row into a ProductSale or raising RowRejected

        Returns:
            Accepted products in input order
        """
        products = []
        for parts in rows:
            try:
                products.append(build(parts))
            except RowRejected as rejected:
                record_row_skipped(self.dialect, rejected.reason)
                logger.debug(f"Skipped row {parts!r}: {rejected}")
        return products

    @abstractmethod
    def parse_products(self, lines: list[str]) -> list[ProductSale]:
        """
        Extract product rows from the export lines.

        Args:
            lines: All lines of the export

        Returns:
            Valid products, possibly empty
        """
        pass

    @property
    @abstractmethod
    def dialect(self) -> Dialect:
        """Return the dialect identifier."""
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(dialect={self.dialect})"
