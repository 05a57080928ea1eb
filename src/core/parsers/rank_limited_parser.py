"""
RankLimitedParser - parses "top-N" sales exports (ETAT_2080QTE family).

Layout: a few metadata lines (pharmacy name, period statement), a header
row such as "Rang,Code,Désignation,Qté vendue", ranked product rows, then
a terminator (blank line or a "LISTE DES ..." section).
"""

from src.core.models import RANK_LIMITED, Dialect, ProductSale
from src.utils.numeric import normalize_quantity
from src.utils.text import fold_text, split_csv_line

from .base_parser import BaseParser, RowRejected

RANK_MARKERS = ("rang", "rank")
DESIGNATION_MARKER = "signation"
TERMINATOR_PREFIX = "liste des"


class RankLimitedParser(BaseParser):
    """
    Parses rank-limited exports, keeping the top-N rows with a positive quantity.

    Parameters:
    - top_n: Size of the rank window (default 20)
    - header_scan_lines: How many leading lines may contain the header row
    """

    def __init__(self, top_n: int = 20, header_scan_lines: int = 40):
        if top_n < 1:
            raise ValueError("top_n must be at least 1")
        self.top_n = top_n
        self.header_scan_lines = header_scan_lines

    def parse_products(self, lines: list[str]) -> list[ProductSale]:
        header_idx = self._find_header(lines)
        if header_idx is None:
            return []

        columns = self._locate_columns(split_csv_line(lines[header_idx]))

        rows = []
        for line in lines[header_idx + 1:]:
            if not line.strip() or fold_text(line).startswith(TERMINATOR_PREFIX):
                break
            rows.append(split_csv_line(line))

        return self.collect_rows(rows, lambda parts: self._build_row(parts, columns))

    def _find_header(self, lines: list[str]) -> int | None:
        """Index of the first line carrying the rank, code and designation markers."""
        for idx, line in enumerate(lines[:self.header_scan_lines]):
            folded = [fold_text(field) for field in split_csv_line(line)]
            has_rank = any(field in RANK_MARKERS for field in folded)
            has_code = any("code" in field for field in folded)
            has_designation = any(DESIGNATION_MARKER in field for field in folded)
            if has_rank and has_code and has_designation:
                return idx
        return None

    @staticmethod
    def _locate_columns(header: list[str]) -> dict[str, int | None]:
        """Map logical columns to header positions (positional defaults when absent)."""
        folded = [fold_text(field) for field in header]

        def find(predicate, default):
            for idx, field in enumerate(folded):
                if predicate(field):
                    return idx
            return default

        return {
            "rank": find(lambda f: f in RANK_MARKERS, 0),
            "code": find(lambda f: "code" in f, 1),
            "designation": find(lambda f: DESIGNATION_MARKER in f, 2),
            # None means "last column of the row"
            "quantity": find(
                lambda f: ("qt" in f and "vendu" in f) or "quantity" in f or f == "qty",
                None,
            ),
        }

    def _build_row(self, parts: list[str], columns: dict[str, int | None]) -> ProductSale:
        if len(parts) < 3:
            raise RowRejected("malformed", "fewer than 3 columns")

        try:
            rank = int(parts[columns["rank"]])
        except (IndexError, ValueError):
            raise RowRejected("malformed", "rank is not an integer")

        code = _field(parts, columns["code"])
        if not code:
            raise RowRejected("malformed", "missing product code")

        qty_idx = columns["quantity"]
        if qty_idx is not None and qty_idx >= len(parts):
            raise RowRejected("malformed", "missing quantity column")
        quantity = normalize_quantity(parts[-1] if qty_idx is None else parts[qty_idx])

        if not 1 <= rank <= self.top_n:
            raise RowRejected("out_of_rank", f"rank {rank} outside top {self.top_n}")
        if quantity <= 0:
            raise RowRejected("zero_quantity")

        return ProductSale(
            code=code,
            designation=_field(parts, columns["designation"]),
            quantity_sold=quantity,
        )

    @property
    def dialect(self) -> Dialect:
        return RANK_LIMITED


def _field(parts: list[str], idx: int | None) -> str:
    if idx is None or idx >= len(parts):
        return ""
    return parts[idx]
