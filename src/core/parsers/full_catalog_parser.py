"""
FullCatalogParser - parses full product-list exports (ETAT_ListeProduitsVendus family).

Layout: metadata lines, a header "Code,Désignation,Qté vendue,Stock[,Prix]",
every product sold, then a trailer ("Code Géo : ...", "Nombre d'articles ...")
or a blank line.
"""

from src.core.models import FULL_CATALOG, Dialect, ProductSale
from src.utils.numeric import normalize_quantity, parse_optional_number
from src.utils.text import fold_text, split_csv_line

from .base_parser import BaseParser, RowRejected

# Accepted (accent-folded) header names per logical column
COLUMN_ALIASES = {
    "code": ("code",),
    "designation": ("designation",),
    "quantity": ("qte vendue", "qte vendu", "quantite vendue", "quantity sold", "qty sold"),
    "stock": ("stock",),
    "price": ("prix", "prix unitaire", "price", "unit price"),
}

# Columns that must all be present for a line to be the header
REQUIRED_COLUMNS = ("code", "designation", "quantity", "stock")

TRAILER_MARKERS = ("code geo :", "nombre d")


class FullCatalogParser(BaseParser):
    """
    Parses full-catalog exports: no rank filter, optional stock and price columns.
    """

    def parse_products(self, lines: list[str]) -> list[ProductSale]:
        for idx, line in enumerate(lines):
            columns = self._match_signature(split_csv_line(line))
            if columns is None:
                continue

            rows = []
            for row in lines[idx + 1:]:
                if not row.strip() or self._is_trailer(row):
                    break
                rows.append(split_csv_line(row))

            return self.collect_rows(rows, lambda parts: self._build_row(parts, columns))

        return []

    @staticmethod
    def _match_signature(header: list[str]) -> dict[str, int] | None:
        """Return column positions if the fields form the catalog header, else None."""
        folded = [fold_text(field) for field in header]
        columns: dict[str, int] = {}
        for name, aliases in COLUMN_ALIASES.items():
            for idx, field in enumerate(folded):
                if field in aliases:
                    columns[name] = idx
                    break

        if all(name in columns for name in REQUIRED_COLUMNS):
            return columns
        return None

    @staticmethod
    def _is_trailer(line: str) -> bool:
        folded = fold_text(line)
        return any(marker in folded for marker in TRAILER_MARKERS)

    def _build_row(self, parts: list[str], columns: dict[str, int]) -> ProductSale:
        if len(parts) < 3 or columns["quantity"] >= len(parts):
            raise RowRejected("malformed", "missing columns")

        code = parts[columns["code"]]
        if not code:
            raise RowRejected("malformed", "missing product code")

        quantity = normalize_quantity(parts[columns["quantity"]])
        if quantity <= 0:
            raise RowRejected("zero_quantity")

        return ProductSale(
            code=code,
            designation=_optional(parts, columns.get("designation")) or "",
            quantity_sold=quantity,
            stock=parse_optional_number(_optional(parts, columns.get("stock"))),
            price=parse_optional_number(_optional(parts, columns.get("price"))),
        )

    @property
    def dialect(self) -> Dialect:
        return FULL_CATALOG


def _optional(parts: list[str], idx: int | None) -> str | None:
    if idx is None or idx >= len(parts):
        return None
    return parts[idx]
