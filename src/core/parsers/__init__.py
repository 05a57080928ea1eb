"""
Dialect parsers for point-of-sale exports.

Provides one parser per export dialect and a dispatching parse() entry point.
"""

from src.core.models import FULL_CATALOG, RANK_LIMITED, PeriodRecord, SourceMapping

from .base_parser import BaseParser, RowRejected
from .full_catalog_parser import FullCatalogParser
from .rank_limited_parser import RankLimitedParser

PARSER_REGISTRY: dict[str, type[BaseParser]] = {
    RANK_LIMITED: RankLimitedParser,
    FULL_CATALOG: FullCatalogParser,
}


def get_parser(dialect: str) -> BaseParser:
    """
    Instantiate the parser for a dialect.

    Raises:
        ValueError: If the dialect is unknown
    """
    parser_class = PARSER_REGISTRY.get(dialect)
    if not parser_class:
        raise ValueError(f"Unknown dialect: {dialect}")
    return parser_class()


def parse(
    dialect: str,
    raw_text: str,
    mapping_hints: SourceMapping | None = None,
    source_path: str | None = None,
) -> PeriodRecord | None:
    """Parse export text with the parser matching its dialect."""
    return get_parser(dialect).parse(raw_text, mapping_hints, source_path=source_path)


__all__ = [
    "BaseParser",
    "RowRejected",
    "RankLimitedParser",
    "FullCatalogParser",
    "PARSER_REGISTRY",
    "get_parser",
    "parse",
]
