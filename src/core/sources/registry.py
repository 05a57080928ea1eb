"""
Source Registry: maps (pharmacy, year) keys to candidate export files.

The candidate order is pinned by the mapping table, never by directory
listing, so that deduplication tie-breaks are reproducible on any platform.
"""

from pathlib import Path

from src.core.models import (
    FULL_CATALOG,
    RANK_LIMITED,
    SourceCandidate,
    SourceMapping,
)

from .mapping_config import SourceMappingLoader


def _rank_limited(file: str, subdir: str, pharmacy_id: str, year: int) -> SourceMapping:
    return SourceMapping(
        file=file,
        subdir=subdir,
        dialect=RANK_LIMITED,
        pharmacy_id=pharmacy_id,
        period_label=f"Aug–Dec {year}",
        year=year,
    )


def _full_catalog(file: str, subdir: str, pharmacy_id: str, year: int) -> SourceMapping:
    return SourceMapping(
        file=file,
        subdir=subdir,
        dialect=FULL_CATALOG,
        pharmacy_id=pharmacy_id,
        period_label=f"Aug–Dec {year}",
        year=year,
    )


DEFAULT_MAPPINGS: tuple[SourceMapping, ...] = (
    # Top-20 exports
    _rank_limited("ETAT_2080QTE1.csv", "PROLIFE/2080", "prolife", 2025),
    _rank_limited("ETAT_2080QTE2.csv", "PROLIFE/2080", "prolife", 2024),
    _rank_limited("ETAT_2080QTE3.csv", "PROLIFE/2080", "prolife", 2023),
    _rank_limited("ETAT_2080QTE4.csv", "PROLIFE/2080", "prolife", 2022),
    _rank_limited("ETAT_2080QTE5.csv", "TANDA/2080", "tanda", 2025),
    _rank_limited("ETAT_2080QTE6.csv", "TANDA/2080", "tanda", 2024),
    _rank_limited("ETAT_2080QTE7.csv", "TANDA/2080", "tanda", 2023),
    _rank_limited("ETAT_2080QTE8.csv", "TANDA/2080", "tanda", 2022),
    # Full product lists
    _full_catalog("ETAT_ListeProduitsVendus1.csv", "TANDA", "tanda", 2025),
    _full_catalog("ETAT_ListeProduitsVendus2.csv", "TANDA", "tanda", 2024),
    _full_catalog("ETAT_ListeProduitsVendus3.csv", "TANDA", "tanda", 2023),
    _full_catalog("ETAT_ListeProduitsVendus4.csv", "TANDA", "tanda", 2022),
)


class SourceRegistry:
    """
    Lookup table from (pharmacy_id, year) to ordered source candidates.

    Preference order: rank-limited mappings before full-catalog mappings,
    each in table order. Within a mapping the subdirectory path is tried
    before the root-level path.
    """

    DIALECT_PRIORITY = {RANK_LIMITED: 0, FULL_CATALOG: 1}

    def __init__(self, mappings: list[SourceMapping] | tuple[SourceMapping, ...] | None = None):
        """
        Initialize the registry.

        Args:
            mappings: Mapping rows (defaults to the built-in table)
        """
        rows = list(DEFAULT_MAPPINGS if mappings is None else mappings)
        # Stable sort keeps table order within each dialect
        self.mappings: list[SourceMapping] = sorted(
            rows, key=lambda m: self.DIALECT_PRIORITY[m.dialect]
        )

    @classmethod
    def from_yaml(cls, config_path: str | Path) -> "SourceRegistry":
        """Build a registry from a YAML mapping file."""
        return cls(SourceMappingLoader(config_path).load_mappings())

    def keys(self) -> list[tuple[str, int]]:
        """All (pharmacy_id, year) keys in first-appearance order."""
        seen: dict[tuple[str, int], None] = {}
        for mapping in self.mappings:
            seen.setdefault(mapping.key, None)
        return list(seen)

    def resolve(self, mapping: SourceMapping, root: str | Path) -> SourceCandidate:
        """
        Resolve one mapping row against an input root.

        Args:
            mapping: Mapping row
            root: Input root directory

        Returns:
            SourceCandidate whose paths are [root/subdir/file, root/file]
        """
        root = Path(root)
        paths = []
        if mapping.subdir:
            paths.append(root / mapping.subdir / mapping.file)
        paths.append(root / mapping.file)
        return SourceCandidate(mapping=mapping, paths=tuple(paths))

    def lookup(self, pharmacy_id: str, year: int, root: str | Path = ".") -> list[SourceCandidate]:
        """
        Get the ordered candidates for one key.

        Args:
            pharmacy_id: Pharmacy identifier
            year: Calendar year
            root: Input root directory

        Returns:
            Candidates in preference order (empty if the key is unknown)
        """
        return [
            self.resolve(mapping, root)
            for mapping in self.mappings
            if mapping.key == (pharmacy_id, year)
        ]

    def candidates(self, root: str | Path = ".") -> list[SourceCandidate]:
        """All candidates, in the pinned discovery order used by the pipeline."""
        return [self.resolve(mapping, root) for mapping in self.mappings]

    def __len__(self) -> int:
        return len(self.mappings)
