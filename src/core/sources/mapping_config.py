"""
Source mapping configuration management.

Loads the (pharmacy, year) -> file mapping table from YAML.
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from src.core.models import DIALECTS, SourceMapping


class SourceMappingLoader:
    """
    Loads source mappings from YAML configuration files.

    Expected YAML format:
    ```yaml
    sources:
      rank_limited:
        - file: ETAT_2080QTE5.csv
          subdir: TANDA/2080
          pharmacy_id: tanda
          year: 2025
          period_label: "Aug–Dec 2025"   # optional

      full_catalog:
        - file: ETAT_ListeProduitsVendus1.csv
          subdir: TANDA
          pharmacy_id: tanda
          year: 2025
    ```
    """

    def __init__(self, config_path: str | Path):
        """
        Initialize the mapping loader.

        Args:
            config_path: Path to the YAML configuration file
        """
        self.config_path = Path(config_path)
        if not self.config_path.exists():
            raise FileNotFoundError(f"Source mapping file not found: {config_path}")

    def load_mappings(self) -> list[SourceMapping]:
        """
        Load and parse source mappings from the YAML file.

        Returns:
            List of SourceMapping rows in file order

        Raises:
            ValueError: If YAML is invalid or rows are missing required fields
        """
        try:
            with open(self.config_path, encoding="utf-8") as f:
                config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {self.config_path}: {e}") from e

        if not config or "sources" not in config:
            raise ValueError("Configuration file must contain 'sources' section")

        sources = config["sources"]
        if not isinstance(sources, dict):
            raise ValueError("'sources' must map a dialect name to a list of files")

        mappings = []
        for dialect, rows in sources.items():
            if dialect not in DIALECTS:
                raise ValueError(f"Unknown dialect '{dialect}'. Must be one of: {', '.join(DIALECTS)}")
            if not isinstance(rows, list):
                raise ValueError(f"Sources for dialect '{dialect}' must be a list")

            for idx, row in enumerate(rows):
                mappings.append(self._parse_row(dialect, row, idx))

        return mappings

    def _parse_row(self, dialect: str, row: dict[str, Any], idx: int) -> SourceMapping:
        """
        Parse a single mapping row.

        Args:
            dialect: Dialect section the row belongs to
            row: The row definition from YAML
            idx: Index of the row within its section (for error messages)

        Returns:
            SourceMapping

        Raises:
            ValueError: If the row is invalid
        """
        if not isinstance(row, dict):
            raise ValueError(f"Entry {idx} of '{dialect}' must be a mapping")

        for required in ("file", "pharmacy_id", "year"):
            if required not in row:
                raise ValueError(f"Entry {idx} of '{dialect}' is missing '{required}'")

        year = row["year"]
        period_label = row.get("period_label", f"Aug–Dec {year}")

        try:
            return SourceMapping(
                file=row["file"],
                subdir=row.get("subdir"),
                dialect=dialect,
                pharmacy_id=row["pharmacy_id"],
                period_label=period_label,
                year=year,
            )
        except ValidationError as e:
            raise ValueError(f"Invalid entry {idx} of '{dialect}': {e}") from e
