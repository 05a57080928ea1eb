"""
Source Registry models: mapping rows and resolved candidates.
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field

Dialect = Literal["rank_limited", "full_catalog"]

RANK_LIMITED: Dialect = "rank_limited"
FULL_CATALOG: Dialect = "full_catalog"
DIALECTS: tuple[Dialect, ...] = (RANK_LIMITED, FULL_CATALOG)


class SourceMapping(BaseModel):
    """
    One row of the source mapping table.

    Attributes:
        file: Export filename (e.g. "ETAT_2080QTE5.csv")
        subdir: Preferred subdirectory under the input root (optional)
        dialect: Export dialect of the file
        pharmacy_id: Expected pharmacy
        period_label: Display label for the period
        year: Expected calendar year
    """

    file: str = Field(..., min_length=1)
    subdir: str | None = None
    dialect: Dialect
    pharmacy_id: str = Field(..., min_length=1)
    period_label: str
    year: int

    @property
    def key(self) -> tuple[str, int]:
        return (self.pharmacy_id, self.year)

    class Config:
        frozen = True


class SourceCandidate(BaseModel):
    """
    A mapping row resolved against an input root.

    paths lists the locations to try, in order: the subdirectory-qualified
    path first, then the root-level path with the same filename.
    """

    mapping: SourceMapping
    paths: tuple[Path, ...]

    @property
    def dialect(self) -> Dialect:
        return self.mapping.dialect

    def existing_path(self) -> Path | None:
        """Return the first path that exists as a file, or None."""
        for path in self.paths:
            if path.is_file():
                return path
        return None

    class Config:
        frozen = True
