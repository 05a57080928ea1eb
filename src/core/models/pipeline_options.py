"""
PipelineOptions model: run configuration for the batch pipeline.
"""

from pathlib import Path

from pydantic import BaseModel, Field


class PipelineOptions(BaseModel):
    """
    Options for a single pipeline run.

    Attributes:
        vrac_root: Root directory of the export files
        output_path: Where the JSON artifact is written
        enrich: Run the enrichment stages after deduplication
        max_workers: Threads used to parse candidate files (1 = sequential)
        mappings_path: Optional YAML source mapping table (built-in table if None)
        dry_run: Run everything except writing the artifact
    """

    vrac_root: Path = Path("VRAC")
    output_path: Path = Path("data/vrac/processed.json")
    enrich: bool = False
    max_workers: int = Field(1, ge=1, le=32)
    mappings_path: Path | None = None
    dry_run: bool = False

    class Config:
        json_schema_extra = {
            "example": {
                "vrac_root": "VRAC",
                "output_path": "data/vrac/processed.json",
                "enrich": True,
                "max_workers": 4,
                "mappings_path": "config/source_mappings.yaml",
                "dry_run": False
            }
        }
