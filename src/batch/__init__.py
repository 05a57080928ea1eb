"""
Batch processing module: pipeline runner, deduplication, readers and writers.
"""

from .dedup import Deduplicator, deduplicate_periods
from .errors import ArtifactWriteError, InputRootError, PipelineError
from .pipeline import PipelineResult, VracPipeline
from .readers import SourceReader, load_artifact
from .writers import ArtifactWriter, serialize_output

__all__ = [
    "VracPipeline",
    "PipelineResult",
    "Deduplicator",
    "deduplicate_periods",
    "PipelineError",
    "InputRootError",
    "ArtifactWriteError",
    "SourceReader",
    "load_artifact",
    "ArtifactWriter",
    "serialize_output",
]
