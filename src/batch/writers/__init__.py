"""
Batch artifact writers.
"""

from .artifact_writer import ArtifactWriter, serialize_output

__all__ = [
    "ArtifactWriter",
    "serialize_output",
]
