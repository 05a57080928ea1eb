"""
Batch readers for export files and processed artifacts.
"""

from .artifact_reader import load_artifact
from .source_reader import SourceReader

__all__ = [
    "SourceReader",
    "load_artifact",
]
