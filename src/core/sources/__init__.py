"""
Source Registry and mapping configuration.
"""

from .mapping_config import SourceMappingLoader
from .registry import DEFAULT_MAPPINGS, SourceRegistry

__all__ = [
    "SourceRegistry",
    "SourceMappingLoader",
    "DEFAULT_MAPPINGS",
]
