"""
Reader for processed artifacts, for downstream consumers.
"""

import json
from pathlib import Path

from src.core.models import ProcessedOutput


def load_artifact(file_path: str | Path) -> ProcessedOutput:
    """
    Load and validate a processed artifact.

    Args:
        file_path: Path to the JSON artifact

    Returns:
        ProcessedOutput with validated period records

    Raises:
        FileNotFoundError: If the artifact does not exist
        ValueError: If the document is not a valid artifact
    """
    path = Path(file_path)
    if not path.exists():
        raise FileNotFoundError(f"Processed artifact not found: {file_path}")

    with open(path, encoding="utf-8") as f:
        document = json.load(f)

    if not isinstance(document, dict) or "periods" not in document:
        raise ValueError("Artifact must contain a 'periods' array")

    return ProcessedOutput.model_validate(document)
