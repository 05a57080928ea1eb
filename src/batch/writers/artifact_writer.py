"""
Artifact writer for the processed period dataset.

Writes are all-or-nothing: the document goes to a temporary file in the
destination directory, which then replaces the target in one rename.
"""

import json
import os
import tempfile
from pathlib import Path

from src.batch.errors import ArtifactWriteError
from src.core.models import ProcessedOutput
from src.observability.logger import get_logger

logger = get_logger(__name__)


def serialize_output(output: ProcessedOutput) -> str:
    """Render the artifact as indented UTF-8 JSON text."""
    return json.dumps(output.to_document(), indent=2, ensure_ascii=False) + "\n"


class ArtifactWriter:
    """
    Writes ProcessedOutput documents atomically.
    """

    def write(self, output: ProcessedOutput, output_path: str | Path) -> Path:
        """
        Write the artifact.

        Args:
            output: Artifact content
            output_path: Destination file

        Returns:
            The destination path

        Raises:
            ArtifactWriteError: If any step fails; the destination is left
                untouched and the temporary file is removed
        """
        path = Path(output_path)
        tmp_name: str | None = None

        try:
            content = serialize_output(output)
            path.parent.mkdir(parents=True, exist_ok=True)

            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{path.name}.", suffix=".tmp", dir=path.parent
            )
            os.close(fd)
            with open(tmp_name, "w", encoding="utf-8") as f:
                f.write(content)
                f.flush()
                os.fsync(f.fileno())

            os.replace(tmp_name, path)
            tmp_name = None

        except (OSError, TypeError, ValueError) as e:
            raise ArtifactWriteError(str(path), str(e)) from e

        finally:
            if tmp_name is not None:
                try:
                    os.unlink(tmp_name)
                except OSError:
                    logger.warning(f"Could not remove temporary file {tmp_name}")

        logger.info(
            f"Wrote {len(output.periods)} periods to {path}",
            extra={"output_path": str(path), "periods": len(output.periods)},
        )
        return path
