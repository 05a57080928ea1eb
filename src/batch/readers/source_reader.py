"""
Reader for point-of-sale export files.
"""

from pathlib import Path

from src.observability.logger import get_logger

logger = get_logger(__name__)


class SourceReader:
    """
    Reads export files as text.

    Exports are UTF-8 (possibly with a BOM); older point-of-sale versions
    write Windows-1252, which is used as a fallback.
    """

    def __init__(self, encoding: str = "utf-8-sig", fallback_encoding: str = "cp1252"):
        """
        Initialize source reader.

        Args:
            encoding: Preferred encoding
            fallback_encoding: Encoding used when the preferred one fails to decode
        """
        self.encoding = encoding
        self.fallback_encoding = fallback_encoding

    def read(self, file_path: str | Path) -> str:
        """
        Read an export file.

        Args:
            file_path: Path to the export

        Returns:
            File content as text

        Raises:
            OSError: If the file cannot be read
        """
        data = Path(file_path).read_bytes()
        try:
            return data.decode(self.encoding)
        except UnicodeDecodeError:
            logger.debug(
                f"{file_path} is not valid {self.encoding}; decoding as {self.fallback_encoding}"
            )
            return data.decode(self.fallback_encoding, errors="replace")
