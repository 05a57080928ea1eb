"""
Text helpers shared by the parsers and the taxonomy classifier.
"""

import csv
import unicodedata


def fold_text(value: str | None) -> str:
    """
    Lowercase and strip accents ("Qté vendue" -> "qte vendue").

    Also drops a leading byte-order mark and collapses inner whitespace.
    """
    if not value:
        return ""
    text = value.replace("\ufeff", "")
    decomposed = unicodedata.normalize("NFKD", text)
    stripped = "".join(c for c in decomposed if not unicodedata.combining(c))
    return " ".join(stripped.lower().split())


def split_csv_line(line: str) -> list[str]:
    """
    Split one export row on commas, respecting double-quoted fields.

    Fields are trimmed. A line the csv module cannot tokenize yields [].
    """
    try:
        fields = next(csv.reader([line]), [])
    except csv.Error:
        return []
    return [field.strip() for field in fields]
