"""
Locale-aware numeric normalization for point-of-sale exports.

The pharmacy exports use French-style thousands grouping: "2,561" and
"2 561" both mean 2561. A comma is never a decimal separator.
"""

import math
import re
from typing import Any

_WHITESPACE = re.compile(r"\s+")


def _clean(value: Any) -> str:
    """Strip all whitespace (including non-breaking spaces) and commas."""
    if value is None:
        return ""
    text = str(value)
    text = _WHITESPACE.sub("", text)
    return text.replace(",", "")


def normalize_quantity(value: Any) -> int:
    """
    Normalize a textual quantity field to an integer.

    Args:
        value: Raw field value (usually a string from a CSV row)

    Returns:
        Rounded integer value, or 0 for empty, non-numeric or malformed input

    Examples:
        >>> normalize_quantity("2,561")
        2561
        >>> normalize_quantity("2 561")
        2561
        >>> normalize_quantity("—")
        0
    """
    cleaned = _clean(value)
    if not cleaned:
        return 0

    try:
        number = float(cleaned)
    except (TypeError, ValueError):
        return 0

    if not math.isfinite(number):
        return 0

    # Halves round up ("0.5" -> 1), not to even
    return math.floor(number + 0.5)


def parse_optional_number(value: Any) -> int | float | None:
    """
    Parse an optional numeric column (stock, price).

    Uses the same separator rules as normalize_quantity but distinguishes
    "absent" from zero.

    Returns:
        int when the value is integral, float otherwise, None when blank or malformed
    """
    cleaned = _clean(value)
    if not cleaned:
        return None

    try:
        number = float(cleaned)
    except (TypeError, ValueError):
        return None

    if not math.isfinite(number):
        return None

    if number.is_integer():
        return int(number)
    return number
