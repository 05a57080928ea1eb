"""
Date helpers for period statements found in export headers.
"""

import re
from datetime import date, datetime

# "Période du 01/08/2025 au 10/12/2025" or "Period from 01/08/2025 to 10/12/2025"
PERIOD_PATTERN = re.compile(
    r"(?:du|from)\s+(\d{2}/\d{2}/\d{4})\s+(?:au|to)\s+(\d{2}/\d{2}/\d{4})",
    re.IGNORECASE,
)

# Reporting window used when an export carries no period statement
DEFAULT_WINDOW_START = (8, 1)
DEFAULT_WINDOW_END = (12, 10)

MONTH_ABBREVIATIONS = [
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
]


def parse_day_first(value: str) -> date | None:
    """Parse a dd/mm/yyyy string, returning None when it is not a real date."""
    try:
        return datetime.strptime(value.strip(), "%d/%m/%Y").date()
    except (AttributeError, ValueError):
        return None


def to_iso_date(value: str) -> str | None:
    """Convert dd/mm/yyyy to ISO 8601 (yyyy-mm-dd)."""
    parsed = parse_day_first(value)
    return parsed.isoformat() if parsed else None


def extract_period(lines: list[str]) -> tuple[date, date] | None:
    """
    Find the first "from DATE to DATE" statement in the given lines.

    Args:
        lines: Metadata lines from the top of an export

    Returns:
        Tuple of (start, end) dates, or None if no valid statement is found
    """
    for line in lines:
        match = PERIOD_PATTERN.search(line)
        if not match:
            continue
        start = parse_day_first(match.group(1))
        end = parse_day_first(match.group(2))
        if start and end:
            return start, end
    return None


def default_window(year: int) -> tuple[date, date]:
    """Default Aug-Dec reporting window for a calendar year."""
    return (
        date(year, *DEFAULT_WINDOW_START),
        date(year, *DEFAULT_WINDOW_END),
    )


def period_label(start: date, end: date) -> str:
    """Build a display label such as "Aug–Dec 2025"."""
    first = MONTH_ABBREVIATIONS[start.month - 1]
    last = MONTH_ABBREVIATIONS[end.month - 1]
    if start.year != end.year:
        return f"{first} {start.year}–{last} {end.year}"
    return f"{first}–{last} {end.year}"
