"""Date parsing and month helpers."""

import re
from datetime import date, datetime

MONTHS_PER_YEAR = 12

# Default month abbreviations (pt-BR), index 0 = January
DEFAULT_MONTH_LABELS = (
    "Jan", "Fev", "Mar", "Abr", "Mai", "Jun",
    "Jul", "Ago", "Set", "Out", "Nov", "Dez",
)

# Postings carry calendar dates as YYYY-MM-DD. A trailing time part
# ("2024-03-05T00:00:00") is tolerated because some providers emit it.
_ISO_DATE_PATTERN = re.compile(r"^(\d{4})-(\d{2})-(\d{2})(?:[T ].*)?$")


def parse_date(raw_date: object) -> date:
    """Parse a posting date.

    Args:
        raw_date: A date, a datetime, or an ISO "YYYY-MM-DD" string.

    Returns:
        Parsed date object.

    Raises:
        ValueError: If the value is empty or not a valid calendar date.
    """
    if isinstance(raw_date, datetime):
        return raw_date.date()
    if isinstance(raw_date, date):
        return raw_date
    if not isinstance(raw_date, str) or not raw_date.strip():
        raise ValueError(f"Expected an ISO date string, got {raw_date!r}")

    match = _ISO_DATE_PATTERN.match(raw_date.strip())
    if not match:
        raise ValueError(f"Cannot parse date: '{raw_date}' (expected YYYY-MM-DD)")

    year, month, day = (int(part) for part in match.groups())
    try:
        return date(year, month, day)
    except ValueError as e:
        raise ValueError(f"Invalid calendar date '{raw_date}': {e}") from e


def date_to_iso(d: date) -> str:
    """Convert a date to ISO 8601 format (YYYY-MM-DD)."""
    return d.isoformat()


def month_index(d: date) -> int:
    """Zero-based month slot of a date (0 = January, 11 = December)."""
    return d.month - 1


def is_date_in_range(
    d: date,
    start_date: date | None = None,
    end_date: date | None = None,
) -> bool:
    """Check if a date is within a range.

    Args:
        d: Date to check.
        start_date: Start of range (inclusive). None means no lower bound.
        end_date: End of range (inclusive). None means no upper bound.

    Returns:
        True if date is within range.
    """
    if start_date is not None and d < start_date:
        return False
    if end_date is not None and d > end_date:
        return False
    return True
