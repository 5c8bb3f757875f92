"""Decimal utilities for dashboard amounts.

All monetary arithmetic uses Decimal so that category totals always equal the
sum of their monthly cells exactly.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Iterable

ZERO = Decimal("0")

WHOLE_UNIT = Decimal("1")
ONE_DECIMAL = Decimal("0.1")


def to_decimal(value: object) -> Decimal:
    """Convert a provider value to Decimal.

    Floats go through ``str`` so that JSON numbers like ``1234.1`` keep their
    written digits instead of their binary expansion.

    Args:
        value: Decimal, int, float, or numeric string.

    Returns:
        The value as a finite Decimal.

    Raises:
        ValueError: If the value is missing, boolean, non-numeric, or not finite.
    """
    if value is None:
        raise ValueError("Amount is missing")
    if isinstance(value, bool):
        raise ValueError(f"Amount must be numeric, got boolean {value!r}")

    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, (int, float)):
        amount = Decimal(str(value))
    elif isinstance(value, str):
        try:
            amount = Decimal(value.strip())
        except InvalidOperation as e:
            raise ValueError(f"Cannot parse amount '{value}'") from e
    else:
        raise ValueError(f"Amount must be numeric, got {type(value).__name__}")

    if not amount.is_finite():
        raise ValueError(f"Amount must be finite, got {value!r}")
    return amount


def sum_amounts(amounts: Iterable[Decimal]) -> Decimal:
    """Sum Decimal amounts starting from an exact zero.

    Args:
        amounts: Amounts to add.

    Returns:
        Sum as Decimal.
    """
    return sum(amounts, ZERO)


def round_whole(amount: Decimal) -> Decimal:
    """Round to the nearest whole currency unit, halves away from zero."""
    return amount.quantize(WHOLE_UNIT, rounding=ROUND_HALF_UP)


def group_thousands(digits: str, separator: str = ".") -> str:
    """Insert a thousands separator into a string of digits.

    Args:
        digits: Unsigned integer digits, e.g. "1234567".
        separator: Grouping separator ("." for pt-BR, "," for en-US).

    Returns:
        Grouped digits, e.g. "1.234.567".
    """
    groups = []
    while len(digits) > 3:
        groups.append(digits[-3:])
        digits = digits[:-3]
    groups.append(digits)
    return separator.join(reversed(groups))


def format_amount(amount: Decimal, thousands_separator: str = ".") -> str:
    """Format a signed amount for the dashboard.

    Rules:
    - rounded to the nearest whole unit
    - digits grouped by thousands
    - negatives wrapped in parentheses, without a minus sign
    - anything that rounds to zero renders as the digit "0"

    Args:
        amount: Amount to format.
        thousands_separator: Grouping separator for the display locale.

    Returns:
        Formatted amount, e.g. "1.235" or "(800)".
    """
    rounded = round_whole(amount)
    if rounded == 0:
        return "0"

    grouped = group_thousands(str(int(abs(rounded))), thousands_separator)
    if rounded < 0:
        return f"({grouped})"
    return grouped


def format_percentage(value: Decimal) -> str:
    """Format a percentage with exactly one decimal place.

    Args:
        value: Percentage value (12.34 means 12.34%).

    Returns:
        String like "12.3" or "-5.0".
    """
    rounded = value.quantize(ONE_DECIMAL, rounding=ROUND_HALF_UP)
    if rounded == 0:
        rounded = abs(rounded)  # avoid "-0.0"
    return f"{rounded:.1f}"
