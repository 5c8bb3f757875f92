"""Tests for display formatting and shared utilities."""

from datetime import date, datetime
from decimal import Decimal

import pytest

from financial_dashboard.config import Config
from financial_dashboard.models.report import TrendResult
from financial_dashboard.output.terminal import amount_style, trend_text
from financial_dashboard.utils.date_utils import is_date_in_range, month_index, parse_date
from financial_dashboard.utils.decimal_utils import (
    format_amount,
    format_percentage,
    group_thousands,
    to_decimal,
)
from financial_dashboard.utils.sanitize import sanitize_cell


class TestFormatAmount:
    """Tests for format_amount."""

    @pytest.mark.parametrize(
        ("amount", "expected"),
        [
            ("1234.5", "1.235"),
            ("-800", "(800)"),
            ("0", "0"),
            ("999", "999"),
            ("1000", "1.000"),
            ("-1234567.89", "(1.234.568)"),
            ("0.5", "1"),
            ("-0.5", "(1)"),
        ],
    )
    def test_formats(self, amount: str, expected: str) -> None:
        """Test rounding, grouping and negative parentheses."""
        assert format_amount(Decimal(amount)) == expected

    def test_rounds_to_zero_without_parentheses(self) -> None:
        """Test a tiny negative amount renders as a plain zero."""
        assert format_amount(Decimal("-0.4")) == "0"

    def test_custom_separator(self) -> None:
        """Test the grouping separator is configurable."""
        assert format_amount(Decimal("1234567"), thousands_separator=",") == "1,234,567"


class TestFormatPercentage:
    """Tests for format_percentage."""

    def test_one_decimal(self) -> None:
        """Test percentages keep exactly one decimal."""
        assert format_percentage(Decimal("12.34")) == "12.3"
        assert format_percentage(Decimal("-5")) == "-5.0"

    def test_half_up(self) -> None:
        """Test halves round away from zero."""
        assert format_percentage(Decimal("0.25")) == "0.3"

    def test_no_negative_zero(self) -> None:
        """Test a value rounding to zero prints without a sign."""
        assert format_percentage(Decimal("-0.01")) == "0.0"


class TestHelpers:
    """Tests for small conversion helpers."""

    def test_group_thousands(self) -> None:
        """Test digit grouping."""
        assert group_thousands("1234567") == "1.234.567"
        assert group_thousands("123") == "123"

    def test_to_decimal_rejects_bool(self) -> None:
        """Test booleans are not treated as numbers."""
        with pytest.raises(ValueError):
            to_decimal(False)

    def test_parse_date_variants(self) -> None:
        """Test date, datetime and ISO strings."""
        assert parse_date("2024-07-01") == date(2024, 7, 1)
        assert parse_date(datetime(2024, 7, 1, 12, 30)) == date(2024, 7, 1)
        assert parse_date(date(2024, 7, 1)) == date(2024, 7, 1)

    def test_parse_date_rejects_empty(self) -> None:
        """Test empty strings are rejected."""
        with pytest.raises(ValueError):
            parse_date("")

    def test_month_index(self) -> None:
        """Test January maps to slot 0 and December to 11."""
        assert month_index(date(2024, 1, 1)) == 0
        assert month_index(date(2024, 12, 31)) == 11

    def test_is_date_in_range(self) -> None:
        """Test inclusive bounds."""
        assert is_date_in_range(date(2024, 1, 1), date(2024, 1, 1), date(2024, 1, 1))
        assert not is_date_in_range(date(2024, 1, 2), None, date(2024, 1, 1))


class TestSanitizeCell:
    """Tests for spreadsheet formula neutralization."""

    @pytest.mark.parametrize("value", ["=SUM(A1)", "+1", "-2", "@cmd", "|calc"])
    def test_formula_prefixes_quoted(self, value: str) -> None:
        """Test formula-looking text gets a leading quote."""
        assert sanitize_cell(value) == "'" + value

    def test_plain_text_unchanged(self) -> None:
        """Test normal text passes through."""
        assert sanitize_cell("Receita de Vendas") == "Receita de Vendas"

    def test_none(self) -> None:
        """Test None becomes an empty cell."""
        assert sanitize_cell(None) == ""


class TestTrendText:
    """Tests for the KPI trend label."""

    def test_no_comparison(self) -> None:
        """Test the no-comparison label when no percentage exists."""
        assert trend_text(TrendResult(), Config()) == "Sem dados para comparação"

    def test_templated_percentage(self) -> None:
        """Test the configured template receives the formatted percentage."""
        trend = TrendResult(percentage=Decimal("-12.5"), last_month=3, previous_month=2)
        assert trend_text(trend, Config()) == "Variação vs mês anterior -12.5%"

    def test_amount_style(self) -> None:
        """Test sign-dependent colors."""
        assert amount_style(Decimal("-1")) == "red"
        assert amount_style(Decimal("1")) == "green"
        assert amount_style(Decimal("0")) == "dim"
