"""Tests for amount parsing."""

import pytest
from decimal import Decimal

from fintrack.core.errors import NormalizationError
from fintrack.normalizers import parse_amount


class TestParseAmount:
    """Test cases for parse_amount."""

    @pytest.mark.parametrize(
        "value",
        ["1234.56", "1.234,56", "1,234.56", "R$ 1.234,56", "1234,56", 1234.56],
    )
    def test_separator_styles_agree(self, value):
        """Test that dot-decimal and comma-decimal inputs parse to the same amount."""
        assert parse_amount(value, "data.valor_total") == Decimal("1234.56")

    def test_integer_amount(self):
        assert parse_amount(500, "data.valor_total") == Decimal("500.00")

    def test_lone_separator_with_three_digits_is_thousands(self):
        assert parse_amount("1.234", "x") == Decimal("1234.00")
        assert parse_amount("1,234", "x") == Decimal("1234.00")

    def test_repeated_separator_is_thousands(self):
        assert parse_amount("1.234.567", "x") == Decimal("1234567.00")

    def test_rounds_half_up_to_cents(self):
        assert parse_amount("1.234,565", "x") == Decimal("1234.57")
        assert parse_amount(0.125, "x") == Decimal("0.13")

    def test_result_has_two_places(self):
        assert parse_amount("7", "x").as_tuple().exponent == -2

    def test_negative_rejected_by_default(self):
        """Test that a negative total is a normalization error."""
        with pytest.raises(NormalizationError) as exc_info:
            parse_amount("-10,00", "data.valor_total")

        assert exc_info.value.field == "data.valor_total"

    @pytest.mark.parametrize("value", ["-12,50", "12,50-", "(12,50)"])
    def test_negative_styles_when_allowed(self, value):
        assert parse_amount(value, "x", allow_negative=True) == Decimal("-12.50")

    @pytest.mark.parametrize("value", ["abc", "", "12a", "1.2.3,4,5", None, True])
    def test_non_numeric_rejected(self, value):
        with pytest.raises(NormalizationError) as exc_info:
            parse_amount(value, "data.itens[0].valor")

        assert exc_info.value.field == "data.itens[0].valor"
        assert exc_info.value.value == value

    @pytest.mark.parametrize("value", [float("inf"), float("nan")])
    def test_non_finite_rejected(self, value):
        with pytest.raises(NormalizationError):
            parse_amount(value, "x")

    @pytest.mark.parametrize("value", ["1" * 30, 1e30, "1.000.000.000.000,00"])
    def test_out_of_range_rejected(self, value):
        with pytest.raises(NormalizationError) as exc_info:
            parse_amount(value, "data.valor_total")

        assert exc_info.value.field == "data.valor_total"

    def test_largest_amount_accepted(self):
        assert parse_amount("999.999.999.999,99", "x") == Decimal("999999999999.99")
