"""Tests for date parsing."""

import pytest
from datetime import date

from fintrack.core.errors import NormalizationError
from fintrack.normalizers.dates import parse_date, parse_optional_date, previous_month


class TestParseDate:
    """Test cases for parse_date."""

    @pytest.mark.parametrize(
        "value",
        ["2024-03-05", "2024/03/05", "05/03/2024", "05-03-2024", "05.03.2024", "2024-03-05T10:30:00Z"],
    )
    def test_supported_formats(self, value):
        assert parse_date(value, "data.data_emissao") == date(2024, 3, 5)

    def test_day_first_for_slashes(self):
        """Test that DD/MM is preferred over MM/DD."""
        assert parse_date("01/02/2024", "x") == date(2024, 2, 1)

    def test_invalid_calendar_date(self):
        with pytest.raises(NormalizationError) as exc_info:
            parse_date("31/02/2024", "data.data_vencimento")

        assert exc_info.value.field == "data.data_vencimento"

    @pytest.mark.parametrize("value", ["ontem", "", "   ", None, "2024-13-01"])
    def test_unparseable(self, value):
        with pytest.raises(NormalizationError):
            parse_date(value, "x")

    def test_optional_blank_is_none(self):
        assert parse_optional_date(None, "x") is None
        assert parse_optional_date("  ", "x") is None
        assert parse_optional_date("10/04/2024", "x") == date(2024, 4, 10)


class TestPreviousMonth:
    def test_mid_year(self):
        assert previous_month(date(2024, 4, 10)) == (3, 2024)

    def test_january_wraps_to_december(self):
        assert previous_month(date(2024, 1, 15)) == (12, 2023)
