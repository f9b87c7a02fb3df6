"""
Tests for money rounding and formatting.
"""
import math
import pytest
from smartdhandha.money import format_currency, mul2, percent2, round2, to_amount


class TestRound2:
    """Half-away-from-zero rounding to paise."""

    @pytest.mark.parametrize("value, expected", [
        (2.675, 2.68),
        (1.005, 1.01),
        (0.125, 0.13),
        (-2.345, -2.35),
        (99.999, 100.0),
        (10, 10.0),
    ])
    def test_rounds_halves_away_from_zero(self, value, expected):
        assert round2(value) == expected

    def test_missing_values_are_zero(self):
        """None and NaN round to zero."""
        assert round2(None) == 0.0
        assert round2(float("nan")) == 0.0

    def test_no_negative_zero(self):
        """Tiny negatives round to a plain zero."""
        result = round2(-0.001)
        assert result == 0.0
        assert math.copysign(1, result) == 1

    def test_idempotent(self):
        for value in (3 * 33.333, 10.005, 0.1 + 0.2, 123456.785):
            assert round2(round2(value)) == round2(value)

    def test_huge_and_infinite_values(self):
        """Values past the default decimal precision still round."""
        assert round2(1e27) == 1e27
        assert round2(-1.5e300) == -1.5e300
        assert round2(float("inf")) == 0.0


class TestDecimalProducts:
    """Products rounded to paise without float error."""

    @pytest.mark.parametrize("a, b, expected", [
        (3, 0.145, 0.44),
        (3, 0.075, 0.23),
        (3, 12.345, 37.04),
        (-3, 0.145, -0.44),
        (2, 0.125, 0.25),
    ])
    def test_mul2(self, a, b, expected):
        assert mul2(a, b) == expected

    def test_mul2_missing_operand(self):
        assert mul2(None, 5) == 0.0
        assert mul2(2, float("nan")) == 0.0

    @pytest.mark.parametrize("amount, rate, expected", [
        (0.25, 5, 0.01),
        (25.1, 12.5, 3.14),
        (1000, 18, 180.0),
        (10.01, 18, 1.8),
    ])
    def test_percent2(self, amount, rate, expected):
        assert percent2(amount, rate) == expected


class TestFormatCurrency:
    """Indian lakh/crore grouping with two decimals."""

    @pytest.mark.parametrize("value, expected", [
        (0, "0.00"),
        (999, "999.00"),
        (1000, "1,000.00"),
        (100000, "1,00,000.00"),
        (1234567.891, "12,34,567.89"),
        (12345678, "1,23,45,678.00"),
    ])
    def test_grouping(self, value, expected):
        assert format_currency(value) == expected

    def test_missing_values_format_as_zero(self):
        assert format_currency(None) == "0.00"
        assert format_currency(float("nan")) == "0.00"
        assert format_currency("abc") == "0.00"

    def test_negative_with_symbol(self):
        assert format_currency(-1500, symbol="₹ ") == "-₹ 1,500.00"

    def test_numeric_string(self):
        assert format_currency("1,250.5") == "1,250.50"


class TestToAmount:
    """Lenient coercion of wire values."""

    def test_numbers_pass_through(self):
        assert to_amount(12) == 12.0
        assert to_amount(12.5) == 12.5

    def test_strings_with_separators(self):
        assert to_amount("₹ 1,200.50") == 1200.5
        assert to_amount("Rs. 500") == 500.0

    def test_empty_and_unparseable_use_default(self):
        assert to_amount(None) == 0.0
        assert to_amount("") == 0.0
        assert to_amount("abc") == 0.0
        assert to_amount("abc", default=5.0) == 5.0
