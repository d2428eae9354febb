"""
Unit Tests for numeric parsing and formatting helpers.
"""

from decimal import Decimal

import pytest

from utils.numbers import (
    clamp,
    format_money,
    format_rate,
    parse_cost_string,
    parse_number,
    quantize,
    round_units,
    to_decimal,
)


class TestParseNumber:
    """Tests for lenient number parsing."""

    @pytest.mark.parametrize("value, expected", [
        (5, Decimal("5")),
        (2.5, Decimal("2.5")),
        (Decimal("1.10"), Decimal("1.10")),
        ("12.5", Decimal("12.5")),
        ("  7 ", Decimal("7")),
        ("12.5 ft", Decimal("12.5")),
        ("-3", Decimal("-3")),
        (".5", Decimal("0.5")),
        ("1e3", Decimal("1E+3")),
    ])
    def test_parses_numeric_input(self, value, expected):
        assert parse_number(value) == expected

    @pytest.mark.parametrize("value", [None, True, False, "abc", "", [], {}, float("nan"), float("inf")])
    def test_rejects_non_numeric_input(self, value):
        assert parse_number(value) is None

    def test_float_uses_its_shortest_repr(self):
        """0.1 parses as exactly 0.1, not its binary expansion."""
        assert parse_number(0.1) == Decimal("0.1")


class TestParseCostString:

    def test_strips_currency_symbols_and_separators(self):
        assert parse_cost_string("$1,250.50") == Decimal("1250.50")

    def test_keeps_sign(self):
        assert parse_cost_string("-$4.00") == Decimal("-4.00")

    def test_no_digits(self):
        assert parse_cost_string("n/a") is None


class TestFormatting:
    """Tests for fixed-precision output."""

    def test_money_has_two_fraction_digits(self):
        assert format_money(Decimal("250")) == "250.00"
        assert format_money(Decimal("1.005")) == "1.01"
        assert format_money(Decimal("2.675")) == "2.68"

    def test_rate_has_four_fraction_digits(self):
        assert format_rate(Decimal("2.5")) == "2.5000"
        assert format_rate(Decimal("0.123456")) == "0.1235"

    def test_negative_zero_is_normalized(self):
        assert format_money(Decimal("-0.001")) == "0.00"

    def test_format_then_parse_is_stable(self):
        """Formatting a parsed monetary string gives the same string back."""
        for value in ["0.00", "1895.00", "1234567.89", "0.01"]:
            assert format_money(parse_number(value)) == value

    def test_unparseable_formats_as_zero(self):
        assert format_money("garbage") == "0.00"

    def test_round_units(self):
        assert round_units(Decimal("12.345")) == 12.35
        assert isinstance(round_units(Decimal("3")), float)


class TestHelpers:

    def test_quantize_half_up(self):
        assert quantize(Decimal("0.125"), 2) == Decimal("0.13")

    def test_clamp(self):
        assert clamp(Decimal("-1"), Decimal("0"), Decimal("1")) == Decimal("0")
        assert clamp(Decimal("2"), Decimal("0"), Decimal("1")) == Decimal("1")
        assert clamp(Decimal("5"), Decimal("0")) == Decimal("5")

    def test_to_decimal_default(self):
        assert to_decimal("x") == Decimal("0")
        assert to_decimal(None, Decimal("1")) == Decimal("1")
