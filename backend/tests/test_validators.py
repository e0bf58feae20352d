"""
PURPOSE: Tests for payload field coercion helpers.

Tests cover money parsing, integer parsing, order number fallback and
external ID normalization.
"""

from decimal import Decimal

from shopsync.utils.validators import (
    normalize_external_id,
    parse_int,
    parse_money,
    parse_order_number,
)


class TestParseMoney:
    """Test money parsing."""

    def test_parse_money_string(self):
        assert parse_money("50.00") == Decimal("50.00")
        assert parse_money(" 19.9 ") == Decimal("19.90")

    def test_parse_money_numbers(self):
        assert parse_money(75) == Decimal("75.00")
        assert parse_money(Decimal("12.345")) == Decimal("12.34")

    def test_parse_money_rounds_to_cents(self):
        assert parse_money("0.005") == Decimal("0.00")
        assert parse_money("10.019") == Decimal("10.02")

    def test_parse_money_invalid_defaults_to_zero(self):
        """Missing or unparseable amounts become 0."""
        assert parse_money(None) == Decimal("0")
        assert parse_money("") == Decimal("0")
        assert parse_money("abc") == Decimal("0")
        assert parse_money(True) == Decimal("0")

    def test_parse_money_non_finite_defaults(self):
        assert parse_money("NaN") == Decimal("0")
        assert parse_money("Infinity") == Decimal("0")

    def test_parse_money_custom_default(self):
        assert parse_money("oops", default=Decimal("1.00")) == Decimal("1.00")


class TestParseInt:
    """Test integer parsing."""

    def test_parse_int_values(self):
        assert parse_int(5) == 5
        assert parse_int("12") == 12

    def test_parse_int_invalid(self):
        assert parse_int(None) == 0
        assert parse_int("twelve") == 0
        assert parse_int("3.5", default=-1) == -1
        assert parse_int(False) == 0


class TestParseOrderNumber:
    """Test order number resolution."""

    def test_explicit_order_number_wins(self):
        assert parse_order_number(1001, "#1500") == 1001

    def test_falls_back_to_name(self):
        assert parse_order_number(None, "#1002") == 1002

    def test_neither_available(self):
        assert parse_order_number(None, None) == 0
        assert parse_order_number(None, "draft") == 0


class TestNormalizeExternalId:
    """Test external ID normalization."""

    def test_integer_id_becomes_string(self):
        assert normalize_external_id(820982911946154508) == "820982911946154508"

    def test_string_id_stripped(self):
        assert normalize_external_id("  123 ") == "123"

    def test_blank_ids_become_none(self):
        assert normalize_external_id(None) is None
        assert normalize_external_id("") is None
        assert normalize_external_id("   ") is None
