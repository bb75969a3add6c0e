"""Unit tests for silver field cleaners and indicator codes."""
import pytest
import sys
import os
from datetime import date
from decimal import Decimal

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', '..'))

from src.etl.silver.cleaners import clean_text, parse_number, parse_int, parse_year_start
from src.etl.silver.indicators import normalize_indicator


class TestCleanText:
    """Tests for clean_text function."""

    def test_trims_whitespace(self):
        """Should strip surrounding whitespace."""
        assert clean_text("  France \t") == "France"

    def test_placeholder_returns_none(self):
        """Should treat '..' as missing."""
        assert clean_text("..") is None
        assert clean_text(" .. ") is None

    def test_empty_returns_none(self):
        """Should return None for empty and blank strings."""
        assert clean_text("") is None
        assert clean_text("   ") is None

    def test_none_and_nan_return_none(self):
        """Should return None for None and NaN."""
        assert clean_text(None) is None
        assert clean_text(float('nan')) is None

    def test_other_dots_are_kept(self):
        """Should only treat the exact '..' token as placeholder."""
        assert clean_text("...") == "..."

    def test_non_string_is_stringified(self):
        """Should convert numbers to text."""
        assert clean_text(12) == "12"


class TestParseNumber:
    """Tests for parse_number function."""

    def test_plain_number(self):
        """Should parse to a two-decimal Decimal."""
        assert parse_number("123") == Decimal("123.00")

    def test_thousands_separator(self):
        """Should drop commas and keep the decimal point."""
        assert parse_number("1,234.50") == Decimal("1234.50")
        assert parse_number("1,234,567") == Decimal("1234567.00")

    def test_rounds_half_up(self):
        """Should round to two places, half up."""
        assert parse_number("0.125") == Decimal("0.13")
        assert parse_number("2.344") == Decimal("2.34")

    def test_negative_number(self):
        """Should keep the sign."""
        assert parse_number("-5.5") == Decimal("-5.50")

    def test_placeholder_returns_none(self):
        """Should return None for '..'."""
        assert parse_number("..") is None

    def test_garbage_returns_none(self):
        """Should return None for text that is not a number."""
        assert parse_number("abc") is None
        assert parse_number("12a") is None
        assert parse_number("1e5") is None

    def test_out_of_range_returns_none(self):
        """Should reject values that do not fit DECIMAL(18,2)."""
        assert parse_number("10000000000000000") is None
        assert parse_number("9999999999999999.99") == Decimal("9999999999999999.99")

    def test_none_returns_none(self):
        """Should return None for None."""
        assert parse_number(None) is None


class TestParseInt:
    """Tests for parse_int function."""

    def test_valid_code(self):
        """Should parse integer codes."""
        assert parse_int(" 250 ") == 250

    def test_decimal_text_returns_none(self):
        """Should reject non-integer text."""
        assert parse_int("250.5") is None
        assert parse_int("FR") is None

    def test_out_of_int32_returns_none(self):
        """Should reject values outside the 32-bit range."""
        assert parse_int(str(2 ** 31)) is None
        assert parse_int(str(2 ** 31 - 1)) == 2 ** 31 - 1

    def test_placeholder_returns_none(self):
        """Should return None for '..'."""
        assert parse_int("..") is None


class TestParseYearStart:
    """Tests for parse_year_start function."""

    def test_year_to_january_first(self):
        """Should map a year to January 1st."""
        assert parse_year_start("2019") == date(2019, 1, 1)

    def test_invalid_year_returns_none(self):
        """Should return None for non-years."""
        assert parse_year_start("0") is None
        assert parse_year_start("2019-2020") is None
        assert parse_year_start(None) is None


class TestNormalizeIndicator:
    """Tests for normalize_indicator function."""

    @pytest.mark.parametrize("raw,expected", [
        ("219", "2.19"),
        ("110", "1.10"),
        ("2.19", "2.19"),
        ("2,19", "2.19"),
        ("2", "2"),
        (" 1.5 ", "1.5"),
    ])
    def test_canonical_forms(self, raw, expected):
        """Should map raw codes onto the dotted form."""
        assert normalize_indicator(raw) == expected

    def test_override_applies(self):
        """Should apply a table override before the positional rule."""
        overrides = {"2.2": "2.20"}
        assert normalize_indicator("2.2", overrides) == "2.20"
        assert normalize_indicator("2,2", overrides) == "2.20"

    def test_override_does_not_leak(self):
        """Should leave the code alone without an override."""
        assert normalize_indicator("2.2") == "2.2"

    def test_missing_returns_none(self):
        """Should return None for blanks and placeholders."""
        assert normalize_indicator(None) is None
        assert normalize_indicator("") is None
        assert normalize_indicator("..") is None

    def test_malformed_returns_none(self):
        """Should return None for codes that are not digits."""
        assert normalize_indicator("A1") is None
        assert normalize_indicator("1.2.3") is None
