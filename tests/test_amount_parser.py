"""Tests for amount parsing."""

from decimal import Decimal

import pytest

from cashtrack.utils.amount_parser import parse_amount, strip_to_decimal


@pytest.mark.parametrize(
    "text, expected",
    [
        ("123.45", Decimal("123.45")),
        ("AED 123.45", Decimal("123.45")),
        ("123.45 AED", Decimal("123.45")),
        ("1,234.56", Decimal("1234.56")),
        ("-50", Decimal("-50")),
        ("(123.45)", Decimal("-123.45")),
    ],
)
def test_parse_amount(text, expected):
    """Test supported amount formats."""
    assert parse_amount(text) == expected


@pytest.mark.parametrize("text", ["", "   ", "abc", "1.2.3", "--5"])
def test_parse_amount_invalid(text):
    """Test unparseable amounts."""
    with pytest.raises(ValueError):
        parse_amount(text)


def test_strip_to_decimal_drops_currency():
    """Test currency text and separators vanish."""
    assert strip_to_decimal("AED 250.00") == Decimal("250.00")
    assert strip_to_decimal("$ 1 000") == Decimal("1000")


def test_strip_to_decimal_no_digits():
    """Test text without digits is rejected."""
    with pytest.raises(ValueError, match="no digits"):
        strip_to_decimal("N/A")
