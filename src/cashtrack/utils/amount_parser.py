"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation
import re

_NON_NUMERIC = re.compile(r"[^0-9.\-]+")


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount string into a Decimal.

    Handles various formats:
    - "123.45"
    - "AED 123.45"
    - "123.45 AED"
    - "-123.45"
    - "1,234.56"
    - "(123.45)" (negative in parentheses)

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount

    Raises:
        ValueError: If amount string cannot be parsed
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    amount_str = amount_str.strip()

    is_negative = False
    if amount_str.startswith("(") and amount_str.endswith(")"):
        is_negative = True
        amount_str = amount_str[1:-1]

    amount = strip_to_decimal(amount_str)
    return -amount if is_negative else amount


def strip_to_decimal(amount_str: str) -> Decimal:
    """Drop everything except digits, '.' and '-', then parse as Decimal.

    Currency codes, symbols, thousands separators and whitespace all vanish,
    so "AED 1,250.00" parses as 1250.00.

    Raises:
        ValueError: If nothing numeric remains or the remainder is malformed
    """
    cleaned = _NON_NUMERIC.sub("", amount_str or "")
    if not cleaned:
        raise ValueError(f"Could not parse amount '{amount_str}': no digits")
    try:
        amount = Decimal(cleaned)
    except InvalidOperation:
        raise ValueError(f"Could not parse amount '{amount_str}'")
    if not amount.is_finite():
        raise ValueError(f"Could not parse amount '{amount_str}'")
    return amount
