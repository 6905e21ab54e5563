"""Utility functions for cashtrack."""

from cashtrack.utils.date_parser import parse_date, parse_instant, to_iso, from_iso
from cashtrack.utils.amount_parser import parse_amount, strip_to_decimal

__all__ = ["parse_date", "parse_instant", "to_iso", "from_iso", "parse_amount", "strip_to_decimal"]
