"""Utility functions for taxfiler."""

from taxfiler.utils.date_parser import parse_statement_date
from taxfiler.utils.amount_parser import parse_amount, parse_optional_amount
from taxfiler.utils.text import normalize_description

__all__ = [
    "parse_statement_date",
    "parse_amount",
    "parse_optional_amount",
    "normalize_description",
]
