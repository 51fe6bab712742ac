"""Date parsing utilities for bank statement exports."""

import re
from datetime import date, datetime
from typing import Optional, Sequence

from dateutil import parser as date_parser

# UK banks export day-first dates; order is the order formats are tried.
STATEMENT_DATE_FORMATS = (
    "%d/%m/%Y",
    "%d-%b-%Y",
    "%d %b %Y",
    "%Y-%m-%d",
    "%Y-%m-%d %H:%M:%S",
    "%d/%m/%y",
)

# Two defaults differing in every date component: a value dateutil had to
# fill in from the default comes out different under each.
_DEFAULTS = (datetime(2000, 1, 1), datetime(2001, 2, 2))
_LEADING_DAY = re.compile(r"^(\d{1,2})\D")


def _parse_complete_day_first(date_str: str) -> date:
    """Parse with dateutil, rejecting partial and month-first dates."""
    first, second = (date_parser.parse(date_str, dayfirst=True, default=d) for d in _DEFAULTS)
    if first.date() != second.date():
        raise ValueError(f"Incomplete date '{date_str}'")
    leading = _LEADING_DAY.match(date_str)
    if leading and int(leading.group(1)) != first.day:
        raise ValueError(f"Date '{date_str}' is not day-first")
    return first.date()


def parse_statement_date(date_str: str, formats: Optional[Sequence[str]] = None) -> date:
    """Parse a date string from a bank CSV export.

    Tries each explicit format first. Without ``formats`` it then falls back
    to dateutil with ``dayfirst=True`` so that "3.4.2025" is read as 3 April;
    the fallback only accepts a full day, month and year, and a leading
    number must be the day.

    Args:
        date_str: Date string as exported by the bank
        formats: Explicit strptime formats to try; when given, nothing else
            is tried

    Returns:
        Date object

    Raises:
        ValueError: If date string is blank or cannot be parsed
    """
    if date_str is None or not date_str.strip():
        raise ValueError("Empty date string")
    date_str = date_str.strip()

    for fmt in formats or STATEMENT_DATE_FORMATS:
        try:
            return datetime.strptime(date_str, fmt).date()
        except ValueError:
            continue

    if formats is not None:
        raise ValueError(f"Could not parse date '{date_str}'")

    try:
        return _parse_complete_day_first(date_str)
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}") from e
