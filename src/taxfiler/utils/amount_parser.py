"""Amount parsing utilities."""

import re
from decimal import Decimal, InvalidOperation
from typing import Optional

_CURRENCY = re.compile(r"GBP|[£$€]", re.IGNORECASE)


def parse_amount(amount_str: str) -> Decimal:
    """Parse a bank statement amount string into a Decimal.

    Handles various formats:
    - "123.45"
    - "£123.45" / "GBP 123.45"
    - "-123.45" and the Unicode minus sign "−123.45"
    - "1,234.56"
    - "(123.45)" (negative in parentheses)

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount

    Raises:
        ValueError: If amount string is empty or cannot be parsed
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    amount_str = amount_str.strip()

    # Handle parentheses notation (negative)
    is_negative = False
    if amount_str.startswith("(") and amount_str.endswith(")"):
        is_negative = True
        amount_str = amount_str[1:-1]

    amount_str = _CURRENCY.sub("", amount_str)
    amount_str = amount_str.replace(",", "").replace("−", "-").strip()

    try:
        amount = Decimal(amount_str)
    except InvalidOperation as e:
        raise ValueError(f"Could not parse amount '{amount_str}'") from e
    if not amount.is_finite():
        raise ValueError(f"Could not parse amount '{amount_str}'")
    return -amount if is_negative else amount


def parse_optional_amount(amount_str: Optional[str]) -> Optional[Decimal]:
    """Parse an amount that may legitimately be blank (e.g. a balance column)."""
    if amount_str is None or not amount_str.strip():
        return None
    return parse_amount(amount_str)
