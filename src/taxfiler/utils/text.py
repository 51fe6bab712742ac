"""Description normalisation utilities."""

import re
from typing import Optional

_WHITESPACE = re.compile(r"\s+")


def normalize_description(description: Optional[str]) -> str:
    """Normalise a transaction description for matching.

    Lowercases, collapses runs of whitespace to a single space and trims.
    ``None`` is treated as the empty string.

    Args:
        description: Raw description text

    Returns:
        Normalised description
    """
    if description is None:
        return ""
    return _WHITESPACE.sub(" ", description.lower()).strip()
