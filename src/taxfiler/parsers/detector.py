"""Bank CSV format auto-detection."""

import logging
from pathlib import Path
from typing import Optional, Sequence

from taxfiler.parsers.base import BankCsvParser, read_header
from taxfiler.parsers.registry import default_parsers

logger = logging.getLogger(__name__)


class BankFormatDetector:
    """Selects the parser for a CSV file from its header row.

    Detection reads only the first row of the file and keeps no state
    between calls.
    """

    def __init__(self, parsers: Optional[Sequence[BankCsvParser]] = None):
        """Initialize detector.

        Args:
            parsers: Parsers in priority order; defaults to the built-in registry
        """
        self.parsers = tuple(parsers) if parsers is not None else tuple(default_parsers())

    def detect_from_headers(self, headers: list[str]) -> Optional[BankCsvParser]:
        """Return the first parser that accepts the header row, if any."""
        for parser in self.parsers:
            if parser.can_parse(headers):
                logger.debug("Header row matched %s", parser.bank_name)
                return parser
        logger.debug("No parser matched header row %s", headers)
        return None

    def detect_format(self, csv_path: str | Path, encoding: str = "utf-8") -> Optional[BankCsvParser]:
        """Detect the bank format of a CSV file.

        Args:
            csv_path: Path to the CSV file
            encoding: File character set

        Returns:
            Matching parser, or None if the format is not recognised
        """
        headers = read_header(Path(csv_path), encoding)
        if not headers:
            return None
        return self.detect_from_headers(headers)
