"""Bank CSV parsers and format detection."""

from taxfiler.parsers.base import BankCsvParser, SETTLEMENT_CURRENCY
from taxfiler.parsers.detector import BankFormatDetector
from taxfiler.parsers.manual_mapping import ColumnMapping, ManualMappingParser
from taxfiler.parsers.registry import default_parsers, supported_banks

__all__ = [
    "BankCsvParser",
    "BankFormatDetector",
    "ColumnMapping",
    "ManualMappingParser",
    "SETTLEMENT_CURRENCY",
    "default_parsers",
    "supported_banks",
]
