"""Ordered registry of built-in bank CSV parsers.

Registration order is detection priority: the first parser whose header
matcher accepts a file wins.
"""

from taxfiler.parsers.base import BankCsvParser
from taxfiler.parsers.barclays import BarclaysCsvParser
from taxfiler.parsers.hsbc import HsbcCsvParser
from taxfiler.parsers.lloyds import LloydsCsvParser
from taxfiler.parsers.nationwide import NationwideCsvParser
from taxfiler.parsers.santander import SantanderCsvParser
from taxfiler.parsers.metro_bank import MetroBankCsvParser
from taxfiler.parsers.starling import StarlingCsvParser
from taxfiler.parsers.monzo import MonzoCsvParser
from taxfiler.parsers.revolut import RevolutCsvParser


def default_parsers() -> list[BankCsvParser]:
    """Return a fresh list of the built-in parsers in priority order."""
    return [
        BarclaysCsvParser(),
        HsbcCsvParser(),
        LloydsCsvParser(),
        NationwideCsvParser(),
        SantanderCsvParser(),
        MetroBankCsvParser(),
        StarlingCsvParser(),
        MonzoCsvParser(),
        RevolutCsvParser(),
    ]


def supported_banks() -> list[str]:
    """Return the names of the built-in banks in priority order."""
    return [parser.bank_name for parser in default_parsers()]
