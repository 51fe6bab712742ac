"""Bank CSV parser interface and shared row handling."""

import csv
import logging
from abc import ABC, abstractmethod
from decimal import Decimal
from pathlib import Path
from typing import Optional

from taxfiler.domain.entities import ImportedTransaction
from taxfiler.domain.errors import CsvParseError, ValidationError
from taxfiler.utils.amount_parser import parse_amount, parse_optional_amount
from taxfiler.utils.date_parser import STATEMENT_DATE_FORMATS, parse_statement_date

logger = logging.getLogger(__name__)

SETTLEMENT_CURRENCY = "GBP"


def open_encoding(encoding: str) -> str:
    """Return the codec to open a CSV with, stripping a UTF-8 BOM if present."""
    if encoding.lower().replace("_", "-") in ("utf-8", "utf8"):
        return "utf-8-sig"
    return encoding


def read_header(csv_path: Path, encoding: str = "utf-8") -> list[str]:
    """Read only the header row of a CSV file.

    Returns:
        Header cells with surrounding whitespace removed, or an empty list
        for an empty file
    """
    with open(csv_path, "r", encoding=open_encoding(encoding), newline="") as f:
        reader = csv.reader(f)
        header = next(reader, None)
    if header is None:
        return []
    return [cell.strip() for cell in header]


class CsvRow:
    """Header-aware view of one CSV data row."""

    def __init__(self, cells: list[str], columns: dict[str, int]):
        self.cells = cells
        self.columns = columns

    def get(self, column: str) -> str:
        """Return the stripped cell for a column, or "" if absent."""
        idx = self.columns.get(column.lower())
        if idx is None or idx >= len(self.cells):
            return ""
        return self.cells[idx].strip()


class BankCsvParser(ABC):
    """Parser for one bank's CSV export dialect.

    Subclasses declare ``BANK_NAME``, ``FORMAT_ID`` and ``EXPECTED_HEADERS``
    and implement :meth:`parse_row`. Adding a bank means adding a subclass
    and registering it in :mod:`taxfiler.parsers.registry`.
    """

    BANK_NAME: str = ""
    FORMAT_ID: str = ""
    EXPECTED_HEADERS: tuple[str, ...] = ()

    @property
    def bank_name(self) -> str:
        return self.BANK_NAME

    @property
    def format_id(self) -> str:
        return self.FORMAT_ID

    @property
    def expected_headers(self) -> list[str]:
        return list(self.EXPECTED_HEADERS)

    def can_parse(self, headers: list[str]) -> bool:
        """Check whether a header row belongs to this dialect.

        The comparison is case-insensitive and position-sensitive against
        the full expected header list.
        """
        if len(headers) != len(self.EXPECTED_HEADERS):
            return False
        return all(
            expected.lower() == actual.strip().lower()
            for expected, actual in zip(self.EXPECTED_HEADERS, headers)
        )

    def parse(self, csv_path: str | Path, encoding: str = "utf-8") -> list[ImportedTransaction]:
        """Parse a CSV file into imported transactions in file order.

        Blank lines are ignored. Rows the dialect marks as not settled or in
        a foreign currency are skipped silently.

        Raises:
            CsvParseError: If any row is malformed; nothing is returned for
                the rest of the file
        """
        csv_path = Path(csv_path)
        file_name = csv_path.name
        transactions: list[ImportedTransaction] = []

        try:
            with open(csv_path, "r", encoding=open_encoding(encoding), newline="") as f:
                reader = csv.reader(f)
                header = next(reader, None)
                if header is None:
                    return transactions
                columns = {name.strip().lower(): idx for idx, name in enumerate(header)}

                for cells in reader:
                    line_number = reader.line_num
                    if not any(cell.strip() for cell in cells):
                        continue
                    if len(cells) < self.min_columns():
                        raise CsvParseError("Invalid number of columns", file_name, line_number)
                    try:
                        transaction = self.parse_row(CsvRow(cells, columns))
                    except CsvParseError:
                        raise
                    except ValueError as e:
                        raise CsvParseError(str(e), file_name, line_number) from e
                    if transaction is None:
                        logger.debug("%s: skipped line %d", self.BANK_NAME, line_number)
                        continue
                    transactions.append(transaction)
        except (OSError, UnicodeDecodeError, csv.Error) as e:
            raise CsvParseError(f"Failed to read CSV file: {e}", file_name) from e

        logger.debug("%s: parsed %d transactions from %s", self.BANK_NAME, len(transactions), file_name)
        return transactions

    def min_columns(self) -> int:
        """Minimum number of cells a data row must have."""
        return len(self.EXPECTED_HEADERS)

    @abstractmethod
    def parse_row(self, row: CsvRow) -> Optional[ImportedTransaction]:
        """Convert one data row, or return None to skip it.

        Raises:
            ValueError: If the row is malformed
        """

    # Shared helpers for subclasses

    @staticmethod
    def parse_date(value: str, formats=STATEMENT_DATE_FORMATS):
        """Parse a row date; bank layouts only accept their known formats."""
        if not value:
            raise ValueError("Empty date not allowed")
        try:
            return parse_statement_date(value, formats=formats)
        except ValueError as e:
            raise ValueError(f"Invalid date format: {value}") from e

    @staticmethod
    def parse_signed_amount(value: str) -> Decimal:
        if not value:
            raise ValueError("Empty amount not allowed")
        return parse_amount(value)

    @staticmethod
    def parse_split_amount(money_out: str, money_in: str) -> Decimal:
        """Combine debit/credit columns into one signed amount.

        Money out becomes negative, money in positive.
        """
        if not money_out and not money_in:
            raise ValueError("No amount specified (both money out and money in are empty)")
        if money_out:
            return -abs(parse_amount(money_out))
        return abs(parse_amount(money_in))

    @staticmethod
    def parse_balance(value: str) -> Optional[Decimal]:
        try:
            return parse_optional_amount(value)
        except ValueError as e:
            raise ValueError(f"Invalid balance format: {value}") from e

    @staticmethod
    def first_non_blank(*values: str) -> str:
        for value in values:
            if value:
                return value
        return ""

    @staticmethod
    def build(date_value, amount: Decimal, description: str,
              balance: Optional[Decimal] = None,
              reference: Optional[str] = None) -> ImportedTransaction:
        if not description:
            raise ValueError("Empty description not allowed")
        try:
            return ImportedTransaction(
                date=date_value,
                amount=amount,
                description=description,
                balance=balance,
                reference=reference or None,
            )
        except ValidationError as e:
            raise ValueError(str(e)) from e
