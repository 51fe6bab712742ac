"""Santander CSV export parser."""

from typing import Optional

from taxfiler.domain.entities import ImportedTransaction
from taxfiler.parsers.base import BankCsvParser, CsvRow


class SantanderCsvParser(BankCsvParser):
    """Santander statements: ``Date,Description,Amount,Balance`` with a signed amount."""

    BANK_NAME = "Santander"
    FORMAT_ID = "csv-santander"
    EXPECTED_HEADERS = ("Date", "Description", "Amount", "Balance")

    def parse_row(self, row: CsvRow) -> Optional[ImportedTransaction]:
        return self.build(
            self.parse_date(row.get("Date")),
            self.parse_signed_amount(row.get("Amount")),
            row.get("Description"),
            balance=self.parse_balance(row.get("Balance")),
        )
