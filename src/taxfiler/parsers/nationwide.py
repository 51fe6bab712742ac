"""Nationwide CSV export parser."""

from typing import Optional

from taxfiler.domain.entities import ImportedTransaction
from taxfiler.parsers.base import BankCsvParser, CsvRow


class NationwideCsvParser(BankCsvParser):
    """Nationwide statements: ``Date,Transaction type,Description,Paid out,Paid in,Balance``.

    Nationwide prefixes amounts with a pound sign.
    """

    BANK_NAME = "Nationwide"
    FORMAT_ID = "csv-nationwide"
    EXPECTED_HEADERS = ("Date", "Transaction type", "Description", "Paid out", "Paid in", "Balance")

    def parse_row(self, row: CsvRow) -> Optional[ImportedTransaction]:
        return self.build(
            self.parse_date(row.get("Date")),
            self.parse_split_amount(row.get("Paid out"), row.get("Paid in")),
            self.first_non_blank(row.get("Description"), row.get("Transaction type")),
            balance=self.parse_balance(row.get("Balance")),
        )
