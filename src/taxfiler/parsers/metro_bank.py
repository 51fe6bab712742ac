"""Metro Bank CSV export parser."""

from typing import Optional

from taxfiler.domain.entities import ImportedTransaction
from taxfiler.parsers.base import BankCsvParser, CsvRow


class MetroBankCsvParser(BankCsvParser):
    """Metro Bank statements: ``Date,Transaction type,Description,Money out,Money in,Balance``."""

    BANK_NAME = "Metro Bank"
    FORMAT_ID = "csv-metro-bank"
    EXPECTED_HEADERS = ("Date", "Transaction type", "Description", "Money out", "Money in", "Balance")

    def parse_row(self, row: CsvRow) -> Optional[ImportedTransaction]:
        return self.build(
            self.parse_date(row.get("Date")),
            self.parse_split_amount(row.get("Money out"), row.get("Money in")),
            self.first_non_blank(row.get("Description"), row.get("Transaction type")),
            balance=self.parse_balance(row.get("Balance")),
        )
