"""HSBC CSV export parser."""

from typing import Optional

from taxfiler.domain.entities import ImportedTransaction
from taxfiler.parsers.base import BankCsvParser, CsvRow


class HsbcCsvParser(BankCsvParser):
    """HSBC statements: ``Date,Type,Description,Paid Out,Paid In,Balance``."""

    BANK_NAME = "HSBC"
    FORMAT_ID = "csv-hsbc"
    EXPECTED_HEADERS = ("Date", "Type", "Description", "Paid Out", "Paid In", "Balance")

    def parse_row(self, row: CsvRow) -> Optional[ImportedTransaction]:
        return self.build(
            self.parse_date(row.get("Date")),
            self.parse_split_amount(row.get("Paid Out"), row.get("Paid In")),
            self.first_non_blank(row.get("Description"), row.get("Type")),
            balance=self.parse_balance(row.get("Balance")),
        )
