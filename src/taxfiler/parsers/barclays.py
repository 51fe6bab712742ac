"""Barclays CSV export parser."""

from typing import Optional

from taxfiler.domain.entities import ImportedTransaction
from taxfiler.parsers.base import BankCsvParser, CsvRow


class BarclaysCsvParser(BankCsvParser):
    """Barclays statements: ``Date,Description,Money Out,Money In,Balance``.

    Dates are ``dd/MM/yyyy`` or ``dd-MMM-yyyy``. There is no transaction
    type column, so a blank description is a parse error.
    """

    BANK_NAME = "Barclays"
    FORMAT_ID = "csv-barclays"
    EXPECTED_HEADERS = ("Date", "Description", "Money Out", "Money In", "Balance")

    def parse_row(self, row: CsvRow) -> Optional[ImportedTransaction]:
        return self.build(
            self.parse_date(row.get("Date")),
            self.parse_split_amount(row.get("Money Out"), row.get("Money In")),
            row.get("Description"),
            balance=self.parse_balance(row.get("Balance")),
        )
