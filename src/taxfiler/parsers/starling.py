"""Starling Bank CSV export parser."""

from typing import Optional

from taxfiler.domain.entities import ImportedTransaction
from taxfiler.parsers.base import BankCsvParser, CsvRow


class StarlingCsvParser(BankCsvParser):
    """Starling statements.

    Header: ``Date,Counter Party,Reference,Type,Amount (GBP),Balance (GBP)``.
    The counter party is the description; the payment reference and then
    the type are used when it is blank.
    """

    BANK_NAME = "Starling"
    FORMAT_ID = "csv-starling"
    EXPECTED_HEADERS = ("Date", "Counter Party", "Reference", "Type", "Amount (GBP)", "Balance (GBP)")

    def parse_row(self, row: CsvRow) -> Optional[ImportedTransaction]:
        reference = row.get("Reference")
        return self.build(
            self.parse_date(row.get("Date")),
            self.parse_signed_amount(row.get("Amount (GBP)")),
            self.first_non_blank(row.get("Counter Party"), reference, row.get("Type")),
            balance=self.parse_balance(row.get("Balance (GBP)")),
            reference=reference,
        )
