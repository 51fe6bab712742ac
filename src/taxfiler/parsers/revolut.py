"""Revolut CSV export parser."""

from typing import Optional

from taxfiler.domain.entities import ImportedTransaction
from taxfiler.parsers.base import SETTLEMENT_CURRENCY, BankCsvParser, CsvRow

COMPLETED_STATE = "COMPLETED"


class RevolutCsvParser(BankCsvParser):
    """Revolut statements.

    Header: ``Type,Product,Started Date,Completed Date,Description,Amount,Fee,Currency,State,Balance``.
    Only COMPLETED rows in GBP are imported; PENDING and REVERTED rows and
    other currencies are skipped. The transaction date is the completed
    date, and the type stands in for a blank description.
    """

    BANK_NAME = "Revolut"
    FORMAT_ID = "csv-revolut"
    EXPECTED_HEADERS = (
        "Type",
        "Product",
        "Started Date",
        "Completed Date",
        "Description",
        "Amount",
        "Fee",
        "Currency",
        "State",
        "Balance",
    )

    def parse_row(self, row: CsvRow) -> Optional[ImportedTransaction]:
        if row.get("State").upper() != COMPLETED_STATE:
            return None
        if row.get("Currency").upper() != SETTLEMENT_CURRENCY:
            return None
        return self.build(
            self.parse_date(row.get("Completed Date")),
            self.parse_signed_amount(row.get("Amount")),
            self.first_non_blank(row.get("Description"), row.get("Type")),
            balance=self.parse_balance(row.get("Balance")),
        )
