"""Lloyds CSV export parser."""

from typing import Optional

from taxfiler.domain.entities import ImportedTransaction
from taxfiler.parsers.base import BankCsvParser, CsvRow


class LloydsCsvParser(BankCsvParser):
    """Lloyds statements.

    Header: ``Transaction Date,Transaction Type,Description,Debit,Credit,Balance``.
    The transaction type (DD, FPO, DEB...) stands in for a blank description.
    """

    BANK_NAME = "Lloyds"
    FORMAT_ID = "csv-lloyds"
    EXPECTED_HEADERS = (
        "Transaction Date",
        "Transaction Type",
        "Description",
        "Debit",
        "Credit",
        "Balance",
    )

    def parse_row(self, row: CsvRow) -> Optional[ImportedTransaction]:
        return self.build(
            self.parse_date(row.get("Transaction Date")),
            self.parse_split_amount(row.get("Debit"), row.get("Credit")),
            self.first_non_blank(row.get("Description"), row.get("Transaction Type")),
            balance=self.parse_balance(row.get("Balance")),
        )
