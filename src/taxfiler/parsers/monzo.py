"""Monzo CSV export parser."""

from typing import Optional

from taxfiler.domain.entities import ImportedTransaction
from taxfiler.parsers.base import SETTLEMENT_CURRENCY, BankCsvParser, CsvRow


class MonzoCsvParser(BankCsvParser):
    """Monzo statements.

    Monzo ships a simplified and a full export; both start with the same
    eight core columns, so detection only checks that prefix. The merchant
    name is the description, falling back to the free-text description and
    then the type. Rows in a currency other than GBP are skipped.
    """

    BANK_NAME = "Monzo"
    FORMAT_ID = "csv-monzo"
    EXPECTED_HEADERS = ("Transaction ID", "Date", "Time", "Type", "Name", "Emoji", "Category", "Amount")

    def can_parse(self, headers: list[str]) -> bool:
        if len(headers) < len(self.EXPECTED_HEADERS):
            return False
        return all(
            expected.lower() == actual.strip().lower()
            for expected, actual in zip(self.EXPECTED_HEADERS, headers)
        )

    def parse_row(self, row: CsvRow) -> Optional[ImportedTransaction]:
        currency = row.get("Currency")
        if currency and currency.upper() != SETTLEMENT_CURRENCY:
            return None
        return self.build(
            self.parse_date(row.get("Date")),
            self.parse_signed_amount(row.get("Amount")),
            self.first_non_blank(row.get("Name"), row.get("Description"), row.get("Type")),
            reference=row.get("Transaction ID"),
        )
