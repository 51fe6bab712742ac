"""Parser driven by a user-supplied column mapping."""

from dataclasses import dataclass
from typing import Optional

from taxfiler.domain.entities import ImportedTransaction
from taxfiler.domain.errors import ValidationError
from taxfiler.parsers.base import BankCsvParser, CsvRow


@dataclass(frozen=True)
class ColumnMapping:
    """Column mapping for a CSV export no built-in dialect recognises.

    Either ``amount_column`` (a signed amount) or at least one of
    ``money_in_column``/``money_out_column`` must be given.
    """

    date_column: str
    description_column: str
    amount_column: Optional[str] = None
    money_in_column: Optional[str] = None
    money_out_column: Optional[str] = None
    balance_column: Optional[str] = None
    reference_column: Optional[str] = None
    type_column: Optional[str] = None
    date_format: Optional[str] = None
    negate_amounts: bool = False
    bank_name: str = "Manual mapping"

    def __post_init__(self):
        if not self.date_column:
            raise ValidationError("date column is required")
        if not self.description_column:
            raise ValidationError("description column is required")
        has_split = bool(self.money_in_column or self.money_out_column)
        if not self.amount_column and not has_split:
            raise ValidationError("an amount column or money in/out columns are required")
        if self.amount_column and has_split:
            raise ValidationError("use either a signed amount column or money in/out columns, not both")

    @property
    def required_columns(self) -> list[str]:
        columns = [self.date_column, self.description_column]
        for optional in (self.amount_column, self.money_in_column, self.money_out_column):
            if optional:
                columns.append(optional)
        return columns


class ManualMappingParser(BankCsvParser):
    """Parses any comma-delimited export according to a :class:`ColumnMapping`."""

    FORMAT_ID = "csv-manual"

    def __init__(self, mapping: ColumnMapping):
        self.mapping = mapping

    @property
    def bank_name(self) -> str:
        return self.mapping.bank_name

    @property
    def expected_headers(self) -> list[str]:
        return self.mapping.required_columns

    def can_parse(self, headers: list[str]) -> bool:
        present = {h.strip().lower() for h in headers}
        return all(column.lower() in present for column in self.mapping.required_columns)

    def min_columns(self) -> int:
        return 1

    def parse_row(self, row: CsvRow) -> Optional[ImportedTransaction]:
        mapping = self.mapping
        date_value = row.get(mapping.date_column)
        # Without an explicit format the lenient day-first fallback applies.
        formats = [mapping.date_format] if mapping.date_format else None
        txn_date = self.parse_date(date_value, formats=formats)

        if mapping.amount_column:
            amount = self.parse_signed_amount(row.get(mapping.amount_column))
        else:
            amount = self.parse_split_amount(
                row.get(mapping.money_out_column) if mapping.money_out_column else "",
                row.get(mapping.money_in_column) if mapping.money_in_column else "",
            )
        if mapping.negate_amounts:
            amount = -amount

        description = self.first_non_blank(
            row.get(mapping.description_column),
            row.get(mapping.type_column) if mapping.type_column else "",
        )
        balance = self.parse_balance(row.get(mapping.balance_column)) if mapping.balance_column else None
        reference = row.get(mapping.reference_column) if mapping.reference_column else None
        return self.build(txn_date, amount, description, balance=balance, reference=reference)
