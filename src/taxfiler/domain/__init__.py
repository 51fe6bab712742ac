"""Domain layer for taxfiler application.

Services are imported from their modules directly; this package only
re-exports the value types so that the parser and database layers can
depend on it without import cycles.
"""

from taxfiler.domain.entities import (
    BankTransaction,
    Expense,
    ImportAudit,
    ImportedTransaction,
    Income,
)
from taxfiler.domain.errors import (
    ConflictError,
    CsvParseError,
    DomainError,
    FileTooLargeError,
    FormatNotRecognizedError,
    NotFoundError,
    UndoBlockedError,
    ValidationError,
)

__all__ = [
    "BankTransaction",
    "Expense",
    "ImportAudit",
    "ImportedTransaction",
    "Income",
    "ConflictError",
    "CsvParseError",
    "DomainError",
    "FileTooLargeError",
    "FormatNotRecognizedError",
    "NotFoundError",
    "UndoBlockedError",
    "ValidationError",
]
