"""Shared domain error messages and error types."""

from typing import Optional


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as an illegal state transition."""


class UndoBlockedError(ConflictError):
    """Import batch cannot be undone (already undone or outside the window)."""


class CsvParseError(DomainError):
    """A bank CSV file could not be parsed.

    A single malformed row aborts the whole file, so the error carries the
    file name and line number of the offending row when known.
    """

    def __init__(
        self,
        message: str,
        file_name: Optional[str] = None,
        line_number: Optional[int] = None,
    ):
        self.file_name = file_name
        self.line_number = line_number
        if file_name is not None and line_number is not None:
            message = f"{message} ({file_name}:{line_number})"
        elif file_name is not None:
            message = f"{message} ({file_name})"
        super().__init__(message)


class FormatNotRecognizedError(CsvParseError):
    """No registered parser recognises the CSV header row."""


class FileTooLargeError(CsvParseError):
    """CSV file exceeds the import size ceiling."""


def unknown_csv_format() -> str:
    """Return message for an unrecognised bank CSV header."""
    return (
        "Unknown CSV format. Please check the file format or use manual column mapping."
    )


def file_too_large(size: int, limit: int) -> str:
    """Return message for a file over the size ceiling."""
    return f"File size ({size} bytes) exceeds maximum allowed size ({limit} bytes)"


def import_audit_not_found(audit_id: str) -> str:
    """Return message for missing import audit."""
    return f"Import audit {audit_id} not found"


def bank_transaction_not_found(transaction_id: str) -> str:
    """Return message for missing bank transaction."""
    return f"Bank transaction {transaction_id} not found"


def already_reviewed(transaction_id: str, status: str) -> str:
    """Return message when a reviewed bank transaction is transitioned again."""
    return (
        f"Bank transaction {transaction_id} is already {status}; "
        "only PENDING transactions can be reviewed"
    )
