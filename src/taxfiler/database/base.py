"""Abstract database interface."""

from abc import ABC, abstractmethod
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

# Import entities directly to avoid circular import through domain/__init__.py
from taxfiler.domain.entities import (
    BankTransaction,
    Expense,
    ImportAudit,
    Income,
)
from taxfiler.domain.enums import ExpenseCategory, IncomeCategory, ReviewStatus


class Database(ABC):
    """Abstract database interface for taxfiler."""

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    @abstractmethod
    def commit(self) -> None:
        """Commit pending writes made with ``commit=False``."""
        pass

    @abstractmethod
    def rollback(self) -> None:
        """Discard pending writes made with ``commit=False``."""
        pass

    # Income operations
    @abstractmethod
    def create_income(
        self,
        business_id: str,
        date: date,
        amount: Decimal,
        description: str,
        category: IncomeCategory,
        reference: Optional[str] = None,
        bank_transaction_ref: Optional[str] = None,
        invoice_number: Optional[str] = None,
        receipt_path: Optional[str] = None,
        commit: bool = True,
    ) -> Income:
        """Create an income record."""
        pass

    @abstractmethod
    def get_income(self, income_id: str) -> Optional[Income]:
        """Get income by ID, including soft-deleted rows."""
        pass

    @abstractmethod
    def find_incomes_by_date_range(self, business_id: str, start_date: date, end_date: date) -> list[Income]:
        """List active incomes dated within [start_date, end_date]."""
        pass

    @abstractmethod
    def soft_delete_incomes(
        self, income_ids: list[str], deleted_at: datetime, reason: str, commit: bool = True
    ) -> int:
        """Soft-delete incomes by ID. Returns number of rows deleted."""
        pass

    @abstractmethod
    def soft_delete_incomes_by_bank_refs(
        self, bank_transaction_ids: list[str], deleted_at: datetime, reason: str, commit: bool = True
    ) -> int:
        """Soft-delete incomes whose bank_transaction_ref is in the given IDs."""
        pass

    # Expense operations
    @abstractmethod
    def create_expense(
        self,
        business_id: str,
        date: date,
        amount: Decimal,
        description: str,
        category: ExpenseCategory,
        receipt_path: Optional[str] = None,
        notes: Optional[str] = None,
        bank_transaction_ref: Optional[str] = None,
        commit: bool = True,
    ) -> Expense:
        """Create an expense record."""
        pass

    @abstractmethod
    def get_expense(self, expense_id: str) -> Optional[Expense]:
        """Get expense by ID, including soft-deleted rows."""
        pass

    @abstractmethod
    def find_expenses_by_date_range(self, business_id: str, start_date: date, end_date: date) -> list[Expense]:
        """List active expenses dated within [start_date, end_date]."""
        pass

    @abstractmethod
    def soft_delete_expenses(
        self, expense_ids: list[str], deleted_at: datetime, reason: str, commit: bool = True
    ) -> int:
        """Soft-delete expenses by ID. Returns number of rows deleted."""
        pass

    @abstractmethod
    def soft_delete_expenses_by_bank_refs(
        self, bank_transaction_ids: list[str], deleted_at: datetime, reason: str, commit: bool = True
    ) -> int:
        """Soft-delete expenses whose bank_transaction_ref is in the given IDs."""
        pass

    # Bank transaction operations
    @abstractmethod
    def save_bank_transaction(self, transaction: BankTransaction, commit: bool = True) -> BankTransaction:
        """Insert a staged bank transaction."""
        pass

    @abstractmethod
    def update_bank_transaction(self, transaction: BankTransaction) -> BankTransaction:
        """Overwrite a staged bank transaction with a new version."""
        pass

    @abstractmethod
    def soft_delete_bank_transactions(
        self,
        transaction_ids: list[str],
        deleted_at: datetime,
        deleted_by: str,
        reason: Optional[str],
        commit: bool = True,
    ) -> int:
        """Soft-delete staged bank transactions by ID. Returns number of rows deleted."""
        pass

    @abstractmethod
    def find_bank_transaction_active(self, transaction_id: str) -> Optional[BankTransaction]:
        """Get a bank transaction by ID unless it is soft-deleted."""
        pass

    @abstractmethod
    def find_bank_transactions_by_business(
        self, business_id: str, review_status: Optional[ReviewStatus] = None
    ) -> list[BankTransaction]:
        """List active bank transactions, optionally filtered by review status."""
        pass

    @abstractmethod
    def find_bank_transactions_by_date_range(
        self, business_id: str, start_date: date, end_date: date
    ) -> list[BankTransaction]:
        """List active bank transactions dated within [start_date, end_date]."""
        pass

    # Import audit operations
    @abstractmethod
    def save_import_audit(self, audit: ImportAudit, commit: bool = True) -> ImportAudit:
        """Persist an audit record. Saving the same ID again is a no-op."""
        pass

    @abstractmethod
    def get_import_audit(self, audit_id: str) -> Optional[ImportAudit]:
        """Get an import audit by ID."""
        pass

    @abstractmethod
    def update_import_audit_status(self, audit: ImportAudit, commit: bool = True) -> None:
        """Persist the status fields (status, undone_at, undone_by) of an audit."""
        pass

    @abstractmethod
    def list_import_audits(self, business_id: str) -> list[ImportAudit]:
        """List import audits for a business, newest first."""
        pass
