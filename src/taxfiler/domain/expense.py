"""Expense domain service."""

from datetime import date
from decimal import Decimal
from typing import Optional

from taxfiler.database.base import Database
from taxfiler.domain.entities import Expense
from taxfiler.domain.enums import ExpenseCategory
from taxfiler.domain.errors import ValidationError


class ExpenseService:
    """Service for creating expense records."""

    def __init__(self, db: Database):
        """Initialize expense service.

        Args:
            db: Database instance
        """
        self.db = db

    def create(
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
        """Create an expense record.

        Amounts are stored as positive values; zero-value statement lines are
        accepted so they are never dropped silently.

        Raises:
            ValidationError: If any field is invalid
        """
        if not business_id:
            raise ValidationError("business_id cannot be null")
        if amount is None or amount < 0:
            raise ValidationError("Expense amount cannot be negative")
        if description is None or not description.strip():
            raise ValidationError("Expense description cannot be blank")

        return self.db.create_expense(
            business_id=business_id,
            date=date,
            amount=amount,
            description=description,
            category=category,
            receipt_path=receipt_path,
            notes=notes,
            bank_transaction_ref=bank_transaction_ref,
            commit=commit,
        )

    def get(self, expense_id: str) -> Optional[Expense]:
        """Get expense by ID."""
        return self.db.get_expense(expense_id)
