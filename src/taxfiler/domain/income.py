"""Income domain service."""

from datetime import date
from decimal import Decimal
from typing import Optional

from taxfiler.database.base import Database
from taxfiler.domain.entities import Income
from taxfiler.domain.enums import IncomeCategory
from taxfiler.domain.errors import ValidationError


class IncomeService:
    """Service for creating income records."""

    def __init__(self, db: Database):
        """Initialize income service.

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
        category: IncomeCategory,
        reference: Optional[str] = None,
        bank_transaction_ref: Optional[str] = None,
        invoice_number: Optional[str] = None,
        receipt_path: Optional[str] = None,
        commit: bool = True,
    ) -> Income:
        """Create an income record.

        Args:
            business_id: Owning business
            date: Date the income was received
            amount: Positive amount
            description: Non-blank description
            category: SA103 income category
            reference: Optional bank reference
            bank_transaction_ref: Optional staged bank transaction ID
            invoice_number: Optional invoice number
            receipt_path: Optional path to a receipt
            commit: Commit immediately; False leaves the write pending

        Returns:
            Created Income

        Raises:
            ValidationError: If any field is invalid
        """
        if not business_id:
            raise ValidationError("business_id cannot be null")
        if amount is None or amount <= 0:
            raise ValidationError("Income amount must be positive")
        if description is None or not description.strip():
            raise ValidationError("Income description cannot be blank")

        return self.db.create_income(
            business_id=business_id,
            date=date,
            amount=amount,
            description=description,
            category=category,
            reference=reference,
            bank_transaction_ref=bank_transaction_ref,
            invoice_number=invoice_number,
            receipt_path=receipt_path,
            commit=commit,
        )

    def get(self, income_id: str) -> Optional[Income]:
        """Get income by ID."""
        return self.db.get_income(income_id)
