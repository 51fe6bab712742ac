"""Tests for income and expense services."""

import pytest
from datetime import date
from decimal import Decimal

from taxfiler.domain.enums import ExpenseCategory, IncomeCategory
from taxfiler.domain.errors import ValidationError


class TestIncomeService:
    """Tests for IncomeService."""

    def test_create_income(self, income_service, business_id):
        income = income_service.create(
            business_id, date(2025, 4, 6), Decimal("1200.00"), "Invoice 31", IncomeCategory.SALES,
            invoice_number="31",
        )

        assert income_service.get(income.id).invoice_number == "31"

    @pytest.mark.parametrize("amount", [Decimal("0"), Decimal("-5.00")])
    def test_amount_must_be_positive(self, income_service, business_id, amount):
        with pytest.raises(ValidationError, match="must be positive"):
            income_service.create(business_id, date(2025, 4, 6), amount, "Invoice", IncomeCategory.SALES)

    def test_blank_description(self, income_service, business_id):
        with pytest.raises(ValidationError, match="cannot be blank"):
            income_service.create(business_id, date(2025, 4, 6), Decimal("1"), "  ", IncomeCategory.SALES)

    def test_business_required(self, income_service):
        with pytest.raises(ValidationError):
            income_service.create("", date(2025, 4, 6), Decimal("1"), "Invoice", IncomeCategory.SALES)


class TestExpenseService:
    """Tests for ExpenseService."""

    def test_zero_amount_allowed(self, expense_service, business_id):
        expense = expense_service.create(
            business_id, date(2025, 4, 6), Decimal("0.00"), "Fee waived", ExpenseCategory.FINANCIAL_CHARGES
        )
        assert expense.amount == Decimal("0.00")

    def test_negative_amount_rejected(self, expense_service, business_id):
        with pytest.raises(ValidationError, match="cannot be negative"):
            expense_service.create(
                business_id, date(2025, 4, 6), Decimal("-1"), "Refund", ExpenseCategory.OTHER_EXPENSES
            )

    def test_notes_and_receipt(self, expense_service, business_id):
        expense = expense_service.create(
            business_id,
            date(2025, 4, 6),
            Decimal("89.99"),
            "Printer",
            ExpenseCategory.OFFICE_COSTS,
            receipt_path="receipts/printer.pdf",
            notes="Replacement",
        )

        stored = expense_service.get(expense.id)
        assert stored.receipt_path == "receipts/printer.pdf"
        assert stored.notes == "Replacement"
