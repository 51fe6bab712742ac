"""Tests for database mappers."""

import pytest
from datetime import datetime, date, timedelta, timezone, UTC
from decimal import Decimal

from taxfiler.database.models import (
    BankTransaction as ORMBankTransaction,
    Expense as ORMExpense,
    ImportAudit as ORMImportAudit,
    Income as ORMIncome,
)
from taxfiler.database.mappers import (
    apply_bank_transaction,
    as_utc,
    bank_transaction_to_domain,
    expense_to_domain,
    import_audit_to_domain,
    import_audit_to_orm,
    income_to_domain,
    to_storage,
)
from taxfiler.domain.entities import BankTransaction, Expense, ImportAudit, Income
from taxfiler.domain.enums import (
    BusinessFlag,
    ExpenseCategory,
    ImportAuditStatus,
    ImportAuditType,
    IncomeCategory,
    ReviewStatus,
)

NAIVE = datetime(2025, 1, 15, 10, 30)
AWARE = datetime(2025, 1, 15, 10, 30, tzinfo=UTC)


class TestTimestamps:
    """Tests for UTC storage helpers."""

    def test_as_utc_tags_naive(self):
        assert as_utc(NAIVE) == AWARE
        assert as_utc(NAIVE).tzinfo is UTC

    def test_to_storage_converts_offset(self):
        plus_one = datetime(2025, 1, 15, 11, 30, tzinfo=timezone(timedelta(hours=1)))
        assert to_storage(plus_one) == NAIVE

    def test_none_passes_through(self):
        assert as_utc(None) is None
        assert to_storage(None) is None


class TestIncomeExpenseMappers:
    """Tests for Income and Expense mappers."""

    def test_income_to_domain(self):
        orm_income = ORMIncome(
            id="i1",
            business_id="b1",
            date=date(2025, 1, 15),
            amount=Decimal("100.00"),
            description="Invoice 7",
            category="SALES",
            reference="REF7",
            created_at=NAIVE,
        )

        income = income_to_domain(orm_income)

        assert isinstance(income, Income)
        assert income.category == IncomeCategory.SALES
        assert income.reference == "REF7"
        assert income.created_at == AWARE
        assert income.deleted_at is None

    def test_expense_to_domain(self):
        orm_expense = ORMExpense(
            id="e1",
            business_id="b1",
            date=date(2025, 1, 15),
            amount=Decimal("12.50"),
            description="Paper",
            category="OFFICE_COSTS",
            created_at=NAIVE,
            deleted_at=NAIVE,
            deletion_reason="Import undo",
        )

        expense = expense_to_domain(orm_expense)

        assert isinstance(expense, Expense)
        assert expense.category == ExpenseCategory.OFFICE_COSTS
        assert expense.deleted_at == AWARE
        assert expense.deletion_reason == "Import undo"


class TestBankTransactionMapper:
    """Tests for BankTransaction mappers."""

    def test_round_trip_through_orm_row(self):
        txn = BankTransaction.create(
            business_id="b1",
            import_audit_id="a1",
            source_format_id="csv-monzo",
            date=date(2025, 1, 15),
            amount=Decimal("-9.99"),
            description="NETFLIX",
            account_last_four="4321",
            bank_transaction_id="tx_0001",
            transaction_hash="h" * 64,
            now=AWARE,
        ).with_suggestion(ExpenseCategory.OTHER_EXPENSES, Decimal("0.40"), AWARE)

        row = apply_bank_transaction(ORMBankTransaction(), txn)
        assert row.review_status == "PENDING"
        assert row.business_flag == "UNSET"
        assert row.created_at.tzinfo is None

        assert bank_transaction_to_domain(row) == txn

    def test_excluded_row(self):
        row = ORMBankTransaction(
            id="t1",
            business_id="b1",
            import_audit_id="a1",
            date=date(2025, 1, 15),
            amount=Decimal("-500.00"),
            description="TFR SAVINGS",
            transaction_hash="h" * 64,
            review_status="EXCLUDED",
            exclusion_reason="TRANSFER",
            business_flag="PERSONAL",
            created_at=NAIVE,
            updated_at=NAIVE,
        )

        txn = bank_transaction_to_domain(row)

        assert txn.review_status == ReviewStatus.EXCLUDED
        assert txn.business_flag == BusinessFlag.PERSONAL
        assert txn.suggested_category is None


class TestImportAuditMapper:
    """Tests for ImportAudit mappers."""

    def test_round_trip(self):
        audit = ImportAudit.create(
            business_id="b1",
            import_timestamp=AWARE,
            file_name="statement.csv",
            file_hash="f" * 64,
            import_type=ImportAuditType.BANK_CSV,
            total_records=3,
            imported_count=2,
            skipped_count=1,
            record_ids=["r1", "r2"],
            original_file_encrypted=False,
            retention_until=date(2031, 1, 15),
            imported_by="alice",
        )

        row = import_audit_to_orm(audit)
        assert row.record_ids == ["r1", "r2"]
        assert row.status == "ACTIVE"

        assert import_audit_to_domain(row) == audit

    def test_undone_row(self):
        row = ORMImportAudit(
            id="a1",
            business_id="b1",
            import_timestamp=NAIVE,
            file_name="statement.csv",
            import_type="CSV_EXPENSE",
            total_records=0,
            imported_count=0,
            skipped_count=0,
            record_ids=None,
            status="UNDONE",
            undone_at=NAIVE,
            undone_by="alice",
        )

        audit = import_audit_to_domain(row)

        assert audit.status == ImportAuditStatus.UNDONE
        assert audit.undone_at == AWARE
        assert audit.record_ids == ()
        assert not audit.can_undo
