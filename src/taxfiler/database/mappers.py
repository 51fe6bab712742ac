"""Mapper functions to convert between domain models and SQLAlchemy models.

SQLite stores datetimes without an offset; every timestamp is written in UTC
and re-tagged as UTC when read back.
"""

from datetime import datetime, UTC
from typing import Optional

from taxfiler.domain import entities as domain
from taxfiler.domain.enums import (
    BusinessFlag,
    ExpenseCategory,
    ImportAuditStatus,
    ImportAuditType,
    IncomeCategory,
    ReviewStatus,
)
from taxfiler.database.models import (
    BankTransaction as ORMBankTransaction,
    Expense as ORMExpense,
    ImportAudit as ORMImportAudit,
    Income as ORMIncome,
)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Attach UTC to a naive datetime read from the database."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def to_storage(value: Optional[datetime]) -> Optional[datetime]:
    """Convert an aware datetime to naive UTC for storage."""
    if value is None:
        return None
    if value.tzinfo is not None:
        return value.astimezone(UTC).replace(tzinfo=None)
    return value


def income_to_domain(orm_income: ORMIncome) -> domain.Income:
    """Convert SQLAlchemy Income model to domain Income entity."""
    return domain.Income(
        id=orm_income.id,
        business_id=orm_income.business_id,
        date=orm_income.date,
        amount=orm_income.amount,
        description=orm_income.description,
        category=IncomeCategory(orm_income.category),
        reference=orm_income.reference,
        bank_transaction_ref=orm_income.bank_transaction_ref,
        invoice_number=orm_income.invoice_number,
        receipt_path=orm_income.receipt_path,
        created_at=as_utc(orm_income.created_at),
        deleted_at=as_utc(orm_income.deleted_at),
        deletion_reason=orm_income.deletion_reason,
    )


def expense_to_domain(orm_expense: ORMExpense) -> domain.Expense:
    """Convert SQLAlchemy Expense model to domain Expense entity."""
    return domain.Expense(
        id=orm_expense.id,
        business_id=orm_expense.business_id,
        date=orm_expense.date,
        amount=orm_expense.amount,
        description=orm_expense.description,
        category=ExpenseCategory(orm_expense.category),
        receipt_path=orm_expense.receipt_path,
        notes=orm_expense.notes,
        bank_transaction_ref=orm_expense.bank_transaction_ref,
        created_at=as_utc(orm_expense.created_at),
        deleted_at=as_utc(orm_expense.deleted_at),
        deletion_reason=orm_expense.deletion_reason,
    )


def bank_transaction_to_domain(orm_txn: ORMBankTransaction) -> domain.BankTransaction:
    """Convert SQLAlchemy BankTransaction model to domain BankTransaction entity."""
    return domain.BankTransaction(
        id=orm_txn.id,
        business_id=orm_txn.business_id,
        import_audit_id=orm_txn.import_audit_id,
        source_format_id=orm_txn.source_format_id,
        date=orm_txn.date,
        amount=orm_txn.amount,
        description=orm_txn.description,
        account_last_four=orm_txn.account_last_four,
        bank_transaction_id=orm_txn.bank_transaction_id,
        transaction_hash=orm_txn.transaction_hash,
        review_status=ReviewStatus(orm_txn.review_status),
        income_id=orm_txn.income_id,
        expense_id=orm_txn.expense_id,
        exclusion_reason=orm_txn.exclusion_reason,
        business_flag=BusinessFlag(orm_txn.business_flag),
        confidence_score=orm_txn.confidence_score,
        suggested_category=(
            ExpenseCategory(orm_txn.suggested_category) if orm_txn.suggested_category else None
        ),
        created_at=as_utc(orm_txn.created_at),
        updated_at=as_utc(orm_txn.updated_at),
        deleted_at=as_utc(orm_txn.deleted_at),
        deleted_by=orm_txn.deleted_by,
        deletion_reason=orm_txn.deletion_reason,
    )


def apply_bank_transaction(orm_txn: ORMBankTransaction, txn: domain.BankTransaction) -> ORMBankTransaction:
    """Copy every field of a domain BankTransaction onto an ORM row."""
    orm_txn.id = txn.id
    orm_txn.business_id = txn.business_id
    orm_txn.import_audit_id = txn.import_audit_id
    orm_txn.source_format_id = txn.source_format_id
    orm_txn.date = txn.date
    orm_txn.amount = txn.amount
    orm_txn.description = txn.description
    orm_txn.account_last_four = txn.account_last_four
    orm_txn.bank_transaction_id = txn.bank_transaction_id
    orm_txn.transaction_hash = txn.transaction_hash
    orm_txn.review_status = txn.review_status.value
    orm_txn.income_id = txn.income_id
    orm_txn.expense_id = txn.expense_id
    orm_txn.exclusion_reason = txn.exclusion_reason
    orm_txn.business_flag = txn.business_flag.value
    orm_txn.confidence_score = txn.confidence_score
    orm_txn.suggested_category = txn.suggested_category.value if txn.suggested_category else None
    orm_txn.created_at = to_storage(txn.created_at)
    orm_txn.updated_at = to_storage(txn.updated_at)
    orm_txn.deleted_at = to_storage(txn.deleted_at)
    orm_txn.deleted_by = txn.deleted_by
    orm_txn.deletion_reason = txn.deletion_reason
    return orm_txn


def import_audit_to_domain(orm_audit: ORMImportAudit) -> domain.ImportAudit:
    """Convert SQLAlchemy ImportAudit model to domain ImportAudit entity."""
    return domain.ImportAudit(
        id=orm_audit.id,
        business_id=orm_audit.business_id,
        import_timestamp=as_utc(orm_audit.import_timestamp),
        file_name=orm_audit.file_name,
        file_hash=orm_audit.file_hash,
        import_type=ImportAuditType(orm_audit.import_type),
        total_records=orm_audit.total_records,
        imported_count=orm_audit.imported_count,
        skipped_count=orm_audit.skipped_count,
        record_ids=tuple(orm_audit.record_ids or ()),
        status=ImportAuditStatus(orm_audit.status),
        undone_at=as_utc(orm_audit.undone_at),
        undone_by=orm_audit.undone_by,
        original_file_path=orm_audit.original_file_path,
        original_file_encrypted=orm_audit.original_file_encrypted,
        retention_until=orm_audit.retention_until,
        imported_by=orm_audit.imported_by,
    )


def import_audit_to_orm(audit: domain.ImportAudit) -> ORMImportAudit:
    """Convert domain ImportAudit entity to a new SQLAlchemy row."""
    return ORMImportAudit(
        id=audit.id,
        business_id=audit.business_id,
        import_timestamp=to_storage(audit.import_timestamp),
        file_name=audit.file_name,
        file_hash=audit.file_hash,
        import_type=audit.import_type.value,
        total_records=audit.total_records,
        imported_count=audit.imported_count,
        skipped_count=audit.skipped_count,
        record_ids=list(audit.record_ids),
        status=audit.status.value,
        undone_at=to_storage(audit.undone_at),
        undone_by=audit.undone_by,
        original_file_path=audit.original_file_path,
        original_file_encrypted=audit.original_file_encrypted,
        retention_until=audit.retention_until,
        imported_by=audit.imported_by,
    )
