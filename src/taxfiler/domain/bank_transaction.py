"""Bank transaction staging and review workflow."""

import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Callable, Optional, TypeVar

from taxfiler.database.base import Database
from taxfiler.domain.categorization import CategorizationEngine
from taxfiler.domain.csv_import import compute_file_hash, detect_parser, validate_file_size
from taxfiler.domain.duplicates import DuplicateDetector
from taxfiler.domain.entities import BankTransaction, new_id
from taxfiler.domain.enums import (
    BusinessFlag,
    ExpenseCategory,
    ImportAuditType,
    IncomeCategory,
    ReviewStatus,
)
from taxfiler.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    already_reviewed,
    bank_transaction_not_found,
)
from taxfiler.domain.expense import ExpenseService
from taxfiler.domain.import_audit import ImportAuditService, LOCAL_USER_IDENTITY, utc_now
from taxfiler.domain.income import IncomeService
from taxfiler.parsers.detector import BankFormatDetector

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Enum)


def parse_enum(enum_cls: type[E], value: str, label: str) -> E:
    """Look up an enum member by name, case-insensitively.

    Raises:
        ValidationError: If the name is unknown
    """
    try:
        return enum_cls[value.strip().upper()]
    except KeyError:
        choices = ", ".join(member.name for member in enum_cls)
        raise ValidationError(f"Unknown {label} '{value}'. Choose one of: {choices}") from None


@dataclass(frozen=True)
class StagingResult:
    """Outcome of staging a bank statement for review."""

    audit_id: str
    bank_name: str
    total_parsed: int
    staged_count: int
    duplicate_count: int
    excluded_count: int
    transaction_ids: tuple[str, ...]


class BankTransactionService:
    """Stages statement lines as bank transactions and reviews them.

    Every staged row starts PENDING with a category suggestion; rows the
    exclusion rules catch start EXCLUDED. A PENDING row is then promoted to an
    income or expense, excluded or skipped, exactly once.
    """

    def __init__(
        self,
        db: Database,
        detector: Optional[BankFormatDetector] = None,
        engine: Optional[CategorizationEngine] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        """Initialize bank transaction service.

        Args:
            db: Database instance
            detector: Format detector, defaults to the built-in bank registry
            engine: Categorisation engine
            clock: Returns the current aware UTC time
        """
        self.db = db
        self.clock = clock
        self.detector = detector or BankFormatDetector()
        self.engine = engine or CategorizationEngine()
        self.duplicate_detector = DuplicateDetector(db)
        self.income_service = IncomeService(db)
        self.expense_service = ExpenseService(db)
        self.audit_service = ImportAuditService(db, clock)

    def stage_statement(
        self,
        business_id: str,
        csv_path: str | Path,
        encoding: str = "utf-8",
        imported_by: Optional[str] = None,
    ) -> StagingResult:
        """Stage a bank statement CSV for review.

        Exact duplicates of existing records or of earlier rows in the file
        are not staged. The audit lists the staged transaction IDs in file
        order.

        Raises:
            FileNotFoundError: If the file does not exist
            FileTooLargeError: If the file exceeds the size ceiling
            FormatNotRecognizedError: If no bank dialect matches the header
            CsvParseError: If any row is malformed; nothing is persisted
        """
        path = Path(csv_path)
        validate_file_size(path)
        parser = detect_parser(self.detector, path, encoding)
        transactions = parser.parse(path, encoding)
        check = self.duplicate_detector.check_duplicates(business_id, transactions)

        now = self.clock()
        audit_id = new_id()
        staged: list[BankTransaction] = []
        for transaction in check.unique_transactions:
            bank_txn = BankTransaction.create(
                business_id=business_id,
                import_audit_id=audit_id,
                source_format_id=parser.format_id,
                date=transaction.date,
                amount=transaction.amount,
                description=transaction.description,
                account_last_four=None,
                bank_transaction_id=transaction.reference,
                transaction_hash=transaction.transaction_hash,
                now=now,
            )
            staged.append(self.engine.apply_recommendation(bank_txn, now))

        excluded_count = sum(1 for t in staged if t.review_status is ReviewStatus.EXCLUDED)
        try:
            for bank_txn in staged:
                self.db.save_bank_transaction(bank_txn, commit=False)
            self.audit_service.record_import(
                business_id=business_id,
                file_name=path.name,
                file_hash=compute_file_hash(path),
                import_type=ImportAuditType.BANK_CSV,
                total_records=len(transactions),
                imported_count=len(staged),
                skipped_count=check.duplicate_count,
                record_ids=[t.id for t in staged],
                imported_by=imported_by,
                imported_at=now,
                audit_id=audit_id,
                commit=False,
            )
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info(
            "Staged %d of %d rows from %s (%d duplicates, %d auto-excluded)",
            len(staged),
            len(transactions),
            path.name,
            check.duplicate_count,
            excluded_count,
        )
        return StagingResult(
            audit_id=audit_id,
            bank_name=parser.bank_name,
            total_parsed=len(transactions),
            staged_count=len(staged),
            duplicate_count=check.duplicate_count,
            excluded_count=excluded_count,
            transaction_ids=tuple(t.id for t in staged),
        )

    def get(self, transaction_id: str) -> BankTransaction:
        """Get an active bank transaction.

        Raises:
            NotFoundError: If it does not exist or was deleted
        """
        bank_txn = self.db.find_bank_transaction_active(transaction_id)
        if bank_txn is None:
            raise NotFoundError(bank_transaction_not_found(transaction_id))
        return bank_txn

    def list_transactions(
        self, business_id: str, review_status: Optional[ReviewStatus] = None
    ) -> list[BankTransaction]:
        """List active bank transactions for a business."""
        return self.db.find_bank_transactions_by_business(business_id, review_status)

    def flag_business(self, transaction_id: str, flag: BusinessFlag) -> BankTransaction:
        """Mark a transaction as business, personal or undecided."""
        bank_txn = self.get(transaction_id)
        return self.db.update_bank_transaction(bank_txn.with_business_flag(flag, self.clock()))

    def promote(self, transaction_id: str, category: Optional[str] = None) -> BankTransaction:
        """Create the income or expense record for a PENDING transaction.

        Args:
            transaction_id: Bank transaction to promote
            category: Category name; defaults to the suggestion for expenses
                and to the keyword match for income

        Returns:
            The CATEGORIZED transaction linked to the new record

        Raises:
            NotFoundError: If the transaction does not exist
            ConflictError: If the transaction is not PENDING
            ValidationError: If the category name is unknown
        """
        bank_txn = self.get(transaction_id)
        if bank_txn.is_reviewed:
            raise ConflictError(already_reviewed(bank_txn.id, bank_txn.review_status.value))
        now = self.clock()

        if bank_txn.is_income:
            if category:
                income_category = parse_enum(IncomeCategory, category, "income category")
            else:
                income_category = self.engine.categorizer.suggest_income_category(
                    bank_txn.description
                ).category
            income = self.income_service.create(
                business_id=bank_txn.business_id,
                date=bank_txn.date,
                amount=bank_txn.amount,
                description=bank_txn.description,
                category=income_category,
                reference=bank_txn.bank_transaction_id,
                bank_transaction_ref=bank_txn.id,
                commit=False,
            )
            updated = bank_txn.with_categorized_as_income(income.id, now)
        else:
            if category:
                expense_category = parse_enum(ExpenseCategory, category, "expense category")
            else:
                expense_category = bank_txn.suggested_category or ExpenseCategory.OTHER_EXPENSES
            expense = self.expense_service.create(
                business_id=bank_txn.business_id,
                date=bank_txn.date,
                amount=bank_txn.absolute_amount,
                description=bank_txn.description,
                category=expense_category,
                bank_transaction_ref=bank_txn.id,
                commit=False,
            )
            updated = bank_txn.with_categorized_as_expense(expense.id, now)

        try:
            result = self.db.update_bank_transaction(updated)
        except Exception:
            self.db.rollback()
            raise
        logger.info("Promoted bank transaction %s", transaction_id)
        return result

    def exclude(self, transaction_id: str, reason: str) -> BankTransaction:
        """Exclude a PENDING transaction from the tax figures."""
        bank_txn = self.get(transaction_id)
        return self.db.update_bank_transaction(bank_txn.with_excluded(reason, self.clock()))

    def skip(self, transaction_id: str) -> BankTransaction:
        """Leave a PENDING transaction out without a reason."""
        bank_txn = self.get(transaction_id)
        return self.db.update_bank_transaction(bank_txn.with_skipped(self.clock()))

    def soft_delete(
        self, transaction_id: str, deleted_by: str = LOCAL_USER_IDENTITY, reason: Optional[str] = None
    ) -> BankTransaction:
        bank_txn = self.get(transaction_id)
        return self.db.update_bank_transaction(
            bank_txn.with_soft_deleted(self.clock(), deleted_by, reason)
        )

    def review_summary(self, business_id: str) -> dict[str, int]:
        """Count active transactions by review status.

        Returns:
            Dict keyed by status value plus ``total``
        """
        summary = {status.value: 0 for status in ReviewStatus}
        for bank_txn in self.db.find_bank_transactions_by_business(business_id):
            summary[bank_txn.review_status.value] += 1
        summary["total"] = sum(summary.values())
        return summary
