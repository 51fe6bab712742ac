"""Domain model entities for taxfiler.

These are pure data classes representing business concepts, independent of
database schema. State changes never mutate an entity: the ``with_*`` methods
return a new instance, leaving the original untouched.
"""

import hashlib
import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, date
from decimal import Decimal
from typing import Optional

from taxfiler.domain.enums import (
    BusinessFlag,
    ExpenseCategory,
    ImportAuditStatus,
    ImportAuditType,
    IncomeCategory,
    ReviewStatus,
)
from taxfiler.domain.errors import (
    ConflictError,
    UndoBlockedError,
    ValidationError,
    already_reviewed,
)
from taxfiler.utils.text import normalize_description


def new_id() -> str:
    """Return a new random entity ID."""
    return str(uuid.uuid4())


def plain_amount(amount: Decimal) -> str:
    """Render an amount with trailing zeros stripped and no exponent."""
    normalized = amount.normalize()
    if normalized == 0:
        return "0"
    return format(normalized, "f")


def compute_transaction_hash(txn_date: date, amount: Decimal, description: Optional[str]) -> str:
    """Compute the duplicate-detection fingerprint of a statement line.

    The fingerprint covers date, amount with trailing zeros stripped and the
    normalised description. Balance and reference never take part.
    """
    key = f"{txn_date.isoformat()}|{plain_amount(amount)}|{normalize_description(description)}"
    return hashlib.sha256(key.encode("utf-8")).hexdigest()


@dataclass(frozen=True)
class ImportedTransaction:
    """One normalised bank statement line produced by a parser.

    Positive amounts are income; zero and negative amounts are expenses.
    """

    date: date
    amount: Decimal
    description: str
    balance: Optional[Decimal] = None
    reference: Optional[str] = None

    def __post_init__(self):
        if not isinstance(self.date, date):
            raise ValidationError("date cannot be null")
        if not isinstance(self.amount, Decimal):
            raise ValidationError("amount cannot be null")
        if self.description is None or not self.description.strip():
            raise ValidationError("description cannot be null or blank")

    @property
    def is_income(self) -> bool:
        return self.amount > 0

    @property
    def is_expense(self) -> bool:
        # Zero-value lines are kept as expenses rather than dropped.
        return self.amount <= 0

    @property
    def absolute_amount(self) -> Decimal:
        return abs(self.amount)

    @property
    def transaction_hash(self) -> str:
        return compute_transaction_hash(self.date, self.amount, self.description)


@dataclass(frozen=True)
class Income:
    """Income record promoted from an import or entered manually."""

    id: str
    business_id: str
    date: date
    amount: Decimal
    description: str
    category: IncomeCategory
    reference: Optional[str]
    bank_transaction_ref: Optional[str]
    invoice_number: Optional[str]
    receipt_path: Optional[str]
    created_at: datetime
    deleted_at: Optional[datetime] = None
    deletion_reason: Optional[str] = None


@dataclass(frozen=True)
class Expense:
    """Expense record promoted from an import or entered manually.

    Amounts are stored as positive values.
    """

    id: str
    business_id: str
    date: date
    amount: Decimal
    description: str
    category: ExpenseCategory
    receipt_path: Optional[str]
    notes: Optional[str]
    bank_transaction_ref: Optional[str]
    created_at: datetime
    deleted_at: Optional[datetime] = None
    deletion_reason: Optional[str] = None


@dataclass(frozen=True)
class BankTransaction:
    """Staged bank transaction awaiting review.

    Review lifecycle: PENDING -> CATEGORIZED | EXCLUDED | SKIPPED. A
    CATEGORIZED transaction links to exactly one Income or Expense record and
    an EXCLUDED one always carries a reason. Soft deletion is independent of
    the review status.
    """

    id: str
    business_id: str
    import_audit_id: str
    source_format_id: Optional[str]
    date: date
    amount: Decimal
    description: str
    account_last_four: Optional[str]
    bank_transaction_id: Optional[str]
    transaction_hash: str
    review_status: ReviewStatus
    income_id: Optional[str]
    expense_id: Optional[str]
    exclusion_reason: Optional[str]
    business_flag: BusinessFlag
    confidence_score: Optional[Decimal]
    suggested_category: Optional[ExpenseCategory]
    created_at: datetime
    updated_at: datetime
    deleted_at: Optional[datetime] = None
    deleted_by: Optional[str] = None
    deletion_reason: Optional[str] = None

    def __post_init__(self):
        if not self.id:
            raise ValidationError("id cannot be null")
        if not self.business_id:
            raise ValidationError("business_id cannot be null")
        if not self.import_audit_id:
            raise ValidationError("import_audit_id cannot be null")
        if not isinstance(self.date, date):
            raise ValidationError("date cannot be null")
        if not isinstance(self.amount, Decimal):
            raise ValidationError("amount cannot be null")
        if self.description is None or not self.description.strip():
            raise ValidationError("description cannot be null or blank")
        if self.transaction_hash is None or not self.transaction_hash.strip():
            raise ValidationError("transaction_hash cannot be null or blank")
        if self.account_last_four is not None and len(self.account_last_four) > 4:
            raise ValidationError("account_last_four must hold at most 4 characters")
        if self.review_status is ReviewStatus.CATEGORIZED:
            if (self.income_id is None) == (self.expense_id is None):
                raise ValidationError(
                    "categorized transaction must link exactly one income or expense"
                )
        if self.review_status is ReviewStatus.EXCLUDED and not self.exclusion_reason:
            raise ValidationError("excluded transaction requires an exclusion reason")

    @classmethod
    def create(
        cls,
        business_id: str,
        import_audit_id: str,
        source_format_id: Optional[str],
        date: date,
        amount: Decimal,
        description: str,
        account_last_four: Optional[str],
        bank_transaction_id: Optional[str],
        transaction_hash: str,
        now: datetime,
    ) -> "BankTransaction":
        """Create a new PENDING transaction from an import."""
        return cls(
            id=new_id(),
            business_id=business_id,
            import_audit_id=import_audit_id,
            source_format_id=source_format_id,
            date=date,
            amount=amount,
            description=description,
            account_last_four=account_last_four,
            bank_transaction_id=bank_transaction_id,
            transaction_hash=transaction_hash,
            review_status=ReviewStatus.PENDING,
            income_id=None,
            expense_id=None,
            exclusion_reason=None,
            business_flag=BusinessFlag.UNSET,
            confidence_score=None,
            suggested_category=None,
            created_at=now,
            updated_at=now,
        )

    @property
    def is_income(self) -> bool:
        return self.amount > 0

    @property
    def is_expense(self) -> bool:
        return self.amount <= 0

    @property
    def absolute_amount(self) -> Decimal:
        return abs(self.amount)

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    @property
    def is_reviewed(self) -> bool:
        return self.review_status.is_reviewed

    def _require_pending(self) -> None:
        if self.review_status is not ReviewStatus.PENDING:
            raise ConflictError(already_reviewed(self.id, self.review_status.value))

    def with_categorized_as_income(self, income_id: str, now: datetime) -> "BankTransaction":
        self._require_pending()
        return replace(
            self,
            review_status=ReviewStatus.CATEGORIZED,
            income_id=income_id,
            expense_id=None,
            exclusion_reason=None,
            updated_at=now,
        )

    def with_categorized_as_expense(self, expense_id: str, now: datetime) -> "BankTransaction":
        self._require_pending()
        return replace(
            self,
            review_status=ReviewStatus.CATEGORIZED,
            income_id=None,
            expense_id=expense_id,
            exclusion_reason=None,
            updated_at=now,
        )

    def with_excluded(self, reason: str, now: datetime) -> "BankTransaction":
        self._require_pending()
        if not reason or not reason.strip():
            raise ValidationError("exclusion reason cannot be blank")
        return replace(
            self,
            review_status=ReviewStatus.EXCLUDED,
            exclusion_reason=reason,
            updated_at=now,
        )

    def with_skipped(self, now: datetime) -> "BankTransaction":
        self._require_pending()
        return replace(self, review_status=ReviewStatus.SKIPPED, updated_at=now)

    def with_business_flag(self, flag: BusinessFlag, now: datetime) -> "BankTransaction":
        return replace(self, business_flag=flag, updated_at=now)

    def with_suggestion(
        self,
        category: Optional[ExpenseCategory],
        confidence_score: Decimal,
        now: datetime,
    ) -> "BankTransaction":
        return replace(
            self,
            suggested_category=category,
            confidence_score=confidence_score,
            updated_at=now,
        )

    def with_soft_deleted(self, now: datetime, deleted_by: str, reason: Optional[str]) -> "BankTransaction":
        return replace(
            self,
            deleted_at=now,
            deleted_by=deleted_by,
            deletion_reason=reason,
            updated_at=now,
        )


@dataclass(frozen=True)
class ImportAudit:
    """Append-only audit record of one import operation.

    ``record_ids`` lists the created Income/Expense IDs in file order and is
    frozen at construction. Undo flips the status once; the import facts
    never change.
    """

    id: str
    business_id: str
    import_timestamp: datetime
    file_name: str
    file_hash: Optional[str]
    import_type: ImportAuditType
    total_records: int
    imported_count: int
    skipped_count: int
    record_ids: tuple[str, ...] = field(default_factory=tuple)
    status: ImportAuditStatus = ImportAuditStatus.ACTIVE
    undone_at: Optional[datetime] = None
    undone_by: Optional[str] = None
    original_file_path: Optional[str] = None
    original_file_encrypted: Optional[bool] = None
    retention_until: Optional[date] = None
    imported_by: Optional[str] = None

    def __post_init__(self):
        if not self.id:
            raise ValidationError("id cannot be null")
        if not self.business_id:
            raise ValidationError("business_id cannot be null")
        if self.import_timestamp is None:
            raise ValidationError("import_timestamp cannot be null")
        if self.import_type is None:
            raise ValidationError("import_type cannot be null")
        if self.status is None:
            raise ValidationError("status cannot be null")
        if self.total_records < 0:
            raise ValidationError("total_records cannot be negative")
        if self.imported_count < 0:
            raise ValidationError("imported_count cannot be negative")
        if self.skipped_count < 0:
            raise ValidationError("skipped_count cannot be negative")
        # Copy into a tuple so a caller's list cannot alias the record.
        object.__setattr__(self, "record_ids", tuple(self.record_ids or ()))

    @classmethod
    def create(
        cls,
        business_id: str,
        import_timestamp: datetime,
        file_name: str,
        file_hash: Optional[str],
        import_type: ImportAuditType,
        total_records: int,
        imported_count: int,
        skipped_count: int,
        record_ids: Optional[list[str]] = None,
        original_file_path: Optional[str] = None,
        original_file_encrypted: Optional[bool] = None,
        retention_until: Optional[date] = None,
        imported_by: Optional[str] = None,
        audit_id: Optional[str] = None,
    ) -> "ImportAudit":
        """Create a new ACTIVE audit record."""
        return cls(
            id=audit_id or new_id(),
            business_id=business_id,
            import_timestamp=import_timestamp,
            file_name=file_name,
            file_hash=file_hash,
            import_type=import_type,
            total_records=total_records,
            imported_count=imported_count,
            skipped_count=skipped_count,
            record_ids=tuple(record_ids or ()),
            original_file_path=original_file_path,
            original_file_encrypted=original_file_encrypted,
            retention_until=retention_until,
            imported_by=imported_by,
        )

    @property
    def can_undo(self) -> bool:
        return self.status is ImportAuditStatus.ACTIVE

    @property
    def has_encrypted_file(self) -> bool:
        return self.original_file_path is not None and self.original_file_encrypted is True

    @property
    def has_retention_policy(self) -> bool:
        return self.retention_until is not None

    def with_undone(self, undone_at: datetime, undone_by: str) -> "ImportAudit":
        """Return a copy marked UNDONE.

        Raises:
            UndoBlockedError: If the import has already been undone
        """
        if not self.can_undo:
            raise UndoBlockedError(f"Import {self.id} has already been undone")
        return replace(
            self,
            status=ImportAuditStatus.UNDONE,
            undone_at=undone_at,
            undone_by=undone_by,
        )
