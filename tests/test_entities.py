"""Tests for domain entities."""

import pytest
from datetime import date, datetime, UTC
from decimal import Decimal

from taxfiler.domain.entities import (
    BankTransaction,
    ImportAudit,
    ImportedTransaction,
    compute_transaction_hash,
    plain_amount,
)
from taxfiler.domain.enums import (
    BusinessFlag,
    ImportAuditStatus,
    ImportAuditType,
    ReviewStatus,
)
from taxfiler.domain.errors import ConflictError, UndoBlockedError, ValidationError

NOW = datetime(2025, 1, 10, 9, 0, tzinfo=UTC)
LATER = datetime(2025, 1, 11, 9, 0, tzinfo=UTC)


def make_bank_transaction(**overrides) -> BankTransaction:
    values = dict(
        business_id="b1",
        import_audit_id="a1",
        source_format_id="csv-barclays",
        date=date(2025, 1, 10),
        amount=Decimal("-12.50"),
        description="COFFEE SHOP",
        account_last_four="1234",
        bank_transaction_id=None,
        transaction_hash="h" * 64,
        now=NOW,
    )
    values.update(overrides)
    return BankTransaction.create(**values)


class TestTransactionHash:
    """Tests for the duplicate fingerprint."""

    def test_hash_is_stable(self):
        first = compute_transaction_hash(date(2025, 1, 15), Decimal("-10.00"), "TEST")
        second = compute_transaction_hash(date(2025, 1, 15), Decimal("-10.00"), "TEST")
        assert first == second
        assert len(first) == 64

    def test_trailing_zeros_do_not_change_hash(self):
        assert compute_transaction_hash(
            date(2025, 1, 15), Decimal("-10.00"), "TEST"
        ) == compute_transaction_hash(date(2025, 1, 15), Decimal("-10"), "TEST")

    def test_description_normalised(self):
        assert compute_transaction_hash(
            date(2025, 1, 15), Decimal("5"), "  Coffee   SHOP "
        ) == compute_transaction_hash(date(2025, 1, 15), Decimal("5"), "coffee shop")

    def test_sign_and_date_matter(self):
        base = compute_transaction_hash(date(2025, 1, 15), Decimal("10"), "TEST")
        assert base != compute_transaction_hash(date(2025, 1, 15), Decimal("-10"), "TEST")
        assert base != compute_transaction_hash(date(2025, 1, 16), Decimal("10"), "TEST")

    def test_balance_and_reference_ignored(self):
        a = ImportedTransaction(date(2025, 1, 15), Decimal("10"), "TEST", Decimal("100"), "R1")
        b = ImportedTransaction(date(2025, 1, 15), Decimal("10"), "TEST", Decimal("200"), "R2")
        assert a.transaction_hash == b.transaction_hash

    def test_plain_amount(self):
        assert plain_amount(Decimal("10.00")) == "10"
        assert plain_amount(Decimal("1.50")) == "1.5"
        assert plain_amount(Decimal("0.00")) == "0"
        assert plain_amount(Decimal("100")) == "100"


class TestImportedTransaction:
    """Tests for ImportedTransaction."""

    def test_direction(self):
        assert ImportedTransaction(date(2025, 1, 1), Decimal("1"), "IN").is_income
        assert ImportedTransaction(date(2025, 1, 1), Decimal("-1"), "OUT").is_expense
        zero = ImportedTransaction(date(2025, 1, 1), Decimal("0"), "ZERO")
        assert zero.is_expense
        assert not zero.is_income

    def test_blank_description_rejected(self):
        with pytest.raises(ValidationError):
            ImportedTransaction(date(2025, 1, 1), Decimal("1"), "   ")

    def test_missing_amount_rejected(self):
        with pytest.raises(ValidationError):
            ImportedTransaction(date(2025, 1, 1), None, "TEST")


class TestBankTransaction:
    """Tests for BankTransaction lifecycle."""

    def test_create_defaults(self):
        txn = make_bank_transaction()
        assert txn.review_status == ReviewStatus.PENDING
        assert txn.business_flag == BusinessFlag.UNSET
        assert txn.created_at == txn.updated_at == NOW
        assert not txn.is_deleted
        assert txn.absolute_amount == Decimal("12.50")

    def test_categorize_as_expense(self):
        txn = make_bank_transaction()
        updated = txn.with_categorized_as_expense("e1", LATER)

        assert updated.review_status == ReviewStatus.CATEGORIZED
        assert updated.expense_id == "e1"
        assert updated.income_id is None
        assert updated.updated_at == LATER
        assert txn.review_status == ReviewStatus.PENDING

    def test_categorize_as_income(self):
        updated = make_bank_transaction(amount=Decimal("100")).with_categorized_as_income("i1", LATER)
        assert updated.income_id == "i1"
        assert updated.expense_id is None

    def test_reviewed_transaction_cannot_transition(self):
        skipped = make_bank_transaction().with_skipped(LATER)
        with pytest.raises(ConflictError):
            skipped.with_excluded("TRANSFER", LATER)
        with pytest.raises(ConflictError):
            skipped.with_categorized_as_expense("e1", LATER)
        with pytest.raises(ConflictError):
            skipped.with_skipped(LATER)

    def test_exclude_requires_reason(self):
        with pytest.raises(ValidationError):
            make_bank_transaction().with_excluded("  ", LATER)

    def test_excluded_state_requires_reason(self):
        txn = make_bank_transaction()
        with pytest.raises(ValidationError):
            BankTransaction(**{**txn.__dict__, "review_status": ReviewStatus.EXCLUDED})

    def test_categorized_state_requires_single_link(self):
        txn = make_bank_transaction()
        with pytest.raises(ValidationError):
            BankTransaction(**{**txn.__dict__, "review_status": ReviewStatus.CATEGORIZED})

    def test_account_last_four_length(self):
        with pytest.raises(ValidationError):
            make_bank_transaction(account_last_four="12345")

    def test_business_flag_allowed_after_review(self):
        reviewed = make_bank_transaction().with_skipped(NOW)
        flagged = reviewed.with_business_flag(BusinessFlag.PERSONAL, LATER)
        assert flagged.business_flag == BusinessFlag.PERSONAL
        assert flagged.review_status == ReviewStatus.SKIPPED

    def test_soft_delete(self):
        deleted = make_bank_transaction().with_soft_deleted(LATER, "alice", "wrong file")
        assert deleted.is_deleted
        assert deleted.deleted_by == "alice"
        assert deleted.deletion_reason == "wrong file"
        assert deleted.review_status == ReviewStatus.PENDING


class TestImportAudit:
    """Tests for ImportAudit."""

    def make_audit(self, record_ids):
        return ImportAudit.create(
            business_id="b1",
            import_timestamp=NOW,
            file_name="statement.csv",
            file_hash="f" * 64,
            import_type=ImportAuditType.BANK_CSV,
            total_records=3,
            imported_count=2,
            skipped_count=1,
            record_ids=record_ids,
        )

    def test_record_ids_frozen(self):
        ids = ["r1", "r2"]
        audit = self.make_audit(ids)
        ids.append("r3")
        assert audit.record_ids == ("r1", "r2")

    def test_create_defaults(self):
        audit = self.make_audit(None)
        assert audit.status == ImportAuditStatus.ACTIVE
        assert audit.record_ids == ()
        assert audit.can_undo
        assert not audit.has_encrypted_file
        assert not audit.has_retention_policy

    def test_preallocated_id(self):
        audit = ImportAudit.create(
            business_id="b1",
            import_timestamp=NOW,
            file_name="statement.csv",
            file_hash=None,
            import_type=ImportAuditType.BANK_CSV,
            total_records=0,
            imported_count=0,
            skipped_count=0,
            audit_id="fixed-id",
        )
        assert audit.id == "fixed-id"

    def test_with_undone(self):
        audit = self.make_audit(["r1"])
        undone = audit.with_undone(LATER, "alice")

        assert undone.status == ImportAuditStatus.UNDONE
        assert undone.undone_at == LATER
        assert undone.undone_by == "alice"
        assert undone.record_ids == audit.record_ids
        assert audit.status == ImportAuditStatus.ACTIVE

    def test_undo_twice_blocked(self):
        undone = self.make_audit(["r1"]).with_undone(LATER, "alice")
        with pytest.raises(UndoBlockedError):
            undone.with_undone(LATER, "alice")

    def test_negative_counts_rejected(self):
        with pytest.raises(ValidationError):
            ImportAudit.create(
                business_id="b1",
                import_timestamp=NOW,
                file_name="statement.csv",
                file_hash=None,
                import_type=ImportAuditType.BANK_CSV,
                total_records=-1,
                imported_count=0,
                skipped_count=0,
            )
