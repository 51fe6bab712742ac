"""Import audit trail and undo."""

import logging
import re
from dataclasses import dataclass
from datetime import datetime, timedelta, UTC
from pathlib import Path
from typing import Callable, Optional

from dateutil.relativedelta import relativedelta

from taxfiler.database.base import Database
from taxfiler.domain.entities import ImportAudit
from taxfiler.domain.enums import ImportAuditStatus, ImportAuditType
from taxfiler.domain.errors import NotFoundError, UndoBlockedError, import_audit_not_found

logger = logging.getLogger(__name__)

UNDO_WINDOW_DAYS = 7
# HMRC record keeping: five years after the 31 January filing deadline.
RETENTION_YEARS = 6
LOCAL_USER_IDENTITY = "local-user"
UNDO_DELETION_REASON = "Import undo"

ALREADY_UNDONE = "Import has already been undone"
OUTSIDE_UNDO_WINDOW = (
    f"Import is older than {UNDO_WINDOW_DAYS} days and cannot be undone. "
    f"Imports can only be undone within {UNDO_WINDOW_DAYS} days of the original import."
)

_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def utc_now() -> datetime:
    return datetime.now(UTC)


def generate_filename(file_name: str, file_hash: str, imported_at: datetime) -> str:
    """Build the stored-copy name for an imported file.

    ``<yyyyMMddTHHmmss>_<first 12 hash chars>_<sanitised base name>``; the
    same inputs always give the same name.

    Example:
        >>> generate_filename("my statement.csv", "ab" * 32, datetime(2025, 4, 6, 9, 30, tzinfo=UTC))
        '20250406T093000_abababababab_my_statement.csv'
    """
    base = Path(file_name).name
    safe = _UNSAFE_FILENAME_CHARS.sub("_", base).strip("_") or "import.csv"
    return f"{imported_at.strftime('%Y%m%dT%H%M%S')}_{file_hash[:12]}_{safe}"


@dataclass(frozen=True)
class UndoEligibility:
    """Whether an import may be undone and, if not, why."""

    eligible: bool
    reason: Optional[str] = None

    @classmethod
    def allowed(cls) -> "UndoEligibility":
        return cls(True)

    @classmethod
    def blocked(cls, reason: str) -> "UndoEligibility":
        return cls(False, reason)


@dataclass(frozen=True)
class UndoResult:
    """Outcome of undoing an import.

    ``records_skipped`` counts IDs that were already deleted or no longer
    exist. ``records_promoted`` counts incomes and expenses created by
    promoting staged rows of a bank CSV import, removed along with them.
    """

    audit: ImportAudit
    records_undone: int
    records_skipped: int
    records_promoted: int = 0


class ImportAuditService:
    """Records imports and reverses them on request."""

    def __init__(self, db: Database, clock: Callable[[], datetime] = utc_now):
        """Initialize import audit service.

        Args:
            db: Database instance
            clock: Returns the current aware UTC time
        """
        self.db = db
        self.clock = clock

    def record_import(
        self,
        business_id: str,
        file_name: str,
        file_hash: Optional[str],
        import_type: ImportAuditType,
        total_records: int,
        imported_count: int,
        skipped_count: int,
        record_ids: Optional[list[str]] = None,
        imported_by: Optional[str] = None,
        imported_at: Optional[datetime] = None,
        audit_id: Optional[str] = None,
        commit: bool = True,
    ) -> ImportAudit:
        """Persist the audit record for a finished import.

        Args:
            business_id: Business the import belongs to
            file_name: Original file name
            file_hash: SHA-256 of the file bytes
            import_type: Kind of import
            total_records: Rows parsed from the file
            imported_count: Records created
            skipped_count: Rows not imported (duplicates, exclusions)
            record_ids: IDs of created records in file order
            imported_by: User identity, defaults to the local user
            imported_at: Import time, defaults to now
            audit_id: Pre-allocated ID when records must reference the audit
            commit: Commit immediately; False joins the caller's unit of work

        Returns:
            The stored ImportAudit
        """
        now = imported_at or self.clock()
        original_file_path = None
        if file_hash:
            original_file_path = generate_filename(file_name, file_hash, now)

        audit = ImportAudit.create(
            business_id=business_id,
            import_timestamp=now,
            file_name=file_name,
            file_hash=file_hash,
            import_type=import_type,
            total_records=total_records,
            imported_count=imported_count,
            skipped_count=skipped_count,
            record_ids=record_ids,
            original_file_path=original_file_path,
            original_file_encrypted=False,
            retention_until=now.date() + relativedelta(years=RETENTION_YEARS),
            imported_by=imported_by or LOCAL_USER_IDENTITY,
            audit_id=audit_id,
        )
        saved = self.db.save_import_audit(audit, commit=commit)
        logger.info(
            "Recorded %s import %s: %d imported, %d skipped",
            import_type.value,
            saved.id,
            imported_count,
            skipped_count,
        )
        return saved

    def get(self, audit_id: str) -> ImportAudit:
        """Get an import audit.

        Raises:
            NotFoundError: If the audit does not exist
        """
        audit = self.db.get_import_audit(audit_id)
        if audit is None:
            raise NotFoundError(import_audit_not_found(audit_id))
        return audit

    def can_undo(self, audit_id: str) -> bool:
        return self.get(audit_id).can_undo

    def undo(self, audit_id: str, undone_by: str, undone_at: Optional[datetime] = None) -> ImportAudit:
        """Mark an import UNDONE without touching its records.

        Raises:
            NotFoundError: If the audit does not exist
            UndoBlockedError: If the import has already been undone
        """
        audit = self.get(audit_id)
        updated = audit.with_undone(undone_at or self.clock(), undone_by)
        self.db.update_import_audit_status(updated)
        logger.info("Import %s marked undone by %s", audit_id, undone_by)
        return updated

    def check_undo_eligibility(self, audit_id: str) -> UndoEligibility:
        """Check whether an import can still be undone.

        Raises:
            NotFoundError: If the audit does not exist
        """
        audit = self.get(audit_id)
        if audit.status is ImportAuditStatus.UNDONE:
            return UndoEligibility.blocked(ALREADY_UNDONE)
        cutoff = self.clock() - timedelta(days=UNDO_WINDOW_DAYS)
        if audit.import_timestamp < cutoff:
            return UndoEligibility.blocked(OUTSIDE_UNDO_WINDOW)
        return UndoEligibility.allowed()

    def undo_import(
        self,
        audit_id: str,
        reason: Optional[str] = None,
        undone_by: str = LOCAL_USER_IDENTITY,
    ) -> UndoResult:
        """Soft-delete every record an import created and mark it UNDONE.

        Bank CSV imports hold incomes, expenses and staged bank transactions,
        so their IDs are removed from all three, together with any income or
        expense promoted from one of the staged rows. Either everything is
        removed and the audit flipped, or nothing changes.

        Raises:
            NotFoundError: If the audit does not exist
            UndoBlockedError: If the import is not eligible
        """
        eligibility = self.check_undo_eligibility(audit_id)
        if not eligibility.eligible:
            logger.warning("Undo of import %s blocked: %s", audit_id, eligibility.reason)
            raise UndoBlockedError(eligibility.reason)

        audit = self.get(audit_id)
        now = self.clock()
        record_ids = list(audit.record_ids)
        deletion_reason = reason or UNDO_DELETION_REASON

        updated = audit.with_undone(now, undone_by)
        promoted = 0
        try:
            if audit.import_type is ImportAuditType.CSV_EXPENSE:
                undone = self.db.soft_delete_expenses(record_ids, now, deletion_reason, commit=False)
            elif audit.import_type is ImportAuditType.CSV_INCOME:
                undone = self.db.soft_delete_incomes(record_ids, now, deletion_reason, commit=False)
            else:
                undone = self.db.soft_delete_incomes(record_ids, now, deletion_reason, commit=False)
                undone += self.db.soft_delete_expenses(record_ids, now, deletion_reason, commit=False)
                undone += self.db.soft_delete_bank_transactions(
                    record_ids, now, undone_by, deletion_reason, commit=False
                )
                promoted = self.db.soft_delete_incomes_by_bank_refs(
                    record_ids, now, deletion_reason, commit=False
                )
                promoted += self.db.soft_delete_expenses_by_bank_refs(
                    record_ids, now, deletion_reason, commit=False
                )
            self.db.update_import_audit_status(updated, commit=False)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info(
            "Undid import %s: %d records removed, %d promoted records removed", audit_id, undone, promoted
        )
        return UndoResult(updated, undone, len(record_ids) - undone, promoted)

    def list_history(self, business_id: str) -> list[ImportAudit]:
        """List every import for a business, newest first."""
        return self.db.list_import_audits(business_id)

    def list_undoable_imports(self, business_id: str) -> list[ImportAudit]:
        """List ACTIVE imports still inside the undo window, newest first."""
        cutoff = self.clock() - timedelta(days=UNDO_WINDOW_DAYS)
        return [
            audit
            for audit in self.db.list_import_audits(business_id)
            if audit.can_undo and audit.import_timestamp >= cutoff
        ]
