"""CSV import domain service."""

import csv
import hashlib
import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional

from taxfiler.database.base import Database
from taxfiler.domain.categorization import CategorizationEngine, CategorizationRecommendation
from taxfiler.domain.duplicates import DuplicateDetector, DuplicateMatch
from taxfiler.domain.entities import ImportedTransaction
from taxfiler.domain.enums import ImportAction, ImportAuditType, IncomeCategory
from taxfiler.domain.errors import (
    CsvParseError,
    FileTooLargeError,
    FormatNotRecognizedError,
    ValidationError,
    file_too_large,
    unknown_csv_format,
)
from taxfiler.domain.expense import ExpenseService
from taxfiler.domain.import_audit import ImportAuditService, utc_now
from taxfiler.domain.income import IncomeService
from taxfiler.parsers.base import BankCsvParser, read_header
from taxfiler.parsers.detector import BankFormatDetector
from taxfiler.parsers.manual_mapping import ColumnMapping, ManualMappingParser

logger = logging.getLogger(__name__)

MAX_FILE_SIZE_BYTES = 10 * 1024 * 1024

DuplicateResolver = Callable[[DuplicateMatch], ImportAction]


def validate_file_size(csv_path: Path, limit: int = MAX_FILE_SIZE_BYTES) -> int:
    """Check a file against the import size ceiling before it is read.

    Returns:
        File size in bytes

    Raises:
        FileNotFoundError: If the file does not exist
        FileTooLargeError: If the file exceeds the ceiling
    """
    if not csv_path.exists():
        raise FileNotFoundError(f"CSV file not found: {csv_path}")
    size = csv_path.stat().st_size
    if size > limit:
        raise FileTooLargeError(file_too_large(size, limit), csv_path.name)
    return size


def compute_file_hash(csv_path: Path) -> str:
    """SHA-256 of the raw file bytes, as lowercase hex."""
    return hashlib.sha256(csv_path.read_bytes()).hexdigest()


def detect_parser(detector: BankFormatDetector, csv_path: Path, encoding: str) -> BankCsvParser:
    """Detect the bank dialect of a file.

    Raises:
        FormatNotRecognizedError: If no parser accepts the header row
        CsvParseError: If the header row cannot be read
    """
    try:
        parser = detector.detect_format(csv_path, encoding)
    except (UnicodeDecodeError, csv.Error) as e:
        raise CsvParseError(f"Failed to read CSV file: {e}", csv_path.name) from e
    if parser is None:
        raise FormatNotRecognizedError(unknown_csv_format(), csv_path.name)
    return parser


@dataclass(frozen=True)
class CsvImportResult:
    """Statistics for one completed import.

    ``imported_count + skipped_count == total_parsed``; skipped rows are the
    duplicates plus the rows excluded as transfers, tax payments, loans,
    card repayments or cash.
    """

    bank_name: str
    total_parsed: int
    imported_count: int
    income_count: int
    expense_count: int
    duplicate_count: int
    excluded_count: int
    skipped_count: int
    audit_id: Optional[str]
    record_ids: tuple[str, ...] = ()


@dataclass(frozen=True)
class ImportPreview:
    """What an import would do, without persisting anything."""

    bank_name: str
    transactions: tuple[ImportedTransaction, ...]
    matches: tuple[DuplicateMatch, ...]
    recommendations: tuple[CategorizationRecommendation, ...]

    @property
    def unique_transactions(self) -> tuple[ImportedTransaction, ...]:
        return tuple(m.transaction for m in self.matches if not m.is_exact)

    @property
    def duplicate_transactions(self) -> tuple[ImportedTransaction, ...]:
        return tuple(m.transaction for m in self.matches if m.is_exact)

    @property
    def excluded_count(self) -> int:
        return sum(
            1
            for match, rec in zip(self.matches, self.recommendations)
            if not match.is_exact and rec.should_exclude
        )


class CSVImportService:
    """Imports bank statement CSV files as income and expense records.

    Callers must not run two imports for the same business concurrently:
    duplicate detection reads a snapshot of existing records and would not
    see rows written by an import still in flight.
    """

    def __init__(
        self,
        db: Database,
        detector: Optional[BankFormatDetector] = None,
        engine: Optional[CategorizationEngine] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        """Initialize CSV import service.

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

    def import_csv(
        self,
        business_id: str,
        csv_path: str | Path,
        encoding: str = "utf-8",
        imported_by: Optional[str] = None,
        resolver: Optional[DuplicateResolver] = None,
    ) -> CsvImportResult:
        """Import a bank statement CSV.

        Args:
            business_id: Business to import into
            csv_path: Path to the CSV file
            encoding: File character set
            imported_by: User identity recorded on the audit
            resolver: Decides LIKELY and SIMILAR matches; without one they
                are imported as new records

        Returns:
            Import statistics

        Raises:
            FileNotFoundError: If the file does not exist
            FileTooLargeError: If the file exceeds MAX_FILE_SIZE_BYTES
            FormatNotRecognizedError: If no bank dialect matches the header
            CsvParseError: If any row is malformed; nothing is persisted
        """
        path = Path(csv_path)
        validate_file_size(path)
        parser = detect_parser(self.detector, path, encoding)
        return self._import(business_id, path, parser, encoding, imported_by, resolver)

    def import_csv_with_mapping(
        self,
        business_id: str,
        csv_path: str | Path,
        mapping: ColumnMapping,
        encoding: str = "utf-8",
        imported_by: Optional[str] = None,
        resolver: Optional[DuplicateResolver] = None,
    ) -> CsvImportResult:
        """Import a CSV no bank dialect recognises, using explicit columns.

        Raises:
            CsvParseError: If a mapped column is missing from the header row
        """
        path = Path(csv_path)
        validate_file_size(path)
        parser = ManualMappingParser(mapping)
        headers = read_header(path, encoding)
        if not parser.can_parse(headers):
            present = {h.lower() for h in headers}
            missing = [c for c in mapping.required_columns if c.lower() not in present]
            raise CsvParseError(f"CSV file missing mapped columns: {', '.join(missing)}", path.name)
        return self._import(business_id, path, parser, encoding, imported_by, resolver)

    def preview_import(
        self, business_id: str, csv_path: str | Path, encoding: str = "utf-8"
    ) -> ImportPreview:
        """Parse a file and report duplicates and recommendations.

        Nothing is written to the database.
        """
        path = Path(csv_path)
        validate_file_size(path)
        parser = detect_parser(self.detector, path, encoding)
        transactions = parser.parse(path, encoding)
        matches = self.duplicate_detector.detect_duplicates(transactions, business_id)
        recommendations = tuple(self.engine.recommend(t) for t in transactions)
        return ImportPreview(parser.bank_name, tuple(transactions), tuple(matches), recommendations)

    def _import(
        self,
        business_id: str,
        path: Path,
        parser: BankCsvParser,
        encoding: str,
        imported_by: Optional[str],
        resolver: Optional[DuplicateResolver],
    ) -> CsvImportResult:
        logger.info("Importing %s as %s", path.name, parser.bank_name)
        transactions = parser.parse(path, encoding)
        matches = self.duplicate_detector.detect_duplicates(transactions, business_id)

        # Decide every row before the first write.
        planned: list[tuple[ImportedTransaction, CategorizationRecommendation]] = []
        duplicate_count = 0
        excluded_count = 0
        for match in matches:
            if match.is_exact or self._resolve(match, resolver) is ImportAction.SKIP:
                duplicate_count += 1
                continue
            recommendation = self.engine.recommend(match.transaction)
            if recommendation.should_exclude:
                excluded_count += 1
                continue
            planned.append((match.transaction, recommendation))

        file_hash = compute_file_hash(path)
        record_ids: list[str] = []
        income_count = 0
        expense_count = 0
        try:
            for transaction, recommendation in planned:
                if transaction.is_income:
                    record = self.income_service.create(
                        business_id=business_id,
                        date=transaction.date,
                        amount=transaction.amount,
                        description=transaction.description,
                        category=recommendation.income_category or IncomeCategory.SALES,
                        reference=transaction.reference,
                        commit=False,
                    )
                    income_count += 1
                else:
                    record = self.expense_service.create(
                        business_id=business_id,
                        date=transaction.date,
                        amount=transaction.absolute_amount,
                        description=transaction.description,
                        category=recommendation.expense_category,
                        commit=False,
                    )
                    expense_count += 1
                record_ids.append(record.id)

            audit = self.audit_service.record_import(
                business_id=business_id,
                file_name=path.name,
                file_hash=file_hash,
                import_type=ImportAuditType.BANK_CSV,
                total_records=len(transactions),
                imported_count=len(record_ids),
                skipped_count=len(transactions) - len(record_ids),
                record_ids=record_ids,
                imported_by=imported_by,
                commit=False,
            )
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info(
            "Imported %d of %d rows from %s (%d duplicates, %d excluded)",
            len(record_ids),
            len(transactions),
            path.name,
            duplicate_count,
            excluded_count,
        )
        return CsvImportResult(
            bank_name=parser.bank_name,
            total_parsed=len(transactions),
            imported_count=len(record_ids),
            income_count=income_count,
            expense_count=expense_count,
            duplicate_count=duplicate_count,
            excluded_count=excluded_count,
            skipped_count=len(transactions) - len(record_ids),
            audit_id=audit.id,
            record_ids=tuple(record_ids),
        )

    @staticmethod
    def _resolve(match: DuplicateMatch, resolver: Optional[DuplicateResolver]) -> ImportAction:
        if not match.needs_review or resolver is None:
            return ImportAction.IMPORT_AS_NEW
        action = resolver(match)
        if action is ImportAction.UPDATE_EXISTING:
            raise ValidationError("Updating existing records is not supported for bank CSV imports")
        return action
