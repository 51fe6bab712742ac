"""Enumerations shared by the import pipeline and the domain entities."""

from enum import Enum


class ExpenseCategory(str, Enum):
    """SA103 self-employment allowable expense categories."""

    COST_OF_GOODS = "COST_OF_GOODS"
    SUBCONTRACTOR_COSTS = "SUBCONTRACTOR_COSTS"
    STAFF_COSTS = "STAFF_COSTS"
    TRAVEL = "TRAVEL"
    TRAVEL_MILEAGE = "TRAVEL_MILEAGE"
    PREMISES = "PREMISES"
    REPAIRS = "REPAIRS"
    OFFICE_COSTS = "OFFICE_COSTS"
    ADVERTISING = "ADVERTISING"
    INTEREST = "INTEREST"
    FINANCIAL_CHARGES = "FINANCIAL_CHARGES"
    BAD_DEBTS = "BAD_DEBTS"
    PROFESSIONAL_FEES = "PROFESSIONAL_FEES"
    DEPRECIATION = "DEPRECIATION"
    OTHER_EXPENSES = "OTHER_EXPENSES"


class IncomeCategory(str, Enum):
    """SA103 self-employment income categories."""

    SALES = "SALES"
    OTHER_INCOME = "OTHER_INCOME"


class Confidence(str, Enum):
    """Coarse confidence level of a category suggestion."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class ReviewStatus(str, Enum):
    """Review lifecycle of a staged bank transaction.

    PENDING is initial; every other state is terminal.
    """

    PENDING = "PENDING"
    CATEGORIZED = "CATEGORIZED"
    EXCLUDED = "EXCLUDED"
    SKIPPED = "SKIPPED"

    @property
    def is_reviewed(self) -> bool:
        return self is not ReviewStatus.PENDING


class BusinessFlag(str, Enum):
    """Whether the user marked a transaction as business or personal."""

    UNSET = "UNSET"
    BUSINESS = "BUSINESS"
    PERSONAL = "PERSONAL"


class ImportAuditStatus(str, Enum):
    """Status of an import batch."""

    ACTIVE = "ACTIVE"
    UNDONE = "UNDONE"


class ImportAuditType(str, Enum):
    """Kind of import recorded in the audit trail."""

    BANK_CSV = "BANK_CSV"
    CSV_INCOME = "CSV_INCOME"
    CSV_EXPENSE = "CSV_EXPENSE"


class MatchType(str, Enum):
    """Result of comparing an imported row against existing records."""

    EXACT = "EXACT"
    LIKELY = "LIKELY"
    SIMILAR = "SIMILAR"
    NEW = "NEW"


class ImportAction(str, Enum):
    """User decision for a row that matched an existing record."""

    IMPORT_AS_NEW = "IMPORT_AS_NEW"
    SKIP = "SKIP"
    UPDATE_EXISTING = "UPDATE_EXISTING"
