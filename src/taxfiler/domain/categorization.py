"""Categorisation engine combining classification, exclusion and SA103 mapping."""

import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional

from taxfiler.domain.categorizer import DescriptionCategorizer
from taxfiler.domain.classification import TransactionClassificationService
from taxfiler.domain.entities import BankTransaction
from taxfiler.domain.enums import Confidence, ExpenseCategory, IncomeCategory
from taxfiler.domain.exclusion import ExclusionRulesEngine

logger = logging.getLogger(__name__)

# SA103F (full self-employment) box for each expense category.
SA103_BOXES: dict[ExpenseCategory, str] = {
    ExpenseCategory.COST_OF_GOODS: "17",
    ExpenseCategory.SUBCONTRACTOR_COSTS: "18",
    ExpenseCategory.STAFF_COSTS: "19",
    ExpenseCategory.TRAVEL: "20",
    ExpenseCategory.TRAVEL_MILEAGE: "20",
    ExpenseCategory.PREMISES: "21",
    ExpenseCategory.REPAIRS: "22",
    ExpenseCategory.OFFICE_COSTS: "23",
    ExpenseCategory.ADVERTISING: "24",
    ExpenseCategory.INTEREST: "25",
    ExpenseCategory.FINANCIAL_CHARGES: "26",
    ExpenseCategory.BAD_DEBTS: "27",
    ExpenseCategory.PROFESSIONAL_FEES: "28",
    ExpenseCategory.DEPRECIATION: "29",
    ExpenseCategory.OTHER_EXPENSES: "30",
}


def sa103_box(category: Optional[ExpenseCategory]) -> Optional[str]:
    """Return the SA103 box number for an expense category."""
    if category is None:
        return None
    return SA103_BOXES[category]


def sa103_box_label(category: Optional[ExpenseCategory]) -> Optional[str]:
    """Return the display label, e.g. ``"Box 24"``."""
    box = sa103_box(category)
    return f"Box {box}" if box is not None else None


@dataclass(frozen=True)
class CategorizationRecommendation:
    """Single recommendation for one transaction.

    When ``should_exclude`` is set the classification fields are kept for
    transparency only.
    """

    is_income: bool
    expense_category: Optional[ExpenseCategory]
    income_category: Optional[IncomeCategory]
    sa103_box: Optional[str]
    confidence_score: Decimal
    confidence_level: Confidence
    should_exclude: bool
    exclusion_reason: Optional[str]

    @property
    def sa103_label(self) -> Optional[str]:
        return f"Box {self.sa103_box}" if self.sa103_box is not None else None


class CategorizationEngine:
    """Produces one recommendation per transaction.

    Exclusion rules run first; classification always runs so excluded
    transactions still show a category and box in the audit view.
    """

    def __init__(
        self,
        classification_service: Optional[TransactionClassificationService] = None,
        exclusion_engine: Optional[ExclusionRulesEngine] = None,
        categorizer: Optional[DescriptionCategorizer] = None,
    ):
        self.categorizer = categorizer or DescriptionCategorizer()
        self.classification_service = classification_service or TransactionClassificationService(
            self.categorizer
        )
        self.exclusion_engine = exclusion_engine or ExclusionRulesEngine()

    def recommend(self, transaction) -> CategorizationRecommendation:
        """Recommend a category or exclusion for a transaction.

        Args:
            transaction: BankTransaction or ImportedTransaction
        """
        exclusion = self.exclusion_engine.evaluate(transaction)
        classification = self.classification_service.classify(transaction)

        income_category = None
        if classification.is_income:
            income_category = self.categorizer.suggest_income_category(
                transaction.description
            ).category

        return CategorizationRecommendation(
            is_income=classification.is_income,
            expense_category=classification.suggested_category,
            income_category=income_category,
            sa103_box=sa103_box(classification.suggested_category),
            confidence_score=classification.confidence_score,
            confidence_level=classification.confidence_level,
            should_exclude=exclusion.should_exclude,
            exclusion_reason=exclusion.reason,
        )

    def apply_recommendation(self, transaction: BankTransaction, now: datetime) -> BankTransaction:
        """Return the staged transaction updated with its recommendation.

        Excluded transactions move to EXCLUDED with the reason; all others
        stay PENDING with the suggested category and score.
        """
        rec = self.recommend(transaction)
        updated = transaction.with_suggestion(rec.expense_category, rec.confidence_score, now)
        if rec.should_exclude:
            updated = updated.with_excluded(rec.exclusion_reason, now)
        return updated
