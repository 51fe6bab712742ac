"""Income/expense classification with numeric confidence scores."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional

from taxfiler.domain.categorizer import DescriptionCategorizer
from taxfiler.domain.entities import BankTransaction
from taxfiler.domain.enums import Confidence, ExpenseCategory

HIGH_THRESHOLD = Decimal("0.90")
MEDIUM_THRESHOLD = Decimal("0.60")

CONFIDENCE_SCORES = {
    Confidence.HIGH: Decimal("0.95"),
    Confidence.MEDIUM: Decimal("0.75"),
    Confidence.LOW: Decimal("0.40"),
}


def confidence_level(score: Decimal) -> Confidence:
    """Band a numeric score: >= 0.90 HIGH, >= 0.60 MEDIUM, else LOW."""
    if score >= HIGH_THRESHOLD:
        return Confidence.HIGH
    if score >= MEDIUM_THRESHOLD:
        return Confidence.MEDIUM
    return Confidence.LOW


@dataclass(frozen=True)
class ClassificationResult:
    """Direction, suggested expense category and confidence for a transaction.

    ``suggested_category`` is always None for income; income categories are
    assigned when the record is promoted.
    """

    is_income: bool
    suggested_category: Optional[ExpenseCategory]
    confidence_score: Decimal
    confidence_level: Confidence

    @classmethod
    def from_score(cls, is_income: bool, category: Optional[ExpenseCategory],
                   score: Decimal) -> "ClassificationResult":
        return cls(is_income, category, score, confidence_level(score))

    def is_high_confidence(self) -> bool:
        # Strictly above the threshold: a score of exactly 0.90 is not high.
        return self.confidence_score > HIGH_THRESHOLD

    def is_suggestion_worthy(self) -> bool:
        return self.confidence_score >= MEDIUM_THRESHOLD

    def requires_manual_review(self) -> bool:
        return self.confidence_score < MEDIUM_THRESHOLD


class TransactionClassificationService:
    """Classifies transactions by amount sign and description keywords."""

    def __init__(self, categorizer: Optional[DescriptionCategorizer] = None):
        self.categorizer = categorizer or DescriptionCategorizer()

    def classify(self, transaction) -> ClassificationResult:
        """Classify a transaction.

        Args:
            transaction: Object with ``amount`` and ``description``
                (BankTransaction or ImportedTransaction)

        Returns:
            Classification result; zero amounts classify as expenses
        """
        if transaction.amount > 0:
            suggestion = self.categorizer.suggest_income_category(transaction.description)
            return ClassificationResult.from_score(
                True, None, CONFIDENCE_SCORES[suggestion.confidence]
            )

        suggestion = self.categorizer.suggest_expense_category(transaction.description)
        return ClassificationResult.from_score(
            False, suggestion.category, CONFIDENCE_SCORES[suggestion.confidence]
        )

    def classify_and_apply(self, transaction: BankTransaction, now: datetime) -> BankTransaction:
        """Return a copy of the transaction carrying the suggestion."""
        result = self.classify(transaction)
        return transaction.with_suggestion(result.suggested_category, result.confidence_score, now)
