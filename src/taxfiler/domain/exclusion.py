"""Exclusion rules for non-taxable cash movements."""

import logging
import re
from dataclasses import dataclass
from typing import Optional

from taxfiler.domain.enums import Confidence
from taxfiler.utils.text import normalize_description

logger = logging.getLogger(__name__)

TRANSFER = "TRANSFER"
TAX_PAYMENT = "TAX_PAYMENT"
LOAN = "LOAN"
CREDIT_CARD = "CREDIT_CARD"
CASH_WITHDRAWAL = "CASH_WITHDRAWAL"

# Ordered keyword families; evaluation stops at the first family that
# matches, regardless of where its keyword appears in the description.
EXCLUSION_RULES: tuple[tuple[str, tuple[str, ...]], ...] = (
    (TRANSFER, ("transfer", "tfr", "fpo", "fpi")),
    (TAX_PAYMENT, ("hmrc", "tax")),
    (LOAN, ("loan",)),
    (CREDIT_CARD, ("credit card payment", "cc payment")),
    (CASH_WITHDRAWAL, ("atm", "cash withdrawal", "cash")),
)


def _family_pattern(keywords: tuple[str, ...]) -> re.Pattern:
    # Whole-word matching: "tax" must not hit "taxi", "atm" must not hit "treatment".
    alternatives = "|".join(re.escape(keyword) for keyword in keywords)
    return re.compile(rf"\b(?:{alternatives})\b")


_COMPILED_RULES = tuple(
    (reason, _family_pattern(keywords)) for reason, keywords in EXCLUSION_RULES
)


@dataclass(frozen=True)
class ExclusionResult:
    """Outcome of evaluating exclusion rules for one transaction."""

    should_exclude: bool
    reason: Optional[str]
    confidence: Confidence

    @classmethod
    def excluded(cls, reason: str) -> "ExclusionResult":
        return cls(True, reason, Confidence.HIGH)

    @classmethod
    def not_excluded(cls) -> "ExclusionResult":
        return cls(False, None, Confidence.LOW)


class ExclusionRulesEngine:
    """Flags transfers, loans, card repayments, cash and tax payments.

    These movements are never business income or expense.
    """

    def evaluate(self, transaction) -> ExclusionResult:
        """Evaluate a transaction (anything with a ``description``)."""
        return self.evaluate_description(getattr(transaction, "description", None))

    def evaluate_description(self, description: Optional[str]) -> ExclusionResult:
        normalized = normalize_description(description)
        if not normalized:
            return ExclusionResult.not_excluded()
        for reason, pattern in _COMPILED_RULES:
            if pattern.search(normalized):
                logger.debug("Exclusion rule %s matched", reason)
                return ExclusionResult.excluded(reason)
        return ExclusionResult.not_excluded()
