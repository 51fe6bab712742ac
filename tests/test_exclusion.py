"""Tests for exclusion rules."""

import pytest
from datetime import date
from decimal import Decimal

from taxfiler.domain.entities import ImportedTransaction
from taxfiler.domain.enums import Confidence
from taxfiler.domain.exclusion import (
    CASH_WITHDRAWAL,
    CREDIT_CARD,
    LOAN,
    TAX_PAYMENT,
    TRANSFER,
    ExclusionRulesEngine,
)


@pytest.fixture
def engine():
    return ExclusionRulesEngine()


class TestExclusionMatches:
    """Descriptions that must be excluded."""

    @pytest.mark.parametrize(
        "description, reason",
        [
            ("TRANSFER TO SAVINGS", TRANSFER),
            ("TFR 12345678", TRANSFER),
            ("FPO J SMITH", TRANSFER),
            ("FPI ACME LTD", TRANSFER),
            ("HMRC SELF ASSESSMENT", TAX_PAYMENT),
            ("COUNCIL TAX", TAX_PAYMENT),
            ("LOAN REPAYMENT", LOAN),
            ("CREDIT CARD PAYMENT", CREDIT_CARD),
            ("CC PAYMENT AMEX", CREDIT_CARD),
            ("ATM HIGH STREET", CASH_WITHDRAWAL),
            ("CASH WITHDRAWAL", CASH_WITHDRAWAL),
        ],
    )
    def test_family_keywords(self, engine, description, reason):
        result = engine.evaluate_description(description)
        assert result.should_exclude
        assert result.reason == reason
        assert result.confidence == Confidence.HIGH

    def test_family_order_beats_keyword_position(self, engine):
        result = engine.evaluate_description("TRANSFER HMRC ACCOUNT")
        assert result.reason == TRANSFER

        # The tax keyword appears first in the text but TRANSFER is listed first
        result = engine.evaluate_description("HMRC TRANSFER")
        assert result.reason == TRANSFER

    def test_evaluate_reads_transaction_description(self, engine):
        txn = ImportedTransaction(date(2025, 1, 1), Decimal("-20"), "ATM WITHDRAWAL")
        assert engine.evaluate(txn).reason == CASH_WITHDRAWAL


class TestExclusionNonMatches:
    """Descriptions that must not be excluded."""

    @pytest.mark.parametrize(
        "description",
        [
            "UBER TAXI",
            "PHYSIO TREATMENT",
            "CASHBACK REWARD",
            "GOOGLE ADS CAMPAIGN",
            "TAXIDERMY SUPPLIES",
            "",
            None,
        ],
    )
    def test_not_excluded(self, engine, description):
        result = engine.evaluate_description(description)
        assert not result.should_exclude
        assert result.reason is None
        assert result.confidence == Confidence.LOW
