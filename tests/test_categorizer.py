"""Tests for keyword category suggestions."""

import pytest

from taxfiler.domain.categorizer import DescriptionCategorizer, EXPENSE_KEYWORDS
from taxfiler.domain.enums import Confidence, ExpenseCategory, IncomeCategory


@pytest.fixture
def categorizer():
    return DescriptionCategorizer()


class TestExpenseSuggestions:
    """Tests for suggest_expense_category."""

    @pytest.mark.parametrize(
        "description, category",
        [
            ("AMAZON MARKETPLACE", ExpenseCategory.OFFICE_COSTS),
            ("Adobe Creative Cloud", ExpenseCategory.OFFICE_COSTS),
            ("VODAFONE LTD", ExpenseCategory.OFFICE_COSTS),
            ("UBER *TRIP", ExpenseCategory.TRAVEL),
            ("PREMIER INN LONDON", ExpenseCategory.TRAVEL),
            ("SHELL PETROL STATION", ExpenseCategory.TRAVEL_MILEAGE),
            ("OCTOPUS ENERGY", ExpenseCategory.PREMISES),
            ("SMITH & CO ACCOUNTANTS", ExpenseCategory.PROFESSIONAL_FEES),
            ("MONTHLY BANK CHARGE", ExpenseCategory.FINANCIAL_CHARGES),
            ("GOOGLE ADS CAMPAIGN", ExpenseCategory.ADVERTISING),
            ("BUSINESS LOAN INTEREST", ExpenseCategory.INTEREST),
            ("PAYROLL MARCH", ExpenseCategory.STAFF_COSTS),
        ],
    )
    def test_keyword_matches_are_high_confidence(self, categorizer, description, category):
        suggestion = categorizer.suggest_expense_category(description)
        assert suggestion.category == category
        assert suggestion.confidence == Confidence.HIGH

    def test_first_match_in_table_order_wins(self, categorizer):
        # "office" (office costs) is listed before "travel"
        suggestion = categorizer.suggest_expense_category("TRAVEL OFFICE BOOKING")
        assert suggestion.category == ExpenseCategory.OFFICE_COSTS

    def test_matching_ignores_case_and_spacing(self, categorizer):
        assert (
            categorizer.suggest_expense_category("  google    ADS ").category
            == ExpenseCategory.ADVERTISING
        )

    @pytest.mark.parametrize("description", [None, "", "   ", "XYZ 12345"])
    def test_unknown_or_blank_defaults_to_other_expenses(self, categorizer, description):
        suggestion = categorizer.suggest_expense_category(description)
        assert suggestion.category == ExpenseCategory.OTHER_EXPENSES
        assert suggestion.confidence == Confidence.LOW

    def test_keyword_table_is_ordered_sequence(self):
        assert isinstance(EXPENSE_KEYWORDS, tuple)
        assert EXPENSE_KEYWORDS[0] == ("amazon", ExpenseCategory.OFFICE_COSTS)


class TestIncomeSuggestions:
    """Tests for suggest_income_category."""

    @pytest.mark.parametrize(
        "description",
        ["HMRC TAX REFUND", "INTEREST PAID", "DIVIDEND PAYMENT", "REFUND FROM SUPPLIER"],
    )
    def test_other_income_keywords(self, categorizer, description):
        suggestion = categorizer.suggest_income_category(description)
        assert suggestion.category == IncomeCategory.OTHER_INCOME
        assert suggestion.confidence == Confidence.HIGH

    @pytest.mark.parametrize("description", [None, "", "ACME LTD INVOICE 1042"])
    def test_defaults_to_sales(self, categorizer, description):
        suggestion = categorizer.suggest_income_category(description)
        assert suggestion.category == IncomeCategory.SALES
        assert suggestion.confidence == Confidence.MEDIUM
