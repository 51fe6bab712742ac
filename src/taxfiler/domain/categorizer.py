"""Keyword-based category suggestions for bank transaction descriptions."""

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

from taxfiler.domain.enums import Confidence, ExpenseCategory, IncomeCategory
from taxfiler.utils.text import normalize_description

C = TypeVar("C")

# Ordered (keyword, category) pairs; the first substring match wins.
# Trailing spaces keep short brand names from matching inside other words.
EXPENSE_KEYWORDS: tuple[tuple[str, ExpenseCategory], ...] = (
    # Office costs - Box 23
    ("amazon", ExpenseCategory.OFFICE_COSTS),
    ("office", ExpenseCategory.OFFICE_COSTS),
    ("software", ExpenseCategory.OFFICE_COSTS),
    ("microsoft", ExpenseCategory.OFFICE_COSTS),
    ("adobe", ExpenseCategory.OFFICE_COSTS),
    ("stationery", ExpenseCategory.OFFICE_COSTS),
    ("staples", ExpenseCategory.OFFICE_COSTS),
    ("ryman", ExpenseCategory.OFFICE_COSTS),
    ("phone", ExpenseCategory.OFFICE_COSTS),
    ("vodafone", ExpenseCategory.OFFICE_COSTS),
    ("ee ", ExpenseCategory.OFFICE_COSTS),
    ("three ", ExpenseCategory.OFFICE_COSTS),
    ("o2 ", ExpenseCategory.OFFICE_COSTS),
    ("bt ", ExpenseCategory.OFFICE_COSTS),
    ("broadband", ExpenseCategory.OFFICE_COSTS),
    ("internet", ExpenseCategory.OFFICE_COSTS),
    ("sky ", ExpenseCategory.OFFICE_COSTS),
    ("virgin media", ExpenseCategory.OFFICE_COSTS),
    # Travel - Box 20
    ("uber", ExpenseCategory.TRAVEL),
    ("train", ExpenseCategory.TRAVEL),
    ("trainline", ExpenseCategory.TRAVEL),
    ("national rail", ExpenseCategory.TRAVEL),
    ("travel", ExpenseCategory.TRAVEL),
    ("hotel", ExpenseCategory.TRAVEL),
    ("premier inn", ExpenseCategory.TRAVEL),
    ("travelodge", ExpenseCategory.TRAVEL),
    ("ibis", ExpenseCategory.TRAVEL),
    ("holiday inn", ExpenseCategory.TRAVEL),
    ("airways", ExpenseCategory.TRAVEL),
    ("airlines", ExpenseCategory.TRAVEL),
    ("easyjet", ExpenseCategory.TRAVEL),
    ("ryanair", ExpenseCategory.TRAVEL),
    ("parking", ExpenseCategory.TRAVEL),
    # Fuel - Box 20
    ("petrol", ExpenseCategory.TRAVEL_MILEAGE),
    ("diesel", ExpenseCategory.TRAVEL_MILEAGE),
    ("fuel", ExpenseCategory.TRAVEL_MILEAGE),
    ("shell", ExpenseCategory.TRAVEL_MILEAGE),
    ("bp ", ExpenseCategory.TRAVEL_MILEAGE),
    ("esso", ExpenseCategory.TRAVEL_MILEAGE),
    ("texaco", ExpenseCategory.TRAVEL_MILEAGE),
    # Premises - Box 21
    ("electricity", ExpenseCategory.PREMISES),
    ("gas bill", ExpenseCategory.PREMISES),
    ("british gas", ExpenseCategory.PREMISES),
    ("edf", ExpenseCategory.PREMISES),
    ("scottish power", ExpenseCategory.PREMISES),
    ("eon", ExpenseCategory.PREMISES),
    ("sse ", ExpenseCategory.PREMISES),
    ("octopus energy", ExpenseCategory.PREMISES),
    ("rent", ExpenseCategory.PREMISES),
    ("water", ExpenseCategory.PREMISES),
    ("rates", ExpenseCategory.PREMISES),
    ("business insurance", ExpenseCategory.PREMISES),
    # Professional fees - Box 28
    ("accountant", ExpenseCategory.PROFESSIONAL_FEES),
    ("accounting", ExpenseCategory.PROFESSIONAL_FEES),
    ("solicitor", ExpenseCategory.PROFESSIONAL_FEES),
    ("legal", ExpenseCategory.PROFESSIONAL_FEES),
    ("lawyer", ExpenseCategory.PROFESSIONAL_FEES),
    # Financial charges - Box 26
    ("bank charge", ExpenseCategory.FINANCIAL_CHARGES),
    ("bank fee", ExpenseCategory.FINANCIAL_CHARGES),
    ("transaction fee", ExpenseCategory.FINANCIAL_CHARGES),
    ("card fee", ExpenseCategory.FINANCIAL_CHARGES),
    # Advertising - Box 24
    ("advertising", ExpenseCategory.ADVERTISING),
    ("marketing", ExpenseCategory.ADVERTISING),
    ("google ads", ExpenseCategory.ADVERTISING),
    ("facebook ads", ExpenseCategory.ADVERTISING),
    ("linkedin ads", ExpenseCategory.ADVERTISING),
    # Interest - Box 25
    ("loan interest", ExpenseCategory.INTEREST),
    # Staff costs - Box 19
    ("salary", ExpenseCategory.STAFF_COSTS),
    ("wages", ExpenseCategory.STAFF_COSTS),
    ("payroll", ExpenseCategory.STAFF_COSTS),
    ("pension", ExpenseCategory.STAFF_COSTS),
)

INCOME_KEYWORDS: tuple[tuple[str, IncomeCategory], ...] = (
    ("tax refund", IncomeCategory.OTHER_INCOME),
    ("interest", IncomeCategory.OTHER_INCOME),
    ("dividend", IncomeCategory.OTHER_INCOME),
    ("refund", IncomeCategory.OTHER_INCOME),
)


@dataclass(frozen=True)
class CategorySuggestion(Generic[C]):
    """Suggested category with a coarse confidence level."""

    category: C
    confidence: Confidence


class DescriptionCategorizer:
    """Suggests SA103 categories from free-text descriptions.

    Matching is a case-insensitive substring search over ordered keyword
    tables. Blank or missing descriptions fall back to the defaults instead
    of raising.
    """

    def suggest_expense_category(self, description: Optional[str]) -> CategorySuggestion[ExpenseCategory]:
        """Suggest an expense category.

        Returns:
            The first matching category at HIGH confidence, otherwise
            OTHER_EXPENSES at LOW confidence
        """
        normalized = normalize_description(description)
        if normalized:
            for keyword, category in EXPENSE_KEYWORDS:
                if keyword in normalized:
                    return CategorySuggestion(category, Confidence.HIGH)
        return CategorySuggestion(ExpenseCategory.OTHER_EXPENSES, Confidence.LOW)

    def suggest_income_category(self, description: Optional[str]) -> CategorySuggestion[IncomeCategory]:
        """Suggest an income category.

        Returns:
            OTHER_INCOME at HIGH confidence for interest, dividends and
            refunds, otherwise SALES at MEDIUM confidence
        """
        normalized = normalize_description(description)
        if normalized:
            for keyword, category in INCOME_KEYWORDS:
                if keyword in normalized:
                    return CategorySuggestion(category, Confidence.HIGH)
        return CategorySuggestion(IncomeCategory.SALES, Confidence.MEDIUM)
