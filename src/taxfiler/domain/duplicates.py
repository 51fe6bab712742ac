"""Duplicate detection for imported bank statement lines.

Imported rows are compared with the business's existing incomes, expenses
and staged bank transactions for the same period:

- EXACT: same date, same absolute amount and equal normalised description
- LIKELY: same date and amount, description similarity >= 80%
- SIMILAR: same date and amount, description similarity below 80%
- NEW: no record shares the date and amount

Similarity is ``1 - levenshtein(a, b) / max(len(a), len(b))`` over the
normalised descriptions.
"""

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Optional, Sequence

from rapidfuzz.distance import Levenshtein

from taxfiler.database.base import Database
from taxfiler.domain.entities import ImportedTransaction
from taxfiler.domain.enums import ImportAction, MatchType
from taxfiler.utils.text import normalize_description

logger = logging.getLogger(__name__)

FUZZY_MATCH_THRESHOLD = Decimal("0.80")

INCOME = "INCOME"
EXPENSE = "EXPENSE"
BANK_TRANSACTION = "BANK_TRANSACTION"
IMPORT_BATCH = "IMPORT_BATCH"

DEFAULT_ACTIONS = {
    MatchType.EXACT: ImportAction.SKIP,
    MatchType.LIKELY: ImportAction.SKIP,
    MatchType.SIMILAR: ImportAction.IMPORT_AS_NEW,
    MatchType.NEW: ImportAction.IMPORT_AS_NEW,
}


def similarity(a: Optional[str], b: Optional[str]) -> Decimal:
    """Levenshtein similarity of two descriptions after normalisation.

    Computed in Decimal so that exactly 80% compares equal to the threshold.
    """
    left = normalize_description(a)
    right = normalize_description(b)
    longest = max(len(left), len(right))
    if longest == 0:
        return Decimal(1)
    distance = Levenshtein.distance(left, right)
    return Decimal(1) - Decimal(distance) / Decimal(longest)


@dataclass(frozen=True)
class ExistingRecord:
    """Already-stored record reduced to the fields used for matching."""

    id: str
    kind: str
    date: date
    amount: Decimal
    description: str
    normalized_description: str = field(init=False)

    def __post_init__(self):
        object.__setattr__(self, "amount", abs(self.amount))
        object.__setattr__(self, "normalized_description", normalize_description(self.description))


@dataclass(frozen=True)
class DuplicateMatch:
    """Best match found for one imported transaction."""

    transaction: ImportedTransaction
    match_type: MatchType
    similarity: Optional[Decimal] = None
    matched_record_id: Optional[str] = None
    matched_record_kind: Optional[str] = None
    matched_description: Optional[str] = None

    @property
    def has_match(self) -> bool:
        return self.match_type is not MatchType.NEW

    @property
    def is_exact(self) -> bool:
        return self.match_type is MatchType.EXACT

    @property
    def needs_review(self) -> bool:
        """LIKELY and SIMILAR matches are left to the user to resolve."""
        return self.match_type in (MatchType.LIKELY, MatchType.SIMILAR)

    @property
    def default_action(self) -> ImportAction:
        return DEFAULT_ACTIONS[self.match_type]

    @property
    def available_actions(self) -> tuple[ImportAction, ...]:
        if self.match_type is MatchType.NEW:
            return (ImportAction.IMPORT_AS_NEW,)
        if self.match_type is MatchType.EXACT:
            return (ImportAction.SKIP, ImportAction.IMPORT_AS_NEW)
        return (ImportAction.IMPORT_AS_NEW, ImportAction.SKIP, ImportAction.UPDATE_EXISTING)


@dataclass(frozen=True)
class DuplicateCheckResult:
    """Disjoint partition of an import batch.

    ``unique_transactions`` and ``duplicate_transactions`` keep file order.
    """

    unique_transactions: tuple[ImportedTransaction, ...]
    duplicate_transactions: tuple[ImportedTransaction, ...]
    matches: tuple[DuplicateMatch, ...] = ()

    @property
    def duplicate_count(self) -> int:
        return len(self.duplicate_transactions)

    @property
    def unique_count(self) -> int:
        return len(self.unique_transactions)


def match_transaction(
    transaction: ImportedTransaction, candidates: Sequence[ExistingRecord]
) -> DuplicateMatch:
    """Classify one transaction against records sharing its date and amount.

    ``candidates`` are expected to already share date and absolute amount;
    an empty sequence yields NEW.
    """
    if not candidates:
        return DuplicateMatch(transaction, MatchType.NEW)

    normalized = normalize_description(transaction.description)
    best: Optional[ExistingRecord] = None
    best_score = Decimal(-1)
    for record in candidates:
        if record.normalized_description == normalized:
            return DuplicateMatch(
                transaction,
                MatchType.EXACT,
                Decimal(1),
                record.id,
                record.kind,
                record.description,
            )
        score = similarity(normalized, record.normalized_description)
        if score > best_score:
            best, best_score = record, score

    match_type = MatchType.LIKELY if best_score >= FUZZY_MATCH_THRESHOLD else MatchType.SIMILAR
    return DuplicateMatch(
        transaction, match_type, best_score, best.id, best.kind, best.description
    )


class DuplicateDetector:
    """Finds imported rows that already exist for a business."""

    def __init__(self, db: Database):
        """Initialize duplicate detector.

        Args:
            db: Database instance
        """
        self.db = db

    def load_existing(self, business_id: str, start_date: date, end_date: date) -> list[ExistingRecord]:
        """Snapshot the business's active records within a date range."""
        records = [
            ExistingRecord(i.id, INCOME, i.date, i.amount, i.description)
            for i in self.db.find_incomes_by_date_range(business_id, start_date, end_date)
        ]
        records.extend(
            ExistingRecord(e.id, EXPENSE, e.date, e.amount, e.description)
            for e in self.db.find_expenses_by_date_range(business_id, start_date, end_date)
        )
        records.extend(
            ExistingRecord(t.id, BANK_TRANSACTION, t.date, t.amount, t.description)
            for t in self.db.find_bank_transactions_by_date_range(business_id, start_date, end_date)
        )
        return records

    def detect_duplicates(
        self, transactions: Sequence[ImportedTransaction], business_id: str
    ) -> list[DuplicateMatch]:
        """Classify every transaction as EXACT, LIKELY, SIMILAR or NEW.

        A row repeating an earlier row of the same batch is reported as an
        EXACT match against the batch.

        Returns:
            One match per transaction, in input order
        """
        if not transactions:
            return []

        start = min(t.date for t in transactions)
        end = max(t.date for t in transactions)
        by_key: dict[tuple[date, Decimal], list[ExistingRecord]] = defaultdict(list)
        for record in self.load_existing(business_id, start, end):
            by_key[(record.date, record.amount)].append(record)

        matches = []
        seen_hashes: set[str] = set()
        for transaction in transactions:
            txn_hash = transaction.transaction_hash
            if txn_hash in seen_hashes:
                match = DuplicateMatch(
                    transaction,
                    MatchType.EXACT,
                    Decimal(1),
                    matched_record_kind=IMPORT_BATCH,
                    matched_description=transaction.description,
                )
            else:
                seen_hashes.add(txn_hash)
                candidates = by_key.get((transaction.date, transaction.absolute_amount), ())
                match = match_transaction(transaction, candidates)
            logger.debug("Duplicate check %s on %s: %s", transaction.absolute_amount,
                         transaction.date, match.match_type.value)
            matches.append(match)
        return matches

    def check_duplicates(
        self, business_id: str, transactions: Sequence[ImportedTransaction]
    ) -> DuplicateCheckResult:
        """Split a batch into exact duplicates and pass-through rows.

        LIKELY and SIMILAR rows pass through; their matches are returned so
        the caller can surface them for a decision.
        """
        matches = self.detect_duplicates(transactions, business_id)
        unique = tuple(m.transaction for m in matches if not m.is_exact)
        duplicates = tuple(m.transaction for m in matches if m.is_exact)
        return DuplicateCheckResult(unique, duplicates, tuple(matches))
