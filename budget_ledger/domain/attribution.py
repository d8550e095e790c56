"""Month attribution engine - assigns transactions to logical (billing-cycle) months"""

from datetime import date
from typing import Iterable, List, Tuple

from budget_ledger.domain.classifier import TransactionClassifier
from budget_ledger.domain.models import LedgerTransaction
from budget_ledger.utils.date_utils import next_month, previous_month, validate_month

# Salary and card bills are posted on the 1st-3rd of the month
BILL_CUTOFF_DAY = 3


def attribution_window(year: int, month: int) -> Tuple[date, date]:
    """
    Calendar window holding every candidate for a logical month.

    Covers the whole target month plus the first BILL_CUTOFF_DAY days of the
    next month, e.g. (2024, 12) -> 2024-12-01 .. 2025-01-03.
    """
    validate_month(year, month)
    next_year, next_mon = next_month(year, month)
    return date(year, month, 1), date(next_year, next_mon, BILL_CUTOFF_DAY)


def belongs_to_month(
    txn: LedgerTransaction,
    year: int,
    month: int,
    classifier: TransactionClassifier,
) -> bool:
    """
    Decide whether a transaction belongs to the logical month (year, month).

    Rules:
    - Target month, day > cutoff: always included
    - Target month, day <= cutoff: included unless salary/card (those belong
      to the previous month)
    - Next month, day <= cutoff: included only if salary/card
    - Anything else: excluded
    """
    txn_day = txn.date
    next_year, next_mon = next_month(year, month)

    if (txn_day.year, txn_day.month) == (year, month):
        if txn_day.day > BILL_CUTOFF_DAY:
            return True
        return not classifier.is_billing_cycle(txn.description, txn.amount)

    if (txn_day.year, txn_day.month) == (next_year, next_mon) and txn_day.day <= BILL_CUTOFF_DAY:
        return classifier.is_billing_cycle(txn.description, txn.amount)

    return False


def attribute_to_month(
    transactions: Iterable[LedgerTransaction],
    year: int,
    month: int,
    classifier: TransactionClassifier,
) -> List[LedgerTransaction]:
    """Filter candidates to the logical month, newest first"""
    attributed = [t for t in transactions if belongs_to_month(t, year, month, classifier)]
    # Deterministic order: date desc, then larger amounts first, then identity
    attributed.sort(key=lambda t: t.id)
    attributed.sort(key=lambda t: (t.date, abs(t.amount)), reverse=True)
    return attributed


def logical_year(txn: LedgerTransaction, classifier: TransactionClassifier) -> int:
    """Year a transaction counts toward; Jan 1-3 salary/card goes to the previous year"""
    txn_day = txn.date
    if txn_day.month == 1 and txn_day.day <= BILL_CUTOFF_DAY:
        if classifier.is_billing_cycle(txn.description, txn.amount):
            return txn_day.year - 1
    return txn_day.year


def year_window(year: int) -> Tuple[date, date]:
    """Calendar window holding every candidate for a logical year"""
    return date(year, 1, 1), date(year + 1, 1, BILL_CUTOFF_DAY)


def logical_months_for_stamps(stamps: Iterable[Tuple[int, int]]) -> List[Tuple[int, int]]:
    """
    Logical months that may hold data, given calendar (year, month) stamps.

    Each stamp also yields the preceding month, since early-month bills are
    attributed back to it. Result is distinct and sorted newest first.
    """
    months = set()
    for year, month in stamps:
        months.add((year, month))
        months.add(previous_month(year, month))
    return sorted(months, reverse=True)
