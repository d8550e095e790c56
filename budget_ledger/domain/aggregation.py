"""Monthly and yearly aggregation over attributed transactions"""

from typing import Dict, Iterable, List

from budget_ledger.domain.classifier import TransactionClassifier
from budget_ledger.domain.models import (
    UNCATEGORIZED,
    CategoryBucket,
    LedgerTransaction,
    MonthlySummary,
    YearSummary,
)
from budget_ledger.domain.attribution import logical_year


def build_monthly_summary(
    year: int,
    month: int,
    attributed: List[LedgerTransaction],
) -> MonthlySummary:
    """
    Summarize the transactions attributed to one logical month.

    Each transaction lands in exactly one bucket, checked in order:
    - is_transfer: listed, excluded from every total except transfer in/out
    - is_investment: listed, absolute amount added to investment_total
    - otherwise counted as income (amount > 0) or expense (absolute value)

    Counted transactions are grouped by category_id, with uncategorized rows
    under the "uncategorized" key.
    """
    income = 0
    expenses = 0
    transfers_in = 0
    transfers_out = 0
    investment_total = 0

    counted: List[LedgerTransaction] = []
    transfers: List[LedgerTransaction] = []
    investments: List[LedgerTransaction] = []

    for txn in attributed:
        if txn.is_transfer:
            transfers.append(txn)
            if txn.amount > 0:
                transfers_in += txn.amount
            else:
                transfers_out += abs(txn.amount)
        elif txn.is_investment:
            investments.append(txn)
            investment_total += abs(txn.amount)
        else:
            counted.append(txn)
            if txn.amount > 0:
                income += txn.amount
            else:
                expenses += abs(txn.amount)

    by_category: Dict[str, CategoryBucket] = {}
    for txn in counted:
        bucket = by_category.setdefault(txn.category_id or UNCATEGORIZED, CategoryBucket())
        if txn.amount > 0:
            bucket.income += txn.amount
        else:
            bucket.expenses += abs(txn.amount)
        bucket.transactions.append(txn)

    return MonthlySummary(
        year=year,
        month=month,
        income=income,
        expenses=expenses,
        balance=income - expenses,
        transfers_in=transfers_in,
        transfers_out=transfers_out,
        transfers_net=transfers_in - transfers_out,
        investment_total=investment_total,
        transaction_count=len(counted),
        transactions=counted,
        transfers=transfers,
        investments=investments,
        by_category=by_category,
    )


def build_year_summary(
    year: int,
    candidates: Iterable[LedgerTransaction],
    classifier: TransactionClassifier,
) -> YearSummary:
    """
    Summarize a logical year from non-transfer candidates.

    Candidates outside the logical year (early-January bills of `year`, or
    anything past Jan 3 of `year + 1`) are dropped. Investments are totalled
    separately but still counted in transaction_count.
    """
    income = 0
    expenses = 0
    investment_total = 0
    count = 0

    for txn in candidates:
        if txn.is_transfer or logical_year(txn, classifier) != year:
            continue
        count += 1
        if txn.is_investment:
            investment_total += abs(txn.amount)
        elif txn.amount > 0:
            income += txn.amount
        else:
            expenses += abs(txn.amount)

    return YearSummary(
        year=year,
        income=income,
        expenses=expenses,
        balance=income - expenses,
        investment_total=investment_total,
        transaction_count=count,
    )


def category_expense(summary: MonthlySummary, category_id: str) -> int:
    bucket = summary.by_category.get(category_id)
    return bucket.expenses if bucket else 0


def regular_income(summary: MonthlySummary) -> int:
    """Positive counted income not flagged occasional"""
    return sum(t.amount for t in summary.transactions if t.amount > 0 and not t.is_occasional_income)


def occasional_income(summary: MonthlySummary) -> int:
    """Positive counted income flagged occasional (gifts, refunds)"""
    return sum(t.amount for t in summary.transactions if t.amount > 0 and t.is_occasional_income)


def nonzero_average(values: Iterable[int]) -> int:
    """
    Mean of the non-zero values, rounded half-up; 0 when there are none.

    Months with nothing recorded are "no data", not a real zero.
    """
    present = [v for v in values if v > 0]
    if not present:
        return 0
    total, n = sum(present), len(present)
    return (2 * total + n) // (2 * n)
