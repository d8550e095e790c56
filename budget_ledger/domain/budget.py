"""Budget derivation engine - expected income and discretionary budget"""

from typing import Dict, Optional, Tuple

from budget_ledger.domain.aggregation import category_expense, occasional_income, regular_income
from budget_ledger.domain.models import BudgetBreakdown, MonthlySummary


def expected_income(
    actual_regular: int,
    expected_override: int,
    average_regular: int,
    actual_occasional: int,
) -> Tuple[int, int]:
    """
    Project the month's income.

    Regular income is projected from the best signal available:
    MAX(actual regular, user override, average regular). Occasional income is
    never projected; only what already arrived counts.

    Returns: (expected_regular_income, expected_income)
    """
    expected_regular = max(actual_regular, expected_override, average_regular)
    return expected_regular, expected_regular + actual_occasional


def fixed_expenses(
    summary: MonthlySummary,
    averages: Dict[str, int],
    variable_category_id: Optional[str],
) -> Tuple[int, int]:
    """
    Budget for every category except the variable bucket.

    Each category contributes MAX(actual this month, average). Categories
    with no spend yet still contribute their average.

    Returns: (fixed_expenses, variable_actual)
    """
    category_ids = set(summary.by_category) | {c for c, avg in averages.items() if avg > 0}

    fixed = 0
    variable_actual = 0
    for category_id in category_ids:
        actual = category_expense(summary, category_id)
        if category_id == variable_category_id:
            variable_actual = actual
            continue
        fixed += max(actual, averages.get(category_id, 0))

    return fixed, variable_actual


def derive_budget(
    summary: MonthlySummary,
    averages: Dict[str, int],
    savings_goal: int,
    expected_override: int,
    average_regular: int,
    variable_category_id: Optional[str],
) -> BudgetBreakdown:
    """
    Available = Expected Income - Savings Goal - Fixed Expenses
    Remaining = Available - Variable spent so far

    Both may go negative when commitments exceed projected income.
    """
    actual_regular = regular_income(summary)
    actual_occasional = occasional_income(summary)
    expected_regular, total_expected = expected_income(
        actual_regular, expected_override, average_regular, actual_occasional
    )
    fixed, variable_actual = fixed_expenses(summary, averages, variable_category_id)

    available = total_expected - savings_goal - fixed

    return BudgetBreakdown(
        year=summary.year,
        month=summary.month,
        expected_income=total_expected,
        expected_regular_income=expected_regular,
        actual_income=summary.income,
        actual_regular_income=actual_regular,
        actual_occasional_income=actual_occasional,
        user_expected_income=expected_override,
        average_income=average_regular,
        savings_goal=savings_goal,
        fixed_expenses=fixed,
        available_for_variable=available,
        variable_actual=variable_actual,
        remaining_for_variable=available - variable_actual,
    )
