"""Monthly/yearly aggregation and budget derivation over the transaction store"""

from typing import Dict, List, Optional, Tuple

from sqlalchemy.orm import Session

from budget_ledger.domain.aggregation import (
    build_monthly_summary,
    build_year_summary,
    category_expense,
    nonzero_average,
    occasional_income,
    regular_income,
)
from budget_ledger.domain.attribution import (
    attribute_to_month,
    attribution_window,
    logical_months_for_stamps,
    year_window,
)
from budget_ledger.domain.budget import derive_budget
from budget_ledger.domain.classifier import TransactionClassifier, default_classifier
from budget_ledger.domain.exceptions import InvalidPeriodError
from budget_ledger.domain.models import (
    UNCATEGORIZED,
    BudgetBreakdown,
    LedgerTransaction,
    MonthlySummary,
    YearSummary,
)
from budget_ledger.infrastructure.database.repositories import (
    CategoryRepository,
    SettingsRepository,
    TransactionRepository,
)
from budget_ledger.utils.date_utils import preceding_months, validate_month

DEFAULT_WINDOW_MONTHS = 3


class SummaryService:
    """
    Read-only views: logical months, summaries, averages, available budget.

    Settings are read through the injected SettingsRepository handle.
    """

    def __init__(
        self,
        db: Session,
        classifier: TransactionClassifier = default_classifier,
        settings_repo: Optional[SettingsRepository] = None,
    ):
        self.classifier = classifier
        self.transactions = TransactionRepository(db)
        self.categories = CategoryRepository(db)
        self.settings = settings_repo or SettingsRepository(db)

    def attributed_transactions(self, year: int, month: int) -> List[LedgerTransaction]:
        start, end = attribution_window(year, month)
        candidates = self.transactions.get_between(start, end)
        return attribute_to_month(candidates, year, month, self.classifier)

    def monthly_summary(self, year: int, month: int) -> MonthlySummary:
        return build_monthly_summary(year, month, self.attributed_transactions(year, month))

    def year_to_date_summary(self, year: int) -> YearSummary:
        if not 1 <= year <= 9998:
            raise InvalidPeriodError(f"Year out of range: {year}")
        start, end = year_window(year)
        candidates = self.transactions.get_between(start, end, include_transfers=False)
        return build_year_summary(year, candidates, self.classifier)

    def available_months(self) -> List[Tuple[int, int]]:
        return logical_months_for_stamps(self.transactions.month_stamps())

    def transaction_count(self) -> int:
        return self.transactions.count()

    def _window_summaries(self, year: int, month: int, window_months: int) -> List[MonthlySummary]:
        validate_month(year, month)
        if window_months < 1:
            raise InvalidPeriodError(f"Averaging window must be at least 1 month, got {window_months}")
        return [self.monthly_summary(y, m) for y, m in preceding_months(year, month, window_months)]

    def category_average(
        self,
        category_id: str,
        year: int,
        month: int,
        window_months: int = DEFAULT_WINDOW_MONTHS,
    ) -> int:
        """Mean expense of the category over the preceding months, ignoring empty months"""
        summaries = self._window_summaries(year, month, window_months)
        return nonzero_average(category_expense(s, category_id) for s in summaries)

    def category_averages(
        self,
        year: int,
        month: int,
        window_months: int = DEFAULT_WINDOW_MONTHS,
        summaries: Optional[List[MonthlySummary]] = None,
    ) -> Dict[str, int]:
        """Averages for every category plus the uncategorized bucket"""
        if summaries is None:
            summaries = self._window_summaries(year, month, window_months)
        category_ids = [c.id for c in self.categories.list_all()] + [UNCATEGORIZED]
        return {
            category_id: nonzero_average(category_expense(s, category_id) for s in summaries)
            for category_id in category_ids
        }

    def regular_income(self, year: int, month: int) -> int:
        return regular_income(self.monthly_summary(year, month))

    def occasional_income(self, year: int, month: int) -> int:
        return occasional_income(self.monthly_summary(year, month))

    def average_regular_income(self, year: int, month: int, window_months: int = DEFAULT_WINDOW_MONTHS) -> int:
        """Mean regular income over the preceding months, ignoring months without any"""
        summaries = self._window_summaries(year, month, window_months)
        return nonzero_average(regular_income(s) for s in summaries)

    def available_budget(self, year: int, month: int) -> BudgetBreakdown:
        summaries = self._window_summaries(year, month, DEFAULT_WINDOW_MONTHS)
        summary = self.monthly_summary(year, month)
        variable = self.categories.get_variable()

        return derive_budget(
            summary=summary,
            averages=self.category_averages(year, month, summaries=summaries),
            savings_goal=self.settings.savings_goal(year, month),
            expected_override=self.settings.expected_income(),
            average_regular=nonzero_average(regular_income(s) for s in summaries),
            variable_category_id=variable.id if variable else None,
        )
