"""Savings goal and expected income settings"""

from dataclasses import dataclass
from typing import Optional

from sqlalchemy.orm import Session

from budget_ledger.domain.exceptions import ValidationError
from budget_ledger.infrastructure.database.repositories import SettingsRepository
from budget_ledger.infrastructure.database.session import transactional
from budget_ledger.utils.date_utils import validate_month


@dataclass
class MonthSavingsGoal:
    goal: int
    default_goal: int
    is_custom: bool


class BudgetSettingsService:
    def __init__(self, db: Session):
        self.db = db
        self.settings = SettingsRepository(db)

    def default_savings_goal(self) -> int:
        return self.settings.default_savings_goal()

    def month_savings_goal(self, year: int, month: int) -> MonthSavingsGoal:
        validate_month(year, month)
        override = self.settings.month_savings_goal(year, month)
        default_goal = self.settings.default_savings_goal()
        return MonthSavingsGoal(
            goal=override if override is not None else default_goal,
            default_goal=default_goal,
            is_custom=override is not None,
        )

    def set_savings_goal(self, amount: int, year: Optional[int] = None, month: Optional[int] = None) -> None:
        """Set the default goal, or the override for (year, month) when both are given"""
        if amount < 0:
            raise ValidationError("Savings goal must be non-negative")
        if (year is None) != (month is None):
            raise ValidationError("Year and month must be given together")
        if year is not None:
            validate_month(year, month)
        with transactional(self.db):
            self.settings.set_savings_goal(amount, year, month)

    def clear_month_savings_goal(self, year: int, month: int) -> None:
        validate_month(year, month)
        with transactional(self.db):
            self.settings.clear_month_savings_goal(year, month)

    def expected_income(self) -> int:
        return self.settings.expected_income()

    def set_expected_income(self, amount: int) -> None:
        if amount < 0:
            raise ValidationError("Expected income must be non-negative")
        with transactional(self.db):
            self.settings.set_expected_income(amount)
