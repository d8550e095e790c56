"""Read-only summary endpoints: months, monthly/yearly summaries, averages, budget"""

from fastapi import APIRouter, Depends, Request

from budget_ledger.api.v1.schemas import (
    AvailableBudgetResponse,
    BudgetDisplaySchema,
    CategoryAveragesResponse,
    MonthlySummaryResponse,
    MonthsResponse,
    StatsResponse,
    YearSummaryResponse,
)
from budget_ledger.api.dependencies import get_request_id, get_summary_service
from budget_ledger.services.summaries import SummaryService
from budget_ledger.infrastructure.observability.logging import log_budget
from budget_ledger.utils.date_utils import validate_month

router = APIRouter()


@router.get("/months", response_model=MonthsResponse)
def get_available_months(service: SummaryService = Depends(get_summary_service)):
    """Logical months that may hold data, newest first"""
    months = service.available_months()
    return MonthsResponse(months=[f"{y}-{m:02d}" for y, m in months])


@router.get("/stats", response_model=StatsResponse)
def get_stats(service: SummaryService = Depends(get_summary_service)):
    return StatsResponse(transaction_count=service.transaction_count())


@router.get("/summary/{year}/{month}", response_model=MonthlySummaryResponse)
def get_monthly_summary(year: int, month: int, service: SummaryService = Depends(get_summary_service)):
    """
    Summary of one logical month.

    Salary and card settlements posted on the 1st-3rd belong to the
    previous month.
    """
    summary = service.monthly_summary(year, month)
    return MonthlySummaryResponse.model_validate(summary, from_attributes=True)


@router.get("/ytd/{year}", response_model=YearSummaryResponse)
def get_year_to_date(year: int, service: SummaryService = Depends(get_summary_service)):
    summary = service.year_to_date_summary(year)
    return YearSummaryResponse.model_validate(summary, from_attributes=True)


@router.get("/category-averages/{year}/{month}", response_model=CategoryAveragesResponse)
def get_category_averages(year: int, month: int, service: SummaryService = Depends(get_summary_service)):
    """3-month expense averages per category, empty months ignored"""
    return CategoryAveragesResponse(averages=service.category_averages(year, month))


@router.get("/available-budget/{year}/{month}", response_model=AvailableBudgetResponse)
def get_available_budget(
    year: int,
    month: int,
    request: Request,
    service: SummaryService = Depends(get_summary_service),
):
    """
    Budget left for variable expenses.

    Returns:
        Expected income, savings goal, fixed expenses and the remaining
        variable budget (may be negative)
    """
    validate_month(year, month)
    budget = service.available_budget(year, month)
    log_budget(get_request_id(request), year, month, budget.available_for_variable, budget.remaining_for_variable)

    return AvailableBudgetResponse(
        year=budget.year,
        month=budget.month,
        expected_income=budget.expected_income,
        expected_regular_income=budget.expected_regular_income,
        actual_income=budget.actual_income,
        actual_regular_income=budget.actual_regular_income,
        actual_occasional_income=budget.actual_occasional_income,
        user_expected_income=budget.user_expected_income,
        average_income=budget.average_income,
        savings_goal=budget.savings_goal,
        fixed_expenses=budget.fixed_expenses,
        available_for_variable=budget.available_for_variable,
        variable_actual=budget.variable_actual,
        remaining_for_variable=budget.remaining_for_variable,
        breakdown=BudgetDisplaySchema(
            total_budget=budget.expected_income,
            minus_savings=budget.savings_goal,
            minus_fixed=budget.fixed_expenses,
            equals_variable=budget.available_for_variable,
            already_spent=budget.variable_actual,
            still_available=budget.remaining_for_variable,
        ),
    )
