"""Savings goal and expected income endpoints"""

from fastapi import APIRouter, Depends

from budget_ledger.api.v1.schemas import (
    ExpectedIncomeResponse,
    MonthSavingsGoalResponse,
    SavingsGoalResponse,
    SetExpectedIncomeRequest,
    SetSavingsGoalRequest,
    SuccessResponse,
)
from budget_ledger.api.dependencies import get_budget_settings_service
from budget_ledger.services.budget_settings import BudgetSettingsService

router = APIRouter()


@router.get("/savings-goal", response_model=SavingsGoalResponse)
def get_default_savings_goal(service: BudgetSettingsService = Depends(get_budget_settings_service)):
    return SavingsGoalResponse(goal=service.default_savings_goal())


@router.get("/savings-goal/{year}/{month}", response_model=MonthSavingsGoalResponse)
def get_month_savings_goal(
    year: int,
    month: int,
    service: BudgetSettingsService = Depends(get_budget_settings_service),
):
    goal = service.month_savings_goal(year, month)
    return MonthSavingsGoalResponse(goal=goal.goal, default_goal=goal.default_goal, is_custom=goal.is_custom)


@router.post("/savings-goal", response_model=SuccessResponse)
def set_savings_goal(
    request_body: SetSavingsGoalRequest,
    service: BudgetSettingsService = Depends(get_budget_settings_service),
):
    """Set the default goal, or a single month's override when year and month are given"""
    service.set_savings_goal(request_body.goal, request_body.year, request_body.month)
    return SuccessResponse()


@router.delete("/savings-goal/{year}/{month}", response_model=SuccessResponse)
def clear_month_savings_goal(
    year: int,
    month: int,
    service: BudgetSettingsService = Depends(get_budget_settings_service),
):
    """Drop a month's override so it falls back to the default goal"""
    service.clear_month_savings_goal(year, month)
    return SuccessResponse()


@router.get("/expected-income", response_model=ExpectedIncomeResponse)
def get_expected_income(service: BudgetSettingsService = Depends(get_budget_settings_service)):
    return ExpectedIncomeResponse(income=service.expected_income())


@router.post("/expected-income", response_model=SuccessResponse)
def set_expected_income(
    request_body: SetExpectedIncomeRequest,
    service: BudgetSettingsService = Depends(get_budget_settings_service),
):
    service.set_expected_income(request_body.income)
    return SuccessResponse()
