"""Pydantic schemas for API request/response validation"""

from pydantic import BaseModel, ConfigDict, Field
from datetime import date
from typing import Any, Dict, List, Optional


class SuccessResponse(BaseModel):
    success: bool = True


# Transactions

class TransactionSchema(BaseModel):
    """Stored transaction with classification flags"""

    model_config = ConfigDict(from_attributes=True)

    id: str
    date: date
    amount: int
    description: str
    memo: str
    account: str
    type: str
    category_id: Optional[str] = None
    is_transfer: bool
    is_investment: bool
    is_occasional_income: bool
    user_comment: Optional[str] = None


class SetCategoryRequest(BaseModel):
    transaction_id: str = Field(..., min_length=1)
    category_id: Optional[str] = None


class SetCategoryResponse(SuccessResponse):
    cascaded: int


class SetFlagRequest(BaseModel):
    transaction_id: str = Field(..., min_length=1)
    value: bool


class SetCommentRequest(BaseModel):
    transaction_id: str = Field(..., min_length=1)
    comment: Optional[str] = None


# Summaries

class MonthsResponse(BaseModel):
    months: List[str]


class StatsResponse(BaseModel):
    transaction_count: int


class CategoryBucketSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    income: int
    expenses: int
    transactions: List[TransactionSchema]


class MonthlySummaryResponse(BaseModel):
    """Response for GET /api/summary/{year}/{month}"""

    model_config = ConfigDict(from_attributes=True)

    year: int
    month: int
    income: int
    expenses: int
    balance: int
    transfers_in: int
    transfers_out: int
    transfers_net: int
    investment_total: int
    transaction_count: int
    transactions: List[TransactionSchema]
    transfers: List[TransactionSchema]
    investments: List[TransactionSchema]
    by_category: Dict[str, CategoryBucketSchema]


class YearSummaryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    year: int
    income: int
    expenses: int
    balance: int
    investment_total: int
    transaction_count: int


class CategoryAveragesResponse(BaseModel):
    averages: Dict[str, int]


class BudgetDisplaySchema(BaseModel):
    total_budget: int
    minus_savings: int
    minus_fixed: int
    equals_variable: int
    already_spent: int
    still_available: int


class AvailableBudgetResponse(BaseModel):
    """Response for GET /api/available-budget/{year}/{month}"""

    model_config = ConfigDict(from_attributes=True)

    year: int
    month: int
    expected_income: int
    expected_regular_income: int
    actual_income: int
    actual_regular_income: int
    actual_occasional_income: int
    user_expected_income: int
    average_income: int
    savings_goal: int
    fixed_expenses: int
    available_for_variable: int
    variable_actual: int
    remaining_for_variable: int
    breakdown: BudgetDisplaySchema


# Categories

class CategorySchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    color: str
    is_variable: bool


class CategoriesResponse(BaseModel):
    categories: List[CategorySchema]


class CreateCategoryRequest(BaseModel):
    name: str = Field(..., min_length=1, description="Unique display name")
    color: Optional[str] = None
    is_variable: bool = False


class CategoryRuleSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    description: str
    category_id: str
    category_name: Optional[str] = None
    category_color: Optional[str] = None


class CategoryRulesResponse(BaseModel):
    rules: List[CategoryRuleSchema]


# Settings

class SavingsGoalResponse(BaseModel):
    goal: int


class MonthSavingsGoalResponse(BaseModel):
    goal: int
    default_goal: int
    is_custom: bool


class SetSavingsGoalRequest(BaseModel):
    goal: int = Field(..., ge=0, description="Savings goal in minor currency units")
    year: Optional[int] = None
    month: Optional[int] = Field(None, ge=1, le=12)


class ExpectedIncomeResponse(BaseModel):
    income: int


class SetExpectedIncomeRequest(BaseModel):
    income: int = Field(..., ge=0, description="Expected regular income in minor currency units")


# Maintenance

class RedetectResponse(SuccessResponse):
    processed: int


class ExcludeMonthRequest(BaseModel):
    year: int
    month: int = Field(..., ge=1, le=12)


class ExcludeMonthResponse(SuccessResponse):
    excluded: int


class IngestRequest(BaseModel):
    account: str = Field(..., min_length=1, description="Source account label")
    transactions: List[Dict[str, Any]] = Field(
        ..., description="Raw feed records; malformed ones are skipped during ingestion"
    )


class IngestResponse(SuccessResponse):
    processed: int
    rules_applied: int


class SyncResponse(SuccessResponse):
    processed: Dict[str, int]
    failed: List[str]
    rules_applied: int
