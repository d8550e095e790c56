"""Domain models - pure Python dataclasses representing ledger entities"""

from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Optional

UNCATEGORIZED = "uncategorized"
DESCRIPTION_KEY_LENGTH = 30


def transaction_key(account: str, txn_date: date, amount: int, description: str) -> str:
    """
    Stable identity for a transaction.

    Built from account label, date, signed amount and the first 30 characters
    of the stripped description. Bank-assigned identifiers are not used since
    they can change between fetches of the same real-world transaction.
    """
    desc = (description or "").strip()[:DESCRIPTION_KEY_LENGTH]
    return f"{account}-{txn_date.isoformat()}-{amount}-{desc}"


@dataclass
class RawTransaction:
    """Transaction record as delivered by the ingestion feed"""

    date: date
    amount: int  # signed, minor currency units
    description: str = ""
    memo: str = ""


@dataclass
class LedgerTransaction:
    """Stored transaction with user classification flags"""

    id: str
    date: date
    amount: int
    description: str
    memo: str
    account: str
    category_id: Optional[str] = None
    is_transfer: bool = False
    is_investment: bool = False
    is_occasional_income: bool = False
    user_comment: Optional[str] = None

    @property
    def type(self) -> str:
        return "income" if self.amount > 0 else "expense"


@dataclass
class Category:
    id: str
    name: str
    color: str
    is_variable: bool = False


@dataclass
class CategoryRule:
    description: str
    category_id: str
    category_name: Optional[str] = None
    category_color: Optional[str] = None


@dataclass
class CategoryBucket:
    """Counted transactions of one category within a month"""

    income: int = 0
    expenses: int = 0
    transactions: List[LedgerTransaction] = field(default_factory=list)


@dataclass
class MonthlySummary:
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
    transactions: List[LedgerTransaction]
    transfers: List[LedgerTransaction]
    investments: List[LedgerTransaction]
    by_category: Dict[str, CategoryBucket]


@dataclass
class YearSummary:
    year: int
    income: int
    expenses: int
    balance: int
    investment_total: int
    transaction_count: int


@dataclass
class BudgetBreakdown:
    """Output of budget derivation for one logical month"""

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
