"""Description pattern matching for salary, card settlement and transfer detection"""

from enum import Enum
from typing import Sequence

# Monthly salary deposits (shift to the previous month when posted early)
SALARY_PATTERNS = (
    "משכורת",
    "שכר",
    "זיכוי מלאומי",
    "העברת משכורת",
)

# Credit card settlements (shift to the previous month when posted early)
CREDIT_CARD_PATTERNS = (
    "מסטרקרד",
    "ויזה",
    "כרטיסי אשראי",
    "ישראכרט",
    "אמריקן אקספרס",
    "דיינרס",
    "לאומי קארד",
)

# Lump-sum card charges on the bank account, already itemized by the card feed
TRANSFER_PATTERNS = (
    "כרטיסי אשראי ל",
)


class TransactionTag(str, Enum):
    SALARY = "salary"
    CREDIT_CARD = "credit_card"
    OTHER = "other"


class TransactionClassifier:
    """
    Tags transactions by description substring.

    Pattern lists are injectable so attribution and aggregation can be
    exercised with custom patterns.
    """

    def __init__(
        self,
        salary_patterns: Sequence[str] = SALARY_PATTERNS,
        credit_card_patterns: Sequence[str] = CREDIT_CARD_PATTERNS,
        transfer_patterns: Sequence[str] = TRANSFER_PATTERNS,
    ):
        self.salary_patterns = tuple(salary_patterns)
        self.credit_card_patterns = tuple(credit_card_patterns)
        self.transfer_patterns = tuple(transfer_patterns)

    def is_salary(self, description: str | None, amount: int) -> bool:
        """Salary requires a positive amount and a salary pattern"""
        if amount <= 0 or not description:
            return False
        return any(p in description for p in self.salary_patterns)

    def is_credit_card(self, description: str | None) -> bool:
        if not description:
            return False
        return any(p in description for p in self.credit_card_patterns)

    def classify(self, description: str | None, amount: int) -> TransactionTag:
        if self.is_salary(description, amount):
            return TransactionTag.SALARY
        if self.is_credit_card(description):
            return TransactionTag.CREDIT_CARD
        return TransactionTag.OTHER

    def is_billing_cycle(self, description: str | None, amount: int) -> bool:
        """True for salary or card settlements, which follow the billing-cycle shift"""
        return self.classify(description, amount) is not TransactionTag.OTHER

    def detect_transfer(self, description: str | None) -> bool:
        """Case-insensitive substring match against transfer patterns"""
        if not description:
            return False
        lower = description.lower()
        return any(p.lower() in lower for p in self.transfer_patterns)


default_classifier = TransactionClassifier()
