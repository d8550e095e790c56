"""Data access layer for ledger entities"""

from datetime import date, datetime, timezone
from typing import Dict, Iterable, List, Optional, Set, Tuple
from sqlalchemy import or_
from sqlalchemy.orm import Session
from budget_ledger.infrastructure.database.models import (
    CategoryRecord,
    CategoryRuleRecord,
    SettingRecord,
    TransactionRecord,
)
from budget_ledger.domain.classifier import TransactionClassifier
from budget_ledger.domain.models import (
    Category,
    CategoryRule,
    LedgerTransaction,
    RawTransaction,
    transaction_key,
)
from budget_ledger.utils.date_utils import month_stamp


def to_domain(record: TransactionRecord) -> LedgerTransaction:
    return LedgerTransaction(
        id=record.id,
        date=record.date,
        amount=record.amount,
        description=record.description or "",
        memo=record.memo or "",
        account=record.account,
        category_id=record.category_id or None,
        is_transfer=bool(record.is_transfer),
        is_investment=bool(record.is_investment),
        is_occasional_income=bool(record.is_occasional_income),
        user_comment=record.user_comment,
    )


def _uncategorized():
    return or_(TransactionRecord.category_id.is_(None), TransactionRecord.category_id == "")


class TransactionRepository:
    """Repository for ingested transactions"""

    def __init__(self, db: Session):
        self.db = db

    def get(self, transaction_id: str) -> Optional[TransactionRecord]:
        return self.db.get(TransactionRecord, transaction_id)

    def upsert(self, raw: RawTransaction, account: str, classifier: TransactionClassifier) -> bool:
        """
        Insert a new transaction or refresh an existing one.

        Existing rows keep their classification flags; new rows get
        is_transfer from pattern detection.

        Returns: True when a new row was inserted
        """
        txn_id = transaction_key(account, raw.date, raw.amount, raw.description)
        txn_type = "income" if raw.amount > 0 else "expense"
        existing = self.get(txn_id)

        if existing is not None:
            existing.date = raw.date
            existing.amount = raw.amount
            existing.description = raw.description
            existing.memo = raw.memo
            existing.account = account
            existing.type = txn_type
            existing.scraped_at = datetime.now(timezone.utc)
            return False

        self.db.add(
            TransactionRecord(
                id=txn_id,
                date=raw.date,
                amount=raw.amount,
                description=raw.description,
                memo=raw.memo,
                account=account,
                type=txn_type,
                is_transfer=classifier.detect_transfer(raw.description),
            )
        )
        self.db.flush()  # Later rows in the batch may share this identity
        return True

    def get_between(self, start: date, end: date, include_transfers: bool = True) -> List[LedgerTransaction]:
        """Fetch transactions dated within [start, end], newest first"""
        query = self.db.query(TransactionRecord).filter(
            TransactionRecord.date >= start,
            TransactionRecord.date <= end,
        )
        if not include_transfers:
            query = query.filter(TransactionRecord.is_transfer.is_(False))
        return [to_domain(r) for r in query.order_by(TransactionRecord.date.desc()).all()]

    def month_stamps(self) -> Set[Tuple[int, int]]:
        """Distinct calendar (year, month) pairs present in storage"""
        rows = self.db.query(TransactionRecord.date).distinct().all()
        return {month_stamp(row.date) for row in rows}

    def count(self) -> int:
        return self.db.query(TransactionRecord).count()

    def categorize_matching(self, description: str, category_id: str) -> int:
        """Assign category to uncategorized transactions with this exact description"""
        return (
            self.db.query(TransactionRecord)
            .filter(TransactionRecord.description == description, _uncategorized())
            .update({TransactionRecord.category_id: category_id})
        )

    def clear_category(self, category_id: str) -> int:
        return (
            self.db.query(TransactionRecord)
            .filter(TransactionRecord.category_id == category_id)
            .update({TransactionRecord.category_id: None})
        )

    def all_records(self) -> List[TransactionRecord]:
        return self.db.query(TransactionRecord).all()

    def mark_transfers(self, transaction_ids: Iterable[str]) -> int:
        ids = list(transaction_ids)
        if not ids:
            return 0
        return (
            self.db.query(TransactionRecord)
            .filter(TransactionRecord.id.in_(ids))
            .update({TransactionRecord.is_transfer: True, TransactionRecord.is_investment: False})
        )


class CategoryRepository:
    """Repository for categories"""

    def __init__(self, db: Session):
        self.db = db

    def list_all(self) -> List[Category]:
        records = self.db.query(CategoryRecord).order_by(CategoryRecord.name).all()
        return [self._to_domain(r) for r in records]

    def get(self, category_id: str) -> Optional[CategoryRecord]:
        return self.db.get(CategoryRecord, category_id)

    def get_by_name(self, name: str) -> Optional[CategoryRecord]:
        return self.db.query(CategoryRecord).filter(CategoryRecord.name == name).first()

    def get_variable(self) -> Optional[CategoryRecord]:
        return self.db.query(CategoryRecord).filter(CategoryRecord.is_variable.is_(True)).first()

    def create(self, name: str, color: str, is_variable: bool = False) -> Category:
        if is_variable:
            self._clear_variable()
        record = CategoryRecord(name=name, color=color, is_variable=is_variable)
        self.db.add(record)
        self.db.flush()  # Get ID without committing
        return self._to_domain(record)

    def set_variable(self, record: CategoryRecord) -> None:
        """Make this category the single variable-expense bucket"""
        self._clear_variable()
        record.is_variable = True

    def delete(self, record: CategoryRecord) -> None:
        self.db.delete(record)

    def _clear_variable(self) -> None:
        self.db.query(CategoryRecord).filter(CategoryRecord.is_variable.is_(True)).update(
            {CategoryRecord.is_variable: False}
        )

    @staticmethod
    def _to_domain(record: CategoryRecord) -> Category:
        return Category(id=record.id, name=record.name, color=record.color, is_variable=bool(record.is_variable))


class RuleRepository:
    """Repository for description -> category rules"""

    def __init__(self, db: Session):
        self.db = db

    def upsert(self, description: str, category_id: str) -> None:
        """Create or repoint the rule for a description (last write wins)"""
        rule = (
            self.db.query(CategoryRuleRecord)
            .filter(CategoryRuleRecord.description_pattern == description)
            .first()
        )
        if rule is None:
            self.db.add(CategoryRuleRecord(description_pattern=description, category_id=category_id))
        else:
            rule.category_id = category_id
        self.db.flush()

    def delete_by_description(self, description: str) -> int:
        return (
            self.db.query(CategoryRuleRecord)
            .filter(CategoryRuleRecord.description_pattern == description)
            .delete()
        )

    def delete_by_category(self, category_id: str) -> int:
        return (
            self.db.query(CategoryRuleRecord)
            .filter(CategoryRuleRecord.category_id == category_id)
            .delete()
        )

    def list_all(self) -> List[CategoryRule]:
        rows = (
            self.db.query(CategoryRuleRecord, CategoryRecord)
            .join(CategoryRecord, CategoryRuleRecord.category_id == CategoryRecord.id)
            .order_by(CategoryRuleRecord.description_pattern)
            .all()
        )
        return [
            CategoryRule(
                description=rule.description_pattern,
                category_id=rule.category_id,
                category_name=category.name,
                category_color=category.color,
            )
            for rule, category in rows
        ]

    def as_mapping(self) -> Dict[str, str]:
        return {
            r.description_pattern: r.category_id
            for r in self.db.query(CategoryRuleRecord).all()
        }


class SettingsRepository:
    """
    Scoped key-value settings.

    Keys:
    - savings_goal: default monthly savings goal
    - savings_goal_{year}_{month}: per-month override
    - expected_income: user-declared regular income
    """

    DEFAULT_SAVINGS_GOAL = "savings_goal"
    EXPECTED_INCOME = "expected_income"

    def __init__(self, db: Session):
        self.db = db

    def get(self, key: str) -> Optional[str]:
        record = self.db.get(SettingRecord, key)
        return record.value if record else None

    def set(self, key: str, value: str) -> None:
        record = self.db.get(SettingRecord, key)
        if record is None:
            self.db.add(SettingRecord(key=key, value=value))
        else:
            record.value = value
        self.db.flush()

    def delete(self, key: str) -> None:
        self.db.query(SettingRecord).filter(SettingRecord.key == key).delete()

    def get_int(self, key: str) -> Optional[int]:
        value = self.get(key)
        if value is None:
            return None
        try:
            return int(value)
        except ValueError:
            return 0

    @staticmethod
    def month_key(year: int, month: int) -> str:
        return f"savings_goal_{year}_{month}"

    def default_savings_goal(self) -> int:
        return self.get_int(self.DEFAULT_SAVINGS_GOAL) or 0

    def month_savings_goal(self, year: int, month: int) -> Optional[int]:
        """Per-month override only; None when the month has none"""
        return self.get_int(self.month_key(year, month))

    def savings_goal(self, year: int, month: int) -> int:
        """Month override if set, else the default"""
        override = self.month_savings_goal(year, month)
        return override if override is not None else self.default_savings_goal()

    def set_savings_goal(self, amount: int, year: Optional[int] = None, month: Optional[int] = None) -> None:
        key = self.month_key(year, month) if year and month else self.DEFAULT_SAVINGS_GOAL
        self.set(key, str(amount))

    def clear_month_savings_goal(self, year: int, month: int) -> None:
        self.delete(self.month_key(year, month))

    def expected_income(self) -> int:
        return self.get_int(self.EXPECTED_INCOME) or 0

    def set_expected_income(self, amount: int) -> None:
        self.set(self.EXPECTED_INCOME, str(amount))
