"""Category management"""

from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from budget_ledger.config import settings
from budget_ledger.domain.exceptions import CategoryNotFoundError, DuplicateCategoryError, ValidationError
from budget_ledger.domain.models import Category
from budget_ledger.infrastructure.database.repositories import (
    CategoryRepository,
    RuleRepository,
    TransactionRepository,
)
from budget_ledger.infrastructure.database.session import transactional


class CategoryService:
    def __init__(self, db: Session):
        self.db = db
        self.categories = CategoryRepository(db)
        self.rules = RuleRepository(db)
        self.transactions = TransactionRepository(db)

    def list_categories(self) -> List[Category]:
        return self.categories.list_all()

    def create_category(self, name: str, color: Optional[str] = None, is_variable: bool = False) -> Category:
        """
        Create a category with a unique name.

        A category named like the configured variable-expense bucket becomes
        the variable bucket automatically.
        """
        name = (name or "").strip()
        if not name:
            raise ValidationError("Category name is required")
        if self.categories.get_by_name(name) is not None:
            raise DuplicateCategoryError(f"Category already exists: {name}")

        is_variable = is_variable or name == settings.variable_category_name
        try:
            with transactional(self.db):
                category = self.categories.create(name, color or settings.default_category_color, is_variable)
        except IntegrityError as e:
            raise DuplicateCategoryError(f"Category already exists: {name}") from e
        return category

    def delete_category(self, category_id: str) -> None:
        """Unassign the category from transactions and drop its rules; transactions stay"""
        with transactional(self.db):
            record = self.categories.get(category_id)
            if record is None:
                raise CategoryNotFoundError(f"Category not found: {category_id}")
            self.transactions.clear_category(category_id)
            self.rules.delete_by_category(category_id)
            self.categories.delete(record)

    def set_variable_category(self, category_id: str) -> Category:
        """Designate the single variable-expense bucket"""
        with transactional(self.db):
            record = self.categories.get(category_id)
            if record is None:
                raise CategoryNotFoundError(f"Category not found: {category_id}")
            self.categories.set_variable(record)
        return Category(id=record.id, name=record.name, color=record.color, is_variable=True)

    def variable_category_id(self) -> Optional[str]:
        record = self.categories.get_variable()
        return record.id if record else None
