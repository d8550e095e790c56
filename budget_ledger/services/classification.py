"""Classification rule engine and per-transaction flag mutations"""

import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from budget_ledger.domain.attribution import attribute_to_month, attribution_window
from budget_ledger.domain.classifier import TransactionClassifier, default_classifier
from budget_ledger.domain.exceptions import CategoryNotFoundError, TransactionNotFoundError, ValidationError
from budget_ledger.domain.models import CategoryRule
from budget_ledger.infrastructure.database.models import TransactionRecord
from budget_ledger.infrastructure.database.repositories import (
    CategoryRepository,
    RuleRepository,
    TransactionRepository,
)
from budget_ledger.infrastructure.database.session import transactional
from budget_ledger.infrastructure.observability.metrics import rules_applied_counter, transfers_redetected_counter

logger = logging.getLogger(__name__)


class ClassificationService:
    """
    Category rules and user flags on transactions.

    Every public method is one atomic unit: it commits on success and rolls
    back on any error.
    """

    def __init__(self, db: Session, classifier: TransactionClassifier = default_classifier):
        self.db = db
        self.classifier = classifier
        self.transactions = TransactionRepository(db)
        self.categories = CategoryRepository(db)
        self.rules = RuleRepository(db)

    def _get_transaction(self, transaction_id: str) -> TransactionRecord:
        if not transaction_id:
            raise ValidationError("Transaction ID required")
        record = self.transactions.get(transaction_id)
        if record is None:
            raise TransactionNotFoundError(f"Transaction not found: {transaction_id}")
        return record

    def apply_category(self, transaction_id: str, category_id: Optional[str]) -> int:
        """
        Set a transaction's category and maintain the rule for its description.

        Setting a category upserts the rule for the exact description and
        cascades it to every other uncategorized transaction with that
        description. Clearing the category deletes the rule; past assignments
        elsewhere are left as they are.

        Returns: number of other transactions categorized by the cascade
        """
        cascaded = 0
        with transactional(self.db):
            record = self._get_transaction(transaction_id)
            if category_id and self.categories.get(category_id) is None:
                raise CategoryNotFoundError(f"Category not found: {category_id}")

            record.category_id = category_id or None
            self.db.flush()

            if record.description:
                if category_id:
                    self.rules.upsert(record.description, category_id)
                    cascaded = self.transactions.categorize_matching(record.description, category_id)
                else:
                    self.rules.delete_by_description(record.description)

        if cascaded:
            logger.info(
                f"Rule cascade categorized {cascaded} transactions",
                extra={"category_id": category_id, "transaction_id": transaction_id},
            )
        return cascaded

    def auto_apply_rules(self) -> int:
        """Apply every stored rule to uncategorized matching transactions; idempotent"""
        applied = 0
        with transactional(self.db):
            for description, category_id in self.rules.as_mapping().items():
                applied += self.transactions.categorize_matching(description, category_id)

        rules_applied_counter.inc(applied)
        return applied

    def list_rules(self) -> List[CategoryRule]:
        return self.rules.list_all()

    def set_transfer(self, transaction_id: str, is_transfer: bool) -> None:
        """Transfers and investments are exclusive: marking a transfer clears investment"""
        with transactional(self.db):
            record = self._get_transaction(transaction_id)
            record.is_transfer = is_transfer
            if is_transfer:
                record.is_investment = False

    def set_investment(self, transaction_id: str, is_investment: bool) -> None:
        with transactional(self.db):
            record = self._get_transaction(transaction_id)
            record.is_investment = is_investment
            record.is_transfer = False

    def set_occasional_income(self, transaction_id: str, is_occasional: bool) -> None:
        """Only affects income averaging for positive amounts"""
        with transactional(self.db):
            record = self._get_transaction(transaction_id)
            record.is_occasional_income = is_occasional

    def set_comment(self, transaction_id: str, comment: Optional[str]) -> None:
        with transactional(self.db):
            record = self._get_transaction(transaction_id)
            record.user_comment = comment or None

    def redetect_transfers(self) -> int:
        """
        Recompute is_transfer for every transaction from current patterns.

        Bulk maintenance: manual transfer overrides are overwritten.

        Returns: number of transactions processed
        """
        with transactional(self.db):
            records = self.transactions.all_records()
            for record in records:
                detected = self.classifier.detect_transfer(record.description)
                record.is_transfer = detected
                if detected:
                    record.is_investment = False

        transfers_redetected_counter.inc(len(records))
        logger.info(f"Re-detected transfers for {len(records)} transactions")
        return len(records)

    def exclude_month(self, year: int, month: int) -> int:
        """
        Mark every transaction attributed to a logical month as a transfer.

        Returns: number of transactions newly excluded
        """
        start, end = attribution_window(year, month)
        with transactional(self.db):
            candidates = self.transactions.get_between(start, end)
            attributed = attribute_to_month(candidates, year, month, self.classifier)
            excluded = self.transactions.mark_transfers(t.id for t in attributed if not t.is_transfer)

        logger.info(f"Excluded {excluded} transactions", extra={"period": f"{year}-{month:02d}"})
        return excluded
