"""Ingestion of raw feed records into the transaction store"""

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Sequence, Union

from sqlalchemy.orm import Session

from budget_ledger.domain.classifier import TransactionClassifier, default_classifier
from budget_ledger.domain.exceptions import FeedAPIError, InvalidTransactionDataError, ValidationError
from budget_ledger.domain.ingestion import parse_raw_transaction
from budget_ledger.domain.models import RawTransaction
from budget_ledger.infrastructure.clients.feed import FeedClient
from budget_ledger.infrastructure.database.repositories import TransactionRepository
from budget_ledger.infrastructure.database.session import transactional
from budget_ledger.infrastructure.observability.logging import log_ingestion
from budget_ledger.infrastructure.observability.metrics import feed_fetch_failures_counter, record_ingestion
from budget_ledger.services.classification import ClassificationService

logger = logging.getLogger(__name__)


@dataclass
class SyncResult:
    """Outcome of pulling every configured account from the feed"""

    processed: Dict[str, int] = field(default_factory=dict)
    failed: List[str] = field(default_factory=list)
    rules_applied: int = 0

    @property
    def total_processed(self) -> int:
        return sum(self.processed.values())


class IngestionService:
    def __init__(self, db: Session, classifier: TransactionClassifier = default_classifier):
        self.db = db
        self.classifier = classifier
        self.transactions = TransactionRepository(db)

    def upsert_transactions(
        self,
        records: Iterable[Union[RawTransaction, Mapping[str, Any]]],
        account: str,
    ) -> int:
        """
        Insert new transactions and refresh known ones in a single commit.

        Classification flags on known identities are preserved. Malformed
        records are skipped and logged. Rules are not applied here; callers
        run auto_apply_rules() after the full batch.

        Returns: number of records processed (skipped records excluded)
        """
        if not account or not account.strip():
            raise ValidationError("Source account label is required")

        start_time = time.time()
        processed = inserted = skipped = 0

        with transactional(self.db):
            for index, record in enumerate(records):
                try:
                    raw = parse_raw_transaction(record)
                except InvalidTransactionDataError as e:
                    skipped += 1
                    logger.warning(f"Skipping record {index}: {e}", extra={"account": account})
                    continue

                if self.transactions.upsert(raw, account, self.classifier):
                    inserted += 1
                processed += 1

        duration_ms = (time.time() - start_time) * 1000
        record_ingestion(account, inserted, processed - inserted, skipped)
        log_ingestion(account, processed, inserted, skipped, duration_ms)
        return processed

    async def sync_accounts(self, feed_client: FeedClient, accounts: Sequence[str]) -> SyncResult:
        """
        Pull every account from the feed, then auto-categorize once.

        A feed failure for one account is logged and reported in the result;
        remaining accounts are still synced.
        """
        result = SyncResult()

        for account in accounts:
            try:
                records = await feed_client.get_transactions(account)
            except FeedAPIError as e:
                feed_fetch_failures_counter.inc()
                logger.error(f"Feed fetch failed: {e}", extra={"account": account})
                result.failed.append(account)
                continue

            result.processed[account] = self.upsert_transactions(records, account)

        result.rules_applied = ClassificationService(self.db, self.classifier).auto_apply_rules()
        if result.rules_applied:
            logger.info(f"Auto-categorized {result.rules_applied} transactions")

        return result
