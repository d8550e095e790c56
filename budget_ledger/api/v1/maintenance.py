"""Bulk maintenance and ingestion endpoints"""

from fastapi import APIRouter, Depends

from budget_ledger.api.v1.schemas import (
    ExcludeMonthRequest,
    ExcludeMonthResponse,
    IngestRequest,
    IngestResponse,
    RedetectResponse,
    SyncResponse,
)
from budget_ledger.api.dependencies import (
    get_classification_service,
    get_feed_client,
    get_ingestion_service,
)
from budget_ledger.config import settings
from budget_ledger.infrastructure.clients.feed import FeedClient
from budget_ledger.services.classification import ClassificationService
from budget_ledger.services.ingestion import IngestionService

router = APIRouter()


@router.post("/redetect-transfers", response_model=RedetectResponse)
def redetect_transfers(service: ClassificationService = Depends(get_classification_service)):
    """Recompute transfer flags for all transactions; overwrites manual choices"""
    return RedetectResponse(processed=service.redetect_transfers())


@router.post("/exclude-month", response_model=ExcludeMonthResponse)
def exclude_month(
    request_body: ExcludeMonthRequest,
    service: ClassificationService = Depends(get_classification_service),
):
    """Mark every transaction of a logical month as transfer"""
    return ExcludeMonthResponse(excluded=service.exclude_month(request_body.year, request_body.month))


@router.post("/ingest", response_model=IngestResponse)
def ingest_transactions(
    request_body: IngestRequest,
    ingestion: IngestionService = Depends(get_ingestion_service),
    classification: ClassificationService = Depends(get_classification_service),
):
    """
    Upsert one account's batch pushed by the feed, then apply category rules.

    Records are validated one by one; malformed records are skipped, not rejected.
    """
    processed = ingestion.upsert_transactions(request_body.transactions, request_body.account)
    return IngestResponse(processed=processed, rules_applied=classification.auto_apply_rules())


@router.post("/sync", response_model=SyncResponse)
async def sync_feed(
    ingestion: IngestionService = Depends(get_ingestion_service),
    feed_client: FeedClient = Depends(get_feed_client),
):
    """Pull every configured account from the feed service"""
    result = await ingestion.sync_accounts(feed_client, settings.feed_accounts)
    return SyncResponse(processed=result.processed, failed=result.failed, rules_applied=result.rules_applied)
