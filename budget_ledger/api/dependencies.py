"""Dependency injection for FastAPI endpoints"""

from fastapi import Depends, Request
from sqlalchemy.orm import Session
from budget_ledger.infrastructure.clients.feed import FeedClient
from budget_ledger.infrastructure.database.session import get_db
from budget_ledger.domain.classifier import TransactionClassifier, default_classifier
from budget_ledger.services.categories import CategoryService
from budget_ledger.services.classification import ClassificationService
from budget_ledger.services.ingestion import IngestionService
from budget_ledger.services.budget_settings import BudgetSettingsService
from budget_ledger.services.summaries import SummaryService


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_feed_client() -> FeedClient:
    """Provide transaction feed client instance"""
    return FeedClient()


def get_classifier() -> TransactionClassifier:
    """Provide the description pattern classifier"""
    return default_classifier


def get_summary_service(
    db: Session = Depends(get_db),
    classifier: TransactionClassifier = Depends(get_classifier),
) -> SummaryService:
    return SummaryService(db, classifier)


def get_classification_service(
    db: Session = Depends(get_db),
    classifier: TransactionClassifier = Depends(get_classifier),
) -> ClassificationService:
    return ClassificationService(db, classifier)


def get_ingestion_service(
    db: Session = Depends(get_db),
    classifier: TransactionClassifier = Depends(get_classifier),
) -> IngestionService:
    return IngestionService(db, classifier)


def get_category_service(db: Session = Depends(get_db)) -> CategoryService:
    return CategoryService(db)


def get_budget_settings_service(db: Session = Depends(get_db)) -> BudgetSettingsService:
    return BudgetSettingsService(db)
