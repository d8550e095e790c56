"""Pytest fixtures for testing"""

import pytest
from datetime import date
from typing import Callable, Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from budget_ledger.api.main import create_app
from budget_ledger.infrastructure.database.models import Base
from budget_ledger.infrastructure.database.session import get_db
from budget_ledger.domain.models import LedgerTransaction, RawTransaction
from budget_ledger.services.ingestion import IngestionService


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db: Session) -> TestClient:
    """Create FastAPI test client with test database"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app)


@pytest.fixture
def make_txn() -> Callable[..., LedgerTransaction]:
    """Factory for in-memory ledger transactions"""
    counter = {"n": 0}

    def _make(txn_date: date, amount: int, description: str = "Purchase", **kwargs) -> LedgerTransaction:
        counter["n"] += 1
        fields = dict(
            id=f"txn-{counter['n']}",
            date=txn_date,
            amount=amount,
            description=description,
            memo="",
            account="Hapoalim",
        )
        fields.update(kwargs)
        return LedgerTransaction(**fields)

    return _make


@pytest.fixture
def ingest(db: Session) -> Callable[..., int]:
    """Store raw records for one account through the ingestion service"""

    def _ingest(records: list[RawTransaction], account: str = "Hapoalim") -> int:
        return IngestionService(db).upsert_transactions(records, account)

    return _ingest
