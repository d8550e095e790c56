"""Integration tests for the transaction store and ingestion service"""

import pytest
from datetime import date
from unittest.mock import patch
from sqlalchemy.exc import SQLAlchemyError
from budget_ledger.domain.exceptions import ValidationError
from budget_ledger.domain.models import RawTransaction, transaction_key
from budget_ledger.infrastructure.database.models import TransactionRecord
from budget_ledger.infrastructure.database.repositories import TransactionRepository
from budget_ledger.services.categories import CategoryService


def test_upsert_inserts_with_stable_identity(db, ingest):
    """Test new record is stored under its deterministic key"""
    raw = RawTransaction(date=date(2024, 3, 5), amount=-12550, description="שופרסל דיל", memo="")

    assert ingest([raw], account="VisaCal") == 1

    record = db.get(TransactionRecord, transaction_key("VisaCal", raw.date, raw.amount, raw.description))
    assert record is not None
    assert record.account == "VisaCal"
    assert record.type == "expense"
    assert record.is_transfer is False


def test_reingesting_same_batch_does_not_duplicate(db, ingest):
    """Test second ingestion of the same batch adds no rows"""
    batch = [
        RawTransaction(date=date(2024, 3, 5), amount=-12550, description="שופרסל"),
        RawTransaction(date=date(2024, 3, 6), amount=1300000, description="משכורת"),
    ]

    ingest(batch)
    ingest(batch)

    assert TransactionRepository(db).count() == 2


def test_duplicate_identity_inside_one_batch_collapses(db, ingest):
    """Test repeated identity within a batch is stored once"""
    same = RawTransaction(date=date(2024, 3, 5), amount=-1000, description="קפה")

    assert ingest([same, same]) == 2
    assert TransactionRepository(db).count() == 1


def test_reingest_preserves_user_flags(db, ingest):
    """Test category, investment, occasional flag and comment survive a later sync"""
    savings = CategoryService(db).create_category("חיסכון")
    raw = RawTransaction(date=date(2024, 3, 5), amount=50000, description="מתנה", memo="old")
    ingest([raw])
    txn_id = transaction_key("Hapoalim", raw.date, raw.amount, raw.description)

    record = db.get(TransactionRecord, txn_id)
    record.category_id = savings.id
    record.is_investment = True
    record.is_occasional_income = True
    record.user_comment = "birthday"
    db.commit()

    ingest([RawTransaction(date=raw.date, amount=raw.amount, description=raw.description, memo="new")])

    db.expire_all()
    record = db.get(TransactionRecord, txn_id)
    assert record.category_id == savings.id
    assert record.is_investment is True
    assert record.is_occasional_income is True
    assert record.user_comment == "birthday"
    assert record.memo == "new"


def test_transfer_detected_on_insert_only(db, ingest):
    """Test manual transfer override is not reset by re-ingestion"""
    raw = RawTransaction(date=date(2024, 3, 10), amount=-450000, description="כרטיסי אשראי לחיוב")
    ingest([raw])
    txn_id = transaction_key("Hapoalim", raw.date, raw.amount, raw.description)

    record = db.get(TransactionRecord, txn_id)
    assert record.is_transfer is True

    # User disagrees; a later sync must not put the flag back
    record.is_transfer = False
    db.commit()
    ingest([raw])

    db.expire_all()
    assert db.get(TransactionRecord, txn_id).is_transfer is False


def test_malformed_records_are_skipped(db, ingest):
    """Test bad records are dropped while the rest of the batch is stored"""
    records = [
        {"date": "2024-03-05", "amount": -1000, "description": "ok"},
        {"date": "garbage", "amount": -1000, "description": "bad date"},
        {"date": "2024-03-06", "amount": 10.5, "description": "bad amount"},
        {"date": "2024-03-07", "amount": -200, "description": 12345},
        {"date": "2024-03-08", "amount": -300, "description": "bad memo", "memo": ["x"]},
        {"amount": 5},
        "not a record",
    ]

    assert ingest(records) == 1
    assert TransactionRepository(db).count() == 1


def test_storage_error_rolls_back_whole_batch(db, ingest):
    """Test a failure mid-batch leaves no rows behind"""
    real_upsert = TransactionRepository.upsert
    calls = {"n": 0}

    def failing_upsert(self, raw, account, classifier):
        calls["n"] += 1
        if calls["n"] == 2:
            raise SQLAlchemyError("disk I/O error")
        return real_upsert(self, raw, account, classifier)

    batch = [
        RawTransaction(date=date(2024, 3, 5), amount=-1000, description="first"),
        RawTransaction(date=date(2024, 3, 6), amount=-2000, description="second"),
        RawTransaction(date=date(2024, 3, 7), amount=-3000, description="third"),
    ]

    with patch.object(TransactionRepository, "upsert", failing_upsert):
        with pytest.raises(SQLAlchemyError):
            ingest(batch)

    assert TransactionRepository(db).count() == 0


def test_empty_account_label_rejected(ingest):
    """Test ingestion requires a source account label"""
    with pytest.raises(ValidationError):
        ingest([], account="  ")


def test_get_between_is_inclusive_and_newest_first(db, ingest):
    """Test window query includes both bounds and orders by date desc"""
    ingest([
        RawTransaction(date=date(2024, 2, 29), amount=-1, description="before"),
        RawTransaction(date=date(2024, 3, 1), amount=-2, description="first"),
        RawTransaction(date=date(2024, 4, 3), amount=-3, description="last"),
        RawTransaction(date=date(2024, 4, 4), amount=-4, description="after"),
    ])

    rows = TransactionRepository(db).get_between(date(2024, 3, 1), date(2024, 4, 3))

    assert [r.description for r in rows] == ["last", "first"]


def test_month_stamps_are_distinct_calendar_months(db, ingest):
    """Test stored dates collapse to distinct (year, month) pairs"""
    ingest([
        RawTransaction(date=date(2024, 3, 1), amount=-1, description="a"),
        RawTransaction(date=date(2024, 3, 20), amount=-1, description="b"),
        RawTransaction(date=date(2023, 12, 31), amount=-1, description="c"),
    ])

    assert TransactionRepository(db).month_stamps() == {(2024, 3), (2023, 12)}
