"""Integration tests for category rules and transaction flags"""

import pytest
from datetime import date
from unittest.mock import patch
from sqlalchemy.exc import SQLAlchemyError
from budget_ledger.domain.exceptions import (
    CategoryNotFoundError,
    DuplicateCategoryError,
    TransactionNotFoundError,
    ValidationError,
)
from budget_ledger.domain.models import RawTransaction, transaction_key
from budget_ledger.infrastructure.database.models import TransactionRecord
from budget_ledger.infrastructure.database.repositories import TransactionRepository
from budget_ledger.services.categories import CategoryService
from budget_ledger.services.classification import ClassificationService


def _key(raw: RawTransaction, account: str = "Hapoalim") -> str:
    return transaction_key(account, raw.date, raw.amount, raw.description)


@pytest.fixture
def groceries(db):
    return CategoryService(db).create_category("סופר", "#22c55e")


@pytest.fixture
def dining(db):
    return CategoryService(db).create_category("מסעדות")


@pytest.fixture
def supermarket_rows(ingest):
    rows = [
        RawTransaction(date=date(2024, 3, 5), amount=-12000, description="שופרסל"),
        RawTransaction(date=date(2024, 3, 12), amount=-8000, description="שופרסל"),
        RawTransaction(date=date(2024, 3, 19), amount=-9000, description="שופרסל"),
        RawTransaction(date=date(2024, 3, 20), amount=-4000, description="שופרסל דיל"),
    ]
    ingest(rows)
    return rows


def test_setting_category_cascades_to_same_description(db, groceries, supermarket_rows):
    """Test category assignment learns a rule and cascades it"""
    service = ClassificationService(db)

    cascaded = service.apply_category(_key(supermarket_rows[0]), groceries.id)

    assert cascaded == 2
    db.expire_all()
    for raw in supermarket_rows[:3]:
        assert db.get(TransactionRecord, _key(raw)).category_id == groceries.id
    assert db.get(TransactionRecord, _key(supermarket_rows[3])).category_id is None

    rules = service.list_rules()
    assert len(rules) == 1
    assert rules[0].description == "שופרסל"
    assert rules[0].category_name == "סופר"
    assert rules[0].category_color == "#22c55e"


def test_cascade_leaves_explicit_categories_alone(db, groceries, dining, supermarket_rows):
    """Test cascade only touches uncategorized rows"""
    service = ClassificationService(db)
    service.apply_category(_key(supermarket_rows[1]), dining.id)
    # Undo the cascade so only one row keeps an explicit category
    db.get(TransactionRecord, _key(supermarket_rows[0])).category_id = None
    db.get(TransactionRecord, _key(supermarket_rows[2])).category_id = None
    db.commit()

    cascaded = service.apply_category(_key(supermarket_rows[0]), groceries.id)

    assert cascaded == 1
    db.expire_all()
    assert db.get(TransactionRecord, _key(supermarket_rows[1])).category_id == dining.id
    assert db.get(TransactionRecord, _key(supermarket_rows[2])).category_id == groceries.id
    assert service.list_rules()[0].category_id == groceries.id


def test_clearing_category_deletes_rule_only(db, groceries, supermarket_rows):
    """Test clearing a category drops the rule but keeps past assignments"""
    service = ClassificationService(db)
    service.apply_category(_key(supermarket_rows[0]), groceries.id)

    assert service.apply_category(_key(supermarket_rows[0]), None) == 0

    db.expire_all()
    assert db.get(TransactionRecord, _key(supermarket_rows[0])).category_id is None
    assert db.get(TransactionRecord, _key(supermarket_rows[1])).category_id == groceries.id
    assert service.list_rules() == []


def test_unknown_transaction_or_category(db, groceries, supermarket_rows):
    """Test missing identities raise without side effects"""
    service = ClassificationService(db)

    with pytest.raises(TransactionNotFoundError):
        service.apply_category("missing", groceries.id)
    with pytest.raises(CategoryNotFoundError):
        service.apply_category(_key(supermarket_rows[0]), "cat-missing")
    with pytest.raises(ValidationError):
        service.set_comment("", "x")

    assert service.list_rules() == []


def test_auto_apply_rules_is_idempotent(db, ingest, groceries, supermarket_rows):
    """Test stored rules categorize new rows once"""
    service = ClassificationService(db)
    service.apply_category(_key(supermarket_rows[0]), groceries.id)

    late = RawTransaction(date=date(2024, 3, 26), amount=-5000, description="שופרסל")
    ingest([late])
    assert db.get(TransactionRecord, _key(late)).category_id is None

    assert service.auto_apply_rules() == 1
    assert service.auto_apply_rules() == 0
    db.expire_all()
    assert db.get(TransactionRecord, _key(late)).category_id == groceries.id


def test_delete_category_uncategorizes_transactions(db, groceries, supermarket_rows):
    """Test deleting a category keeps its transactions and drops its rules"""
    ClassificationService(db).apply_category(_key(supermarket_rows[0]), groceries.id)

    CategoryService(db).delete_category(groceries.id)

    db.expire_all()
    assert all(db.get(TransactionRecord, _key(raw)).category_id is None for raw in supermarket_rows)
    assert ClassificationService(db).list_rules() == []
    assert CategoryService(db).list_categories() == []

    with pytest.raises(CategoryNotFoundError):
        CategoryService(db).delete_category(groceries.id)


def test_category_names_are_unique_and_required(db, groceries):
    """Test duplicate and blank category names are rejected"""
    with pytest.raises(DuplicateCategoryError):
        CategoryService(db).create_category("סופר")
    with pytest.raises(ValidationError):
        CategoryService(db).create_category("   ")


def test_variable_category_is_single(db):
    """Test only one category holds the variable role"""
    service = CategoryService(db)
    bucket = service.create_category("הוצאות משתנות")
    other = service.create_category("פנאי")

    assert bucket.is_variable is True
    assert service.variable_category_id() == bucket.id

    service.set_variable_category(other.id)

    flags = {c.name: c.is_variable for c in service.list_categories()}
    assert flags == {"הוצאות משתנות": False, "פנאי": True}
    assert service.variable_category_id() == other.id


def test_transfer_and_investment_are_exclusive(db, ingest):
    """Test transfer and investment flags clear each other"""
    raw = RawTransaction(date=date(2024, 3, 5), amount=-100000, description="מיטב טרייד")
    ingest([raw])
    service = ClassificationService(db)

    service.set_investment(_key(raw), True)
    service.set_transfer(_key(raw), True)
    db.expire_all()
    record = db.get(TransactionRecord, _key(raw))
    assert (record.is_transfer, record.is_investment) == (True, False)

    service.set_investment(_key(raw), True)
    db.expire_all()
    record = db.get(TransactionRecord, _key(raw))
    assert (record.is_transfer, record.is_investment) == (False, True)


def test_occasional_income_and_comment(db, ingest):
    """Test occasional flag and comment; empty comment clears it"""
    raw = RawTransaction(date=date(2024, 3, 5), amount=50000, description="העברה מאמא")
    ingest([raw])
    service = ClassificationService(db)

    service.set_occasional_income(_key(raw), True)
    service.set_comment(_key(raw), "מתנת יום הולדת")
    db.expire_all()
    record = db.get(TransactionRecord, _key(raw))
    assert record.is_occasional_income is True
    assert record.user_comment == "מתנת יום הולדת"

    service.set_comment(_key(raw), "")
    db.expire_all()
    assert db.get(TransactionRecord, _key(raw)).user_comment is None


def test_redetect_transfers_overwrites_manual_flags(db, ingest):
    """Test bulk re-detection resets manual transfer choices"""
    card = RawTransaction(date=date(2024, 3, 10), amount=-450000, description="כרטיסי אשראי לחיוב")
    rent = RawTransaction(date=date(2024, 3, 1), amount=-520000, description="שכר דירה")
    ingest([card, rent])
    service = ClassificationService(db)
    service.set_transfer(_key(card), False)
    service.set_transfer(_key(rent), True)

    assert service.redetect_transfers() == 2

    db.expire_all()
    assert db.get(TransactionRecord, _key(card)).is_transfer is True
    assert db.get(TransactionRecord, _key(rent)).is_transfer is False


def test_exclude_month_marks_attributed_transactions(db, ingest):
    """Test month exclusion marks only that logical month's rows"""
    rows = [
        RawTransaction(date=date(2024, 3, 15), amount=-20000, description="טיסה"),
        RawTransaction(date=date(2024, 4, 2), amount=1300000, description="משכורת"),
        RawTransaction(date=date(2024, 4, 2), amount=-3000, description="קפה"),
        RawTransaction(date=date(2024, 2, 28), amount=-1000, description="לפני"),
    ]
    ingest(rows)
    service = ClassificationService(db)

    assert service.exclude_month(2024, 3) == 2
    assert service.exclude_month(2024, 3) == 0

    db.expire_all()
    assert [db.get(TransactionRecord, _key(raw)).is_transfer for raw in rows] == [True, True, False, False]


def test_failed_cascade_rolls_back_category_and_rule(db, groceries, supermarket_rows):
    """Test a storage error during the cascade leaves no partial assignment"""
    service = ClassificationService(db)

    with patch.object(TransactionRepository, "categorize_matching", side_effect=SQLAlchemyError("locked")):
        with pytest.raises(SQLAlchemyError):
            service.apply_category(_key(supermarket_rows[0]), groceries.id)

    db.expire_all()
    assert all(db.get(TransactionRecord, _key(raw)).category_id is None for raw in supermarket_rows)
    assert service.list_rules() == []
