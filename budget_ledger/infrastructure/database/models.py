"""SQLAlchemy ORM models for the ledger tables"""

import uuid
from sqlalchemy import Column, String, BigInteger, Boolean, Date, DateTime, ForeignKey, Integer, Text
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

Base = declarative_base()


def _category_id() -> str:
    return f"cat-{uuid.uuid4().hex[:16]}"


class TransactionRecord(Base):
    """Ingested transaction plus user classification flags"""

    __tablename__ = "transactions"

    id = Column(Text, primary_key=True)  # stable identity, see transaction_key()
    date = Column(Date, nullable=False, index=True)
    amount = Column(BigInteger, nullable=False)
    description = Column(Text, nullable=False, default="", index=True)
    memo = Column(Text, nullable=False, default="")
    account = Column(Text, nullable=False, index=True)
    type = Column(String(16), nullable=False)
    scraped_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    category_id = Column(Text, ForeignKey("categories.id"), nullable=True, index=True)
    is_transfer = Column(Boolean, nullable=False, default=False)
    is_investment = Column(Boolean, nullable=False, default=False)
    is_occasional_income = Column(Boolean, nullable=False, default=False)
    user_comment = Column(Text, nullable=True)


class CategoryRecord(Base):
    """User-defined spending category"""

    __tablename__ = "categories"

    id = Column(Text, primary_key=True, default=_category_id)
    name = Column(Text, nullable=False, unique=True)
    color = Column(String(16), nullable=False, default="#6366f1")
    is_variable = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    rules = relationship("CategoryRuleRecord", back_populates="category", cascade="all, delete-orphan")


class CategoryRuleRecord(Base):
    """Exact-description to category association"""

    __tablename__ = "category_rules"

    id = Column(Integer, primary_key=True, autoincrement=True)
    description_pattern = Column(Text, nullable=False, unique=True)
    category_id = Column(Text, ForeignKey("categories.id", ondelete="CASCADE"), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    category = relationship("CategoryRecord", back_populates="rules")


class SettingRecord(Base):
    """Key-value user settings"""

    __tablename__ = "settings"

    key = Column(Text, primary_key=True)
    value = Column(Text, nullable=False)
