"""SQLAlchemy models for accounts and their ledger."""
from __future__ import annotations

import uuid
from decimal import Decimal

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    func,
)
from sqlalchemy.orm import relationship

from .session import Base
from .types import Money


def _new_id() -> str:
    return str(uuid.uuid4())


class Account(Base):
    __tablename__ = "accounts"

    id = Column(String(36), primary_key=True, default=_new_id)
    username = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=False)
    password_hash = Column(Text, nullable=False)
    is_email_verified = Column(Boolean, default=False, nullable=False)
    email_verification_token = Column(String(128), unique=True, nullable=True)
    email_verification_expires = Column(DateTime(timezone=True), nullable=True)
    wallet_balance = Column(Money, default=Decimal("0.00"), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    entries = relationship("LedgerEntry", back_populates="account", cascade="all,delete-orphan", passive_deletes=True)


class LedgerEntry(Base):
    __tablename__ = "ledger_entries"

    id = Column(Integer, primary_key=True, autoincrement=True)
    account_id = Column(String(36), ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False)
    kind = Column(String(32), nullable=False)
    amount = Column(Money, nullable=False)
    status = Column(String(16), default="pending", nullable=False)
    reference = Column(String(64), unique=True, nullable=False)
    description = Column(Text, nullable=True)
    balance_before = Column(Money, nullable=True)
    balance_after = Column(Money, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    account = relationship("Account", back_populates="entries")


Index("ix_ledger_entries_account_created", LedgerEntry.account_id, LedgerEntry.created_at)
