"""High-level data access helpers backed by SQLAlchemy."""
from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError

from wallet_api.core.utils import new_reference, utcnow
from wallet_api.db.models import Account, LedgerEntry
from wallet_api.db.session import Database


class RepositoryError(Exception):
    """Base class for persistence-level failures the services translate."""


class DuplicateEmailError(RepositoryError):
    pass


class AccountNotFoundError(RepositoryError):
    pass


class InsufficientBalanceError(RepositoryError):
    def __init__(self, balance: Decimal, amount: Decimal):
        super().__init__(f"insufficient balance: {balance} available, {amount} requested")
        self.balance = balance
        self.amount = amount


class SQLRepository:
    """CRUD helpers wrapping the SQLAlchemy session."""

    def __init__(self, database: Database) -> None:
        self.database = database

    # -------------------------- accounts --------------------------
    def get_account(self, account_id: str) -> Optional[Account]:
        with self.database.session() as session:
            return session.get(Account, account_id)

    def get_account_by_email(self, email: str) -> Optional[Account]:
        with self.database.session() as session:
            stmt = select(Account).where(Account.email == email)
            return session.execute(stmt).scalar_one_or_none()

    def get_account_by_verification_token(self, token: str) -> Optional[Account]:
        with self.database.session() as session:
            stmt = select(Account).where(Account.email_verification_token == token)
            return session.execute(stmt).scalar_one_or_none()

    def create_account(
        self,
        username: str,
        email: str,
        password_hash: str,
        *,
        verification_token: str | None = None,
        verification_expires: datetime | None = None,
    ) -> Account:
        now = utcnow()
        entity = Account(
            username=username,
            email=email,
            password_hash=password_hash,
            is_email_verified=False,
            email_verification_token=verification_token,
            email_verification_expires=verification_expires,
            wallet_balance=Decimal("0.00"),
            created_at=now,
            updated_at=now,
        )
        with self.database.session() as session:
            session.add(entity)
            try:
                session.commit()
            except IntegrityError as exc:
                session.rollback()
                raise DuplicateEmailError(email) from exc
            return entity

    def update_profile(
        self,
        account_id: str,
        *,
        username: str | None = None,
        email: str | None = None,
        verification_token: str | None = None,
        verification_expires: datetime | None = None,
    ) -> Account:
        """Apply profile changes; a verification token also marks the account unverified."""
        with self.database.session() as session:
            account = session.get(Account, account_id)
            if not account:
                raise AccountNotFoundError(account_id)
            if username is not None:
                account.username = username
            if email is not None:
                account.email = email
            if verification_token is not None:
                account.is_email_verified = False
                account.email_verification_token = verification_token
                account.email_verification_expires = verification_expires
            account.updated_at = utcnow()
            try:
                session.commit()
            except IntegrityError as exc:
                session.rollback()
                raise DuplicateEmailError(email or "") from exc
            return account

    def update_password(self, account_id: str, password_hash: str) -> None:
        with self.database.session() as session:
            stmt = (
                update(Account)
                .where(Account.id == account_id)
                .values(password_hash=password_hash, updated_at=utcnow())
            )
            result = session.execute(stmt)
            session.commit()
            if result.rowcount == 0:
                raise AccountNotFoundError(account_id)

    def set_verification_token(self, account_id: str, token: str, expires_at: datetime) -> None:
        with self.database.session() as session:
            stmt = (
                update(Account)
                .where(Account.id == account_id)
                .values(email_verification_token=token, email_verification_expires=expires_at, updated_at=utcnow())
            )
            result = session.execute(stmt)
            session.commit()
            if result.rowcount == 0:
                raise AccountNotFoundError(account_id)

    def mark_verified(self, account_id: str) -> None:
        with self.database.session() as session:
            stmt = (
                update(Account)
                .where(Account.id == account_id)
                .values(
                    is_email_verified=True,
                    email_verification_token=None,
                    email_verification_expires=None,
                    updated_at=utcnow(),
                )
            )
            session.execute(stmt)
            session.commit()

    def clear_verification_token(self, account_id: str) -> None:
        with self.database.session() as session:
            stmt = (
                update(Account)
                .where(Account.id == account_id)
                .values(email_verification_token=None, email_verification_expires=None, updated_at=utcnow())
            )
            session.execute(stmt)
            session.commit()

    def delete_account(self, account_id: str) -> bool:
        with self.database.session() as session:
            session.execute(delete(LedgerEntry).where(LedgerEntry.account_id == account_id))
            result = session.execute(delete(Account).where(Account.id == account_id))
            session.commit()
            return result.rowcount > 0

    # -------------------------- ledger --------------------------
    def apply_balance_change(
        self,
        account_id: str,
        amount: Decimal,
        *,
        credit: bool,
        kind: str,
        description: str | None = None,
    ) -> LedgerEntry:
        """
        Move the balance and append the matching ledger entry in one transaction.

        The balance check is part of the UPDATE's WHERE clause, so two concurrent
        debits cannot both pass it; zero matched rows means either the account is
        gone or the funds are short, and nothing is written.
        """
        now = utcnow()
        if credit:
            new_balance = Account.wallet_balance + amount
            condition = Account.id == account_id
        else:
            new_balance = Account.wallet_balance - amount
            condition = (Account.id == account_id) & (Account.wallet_balance >= amount)
        with self.database.session() as session:
            result = session.execute(
                update(Account)
                .where(condition)
                .values(wallet_balance=new_balance, updated_at=now)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                current = session.execute(
                    select(Account.wallet_balance).where(Account.id == account_id)
                ).scalar_one_or_none()
                session.rollback()
                if current is None:
                    raise AccountNotFoundError(account_id)
                raise InsufficientBalanceError(Decimal(current), amount)
            balance_after = Decimal(
                session.execute(select(Account.wallet_balance).where(Account.id == account_id)).scalar_one()
            )
            balance_before = balance_after - amount if credit else balance_after + amount
            entry = LedgerEntry(
                account_id=account_id,
                kind=kind,
                amount=amount,
                status="success",
                reference=new_reference(),
                description=description,
                balance_before=balance_before,
                balance_after=balance_after,
                created_at=now,
                updated_at=now,
            )
            # uncommitted work is rolled back when the session closes
            session.add(entry)
            session.commit()
            return entry

    def create_entry(
        self,
        account_id: str,
        *,
        kind: str,
        amount: Decimal,
        status: str = "pending",
        description: str | None = None,
        balance_before: Decimal | None = None,
        balance_after: Decimal | None = None,
    ) -> LedgerEntry:
        now = utcnow()
        entry = LedgerEntry(
            account_id=account_id,
            kind=kind,
            amount=amount,
            status=status,
            reference=new_reference(),
            description=description,
            balance_before=balance_before,
            balance_after=balance_after,
            created_at=now,
            updated_at=now,
        )
        with self.database.session() as session:
            if not session.get(Account, account_id):
                raise AccountNotFoundError(account_id)
            session.add(entry)
            session.commit()
            return entry

    def list_entries(self, account_id: str, *, kind: str | None = None, status: str | None = None) -> list[LedgerEntry]:
        stmt = select(LedgerEntry).where(LedgerEntry.account_id == account_id)
        if kind:
            stmt = stmt.where(LedgerEntry.kind == kind)
        if status:
            stmt = stmt.where(LedgerEntry.status == status)
        stmt = stmt.order_by(LedgerEntry.created_at.desc(), LedgerEntry.id.desc())
        with self.database.session() as session:
            return list(session.execute(stmt).scalars().all())

    def get_entry(self, account_id: str, reference: str) -> Optional[LedgerEntry]:
        with self.database.session() as session:
            stmt = select(LedgerEntry).where(
                LedgerEntry.reference == reference,
                LedgerEntry.account_id == account_id,
            )
            return session.execute(stmt).scalar_one_or_none()
