"""Ledger entry use cases (record, list, fetch by reference)."""

from __future__ import annotations

from wallet_api.core.utils import to_money
from wallet_api.db.models import LedgerEntry
from wallet_api.domain.ledger import LedgerStatus, parse_kind, parse_status
from wallet_api.repositories.sql_repository import SQLRepository


class TransactionError(Exception):
    """Base exception for ledger queries and records."""


class InvalidTransactionError(TransactionError):
    """Raised when a kind, status or amount is not acceptable."""


class TransactionNotFoundError(TransactionError):
    """Raised when the reference is unknown or belongs to another account."""


class TransactionService:
    def __init__(self, repository: SQLRepository) -> None:
        self.repository = repository

    def create(
        self,
        account_id: str,
        kind: str,
        amount,
        status: str | None = None,
        description: str | None = None,
        balance_before=None,
        balance_after=None,
    ) -> LedgerEntry:
        """Record an informational entry; the wallet balance is not touched."""
        parsed_kind = parse_kind(kind)
        if parsed_kind is None:
            raise InvalidTransactionError("Invalid transaction type")
        parsed_status = parse_status(status) if status else LedgerStatus.PENDING
        if parsed_status is None:
            raise InvalidTransactionError("Invalid transaction status")
        value = to_money(amount)
        if value is None or value <= 0:
            raise InvalidTransactionError("Invalid amount")
        before = to_money(balance_before)
        after = to_money(balance_after)
        if (balance_before is not None and before is None) or (balance_after is not None and after is None):
            raise InvalidTransactionError("Invalid balance snapshot")
        return self.repository.create_entry(
            account_id,
            kind=parsed_kind.value,
            amount=value,
            status=parsed_status.value,
            description=(description or "").strip() or None,
            balance_before=before,
            balance_after=after,
        )

    def history(self, account_id: str, kind: str | None = None, status: str | None = None) -> list[LedgerEntry]:
        kind_filter = None
        if kind:
            parsed = parse_kind(kind)
            if parsed is None:
                raise InvalidTransactionError("Invalid transaction type")
            kind_filter = parsed.value
        status_filter = None
        if status:
            parsed_status = parse_status(status)
            if parsed_status is None:
                raise InvalidTransactionError("Invalid transaction status")
            status_filter = parsed_status.value
        return self.repository.list_entries(account_id, kind=kind_filter, status=status_filter)

    def get(self, account_id: str, reference: str) -> LedgerEntry:
        entry = self.repository.get_entry(account_id, (reference or "").strip())
        if not entry:
            raise TransactionNotFoundError("Transaction not found")
        return entry
