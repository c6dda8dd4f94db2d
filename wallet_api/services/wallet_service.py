"""Wallet balance use cases (read, fund, deduct)."""

from __future__ import annotations

from decimal import Decimal

from wallet_api.core.log import get_logger
from wallet_api.core.utils import to_money
from wallet_api.db.models import LedgerEntry
from wallet_api.domain.ledger import LedgerKind
from wallet_api.repositories.sql_repository import (
    AccountNotFoundError,
    InsufficientBalanceError,
    SQLRepository,
)

logger = get_logger(__name__)

__all__ = [
    "AccountNotFoundError",
    "InsufficientBalanceError",
    "InvalidAmountError",
    "WalletError",
    "WalletService",
]


class WalletError(Exception):
    """Base exception for wallet operations."""


class InvalidAmountError(WalletError):
    """Raised when the amount is missing, not a number, or not positive."""


class WalletService:
    """Funds and debits a wallet, each change paired with its ledger entry."""

    FUND_DESCRIPTION = "Wallet funding"
    DEDUCT_DESCRIPTION = "Wallet deduction"

    def __init__(self, repository: SQLRepository) -> None:
        self.repository = repository

    def _amount(self, value) -> Decimal:
        amount = to_money(value)
        if amount is None or amount <= 0:
            raise InvalidAmountError("Invalid amount")
        return amount

    def balance(self, account_id: str) -> Decimal:
        account = self.repository.get_account(account_id)
        if not account:
            raise AccountNotFoundError(account_id)
        return Decimal(account.wallet_balance or 0)

    def fund(self, account_id: str, amount, description: str | None = None) -> LedgerEntry:
        value = self._amount(amount)
        entry = self.repository.apply_balance_change(
            account_id,
            value,
            credit=True,
            kind=LedgerKind.WALLET_FUNDING.value,
            description=(description or "").strip() or self.FUND_DESCRIPTION,
        )
        logger.info("Funded account %s with %s (ref %s)", account_id, value, entry.reference)
        return entry

    def deduct(self, account_id: str, amount, description: str | None = None) -> LedgerEntry:
        value = self._amount(amount)
        try:
            entry = self.repository.apply_balance_change(
                account_id,
                value,
                credit=False,
                kind=LedgerKind.PURCHASE.value,
                description=(description or "").strip() or self.DEDUCT_DESCRIPTION,
            )
        except InsufficientBalanceError:
            logger.warning("Rejected deduction of %s from account %s: insufficient balance", value, account_id)
            raise
        logger.info("Deducted %s from account %s (ref %s)", value, account_id, entry.reference)
        return entry
