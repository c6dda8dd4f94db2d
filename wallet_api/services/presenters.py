"""
JSON views of accounts and ledger entries (camelCase keys on the wire).
"""

from __future__ import annotations

from datetime import datetime

from wallet_api.core.utils import as_utc, money_to_json
from wallet_api.db.models import Account, LedgerEntry


def _timestamp(value: datetime | None) -> str | None:
    return as_utc(value).isoformat() if value else None


def account_summary(account: Account) -> dict:
    return {
        "id": account.id,
        "username": account.username,
        "email": account.email,
        "walletBalance": money_to_json(account.wallet_balance),
    }


def account_to_dict(account: Account) -> dict:
    """Full public view; never exposes the password hash or verification token."""
    data = account_summary(account)
    data.update(
        {
            "isEmailVerified": bool(account.is_email_verified),
            "createdAt": _timestamp(account.created_at),
            "updatedAt": _timestamp(account.updated_at),
        }
    )
    return data


def entry_to_dict(entry: LedgerEntry) -> dict:
    return {
        "id": entry.id,
        "user": entry.account_id,
        "type": entry.kind,
        "amount": money_to_json(entry.amount),
        "status": entry.status,
        "reference": entry.reference,
        "description": entry.description,
        "balanceBefore": money_to_json(entry.balance_before),
        "balanceAfter": money_to_json(entry.balance_after),
        "createdAt": _timestamp(entry.created_at),
        "updatedAt": _timestamp(entry.updated_at),
    }
