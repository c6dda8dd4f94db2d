"""Domain vocabulary for ledger entries."""
from __future__ import annotations

import enum


class LedgerKind(str, enum.Enum):
    AIRTIME = "airtime"
    DATA = "data"
    ELECTRICITY = "electricity"
    TV = "tv"
    WALLET_FUNDING = "wallet_funding"
    TRANSFER = "transfer"
    PURCHASE = "purchase"


class LedgerStatus(str, enum.Enum):
    PENDING = "pending"
    SUCCESS = "success"
    FAILED = "failed"


def parse_kind(value: str | None) -> LedgerKind | None:
    """Return the matching kind, or None for empty/unknown values."""
    if not value:
        return None
    try:
        return LedgerKind(value.strip().lower())
    except ValueError:
        return None


def parse_status(value: str | None) -> LedgerStatus | None:
    if not value:
        return None
    try:
        return LedgerStatus(value.strip().lower())
    except ValueError:
        return None
