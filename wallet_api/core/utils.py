"""
Utility helpers shared across routers/services.
"""

from __future__ import annotations

import secrets
import uuid
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

MONEY_QUANT = Decimal("0.01")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Normalize naive datetimes (SQLite drops tzinfo) and offsets to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def new_reference() -> str:
    return str(uuid.uuid4())


def new_verification_token() -> str:
    return secrets.token_hex(32)


def to_money(value) -> Decimal | None:
    """Coerce to a 2-decimal Decimal; None for anything non-finite or unparsable."""
    if value is None or isinstance(value, bool):
        return None
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None
    if not amount.is_finite():
        return None
    return amount.quantize(MONEY_QUANT, rounding=ROUND_HALF_UP)


def money_to_json(value: Decimal | None) -> float | None:
    if value is None:
        return None
    return float(value)
