"""Column types shared by the models."""
from __future__ import annotations

from decimal import Decimal

from sqlalchemy import BigInteger
from sqlalchemy.types import TypeDecorator

from wallet_api.core.utils import MONEY_QUANT, to_money

_CENTS = Decimal(100)


class Money(TypeDecorator):
    """Decimal amounts stored as integer cents.

    Literals compared with or added to a Money column are bound through the
    same conversion, so balance arithmetic and guards run on integers.
    """

    impl = BigInteger
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        amount = to_money(value)
        if amount is None:
            raise ValueError(f"not a monetary amount: {value!r}")
        return int(amount * _CENTS)

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return (Decimal(int(value)) / _CENTS).quantize(MONEY_QUANT)
