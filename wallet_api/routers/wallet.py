from __future__ import annotations

from decimal import Decimal
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from wallet_api.core.utils import money_to_json
from wallet_api.routers.deps import current_account_id, get_services
from wallet_api.services.context import ServiceContext
from wallet_api.services.presenters import entry_to_dict
from wallet_api.services.wallet_service import (
    AccountNotFoundError,
    InsufficientBalanceError,
    InvalidAmountError,
)

router = APIRouter(prefix="/api/wallet", tags=["wallet"])


class AmountBody(BaseModel):
    amount: Optional[Decimal] = None
    description: Optional[str] = None


@router.get("/balance")
def balance(account_id: str = Depends(current_account_id), services: ServiceContext = Depends(get_services)):
    try:
        value = services.wallet.balance(account_id)
    except AccountNotFoundError:
        raise HTTPException(404, "User not found")
    return {"walletBalance": money_to_json(value)}


@router.post("/fund")
def fund(
    body: AmountBody,
    account_id: str = Depends(current_account_id),
    services: ServiceContext = Depends(get_services),
):
    try:
        entry = services.wallet.fund(account_id, body.amount, body.description)
    except InvalidAmountError as exc:
        raise HTTPException(400, str(exc))
    except AccountNotFoundError:
        raise HTTPException(404, "User not found")
    return {
        "message": "Wallet funded",
        "walletBalance": money_to_json(entry.balance_after),
        "transaction": entry_to_dict(entry),
    }


@router.post("/deduct")
def deduct(
    body: AmountBody,
    account_id: str = Depends(current_account_id),
    services: ServiceContext = Depends(get_services),
):
    try:
        entry = services.wallet.deduct(account_id, body.amount, body.description)
    except InvalidAmountError as exc:
        raise HTTPException(400, str(exc))
    except InsufficientBalanceError:
        raise HTTPException(400, "Insufficient balance")
    except AccountNotFoundError:
        raise HTTPException(404, "User not found")
    return {
        "message": "Purchase successful",
        "walletBalance": money_to_json(entry.balance_after),
        "transaction": entry_to_dict(entry),
    }
