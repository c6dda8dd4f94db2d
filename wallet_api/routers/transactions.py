from __future__ import annotations

from decimal import Decimal
from typing import Optional, Union

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict, Field

from wallet_api.repositories.sql_repository import AccountNotFoundError
from wallet_api.routers.deps import current_account_id, get_services
from wallet_api.services.context import ServiceContext
from wallet_api.services.presenters import entry_to_dict
from wallet_api.services.transaction_service import (
    InvalidTransactionError,
    TransactionNotFoundError,
)

router = APIRouter(prefix="/api/transactions", tags=["transactions"])


class CreateTransactionBody(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    type: str
    amount: Decimal
    status: Optional[str] = None
    description: Optional[str] = None
    # validated by TransactionService.create
    balance_before: Optional[Union[Decimal, str]] = Field(default=None, alias="balanceBefore")
    balance_after: Optional[Union[Decimal, str]] = Field(default=None, alias="balanceAfter")


@router.post("/create", status_code=201)
def create_transaction(
    body: CreateTransactionBody,
    account_id: str = Depends(current_account_id),
    services: ServiceContext = Depends(get_services),
):
    try:
        entry = services.transactions.create(
            account_id,
            body.type,
            body.amount,
            status=body.status,
            description=body.description,
            balance_before=body.balance_before,
            balance_after=body.balance_after,
        )
    except InvalidTransactionError as exc:
        raise HTTPException(400, str(exc))
    except AccountNotFoundError:
        raise HTTPException(404, "User not found")
    return {"message": "Transaction recorded successfully", "transaction": entry_to_dict(entry)}


@router.get("/history")
def history(
    type: Optional[str] = None,
    status: Optional[str] = None,
    account_id: str = Depends(current_account_id),
    services: ServiceContext = Depends(get_services),
):
    try:
        entries = services.transactions.history(account_id, kind=type, status=status)
    except InvalidTransactionError as exc:
        raise HTTPException(400, str(exc))
    return {"transactions": [entry_to_dict(entry) for entry in entries]}


@router.get("/{reference}")
def get_transaction(
    reference: str,
    account_id: str = Depends(current_account_id),
    services: ServiceContext = Depends(get_services),
):
    try:
        entry = services.transactions.get(account_id, reference)
    except TransactionNotFoundError as exc:
        raise HTTPException(404, str(exc))
    return entry_to_dict(entry)
