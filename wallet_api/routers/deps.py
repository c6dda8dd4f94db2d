"""Request-scoped helpers shared by the routers."""
from __future__ import annotations

from typing import Optional

from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from wallet_api.services.auth_service import UnauthenticatedError
from wallet_api.services.context import ServiceContext

_bearer = HTTPBearer(auto_error=False)


def get_services(request: Request) -> ServiceContext:
    services = getattr(getattr(request.app, "state", None), "services", None)
    if not services:
        raise RuntimeError("ServiceContext not configured")
    return services


def current_account_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer),
    services: ServiceContext = Depends(get_services),
) -> str:
    """Resolve the bearer token into the caller's account id, or answer 401."""
    token = credentials.credentials if credentials else None
    try:
        return services.auth.authenticate(token)
    except UnauthenticatedError as exc:
        raise HTTPException(401, exc.message)
