from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict, EmailStr, Field

from wallet_api.repositories.sql_repository import AccountNotFoundError
from wallet_api.routers.deps import current_account_id, get_services
from wallet_api.services.auth_service import (
    AccountExistsError,
    AlreadyVerifiedError,
    AuthError,
    InvalidCredentialsError,
    InvalidInputError,
    TokenInvalidError,
)
from wallet_api.services.context import ServiceContext
from wallet_api.services.presenters import account_summary, account_to_dict

router = APIRouter(prefix="/api/auth", tags=["auth"])

_STATUS_BY_ERROR = {
    InvalidInputError: 400,
    TokenInvalidError: 400,
    AlreadyVerifiedError: 400,
    InvalidCredentialsError: 401,
    AccountExistsError: 409,
}


def _http_error(exc: AuthError) -> HTTPException:
    return HTTPException(_STATUS_BY_ERROR.get(type(exc), 400), exc.message)


class SignupBody(BaseModel):
    username: str = Field(min_length=1)
    email: EmailStr
    password: str = Field(min_length=1)


class LoginBody(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class VerifyEmailBody(BaseModel):
    token: Optional[str] = None


class UpdateBody(BaseModel):
    username: Optional[str] = None
    email: Optional[EmailStr] = None


class ChangePasswordBody(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    old_password: str = Field(alias="oldPassword")
    new_password: str = Field(alias="newPassword")


@router.post("/signup", status_code=201)
def signup(body: SignupBody, services: ServiceContext = Depends(get_services)):
    try:
        result = services.auth.signup(body.username, body.email, body.password)
    except AuthError as exc:
        raise _http_error(exc)
    return {
        "message": "Signup successful. Verify your email.",
        "verificationToken": result.verification_token,
    }


@router.post("/login")
def login(body: LoginBody, services: ServiceContext = Depends(get_services)):
    try:
        result = services.auth.login(body.email or "", body.password or "")
    except AuthError as exc:
        raise _http_error(exc)
    return {
        "message": "Login successful",
        "token": result.token,
        "user": account_summary(result.account),
    }


@router.post("/verify-email")
def verify_email(body: VerifyEmailBody, services: ServiceContext = Depends(get_services)):
    try:
        services.auth.verify_email(body.token or "")
    except AuthError as exc:
        raise _http_error(exc)
    return {"message": "Email verified successfully"}


@router.post("/resend-verification")
def resend_verification(
    account_id: str = Depends(current_account_id),
    services: ServiceContext = Depends(get_services),
):
    try:
        token = services.auth.resend_verification(account_id)
    except AccountNotFoundError:
        raise HTTPException(404, "User not found")
    except AuthError as exc:
        raise _http_error(exc)
    return {"message": "Verification email sent", "token": token}


@router.put("/update")
def update_account(
    body: UpdateBody,
    account_id: str = Depends(current_account_id),
    services: ServiceContext = Depends(get_services),
):
    try:
        account = services.auth.update_profile(account_id, username=body.username, email=body.email)
    except AccountNotFoundError:
        raise HTTPException(404, "User not found")
    except AuthError as exc:
        raise _http_error(exc)
    return {"message": "User updated", "user": account_to_dict(account)}


@router.post("/change-password")
def change_password(
    body: ChangePasswordBody,
    account_id: str = Depends(current_account_id),
    services: ServiceContext = Depends(get_services),
):
    try:
        services.auth.change_password(account_id, body.old_password, body.new_password)
    except AccountNotFoundError:
        raise HTTPException(404, "User not found")
    except AuthError as exc:
        raise _http_error(exc)
    return {"message": "Password changed successfully"}


@router.delete("/delete")
def delete_account(
    account_id: str = Depends(current_account_id),
    services: ServiceContext = Depends(get_services),
):
    try:
        services.auth.delete_account(account_id)
    except AccountNotFoundError:
        raise HTTPException(404, "User not found")
    return {"message": "Account deleted"}
