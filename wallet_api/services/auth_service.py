"""
Authentication and identity related use cases.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from wallet_api.core.config import Settings
from wallet_api.core.log import get_logger
from wallet_api.core.mailer import Mailer
from wallet_api.core.security import hash_password, verify_password
from wallet_api.core.tokens import InvalidTokenError, TokenService
from wallet_api.core.utils import as_utc, new_verification_token, utcnow
from wallet_api.db.models import Account
from wallet_api.repositories.sql_repository import (
    AccountNotFoundError,
    DuplicateEmailError,
    SQLRepository,
)

logger = get_logger(__name__)


class AuthError(Exception):
    """Base class for authentication-related exceptions."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidInputError(AuthError):
    pass


class AccountExistsError(AuthError):
    pass


class InvalidCredentialsError(AuthError):
    pass


class TokenInvalidError(AuthError):
    pass


class AlreadyVerifiedError(AuthError):
    pass


class UnauthenticatedError(AuthError):
    pass


@dataclass
class SignupResult:
    account: Account
    verification_token: str
    email_sent: bool


@dataclass
class LoginResult:
    token: str
    account: Account


def normalize_email(email: str | None) -> str:
    return (email or "").strip().lower()


class AuthService:
    """Handles signup, login, verification and account maintenance flows."""

    def __init__(self, settings: Settings, repository: SQLRepository, tokens: TokenService, mailer: Mailer) -> None:
        self.settings = settings
        self.repository = repository
        self.tokens = tokens
        self.mailer = mailer

    # -------------------------------------- helpers --------------------------------------
    def _now(self) -> datetime:
        return utcnow()

    def _token_expired(self, expires_at: datetime | None, now: datetime) -> bool:
        if expires_at is None:
            return True
        return as_utc(expires_at) <= as_utc(now)

    def _new_verification(self) -> tuple[str, datetime]:
        ttl = max(1, self.settings.email_verification_ttl_seconds)
        return new_verification_token(), self._now() + timedelta(seconds=ttl)

    def _require_account(self, account_id: str) -> Account:
        account = self.repository.get_account(account_id)
        if not account:
            raise AccountNotFoundError(account_id)
        return account

    def _send_verification(self, email: str, token: str) -> bool:
        verify_url = f"{self.settings.public_base_url}/verify-email?token={token}"
        html_body = f"""
        <p>Hello!</p>
        <p>Confirm your email address to finish setting up your wallet:</p>
        <p><a href="{verify_url}">Verify my email</a></p>
        <p>The link expires in {self.settings.email_verification_ttl_seconds // 60} minutes.</p>
        """
        return self.mailer.send("Verify your email", email, html_body, f"Verify your email: {verify_url}")

    def _check_password(self, password: str | None) -> str:
        value = password or ""
        minimum = self.settings.password_min_length
        if len(value) < minimum:
            raise InvalidInputError(f"Password must be at least {minimum} characters")
        return value

    # -------------------------------------- identity --------------------------------------
    def authenticate(self, token: str | None) -> str:
        """Resolve a bearer token to the account id it was issued for."""
        if not token:
            raise UnauthenticatedError("No token provided")
        try:
            return self.tokens.decode(token)
        except InvalidTokenError as exc:
            raise UnauthenticatedError("Invalid token") from exc

    # -------------------------------------- signup --------------------------------------
    def signup(self, username: str, email: str, password: str) -> SignupResult:
        name = (username or "").strip()
        if not name:
            raise InvalidInputError("Username is required")
        address = normalize_email(email)
        if not address:
            raise InvalidInputError("Email is required")
        raw_password = self._check_password(password)
        if self.repository.get_account_by_email(address):
            raise AccountExistsError("Email already exists")
        token, expires_at = self._new_verification()
        try:
            account = self.repository.create_account(
                name,
                address,
                hash_password(raw_password),
                verification_token=token,
                verification_expires=expires_at,
            )
        except DuplicateEmailError as exc:
            # lost a race with a concurrent signup for the same address
            raise AccountExistsError("Email already exists") from exc
        email_sent = self._send_verification(address, token)
        logger.info("Account %s signed up", account.id)
        return SignupResult(account=account, verification_token=token, email_sent=email_sent)

    # -------------------------------------- login --------------------------------------
    def login(self, email: str, password: str) -> LoginResult:
        address = normalize_email(email)
        if not address or not password:
            raise InvalidInputError("Email and password required")
        account = self.repository.get_account_by_email(address)
        if not account or not verify_password(password, account.password_hash):
            logger.warning("Failed login attempt for %s", address)
            raise InvalidCredentialsError("Invalid credentials")
        return LoginResult(token=self.tokens.issue(account.id), account=account)

    # -------------------------------------- verification --------------------------------------
    def verify_email(self, token: str) -> Account:
        token_value = (token or "").strip()
        if not token_value:
            raise TokenInvalidError("Invalid or expired token")
        account = self.repository.get_account_by_verification_token(token_value)
        if not account:
            raise TokenInvalidError("Invalid or expired token")
        if self._token_expired(account.email_verification_expires, self._now()):
            self.repository.clear_verification_token(account.id)
            raise TokenInvalidError("Invalid or expired token")
        self.repository.mark_verified(account.id)
        logger.info("Account %s verified its email", account.id)
        return self._require_account(account.id)

    def resend_verification(self, account_id: str) -> str:
        account = self._require_account(account_id)
        if account.is_email_verified:
            raise AlreadyVerifiedError("Email already verified")
        token, expires_at = self._new_verification()
        self.repository.set_verification_token(account_id, token, expires_at)
        self._send_verification(account.email, token)
        return token

    # -------------------------------------- account maintenance --------------------------------------
    def update_profile(self, account_id: str, username: Optional[str] = None, email: Optional[str] = None) -> Account:
        account = self._require_account(account_id)
        name = None
        if username is not None:
            name = username.strip()
            if not name:
                raise InvalidInputError("Username must not be empty")
        address = None
        if email is not None:
            address = normalize_email(email)
            if not address:
                raise InvalidInputError("Email must not be empty")
            if address == account.email:
                address = None
            else:
                other = self.repository.get_account_by_email(address)
                if other and other.id != account_id:
                    raise AccountExistsError("Email already exists")
        token = expires_at = None
        if address is not None:
            # a new address has to be proven again
            token, expires_at = self._new_verification()
        try:
            updated = self.repository.update_profile(
                account_id,
                username=name,
                email=address,
                verification_token=token,
                verification_expires=expires_at,
            )
        except DuplicateEmailError as exc:
            raise AccountExistsError("Email already exists") from exc
        if token is not None:
            self._send_verification(address, token)
        return updated

    def change_password(self, account_id: str, old_password: str, new_password: str) -> None:
        account = self._require_account(account_id)
        if not verify_password(old_password, account.password_hash):
            raise InvalidCredentialsError("Old password incorrect")
        raw_password = self._check_password(new_password)
        self.repository.update_password(account_id, hash_password(raw_password))
        logger.info("Account %s changed its password", account_id)

    def delete_account(self, account_id: str) -> None:
        if not self.repository.delete_account(account_id):
            raise AccountNotFoundError(account_id)
        logger.info("Account %s deleted", account_id)
