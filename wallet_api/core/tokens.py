"""Signed, time-limited identity tokens (JWT)."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt


class InvalidTokenError(Exception):
    """Raised when a token is malformed, tampered with or expired."""


class TokenService:
    """Issues and verifies bearer tokens carrying the account id."""

    CLAIM = "userId"

    def __init__(self, secret: str, algorithm: str = "HS256", ttl_seconds: int = 7 * 24 * 60 * 60) -> None:
        if not secret:
            raise ValueError("token secret must not be empty")
        self._secret = secret
        self._algorithm = algorithm
        self._ttl = max(1, int(ttl_seconds))

    def issue(self, account_id: str, *, now: datetime | None = None) -> str:
        issued_at = now or datetime.now(timezone.utc)
        claims = {
            self.CLAIM: account_id,
            "iat": int(issued_at.timestamp()),
            "exp": int((issued_at + timedelta(seconds=self._ttl)).timestamp()),
        }
        return jwt.encode(claims, self._secret, algorithm=self._algorithm)

    def decode(self, token: str | None) -> str:
        if not token:
            raise InvalidTokenError("Token missing")
        try:
            claims = jwt.decode(token, self._secret, algorithms=[self._algorithm])
        except JWTError as exc:
            raise InvalidTokenError(str(exc)) from exc
        account_id = claims.get(self.CLAIM)
        if not account_id or not isinstance(account_id, str):
            raise InvalidTokenError("Token carries no account id")
        return account_id
