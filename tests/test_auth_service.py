from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from wallet_api.core.security import verify_password
from wallet_api.core.utils import utcnow
from wallet_api.repositories.sql_repository import AccountNotFoundError
from wallet_api.services.auth_service import (
    AccountExistsError,
    AlreadyVerifiedError,
    InvalidCredentialsError,
    InvalidInputError,
    TokenInvalidError,
    UnauthenticatedError,
)


def test_token_expired_respects_timezone_offset(services):
    svc = services.auth
    now = svc._now()
    expires = datetime.now(timezone(timedelta(hours=-3))) + timedelta(minutes=15)

    assert svc._token_expired(expires, now) is False

    assert svc._token_expired(expires - timedelta(hours=1), now) is True
    # SQLite hands back naive datetimes; they are read as UTC
    assert svc._token_expired(expires.astimezone(timezone.utc).replace(tzinfo=None), now) is False


def test_signup_normalizes_email_and_hashes_password(services, mailer):
    result = services.auth.signup("  Alice ", "  Alice@Example.COM ", "secret123")

    account = services.repository.get_account(result.account.id)
    assert account.username == "Alice"
    assert account.email == "alice@example.com"
    assert account.password_hash != "secret123"
    assert verify_password("secret123", account.password_hash)
    assert account.is_email_verified is False
    assert account.email_verification_token == result.verification_token
    assert result.email_sent is True
    assert mailer.sent[-1]["to"] == "alice@example.com"
    assert result.verification_token in mailer.sent[-1]["text"]


def test_signup_with_used_email_conflicts_and_creates_nothing(services):
    first = services.auth.signup("alice", "alice@example.com", "secret123")

    with pytest.raises(AccountExistsError):
        services.auth.signup("other", "ALICE@example.com", "another-pass")

    account = services.repository.get_account_by_email("alice@example.com")
    assert account.id == first.account.id
    assert account.username == "alice"


def test_signup_rejects_short_password(services):
    with pytest.raises(InvalidInputError):
        services.auth.signup("bob", "bob@example.com", "123")
    assert services.repository.get_account_by_email("bob@example.com") is None


def test_login_succeeds_only_with_matching_password(services):
    created = services.auth.signup("alice", "alice@example.com", "secret123").account

    result = services.auth.login("Alice@example.com", "secret123")
    assert result.account.id == created.id
    assert services.auth.authenticate(result.token) == created.id

    with pytest.raises(InvalidCredentialsError):
        services.auth.login("alice@example.com", "wrong-pass")
    with pytest.raises(InvalidCredentialsError):
        services.auth.login("nobody@example.com", "secret123")
    with pytest.raises(InvalidInputError):
        services.auth.login("", "")


def test_authenticate_rejects_missing_and_garbage_tokens(services):
    with pytest.raises(UnauthenticatedError) as missing:
        services.auth.authenticate(None)
    assert missing.value.message == "No token provided"
    with pytest.raises(UnauthenticatedError) as garbage:
        services.auth.authenticate("not-a-jwt")
    assert garbage.value.message == "Invalid token"


def test_verify_email_is_single_use(services):
    result = services.auth.signup("alice", "alice@example.com", "secret123")

    account = services.auth.verify_email(result.verification_token)
    assert account.is_email_verified is True
    assert account.email_verification_token is None
    assert account.email_verification_expires is None

    with pytest.raises(TokenInvalidError):
        services.auth.verify_email(result.verification_token)


def test_verify_email_rejects_expired_token_and_clears_it(services, monkeypatch):
    result = services.auth.signup("alice", "alice@example.com", "secret123")
    monkeypatch.setattr(services.auth, "_now", lambda: utcnow() + timedelta(hours=1))

    with pytest.raises(TokenInvalidError):
        services.auth.verify_email(result.verification_token)

    account = services.repository.get_account(result.account.id)
    assert account.is_email_verified is False
    assert account.email_verification_token is None


def test_resend_verification_replaces_token(services):
    result = services.auth.signup("alice", "alice@example.com", "secret123")

    token = services.auth.resend_verification(result.account.id)

    assert token != result.verification_token
    with pytest.raises(TokenInvalidError):
        services.auth.verify_email(result.verification_token)
    services.auth.verify_email(token)
    with pytest.raises(AlreadyVerifiedError):
        services.auth.resend_verification(result.account.id)


def test_update_profile_changes_fields_and_guards_email(services):
    alice = services.auth.signup("alice", "alice@example.com", "secret123")
    services.auth.signup("bob", "bob@example.com", "secret123")
    services.auth.verify_email(alice.verification_token)

    updated = services.auth.update_profile(alice.account.id, username="alice2")
    assert updated.username == "alice2"
    assert updated.email == "alice@example.com"
    assert updated.is_email_verified is True

    with pytest.raises(AccountExistsError):
        services.auth.update_profile(alice.account.id, email="BOB@example.com")

    moved = services.auth.update_profile(alice.account.id, email="new@example.com")
    assert moved.email == "new@example.com"
    assert moved.is_email_verified is False
    assert moved.email_verification_token


def test_email_change_resets_verification_in_the_profile_update(services, monkeypatch):
    alice = services.auth.signup("alice", "alice@example.com", "secret123")
    services.auth.verify_email(alice.verification_token)

    def fail(*args, **kwargs):
        raise RuntimeError("separate write")

    monkeypatch.setattr(services.repository, "set_verification_token", fail)
    moved = services.auth.update_profile(alice.account.id, email="new@example.com")

    stored = services.repository.get_account(alice.account.id)
    assert stored.email == "new@example.com"
    assert stored.is_email_verified is False
    assert stored.email_verification_token == moved.email_verification_token
    assert services.repository.get_account_by_verification_token(moved.email_verification_token).id == alice.account.id


def test_change_password_requires_old_password(services):
    account = services.auth.signup("alice", "alice@example.com", "secret123").account

    with pytest.raises(InvalidCredentialsError):
        services.auth.change_password(account.id, "wrong-pass", "newsecret")

    services.auth.change_password(account.id, "secret123", "newsecret")
    services.auth.login("alice@example.com", "newsecret")
    with pytest.raises(InvalidCredentialsError):
        services.auth.login("alice@example.com", "secret123")


def test_delete_account_removes_it(services):
    account = services.auth.signup("alice", "alice@example.com", "secret123").account

    services.auth.delete_account(account.id)

    assert services.repository.get_account(account.id) is None
    with pytest.raises(AccountNotFoundError):
        services.auth.delete_account(account.id)
