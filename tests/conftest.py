from __future__ import annotations

import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# make the package importable when tests run from a plain checkout
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from wallet_api.app import create_app  # noqa: E402
from wallet_api.core.config import Settings  # noqa: E402
from wallet_api.core.mailer import Mailer  # noqa: E402
from wallet_api.db.create_tables import create_all  # noqa: E402
from wallet_api.services.context import ServiceContext  # noqa: E402


class RecordingMailer(Mailer):
    """Keeps outgoing messages in memory instead of talking to SMTP."""

    def __init__(self, settings: Settings) -> None:
        super().__init__(settings)
        self.sent: list[dict] = []

    def send(self, subject, to_email, html_body, text_body=None) -> bool:
        self.sent.append({"subject": subject, "to": to_email, "html": html_body, "text": text_body})
        return True


@pytest.fixture()
def settings(tmp_path):
    """Settings pointing at a throwaway SQLite file."""
    return Settings(
        database_url=f"sqlite:///{tmp_path / 'test.db'}",
        jwt_secret="test-secret",
        log_level="WARNING",
    )


@pytest.fixture()
def mailer(settings):
    return RecordingMailer(settings)


@pytest.fixture()
def services(settings, mailer):
    ctx = ServiceContext.build(settings, mailer=mailer)
    create_all(ctx.database)
    yield ctx
    ctx.database.dispose()


@pytest.fixture()
def client(services):
    app = create_app(services.settings, services)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def signup_and_login(client):
    """Register an account and return its Authorization header."""

    def _make(email: str = "alice@example.com", password: str = "secret123", username: str = "alice") -> dict:
        resp = client.post("/api/auth/signup", json={"username": username, "email": email, "password": password})
        assert resp.status_code == 201, resp.text
        resp = client.post("/api/auth/login", json={"email": email, "password": password})
        assert resp.status_code == 200, resp.text
        return {"Authorization": f"Bearer {resp.json()['token']}"}

    return _make
