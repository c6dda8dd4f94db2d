"""Explicitly constructed bundle of the app's long-lived collaborators."""

from __future__ import annotations

from dataclasses import dataclass

from wallet_api.core.config import Settings
from wallet_api.core.mailer import Mailer
from wallet_api.core.tokens import TokenService
from wallet_api.db.session import Database
from wallet_api.repositories.sql_repository import SQLRepository
from wallet_api.services.auth_service import AuthService
from wallet_api.services.transaction_service import TransactionService
from wallet_api.services.wallet_service import WalletService


@dataclass
class ServiceContext:
    settings: Settings
    database: Database
    repository: SQLRepository
    auth: AuthService
    wallet: WalletService
    transactions: TransactionService

    @classmethod
    def build(cls, settings: Settings, database: Database | None = None, mailer: Mailer | None = None) -> "ServiceContext":
        database = database or Database(settings.database_url)
        repository = SQLRepository(database)
        tokens = TokenService(settings.jwt_secret, settings.jwt_algorithm, settings.token_ttl_seconds)
        return cls(
            settings=settings,
            database=database,
            repository=repository,
            auth=AuthService(settings, repository, tokens, mailer or Mailer(settings)),
            wallet=WalletService(repository),
            transactions=TransactionService(repository),
        )
