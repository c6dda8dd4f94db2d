"""
Persistence adapters.

Services depend on the repository instead of touching SQLAlchemy sessions
directly.
"""

from .sql_repository import (
    AccountNotFoundError,
    DuplicateEmailError,
    InsufficientBalanceError,
    RepositoryError,
    SQLRepository,
)

__all__ = [
    "AccountNotFoundError",
    "DuplicateEmailError",
    "InsufficientBalanceError",
    "RepositoryError",
    "SQLRepository",
]
