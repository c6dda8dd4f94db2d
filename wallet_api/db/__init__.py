"""Database helpers (engine/session export)."""

from .session import Base, Database
from .create_tables import create_all

__all__ = ["Base", "Database", "create_all"]
