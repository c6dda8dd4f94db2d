"""Utility script to create the database schema."""
from __future__ import annotations

from sqlalchemy.exc import SQLAlchemyError

from wallet_api.core.config import get_settings
from wallet_api.core.log import configure_logging

from .session import Base, Database
from . import models  # noqa: F401  # ensure models are imported for metadata


def create_all(database: Database) -> None:
    Base.metadata.create_all(bind=database.engine)


if __name__ == "__main__":
    settings = get_settings()
    logger = configure_logging(settings.log_level)
    try:
        create_all(Database(settings.database_url))
        logger.info("Database tables created successfully.")
    except SQLAlchemyError as exc:
        raise SystemExit(f"Failed to create tables: {exc}") from exc
