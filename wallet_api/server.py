"""Run the wallet API with uvicorn, creating the schema first."""
from __future__ import annotations

import uvicorn
from dotenv import load_dotenv

from wallet_api.app import create_app
from wallet_api.core.config import get_settings
from wallet_api.db.create_tables import create_all
from wallet_api.services.context import ServiceContext


def main() -> None:
    load_dotenv()
    get_settings.cache_clear()
    settings = get_settings()
    services = ServiceContext.build(settings)
    create_all(services.database)
    app = create_app(settings, services)
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
