"""Database initialization script."""

from catalog.core.services.database import DbManageService, DbSessionService
from catalog.runtime.config.config_data import ConfigData
from catalog.runtime.context import get_config


def init_db(config: ConfigData | None = None) -> None:
    """Create the product table for the configured database."""
    config = config or get_config()
    database_service = DbSessionService(config.database, config.app.environment)
    try:
        DbManageService(database_service).ensure_schema()
    finally:
        database_service.dispose()


if __name__ == "__main__":
    init_db()
