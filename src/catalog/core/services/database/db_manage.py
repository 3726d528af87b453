"""Schema management for the product store."""

from loguru import logger
from sqlmodel import SQLModel

from catalog.core.services.database.db_session import DbSessionService


class DbManageService:
    def __init__(self, database_service: DbSessionService):
        self._engine = database_service.engine

    def ensure_schema(self) -> None:
        """Create the Product table if it does not exist yet.

        Safe to call repeatedly. Connection or DDL errors propagate so the
        process fails to start.
        """
        from catalog.entities.product import ProductTable  # noqa: F401

        SQLModel.metadata.create_all(self._engine)
        logger.info("Database schema ensured")
