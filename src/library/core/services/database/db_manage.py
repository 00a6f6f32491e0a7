"""Schema management for the library database."""

from loguru import logger
from sqlalchemy.engine import Engine
from sqlmodel import SQLModel


class DbManageService:
    def __init__(self, engine: Engine):
        self._engine = engine

    def create_all(self) -> None:
        """Create all library tables; existing tables are left untouched."""
        from src.library.entities import (  # noqa: F401
            AuthorTable,
            BookTable,
            RentalTable,
            UserTable,
        )

        SQLModel.metadata.create_all(self._engine)
        logger.info("Database initialized with tables.", tables=sorted(SQLModel.metadata.tables))

    def drop_all(self) -> None:
        """Drop all library tables."""
        SQLModel.metadata.drop_all(self._engine)
        logger.warning("Dropped all library tables")
