"""Book database table model."""

import sqlalchemy as sa
from sqlmodel import Field

from src.library.core.types.book_status import STORED_STATUSES
from src.library.entities.core._base import EntityTable

_STATUS_VALUES = ", ".join(f"'{value}'" for value in STORED_STATUSES)


class BookTable(EntityTable, table=True):
    """Persistence model for books.

    ``status`` holds the capitalized storage spelling and ``author`` references
    ``author.name``.
    """

    __tablename__ = "book"
    __table_args__ = (
        sa.CheckConstraint(f"status IN ({_STATUS_VALUES})", name="ck_book_status"),
    )

    name: str = Field(max_length=255, unique=True, index=True, nullable=False)
    year: int = Field(nullable=False)
    category: str = Field(max_length=100, nullable=False)
    status: str = Field(max_length=20, nullable=False, index=True)
    author: str = Field(
        max_length=255, foreign_key="author.name", index=True, nullable=False
    )
