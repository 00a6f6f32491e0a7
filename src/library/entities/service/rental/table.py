"""Rental history database table model."""

from sqlmodel import Field

from src.library.entities.core._base import EntityTable


class RentalTable(EntityTable, table=True):
    """Persistence model for the ``users_history`` rental ledger."""

    __tablename__ = "users_history"

    nation_id: str = Field(
        max_length=100, foreign_key="users.nation_id", index=True, nullable=False
    )
    book_name: str = Field(
        max_length=255, foreign_key="book.name", index=True, nullable=False
    )
    due_date: str = Field(max_length=100, nullable=False)
