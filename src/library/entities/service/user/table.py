"""User database table model."""

from sqlmodel import Field

from src.library.entities.core._base import EntityTable


class UserTable(EntityTable, table=True):
    """Persistence model for library users; ``nation_id`` is the business key."""

    __tablename__ = "users"

    nation_id: str = Field(max_length=100, unique=True, index=True, nullable=False)
    name: str = Field(max_length=100, nullable=False)
