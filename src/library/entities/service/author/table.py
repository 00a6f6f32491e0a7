"""Author database table model."""

from sqlmodel import Field

from src.library.entities.core._base import EntityTable


class AuthorTable(EntityTable, table=True):
    """Persistence model for authors; ``name`` is the business key."""

    __tablename__ = "author"

    name: str = Field(max_length=255, unique=True, index=True, nullable=False)
    country: str = Field(max_length=100, nullable=False)
    birth_date: str = Field(max_length=100, nullable=False)
