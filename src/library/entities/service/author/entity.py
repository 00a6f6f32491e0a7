"""Entity: Author."""

from typing import Any

from pydantic import BaseModel, Field

from src.library.entities.core._base import Entity


class Author(Entity):
    """An author, identified by the business key ``name``."""

    name: str = Field(min_length=1, max_length=255, description="Unique author name")
    country: str = Field(max_length=100, description="Country of origin")
    birth_date: str = Field(max_length=100, description="Birth date as given")

    def __eq__(self, other: Any) -> bool:
        """Compare authors by business attributes, ignoring timestamps."""
        if not isinstance(other, Author):
            return False

        return (
            self.id == other.id
            and self.name == other.name
            and self.country == other.country
            and self.birth_date == other.birth_date
        )

    def __hash__(self) -> int:
        return hash((self.id, self.name, self.country, self.birth_date))


class AuthorDetail(BaseModel):
    """Author together with the names of the books referencing it."""

    name: str
    country: str
    birth_date: str
    books: list[str] = Field(default_factory=list)
