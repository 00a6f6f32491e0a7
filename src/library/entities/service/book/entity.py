"""Entity: Book."""

from typing import Any

from pydantic import Field, field_validator

from src.library.core.types.book_status import BookStatus
from src.library.entities.core._base import Entity


class Book(Entity):
    """A book, identified by the business key ``name``.

    ``author`` holds the name of an existing author. ``status`` serializes with
    the lower-case wire spelling.
    """

    name: str = Field(min_length=1, max_length=255, description="Unique book name")
    year: int = Field(description="Publication year")
    category: str = Field(max_length=100, description="Category")
    status: BookStatus = Field(default=BookStatus.AVAILABLE, description="Availability")
    author: str = Field(max_length=100, description="Name of the book's author")

    @field_validator("status", mode="before")
    @classmethod
    def _parse_status(cls, value: Any) -> Any:
        if isinstance(value, str):
            return BookStatus.parse(value)
        return value

    def __eq__(self, other: Any) -> bool:
        """Compare books by business attributes, ignoring timestamps."""
        if not isinstance(other, Book):
            return False

        return (
            self.id == other.id
            and self.name == other.name
            and self.year == other.year
            and self.category == other.category
            and self.status == other.status
            and self.author == other.author
        )

    def __hash__(self) -> int:
        return hash((self.id, self.name, self.year, self.category, self.status, self.author))
