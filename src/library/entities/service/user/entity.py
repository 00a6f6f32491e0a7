"""Entity: User."""

from typing import Any

from pydantic import BaseModel, Field

from src.library.entities.core._base import Entity


class User(Entity):
    """A library user, identified by the business key ``nation_id``."""

    nation_id: str = Field(min_length=1, max_length=100, description="National identity number")
    name: str = Field(max_length=100, description="Full name")

    def __eq__(self, other: Any) -> bool:
        """Compare users by business attributes, ignoring timestamps."""
        if not isinstance(other, User):
            return False

        return (
            self.id == other.id
            and self.nation_id == other.nation_id
            and self.name == other.name
        )

    def __hash__(self) -> int:
        return hash((self.id, self.nation_id, self.name))


class UserRentalRow(BaseModel):
    """One row of the filtered user listing: a user and a book they rented."""

    nation_id: str
    user_name: str
    book_name: str
