"""Entity: RentalRecord."""

from typing import Any

from pydantic import BaseModel, Field

from src.library.entities.core._base import Entity


class RentalRecord(Entity):
    """One rental event linking a user to a book.

    Records are created only by the rental service and never change afterwards.
    """

    nation_id: str = Field(max_length=100, description="Renting user's nation id")
    book_name: str = Field(max_length=255, description="Rented book's name")
    due_date: str = Field(max_length=100, description="Due date, YYYY-MM-DD")

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, RentalRecord):
            return False

        return (
            self.id == other.id
            and self.nation_id == other.nation_id
            and self.book_name == other.book_name
            and self.due_date == other.due_date
        )

    def __hash__(self) -> int:
        return hash((self.id, self.nation_id, self.book_name, self.due_date))


class UserHistoryRow(BaseModel):
    """A rental record joined with the renting user's name."""

    name: str
    nation_id: str
    book_name: str
    due_date: str


class RentalReceipt(BaseModel):
    """Confirmation returned by a successful rental."""

    message: str
    info: RentalRecord
