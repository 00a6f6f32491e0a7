"""Book availability status with its wire and storage spellings."""

from __future__ import annotations

from enum import Enum


class BookStatus(str, Enum):
    """Availability of a book.

    Values are the lower-case wire spelling used in JSON bodies and query
    strings. The relational layer stores the capitalized spelling returned by
    :attr:`stored`. Parsing accepts either spelling, case-insensitively.
    """

    AVAILABLE = "available"
    NOT_AVAILABLE = "notavailable"
    RENTED = "rented"

    @property
    def stored(self) -> str:
        """Spelling persisted in the ``book.status`` column."""
        return _STORED[self]

    @classmethod
    def parse(cls, value: str | BookStatus) -> BookStatus:
        """Parse a wire or storage spelling; raises ``ValueError`` if unknown."""
        if isinstance(value, cls):
            return value
        return cls(value)

    @classmethod
    def _missing_(cls, value: object) -> BookStatus | None:
        if isinstance(value, str):
            folded = value.strip().lower()
            for member in cls:
                if member.value == folded:
                    return member
        return None


_STORED = {
    BookStatus.AVAILABLE: "Available",
    BookStatus.NOT_AVAILABLE: "NotAvailable",
    BookStatus.RENTED: "Rented",
}

STORED_STATUSES = tuple(_STORED.values())
