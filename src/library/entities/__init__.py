"""Library entities, organized by business concept.

Each entity package contains:
- entity.py: Domain model validated at the service boundary
- table.py: Database persistence model
- repository.py: Data access layer over an injected session
"""

from .service.author import Author, AuthorDetail, AuthorRepository, AuthorTable
from .service.book import Book, BookRepository, BookTable
from .service.rental import (
    RentalReceipt,
    RentalRecord,
    RentalRepository,
    RentalTable,
    UserHistoryRow,
)
from .service.user import User, UserRentalRow, UserRepository, UserTable

__all__ = [
    "Author",
    "AuthorDetail",
    "AuthorRepository",
    "AuthorTable",
    "Book",
    "BookRepository",
    "BookTable",
    "RentalReceipt",
    "RentalRecord",
    "RentalRepository",
    "RentalTable",
    "UserHistoryRow",
    "User",
    "UserRentalRow",
    "UserRepository",
    "UserTable",
]
