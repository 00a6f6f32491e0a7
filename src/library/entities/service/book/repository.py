"""Book repository."""

from sqlmodel import Session, select

from src.library.core.errors import NotFoundError, ValidationError
from src.library.core.services.database.db_utils import flush_or_raise
from src.library.core.services.query.filters import BookFilter, apply_filters
from src.library.core.types.book_status import BookStatus
from src.library.entities.service.author.table import AuthorTable

from .entity import Book
from .table import BookTable


def to_entity(row: BookTable) -> Book:
    """Map a table row to the domain entity, normalizing the status spelling."""
    return Book(**row.model_dump(exclude={"status"}), status=BookStatus.parse(row.status))


def to_row(book: Book) -> BookTable:
    return BookTable(**book.model_dump(exclude={"status"}), status=book.status.stored)


class BookRepository:
    """Data-access layer for books."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def create(self, book: Book) -> Book:
        """Insert a book; its author must already exist.

        A new book is never ``Rented``; only renting moves it to that status.
        """
        if book.status is BookStatus.RENTED:
            raise ValidationError(
                f"Book '{book.name}' cannot be created as rented; rent it instead"
            )

        author_exists = self._session.exec(
            select(AuthorTable.id).where(AuthorTable.name == book.author)
        ).first()
        if author_exists is None:
            raise NotFoundError("Author", book.author)

        row = to_row(book)
        self._session.add(row)
        flush_or_raise(
            self._session,
            entity="Book",
            key=book.name,
            reference=("Author", book.author),
        )
        return to_entity(row)

    def get(self, book_id: str) -> Book | None:
        row = self._session.get(BookTable, book_id)
        if row is None:
            return None
        return to_entity(row)

    def get_by_name(self, name: str) -> Book | None:
        row = self._session.exec(select(BookTable).where(BookTable.name == name)).first()
        if row is None:
            return None
        return to_entity(row)

    def list(self, filters: BookFilter | None = None) -> list[Book]:
        """List books matching every provided filter."""
        statement = apply_filters(
            select(BookTable),
            {
                "name": BookTable.name,
                "year": BookTable.year,
                "category": BookTable.category,
                "status": BookTable.status,
                "author": BookTable.author,
            },
            filters or BookFilter(),
        ).order_by(BookTable.name)
        return [to_entity(row) for row in self._session.exec(statement).all()]
