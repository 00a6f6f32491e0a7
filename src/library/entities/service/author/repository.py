"""Author repository."""

from sqlmodel import Session, select

from src.library.core.services.database.db_utils import flush_or_raise
from src.library.core.services.query.filters import AuthorFilter, apply_filters
from src.library.entities.service.book.table import BookTable

from .entity import Author, AuthorDetail
from .table import AuthorTable


class AuthorRepository:
    """Data-access layer for authors."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def create(self, author: Author) -> Author:
        row = AuthorTable.model_validate(author, from_attributes=True)
        self._session.add(row)
        flush_or_raise(self._session, entity="Author", key=author.name)
        return Author.model_validate(row, from_attributes=True)

    def get(self, author_id: str) -> Author | None:
        row = self._session.get(AuthorTable, author_id)
        if row is None:
            return None
        return Author.model_validate(row, from_attributes=True)

    def get_by_name(self, name: str) -> Author | None:
        statement = select(AuthorTable).where(AuthorTable.name == name)
        row = self._session.exec(statement).first()
        if row is None:
            return None
        return Author.model_validate(row, from_attributes=True)

    def get_detail(self, author_id: str) -> AuthorDetail | None:
        """Return the author with the names of its books, or ``None``."""
        author = self.get(author_id)
        if author is None:
            return None
        return AuthorDetail(
            name=author.name,
            country=author.country,
            birth_date=author.birth_date,
            books=self.book_names(author.name),
        )

    def book_names(self, author_name: str) -> list[str]:
        statement = (
            select(BookTable.name)
            .where(BookTable.author == author_name)
            .order_by(BookTable.name)
        )
        return list(self._session.exec(statement).all())

    def list(self, filters: AuthorFilter | None = None) -> list[Author]:
        """List authors matching every provided filter."""
        statement = apply_filters(
            select(AuthorTable),
            {
                "name": AuthorTable.name,
                "country": AuthorTable.country,
                "birth_date": AuthorTable.birth_date,
            },
            filters or AuthorFilter(),
        ).order_by(AuthorTable.name)
        rows = self._session.exec(statement).all()
        return [Author.model_validate(row, from_attributes=True) for row in rows]
