"""Book API router."""

from typing import Any

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field, field_validator
from sqlmodel import Session

from src.library.api.http.deps import get_book_repository, get_db_session
from src.library.core.errors import NotFoundError
from src.library.core.services.query.filters import BookFilter
from src.library.core.types.book_status import BookStatus
from src.library.entities import Book, BookRepository

router = APIRouter(prefix="/api/book", tags=["book"])


class CreateBook(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    year: int
    category: str = Field(max_length=100)
    status: BookStatus = BookStatus.AVAILABLE
    author: str = Field(max_length=100)

    @field_validator("status", mode="before")
    @classmethod
    def _parse_status(cls, value: Any) -> Any:
        if isinstance(value, str):
            return BookStatus.parse(value)
        return value

    @field_validator("status")
    @classmethod
    def _not_rented(cls, value: BookStatus) -> BookStatus:
        if value is BookStatus.RENTED:
            raise ValueError("a new book cannot be rented; rent it instead")
        return value


class CreatedBookBody(BaseModel):
    info: Book
    id: str


class BooksBody(BaseModel):
    books: list[Book]


class GetBookBody(BaseModel):
    book: Book


@router.get("", response_model=BooksBody)
def list_books(
    name: str | None = Query(default=None),
    year: str | None = Query(default=None),
    category: str | None = Query(default=None),
    status: str | None = Query(default=None),
    author: str | None = Query(default=None),
    repository: BookRepository = Depends(get_book_repository),
) -> BooksBody:
    """List books matching every provided filter."""
    filters = BookFilter.from_params(
        name=name, year=year, category=category, status=status, author=author
    )
    return BooksBody(books=repository.list(filters))


@router.post("/create", response_model=CreatedBookBody, status_code=201)
def create_book(
    payload: CreateBook,
    session: Session = Depends(get_db_session),
    repository: BookRepository = Depends(get_book_repository),
) -> CreatedBookBody:
    """Create a book for an existing author."""
    book = repository.create(Book(**payload.model_dump()))
    session.commit()
    return CreatedBookBody(info=book, id=book.id)


@router.get("/{book_id}", response_model=GetBookBody)
def get_book(
    book_id: str,
    repository: BookRepository = Depends(get_book_repository),
) -> GetBookBody:
    """Get a book by id."""
    book = repository.get(book_id)
    if book is None:
        raise NotFoundError("Book", book_id)
    return GetBookBody(book=book)
