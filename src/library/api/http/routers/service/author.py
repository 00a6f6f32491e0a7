"""Author API router."""

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field
from sqlmodel import Session

from src.library.api.http.deps import get_author_repository, get_db_session
from src.library.core.errors import NotFoundError
from src.library.core.services.query.filters import AuthorFilter
from src.library.entities import Author, AuthorDetail, AuthorRepository

router = APIRouter(prefix="/api/author", tags=["author"])


class CreateAuthor(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    country: str = Field(max_length=100)
    birth_date: str = Field(max_length=100)


class CreatedAuthorBody(BaseModel):
    info: Author
    id: str


class AuthorsBody(BaseModel):
    authors: list[Author]


class GetAuthorBody(BaseModel):
    author: AuthorDetail


@router.get("", response_model=AuthorsBody)
def list_authors(
    name: str | None = Query(default=None),
    country: str | None = Query(default=None),
    birth_date: str | None = Query(default=None),
    repository: AuthorRepository = Depends(get_author_repository),
) -> AuthorsBody:
    filters = AuthorFilter.from_params(name=name, country=country, birth_date=birth_date)
    return AuthorsBody(authors=repository.list(filters))


@router.post("/create", response_model=CreatedAuthorBody, status_code=201)
def create_author(
    payload: CreateAuthor,
    session: Session = Depends(get_db_session),
    repository: AuthorRepository = Depends(get_author_repository),
) -> CreatedAuthorBody:
    author = repository.create(Author(**payload.model_dump()))
    session.commit()
    return CreatedAuthorBody(info=author, id=author.id)


@router.get("/{author_id}", response_model=GetAuthorBody)
def get_author(
    author_id: str,
    repository: AuthorRepository = Depends(get_author_repository),
) -> GetAuthorBody:
    """Get an author together with the names of their books."""
    detail = repository.get_detail(author_id)
    if detail is None:
        raise NotFoundError("Author", author_id)
    return GetAuthorBody(author=detail)
