"""FastAPI dependency implementations."""

from __future__ import annotations

from collections.abc import Iterator

from fastapi import Depends, Request
from sqlmodel import Session

from src.library.api.http.app_data import ApplicationDependencies
from src.library.core.services.rental.rental_service import RentalService
from src.library.entities import AuthorRepository, BookRepository, RentalRepository, UserRepository


def get_db_session(request: Request) -> Iterator[Session]:
    """Yield a request-scoped database session and close it afterwards."""
    app_deps: ApplicationDependencies = request.app.state.app_dependencies
    session = app_deps.database_service.get_session()
    try:
        yield session
    finally:
        session.close()


def get_author_repository(session: Session = Depends(get_db_session)) -> AuthorRepository:
    return AuthorRepository(session)


def get_book_repository(session: Session = Depends(get_db_session)) -> BookRepository:
    return BookRepository(session)


def get_user_repository(session: Session = Depends(get_db_session)) -> UserRepository:
    return UserRepository(session)


def get_rental_repository(session: Session = Depends(get_db_session)) -> RentalRepository:
    return RentalRepository(session)


def get_rental_service(session: Session = Depends(get_db_session)) -> RentalService:
    """Get the rental service bound to the request's session."""
    return RentalService(session)
