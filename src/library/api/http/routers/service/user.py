"""User API router, including the rent operation."""

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field
from sqlmodel import Session

from src.library.api.http.deps import (
    get_db_session,
    get_rental_repository,
    get_rental_service,
    get_user_repository,
)
from src.library.core.errors import NotFoundError
from src.library.core.services.query.filters import UserFilter
from src.library.core.services.rental.rental_service import RentalService
from src.library.entities import (
    RentalReceipt,
    RentalRepository,
    User,
    UserHistoryRow,
    UserRentalRow,
    UserRepository,
)

router = APIRouter(prefix="/api/user", tags=["user"])


class CreateUser(BaseModel):
    nation_id: str = Field(min_length=1, max_length=100)
    name: str = Field(max_length=100)


class RentBook(BaseModel):
    book_name: str = Field(min_length=1, max_length=255)
    due_date: str


class CreatedUserBody(BaseModel):
    info: User
    id: str


class UsersBody(BaseModel):
    users: list[UserRentalRow]


class GetUserBody(BaseModel):
    user: list[UserHistoryRow]


@router.get("", response_model=UsersBody)
def list_users(
    user_name: str | None = Query(default=None),
    book_name: str | None = Query(default=None),
    repository: UserRepository = Depends(get_user_repository),
) -> UsersBody:
    """List users with the books they rented."""
    filters = UserFilter.from_params(user_name=user_name, book_name=book_name)
    return UsersBody(users=repository.list(filters))


@router.post("/create", response_model=CreatedUserBody, status_code=201)
def create_user(
    payload: CreateUser,
    session: Session = Depends(get_db_session),
    repository: UserRepository = Depends(get_user_repository),
) -> CreatedUserBody:
    user = repository.create(User(**payload.model_dump()))
    session.commit()
    return CreatedUserBody(info=user, id=user.id)


@router.post(
    "/rent/{nation_id}",
    response_model=RentalReceipt,
    status_code=201,
)
def rent_book(
    nation_id: str,
    payload: RentBook,
    service: RentalService = Depends(get_rental_service),
) -> RentalReceipt:
    """Rent a book to the user identified by ``nation_id``."""
    return service.rent_book(nation_id, payload.book_name, payload.due_date)


@router.get("/{nation_id}", response_model=GetUserBody)
def get_user_history(
    nation_id: str,
    users: UserRepository = Depends(get_user_repository),
    rentals: RentalRepository = Depends(get_rental_repository),
) -> GetUserBody:
    """Return the rental history of a user; empty if they never rented."""
    if users.get_by_nation_id(nation_id) is None:
        raise NotFoundError("User", nation_id)
    return GetUserBody(user=rentals.history(nation_id))
