"""User repository."""

from sqlmodel import Session, select

from src.library.core.services.database.db_utils import flush_or_raise
from src.library.core.services.query.filters import UserFilter, apply_filters
from src.library.entities.service.rental.table import RentalTable

from .entity import User, UserRentalRow
from .table import UserTable


class UserRepository:
    """Data-access layer for library users."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def create(self, user: User) -> User:
        row = UserTable.model_validate(user, from_attributes=True)
        self._session.add(row)
        flush_or_raise(self._session, entity="User", key=user.nation_id)
        return User.model_validate(row, from_attributes=True)

    def get(self, user_id: str) -> User | None:
        row = self._session.get(UserTable, user_id)
        if row is None:
            return None
        return User.model_validate(row, from_attributes=True)

    def get_by_nation_id(self, nation_id: str) -> User | None:
        statement = select(UserTable).where(UserTable.nation_id == nation_id)
        row = self._session.exec(statement).first()
        if row is None:
            return None
        return User.model_validate(row, from_attributes=True)

    def list(self, filters: UserFilter | None = None) -> list[UserRentalRow]:
        """List users through their rental history.

        Users are matched by joining ``users_history`` on ``nation_id``, so a
        user appears once per rental and users without rentals are not listed.
        """
        statement = (
            select(UserTable.nation_id, UserTable.name, RentalTable.book_name)
            .join(RentalTable, RentalTable.nation_id == UserTable.nation_id)
        )
        statement = apply_filters(
            statement,
            {"user_name": UserTable.name, "book_name": RentalTable.book_name},
            filters or UserFilter(),
        ).order_by(UserTable.name, RentalTable.book_name, RentalTable.created_at)

        return [
            UserRentalRow(nation_id=nation_id, user_name=name, book_name=book_name)
            for nation_id, name, book_name in self._session.exec(statement).all()
        ]
