"""Rental ledger repository."""

from sqlmodel import Session, select

from src.library.core.services.database.db_utils import flush_or_raise
from src.library.entities.service.user.table import UserTable

from .entity import RentalRecord, UserHistoryRow
from .table import RentalTable


class RentalRepository:
    """Append-only access to the rental ledger."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def create(self, record: RentalRecord) -> RentalRecord:
        row = RentalTable.model_validate(record, from_attributes=True)
        self._session.add(row)
        flush_or_raise(
            self._session,
            entity="RentalRecord",
            key=f"{record.nation_id}/{record.book_name}",
        )
        return RentalRecord.model_validate(row, from_attributes=True)

    def history(self, nation_id: str) -> list[UserHistoryRow]:
        """Return the rentals of ``nation_id`` joined with the user's name."""
        statement = (
            select(UserTable.name, RentalTable.nation_id, RentalTable.book_name, RentalTable.due_date)
            .join(UserTable, UserTable.nation_id == RentalTable.nation_id)
            .where(RentalTable.nation_id == nation_id)
            .order_by(RentalTable.created_at)
        )
        return [
            UserHistoryRow(name=name, nation_id=nid, book_name=book_name, due_date=due_date)
            for name, nid, book_name, due_date in self._session.exec(statement).all()
        ]
