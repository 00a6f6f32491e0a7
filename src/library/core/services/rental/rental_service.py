"""Rental transaction engine.

Renting checks the user, the book and its availability, flips the book to
``Rented`` and appends a ledger record, all inside one database transaction.
Isolation comes from the store: the book row is read ``FOR UPDATE`` and the
status change is a conditional UPDATE whose row count is verified before the
ledger insert. SQLite engines built by ``create_db_engine`` open every
transaction with ``BEGIN IMMEDIATE``, which serializes concurrent writers.
"""

from __future__ import annotations

from datetime import date

from loguru import logger
from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from src.library.core.errors import (
    BookUnavailableError,
    LibraryError,
    NotFoundError,
    StoreError,
    ValidationError,
)
from src.library.core.types.book_status import BookStatus
from src.library.entities.service.book.table import BookTable
from src.library.entities.service.rental import (
    RentalReceipt,
    RentalRecord,
    RentalRepository,
)
from src.library.entities.service.user.table import UserTable

RENTED_MESSAGE = "successfully book rented"


def parse_due_date(value: str) -> str:
    """Validate ``value`` as an ISO calendar date and return it canonicalized."""
    try:
        return date.fromisoformat(value.strip()).isoformat()
    except (AttributeError, ValueError) as exc:
        raise ValidationError(f"Invalid due_date '{value}', expected YYYY-MM-DD") from exc


class RentalService:
    """Rents books to users as a single atomic unit of work."""

    def __init__(self, session: Session) -> None:
        self._session = session
        self._rentals = RentalRepository(session)

    def rent_book(self, nation_id: str, book_name: str, due_date: str) -> RentalReceipt:
        """Rent ``book_name`` to the user ``nation_id``.

        The rental runs in a fresh transaction. Objects added or modified but
        not yet flushed are refused rather than committed with the rental. A
        transaction already open on the session, including work the caller
        has flushed, is committed before the rental starts.

        Args:
            nation_id: Business key of the renting user.
            book_name: Business key of the book.
            due_date: Due date as ``YYYY-MM-DD``.

        Returns:
            The created ledger record and a confirmation message.

        Raises:
            ValidationError: ``due_date`` is not a calendar date.
            NotFoundError: The user or the book does not exist.
            BookUnavailableError: The book is rented or not available.
            StoreError: The transaction could not be completed, or the session
                holds unflushed changes.
        """
        due = parse_due_date(due_date)

        if self._session.new or self._session.dirty or self._session.deleted:
            raise StoreError("Session has unsaved changes; commit them before renting")
        if self._session.in_transaction():
            self._session.commit()

        with logger.contextualize(nation_id=nation_id, book_name=book_name):
            try:
                record = self._rent_in_transaction(nation_id, book_name, due)
                self._session.commit()
            except LibraryError as exc:
                self._session.rollback()
                event = (
                    "rental.conflict" if isinstance(exc, BookUnavailableError) else "rental.rejected"
                )
                logger.bind(error_type=type(exc).__name__).info(event)
                raise
            except SQLAlchemyError as exc:
                self._session.rollback()
                logger.bind(error_type=type(exc).__name__).error("rental.store_error")
                raise StoreError(f"Could not rent book '{book_name}'") from exc

            logger.bind(rental_id=record.id, due_date=due).info("rental.success")
            return RentalReceipt(message=RENTED_MESSAGE, info=record)

    def _rent_in_transaction(self, nation_id: str, book_name: str, due_date: str) -> RentalRecord:
        session = self._session

        user_id = session.exec(
            select(UserTable.id).where(UserTable.nation_id == nation_id)
        ).first()
        if user_id is None:
            raise NotFoundError("User", nation_id)

        status = session.exec(
            select(BookTable.status).where(BookTable.name == book_name).with_for_update()
        ).first()
        if status is None:
            raise NotFoundError("Book", book_name)
        if BookStatus.parse(status) is not BookStatus.AVAILABLE:
            raise BookUnavailableError(book_name, BookStatus.parse(status).value)

        result = session.execute(
            update(BookTable)
            .where(BookTable.name == book_name)
            .where(BookTable.status == BookStatus.AVAILABLE.stored)
            .values(status=BookStatus.RENTED.stored)
        )
        if result.rowcount != 1:
            raise BookUnavailableError(book_name)

        return self._rentals.create(
            RentalRecord(nation_id=nation_id, book_name=book_name, due_date=due_date)
        )
