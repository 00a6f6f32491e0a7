"""Unit tests for the rental transaction engine."""

import threading

import pytest
from sqlmodel import Session, select

from src.library.core.errors import (
    BookUnavailableError,
    ConflictError,
    NotFoundError,
    StoreError,
    ValidationError,
)
from src.library.core.services.database.db_session import DbSessionService
from src.library.core.services.rental.rental_service import (
    RENTED_MESSAGE,
    RentalService,
    parse_due_date,
)
from src.library.core.types.book_status import BookStatus
from src.library.entities import (
    AuthorTable,
    Book,
    BookRepository,
    BookTable,
    RentalRecord,
    RentalTable,
)


def _book_status(session: Session, name: str) -> str:
    session.expire_all()
    return session.exec(select(BookTable.status).where(BookTable.name == name)).one()


def _ledger(session: Session) -> list[RentalRecord]:
    rows = session.exec(select(RentalTable).order_by(RentalTable.created_at)).all()
    return [RentalRecord.model_validate(row, from_attributes=True) for row in rows]


class TestParseDueDate:
    def test_valid_date(self):
        assert parse_due_date(" 2024-01-01 ") == "2024-01-01"

    @pytest.mark.parametrize("raw", ["", "tomorrow", "2024-13-01", "2024-02-30"])
    def test_invalid_date(self, raw):
        with pytest.raises(ValidationError, match="due_date"):
            parse_due_date(raw)


class TestRentBook:
    """Renting within a single session."""

    @pytest.fixture(autouse=True)
    def _seed(self, session: Session, seed_library):
        self.seeded = seed_library(session)

    def test_successful_rent(self, session: Session):
        receipt = RentalService(session).rent_book("U1", "1984", "2024-01-01")

        assert receipt.message == RENTED_MESSAGE == "successfully book rented"
        assert receipt.info.nation_id == "U1"
        assert receipt.info.book_name == "1984"
        assert receipt.info.due_date == "2024-01-01"
        assert _book_status(session, "1984") == "Rented"
        assert BookRepository(session).get_by_name("1984").status is BookStatus.RENTED
        assert _ledger(session) == [receipt.info]

    def test_second_rent_conflicts(self, session: Session):
        service = RentalService(session)
        service.rent_book("U1", "1984", "2024-01-01")

        with pytest.raises(BookUnavailableError) as exc_info:
            service.rent_book("U1", "1984", "2024-02-01")

        assert isinstance(exc_info.value, ConflictError)
        assert len(_ledger(session)) == 1

    def test_rent_refreshes_updated_at(self, session: Session):
        def updated_at():
            session.expire_all()
            return session.exec(
                select(BookTable.updated_at).where(BookTable.name == "1984")
            ).one()

        before = updated_at()
        RentalService(session).rent_book("U1", "1984", "2024-01-01")

        assert updated_at() > before

    def test_unsaved_changes_refused(self, session: Session):
        """Pending objects are never committed as a side effect of renting."""
        session.add(AuthorTable(name="Huxley", country="UK", birth_date="1894-07-26"))

        with pytest.raises(StoreError, match="unsaved changes"):
            RentalService(session).rent_book("U1", "1984", "2024-01-01")

        session.rollback()
        assert _book_status(session, "1984") == "Available"
        assert _ledger(session) == []
        assert session.exec(select(AuthorTable.name)).all() == ["Orwell"]

    def test_not_available_book_leaves_store_unchanged(self, session: Session):
        BookRepository(session).create(
            Book(
                name="Burmese Days",
                year=1934,
                category="Novel",
                status=BookStatus.NOT_AVAILABLE,
                author="Orwell",
            )
        )
        session.commit()

        with pytest.raises(BookUnavailableError, match="notavailable"):
            RentalService(session).rent_book("U1", "Burmese Days", "2024-01-01")

        assert _book_status(session, "Burmese Days") == "NotAvailable"
        assert session.exec(select(RentalTable)).all() == []

    def test_unknown_user(self, session: Session):
        with pytest.raises(NotFoundError) as exc_info:
            RentalService(session).rent_book("U9", "1984", "2024-01-01")

        assert exc_info.value.entity == "User"
        assert _book_status(session, "1984") == "Available"

    def test_unknown_book(self, session: Session):
        with pytest.raises(NotFoundError) as exc_info:
            RentalService(session).rent_book("U1", "Homage to Catalonia", "2024-01-01")

        assert exc_info.value.entity == "Book"
        assert session.exec(select(RentalTable)).all() == []

    def test_invalid_due_date_writes_nothing(self, session: Session):
        with pytest.raises(ValidationError):
            RentalService(session).rent_book("U1", "1984", "01/01/2024")

        assert _book_status(session, "1984") == "Available"
        assert session.exec(select(RentalTable)).all() == []


class TestConcurrentRent:
    """Two sessions racing for the same book on a file-backed database."""

    def test_exactly_one_rent_succeeds(self, file_db_service: DbSessionService, seed_library):
        with file_db_service.session_scope() as session:
            seed_library(session)

        barrier = threading.Barrier(2)
        outcomes: list[object] = []
        lock = threading.Lock()

        def attempt(nation_id: str) -> None:
            session = file_db_service.get_session()
            try:
                barrier.wait()
                result: object = RentalService(session).rent_book(
                    nation_id, "1984", "2024-01-01"
                )
            except ConflictError as exc:
                result = exc
            finally:
                session.close()
            with lock:
                outcomes.append(result)

        threads = [threading.Thread(target=attempt, args=("U1",)) for _ in range(2)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=30)

        conflicts = [o for o in outcomes if isinstance(o, BookUnavailableError)]
        assert len(outcomes) == 2
        assert len(conflicts) == 1

        with file_db_service.session_scope() as session:
            assert _book_status(session, "1984") == "Rented"
            assert len(session.exec(select(RentalTable)).all()) == 1
