"""Unit tests for the database engine, session service and write helpers."""

from pathlib import Path

import pytest
from sqlalchemy import StaticPool, inspect, text
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlmodel import Session, select

from src.library.core.errors import DuplicateEntityError, StoreError
from src.library.core.services.database.db_manage import DbManageService
from src.library.core.services.database.db_session import DbSessionService, create_db_engine
from src.library.core.services.database.db_utils import flush_or_raise, integrity_kind
from src.library.entities import AuthorTable
from src.library.runtime.config.config_data import DatabaseConfig


class TestCreateDbEngine:
    def test_sqlite_foreign_keys_enabled(self):
        engine = create_db_engine("sqlite:///:memory:", poolclass=StaticPool)
        with engine.connect() as connection:
            assert connection.execute(text("PRAGMA foreign_keys")).scalar() == 1
        engine.dispose()

    def test_create_all_is_idempotent(self, engine):
        DbManageService(engine).create_all()

        tables = set(inspect(engine).get_table_names())
        assert {"author", "book", "users", "users_history"} <= tables

    def test_writer_waits_for_lock(self, tmp_path: Path):
        """A second writer cannot start while the first holds the lock."""
        engine = create_db_engine(f"sqlite:///{tmp_path / 'lock.db'}", lock_timeout=0.1)
        DbManageService(engine).create_all()

        with engine.connect() as first, engine.connect() as second:
            first.execute(text("SELECT 1"))
            with pytest.raises(OperationalError, match="locked"):
                second.execute(text("SELECT 1"))
            first.rollback()
        engine.dispose()


class TestDbSessionService:
    def test_from_config(self, tmp_path: Path):
        config = DatabaseConfig(url=f"sqlite:///{tmp_path / 'cfg.db'}", lock_timeout=1)
        service = DbSessionService(config)

        assert service.health_check() is True
        assert service.engine.dialect.name == "sqlite"
        service.dispose()

    def test_session_scope_commits(self, db_service: DbSessionService):
        with db_service.session_scope() as session:
            session.add(AuthorTable(name="Orwell", country="UK", birth_date="1903"))

        with db_service.session_scope() as session:
            assert session.exec(select(AuthorTable)).one().name == "Orwell"

    def test_session_scope_rolls_back(self, db_service: DbSessionService):
        with pytest.raises(RuntimeError):
            with db_service.session_scope() as session:
                session.add(AuthorTable(name="Orwell", country="UK", birth_date="1903"))
                session.flush()
                raise RuntimeError("boom")

        with db_service.session_scope() as session:
            assert session.exec(select(AuthorTable)).all() == []

    def test_pool_status(self, db_service: DbSessionService):
        status = db_service.get_pool_status()

        assert set(status) == {"size", "checked_in", "checked_out", "overflow"}


class TestFlushOrRaise:
    def test_duplicate_becomes_domain_error(self, session: Session):
        session.add(AuthorTable(name="Orwell", country="UK", birth_date="1903"))
        session.commit()

        session.add(AuthorTable(name="Orwell", country="FR", birth_date="1900"))
        with pytest.raises(DuplicateEntityError, match="Orwell"):
            flush_or_raise(session, entity="Author", key="Orwell")

        assert not session.new

    def test_other_failures_become_store_errors(self, session: Session):
        session.add(AuthorTable(name="Orwell", country=None, birth_date="1903"))

        with pytest.raises(StoreError):
            flush_or_raise(session, entity="Author", key="Orwell")

    @pytest.mark.parametrize(
        ("message", "kind"),
        [
            ("UNIQUE constraint failed: author.name", "unique"),
            ("duplicate key value violates unique constraint", "unique"),
            ("FOREIGN KEY constraint failed", "foreign_key"),
            ("NOT NULL constraint failed: author.country", "other"),
        ],
    )
    def test_integrity_kind_from_message(self, message, kind):
        exc = IntegrityError("INSERT", {}, Exception(message))

        assert integrity_kind(exc) == kind

