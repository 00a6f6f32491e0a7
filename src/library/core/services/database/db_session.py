"""Database engine and session factory used across the application."""

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from loguru import logger
from sqlalchemy import event, text
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, create_engine

from src.library.runtime.config.config_data import DatabaseConfig
from src.library.runtime.context import get_config


def _enable_sqlite_locking(engine: Engine) -> None:
    """Make SQLite transactions take the write lock up front.

    pysqlite's own transaction handling is switched off so that every
    transaction SQLAlchemy begins is a ``BEGIN IMMEDIATE``. Concurrent writers
    queue on the database lock for up to the driver ``timeout`` instead of
    upgrading a shared lock mid-transaction.
    """

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection: Any, _record: Any) -> None:
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(conn: Any) -> None:
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def create_db_engine(url: str, *, lock_timeout: float = 20.0, **engine_kwargs: Any) -> Engine:
    """Create an engine for ``url`` with the locking behaviour renting relies on.

    Args:
        url: SQLAlchemy database URL.
        lock_timeout: Seconds a SQLite connection waits on a locked database.
        **engine_kwargs: Passed through to ``create_engine``.
    """
    backend = make_url(url).get_backend_name()
    if backend == "sqlite":
        connect_args = engine_kwargs.pop("connect_args", {})
        connect_args.setdefault("check_same_thread", False)
        connect_args.setdefault("timeout", lock_timeout)
        engine = create_engine(url, connect_args=connect_args, **engine_kwargs)
        _enable_sqlite_locking(engine)
        return engine
    return create_engine(url, **engine_kwargs)


class DbSessionService:
    def __init__(self, config: DatabaseConfig | None = None, *, engine: Engine | None = None):
        """Initialize the shared database engine and session factory.

        Args:
            config: Database settings; the active configuration when omitted.
            engine: A pre-built engine, used as-is instead of ``config``.
        """
        if engine is not None:
            self._engine = engine
            return

        db_config = config or get_config().database
        logger.info("Setting up database engine and session factory")

        engine_kwargs: dict[str, Any] = {
            "pool_pre_ping": True,
            "echo": db_config.echo,
        }
        if db_config.is_sqlite:
            if db_config.environment_mode == "production":
                logger.warning(
                    "SQLite is not recommended for production use. "
                    "Consider PostgreSQL for better concurrency."
                )
        else:
            engine_kwargs.update(
                {
                    "pool_size": db_config.pool_size,
                    "max_overflow": db_config.max_overflow,
                    "pool_timeout": db_config.pool_timeout,
                    "pool_recycle": db_config.pool_recycle,
                    "connect_args": {"application_name": "library_api", "connect_timeout": 30},
                }
            )

        self._engine = create_db_engine(
            db_config.connection_string,
            lock_timeout=db_config.lock_timeout,
            **engine_kwargs,
        )
        logger.info(
            "Database engine initialized",
            backend=self._engine.dialect.name,
            url=self._engine.url.render_as_string(hide_password=True),
        )

    @property
    def engine(self) -> Engine:
        return self._engine

    def get_session(self) -> Session:
        """Return a new SQLModel session bound to the shared engine."""
        return Session(self._engine, expire_on_commit=False, autoflush=True)

    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        """Yield a session that commits on success and rolls back on error."""
        db = self.get_session()
        try:
            yield db
            db.commit()
        except Exception as e:
            db.rollback()
            logger.error(
                "Database transaction failed",
                error_type=type(e).__name__,
                error_message=str(e),
            )
            raise
        finally:
            db.close()

    def health_check(self) -> bool:
        """Perform a health check on the database connection."""
        try:
            with self._engine.connect() as connection:
                connection.execute(text("SELECT 1"))
                return True
        except SQLAlchemyError as e:
            logger.error(
                "Database health check failed",
                error_type=type(e).__name__,
                error_message=str(e),
            )
            return False

    def get_pool_status(self) -> dict:
        """Get current connection pool status for monitoring."""
        pool = self._engine.pool
        return {
            "size": getattr(pool, "size", lambda: 0)(),
            "checked_in": getattr(pool, "checkedin", lambda: 0)(),
            "checked_out": getattr(pool, "checkedout", lambda: 0)(),
            "overflow": getattr(pool, "overflow", lambda: 0)(),
        }

    def dispose(self) -> None:
        self._engine.dispose()
