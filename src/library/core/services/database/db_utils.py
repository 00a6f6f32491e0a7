from typing import Literal

from loguru import logger
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session

from src.library.core.errors import DuplicateEntityError, NotFoundError, StoreError

IntegrityKind = Literal["unique", "foreign_key", "other"]

# SQLSTATE codes reported by PostgreSQL drivers
_UNIQUE_VIOLATION = "23505"
_FOREIGN_KEY_VIOLATION = "23503"


def integrity_kind(exc: IntegrityError) -> IntegrityKind:
    """Classify an ``IntegrityError`` as a unique or foreign-key violation."""
    orig = exc.orig
    sqlstate = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if sqlstate == _UNIQUE_VIOLATION:
        return "unique"
    if sqlstate == _FOREIGN_KEY_VIOLATION:
        return "foreign_key"

    message = str(orig).lower()
    if "unique" in message or "duplicate key" in message:
        return "unique"
    if "foreign key" in message:
        return "foreign_key"
    return "other"


def flush_or_raise(
    session: Session,
    *,
    entity: str,
    key: str,
    reference: tuple[str, str] | None = None,
) -> None:
    """Flush pending inserts, translating constraint failures into domain errors.

    On failure the session is rolled back so no partial row survives.

    Args:
        session: Session holding the pending row.
        entity: Entity name used in the error message.
        key: Business key of the row being written.
        reference: ``(entity, key)`` of the row a foreign key points to, reported
            as :class:`NotFoundError` on a foreign-key violation.
    """
    try:
        session.flush()
    except IntegrityError as exc:
        session.rollback()
        kind = integrity_kind(exc)
        logger.info("Insert rejected by constraint", entity=entity, key=key, kind=kind)
        if kind == "unique":
            raise DuplicateEntityError(entity, key) from exc
        if kind == "foreign_key" and reference is not None:
            raise NotFoundError(*reference) from exc
        raise StoreError(f"Could not store {entity} '{key}'") from exc
    except SQLAlchemyError as exc:
        session.rollback()
        logger.error(
            "Database write failed",
            entity=entity,
            error_type=type(exc).__name__,
            error_message=str(exc),
        )
        raise StoreError(f"Could not store {entity} '{key}'") from exc
