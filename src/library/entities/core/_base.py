import uuid
from datetime import UTC, datetime

import sqlalchemy as sa
from pydantic import BaseModel
from pydantic import Field as PydanticField
from sqlmodel import Field, SQLModel


def utc_now() -> datetime:
    """Return current UTC datetime."""
    return datetime.now(UTC)


class Entity(BaseModel):
    """Base domain entity with a UUID surrogate id and audit timestamps."""

    id: str = PydanticField(
        default_factory=lambda: str(uuid.uuid4()),
        description="Opaque unique identifier",
    )

    created_at: datetime = PydanticField(default_factory=utc_now)
    updated_at: datetime = PydanticField(default_factory=utc_now)


class EntityTable(SQLModel, table=False):
    """Base table model; ``updated_at`` is refreshed on every UPDATE."""

    id: str = Field(
        primary_key=True,
        default_factory=lambda: str(uuid.uuid4()),
        description="Opaque unique identifier",
    )

    created_at: datetime = Field(
        default_factory=utc_now,
        sa_type=sa.DateTime(timezone=True),
        nullable=False,
    )
    updated_at: datetime = Field(
        default_factory=utc_now,
        sa_type=sa.DateTime(timezone=True),
        nullable=False,
        sa_column_kwargs={
            "server_default": sa.func.now(),
            "onupdate": utc_now,
        },
    )
