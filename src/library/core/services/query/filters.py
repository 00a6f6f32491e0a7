"""Filter models and the query translator backing the list endpoints.

Each filter model carries only optional fields. ``apply_filters`` turns the
fields that are set into equality predicates joined with AND, so a model with
nothing set leaves the statement unfiltered. Values are always bound as
parameters.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Self, TypeVar

from loguru import logger
from pydantic import BaseModel, ConfigDict, field_validator
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.sql import Select

from src.library.core.errors import ValidationError
from src.library.core.types.book_status import BookStatus

SelectT = TypeVar("SelectT", bound=Select)


class QueryFilter(BaseModel):
    """Base class for list filters; every field must be optional."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    @classmethod
    def from_params(cls, **params: Any) -> Self:
        """Build a filter from raw request values.

        ``None`` means the filter is absent. Malformed values raise
        :class:`ValidationError` carrying every offending field.
        """
        try:
            return cls.model_validate(params)
        except PydanticValidationError as exc:
            fields = ", ".join(
                ".".join(str(part) for part in error["loc"]) for error in exc.errors()
            )
            raise ValidationError(f"Invalid filter value for: {fields}") from exc

    def criteria(self) -> dict[str, Any]:
        """Return the provided filters as storage values keyed by field name."""
        return self.model_dump(exclude_none=True)


class BookFilter(QueryFilter):
    name: str | None = None
    year: int | None = None
    category: str | None = None
    status: BookStatus | None = None
    author: str | None = None

    @field_validator("status", mode="before")
    @classmethod
    def _parse_status(cls, value: Any) -> Any:
        if value is None or isinstance(value, BookStatus):
            return value
        try:
            return BookStatus.parse(value)
        except ValueError as exc:
            raise ValueError(f"unknown status '{value}'") from exc

    def criteria(self) -> dict[str, Any]:
        values = super().criteria()
        if self.status is not None:
            values["status"] = self.status.stored
        return values


class AuthorFilter(QueryFilter):
    name: str | None = None
    country: str | None = None
    birth_date: str | None = None


class UserFilter(QueryFilter):
    """Filters over users resolved through their rental history."""

    user_name: str | None = None
    book_name: str | None = None


def apply_filters(
    statement: SelectT,
    columns: Mapping[str, Any],
    filters: QueryFilter,
) -> SelectT:
    """Add one equality predicate per provided filter to ``statement``.

    Args:
        statement: The base ``SELECT`` to narrow.
        columns: Maps each filter field name to the column it compares against.
        filters: The filter model; unset fields produce no clause.

    Returns:
        The narrowed statement. Predicates accumulate with AND semantics.
    """
    criteria = filters.criteria()
    missing = set(criteria) - set(columns)
    if missing:
        raise ValidationError(f"Unsupported filter field(s): {', '.join(sorted(missing))}")

    for field_name, value in criteria.items():
        statement = statement.where(columns[field_name] == value)

    logger.debug(
        "Applied list filters",
        filter_type=type(filters).__name__,
        fields=sorted(criteria),
    )
    return statement
