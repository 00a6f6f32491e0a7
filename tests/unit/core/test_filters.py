"""Unit tests for the list filter models and query translator."""

import pytest
from sqlmodel import select

from src.library.core.errors import ValidationError
from src.library.core.services.query.filters import (
    AuthorFilter,
    BookFilter,
    UserFilter,
    apply_filters,
)
from src.library.core.types.book_status import BookStatus
from src.library.entities import BookTable

BOOK_COLUMNS = {
    "name": BookTable.name,
    "year": BookTable.year,
    "category": BookTable.category,
    "status": BookTable.status,
    "author": BookTable.author,
}


class TestFilterModels:
    """Parsing raw request values into filter models."""

    def test_absent_values_are_not_criteria(self):
        filters = BookFilter.from_params(name=None, year=None, status=None)

        assert filters.criteria() == {}

    def test_year_is_coerced_to_int(self):
        assert BookFilter.from_params(year="1949").criteria() == {"year": 1949}

    def test_non_integer_year_rejected(self):
        with pytest.raises(ValidationError, match="year"):
            BookFilter.from_params(year="nineteen")

    def test_status_maps_to_stored_spelling(self):
        filters = BookFilter.from_params(status="RENTED")

        assert filters.status is BookStatus.RENTED
        assert filters.criteria() == {"status": "Rented"}

    def test_unknown_status_rejected(self):
        with pytest.raises(ValidationError, match="status"):
            BookFilter.from_params(status="borrowed")

    def test_unknown_field_rejected(self):
        with pytest.raises(ValidationError, match="publisher"):
            BookFilter.from_params(publisher="Secker")

    def test_author_and_user_filters(self):
        assert AuthorFilter.from_params(country="UK").criteria() == {"country": "UK"}
        assert UserFilter.from_params(user_name="Alice", book_name=None).criteria() == {
            "user_name": "Alice"
        }


class TestApplyFilters:
    """Translating filters into WHERE clauses."""

    def test_no_filters_leaves_statement_unchanged(self):
        statement = select(BookTable)

        assert apply_filters(statement, BOOK_COLUMNS, BookFilter()).whereclause is None

    def test_filters_are_bound_parameters(self):
        statement = apply_filters(
            select(BookTable),
            BOOK_COLUMNS,
            BookFilter(name="1984'; DROP TABLE book; --", year=1949),
        )
        compiled = statement.compile()

        assert "DROP TABLE" not in str(compiled)
        assert "1984'; DROP TABLE book; --" in compiled.params.values()
        assert 1949 in compiled.params.values()

    def test_filters_combine_with_and(self):
        statement = apply_filters(
            select(BookTable), BOOK_COLUMNS, BookFilter(year=1949, status="rented")
        )

        where = str(statement.whereclause.compile())
        assert " AND " in where
        assert "book.year" in where
        assert "book.status" in where

    def test_unsupported_field_rejected(self):
        with pytest.raises(ValidationError, match="status"):
            apply_filters(
                select(BookTable),
                {"name": BookTable.name},
                BookFilter(name="1984", status="available"),
            )
