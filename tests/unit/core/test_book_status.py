"""Unit tests for the book status enumeration."""

import pytest

from src.library.core.types.book_status import STORED_STATUSES, BookStatus


class TestBookStatus:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("available", BookStatus.AVAILABLE),
            ("Available", BookStatus.AVAILABLE),
            (" NotAvailable ", BookStatus.NOT_AVAILABLE),
            ("rented", BookStatus.RENTED),
            ("RENTED", BookStatus.RENTED),
        ],
    )
    def test_parse_is_case_insensitive(self, raw, expected):
        assert BookStatus.parse(raw) is expected

    def test_parse_unknown_value(self):
        with pytest.raises(ValueError):
            BookStatus.parse("missing")

    def test_stored_spelling(self):
        assert [status.stored for status in BookStatus] == list(STORED_STATUSES)
        assert BookStatus.NOT_AVAILABLE.stored == "NotAvailable"
        assert BookStatus.RENTED.value == "rented"
