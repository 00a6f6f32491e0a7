"""Domain error taxonomy shared by repositories, services and the HTTP layer."""


class LibraryError(Exception):
    """Base exception for library service errors."""

    code = "library_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(LibraryError):
    """Malformed input such as a non-integer year or an unknown status."""

    code = "validation_error"


class NotFoundError(LibraryError):
    """A referenced author, book, user or rental record does not exist."""

    code = "not_found"

    def __init__(self, entity: str, key: str) -> None:
        super().__init__(f"{entity} '{key}' not found")
        self.entity = entity
        self.key = key


class ConflictError(LibraryError):
    """The request conflicts with the current state of the store."""

    code = "conflict"


class BookUnavailableError(ConflictError):
    """The book is rented or not available for rental."""

    code = "book_unavailable"

    def __init__(self, book_name: str, status: str | None = None) -> None:
        detail = f"Book '{book_name}' is not available"
        if status is not None:
            detail = f"{detail} (status: {status})"
        super().__init__(detail)
        self.book_name = book_name
        self.status = status


class DuplicateEntityError(ConflictError):
    """A row with the same business key already exists."""

    code = "duplicate"

    def __init__(self, entity: str, key: str) -> None:
        super().__init__(f"{entity} '{key}' already exists")
        self.entity = entity
        self.key = key


class StoreError(LibraryError):
    """Connectivity or transaction failure in the persistence layer."""

    code = "store_error"
