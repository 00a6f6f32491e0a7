"""Entity package: Author."""

from .entity import Author, AuthorDetail
from .repository import AuthorRepository
from .table import AuthorTable

__all__ = ["Author", "AuthorDetail", "AuthorRepository", "AuthorTable"]
