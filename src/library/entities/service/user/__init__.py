"""Entity package: User.

Users are library patrons identified by ``nation_id``. Their rental history
lives in the ``rental`` package.
"""

from .entity import User, UserRentalRow
from .repository import UserRepository
from .table import UserTable

__all__ = ["User", "UserRentalRow", "UserRepository", "UserTable"]
