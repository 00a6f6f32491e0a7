"""Library rental service.

Tracks authors, books and users, and rents books to users through a single
atomic check-and-write transaction. The HTTP surface is a FastAPI application
backed by SQLModel tables.
"""

__version__ = "0.1.0"
