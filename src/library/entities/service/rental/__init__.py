"""Entity package: RentalRecord, the append-only ``users_history`` ledger."""

from .entity import RentalReceipt, RentalRecord, UserHistoryRow
from .repository import RentalRepository
from .table import RentalTable

__all__ = [
    "RentalReceipt",
    "RentalRecord",
    "RentalRepository",
    "RentalTable",
    "UserHistoryRow",
]
