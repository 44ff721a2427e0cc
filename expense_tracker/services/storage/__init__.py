"""
Storage Services Package

Provides the abstract storage interface and the SQLAlchemy implementation
used for every supported database.
"""

from expense_tracker.services.storage.interface import (
    ConstraintViolationError,
    ExpenseStorageInterface,
    StorageConnectionError,
    StorageError,
)
from expense_tracker.services.storage.sql_storage import (
    ExpenseRecord,
    SQLExpenseStorage,
)

__all__ = [
    # Interfaces
    "ExpenseStorageInterface",
    # Exceptions
    "ConstraintViolationError",
    "StorageConnectionError",
    "StorageError",
    # SQL implementation
    "ExpenseRecord",
    "SQLExpenseStorage",
]
