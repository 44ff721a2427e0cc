"""Services package."""

from expense_tracker.services.storage import (
    ConstraintViolationError,
    ExpenseRecord,
    ExpenseStorageInterface,
    SQLExpenseStorage,
    StorageConnectionError,
    StorageError,
)

__all__ = [
    # Storage services
    "ConstraintViolationError",
    "ExpenseRecord",
    "ExpenseStorageInterface",
    "SQLExpenseStorage",
    "StorageConnectionError",
    "StorageError",
]
