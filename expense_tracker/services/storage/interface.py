"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for storage operations.
This allows us to:
1. Point the tracker at SQLite, PostgreSQL or MySQL without touching
   the repository
2. Substitute a fake in tests of higher layers
3. Keep report formatting decoupled from SQL

The interface is intentionally small: the tracker only ever adds, reads
and deletes expenses. There is no update.
"""

from abc import ABC, abstractmethod
from datetime import date
from typing import Optional

from expense_tracker.models.expense import Expense


class ExpenseStorageInterface(ABC):
    """
    Abstract interface for expense storage operations.

    Implementations open their connection lazily, guarantee the schema
    exists before every operation and release the connection on close().
    """

    @abstractmethod
    def ensure_schema(self) -> None:
        """
        Create the expenses table if it does not exist.

        Must be safe to call on every invocation.
        """
        pass

    @abstractmethod
    def add_expense(self, amount: str, memo: str, created_on: date) -> Expense:
        """
        Insert one expense.

        Args:
            amount: Amount as entered by the user (parsed by the store)
            memo: Description of the expense
            created_on: Date to record the expense under

        Returns:
            The stored expense, including its assigned id

        Raises:
            ConstraintViolationError: If amount is not a positive number
                or memo is empty
        """
        pass

    @abstractmethod
    def list_expenses(self) -> list[Expense]:
        """
        List every expense, oldest first (ties broken by id).
        """
        pass

    @abstractmethod
    def search_expenses(self, pattern: Optional[str]) -> list[Expense]:
        """
        List expenses whose memo contains pattern, ignoring case.

        An empty or missing pattern matches every expense.
        """
        pass

    @abstractmethod
    def delete_expense(self, expense_id) -> Optional[Expense]:
        """
        Delete an expense by id.

        The presence check and the delete run in one transaction.

        Returns:
            The deleted expense, or None if there was nothing to delete
        """
        pass

    @abstractmethod
    def delete_all_expenses(self) -> int:
        """
        Delete every expense and restart the id sequence.

        Both steps run in one transaction.

        Returns:
            Number of expenses deleted
        """
        pass

    @abstractmethod
    def close(self) -> None:
        """Release every connection held by this storage."""
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class ConstraintViolationError(StorageError):
    """A write violated a data invariant enforced by the store."""
    pass


class StorageConnectionError(StorageError):
    """Could not connect to storage backend."""
    pass
