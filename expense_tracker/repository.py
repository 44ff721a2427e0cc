"""
Expense Repository

This module ties storage, report rendering and audit logging together
and defines the operations the command line exposes:
1. list - every expense, oldest first
2. add - record a new expense dated today
3. search - expenses whose memo contains a pattern
4. delete - one expense by id
5. clear - every expense, restarting the id sequence

DESIGN DECISION: Every operation is one unit of work. Storage is opened
on demand, the schema is checked, the statements run, the report is
printed and the storage is closed again, whatever the outcome.

The repository never exits the process. Storage failures are logged and
returned as a failed OperationResult; the dispatcher decides what the
exit status is.
"""

from datetime import date
from typing import Callable, Iterable, Optional

from expense_tracker.audit import AuditLogger
from expense_tracker.models.audit import AuditEvent, AuditEventBuilder
from expense_tracker.models.expense import Operation, OperationResult
from expense_tracker.reports import ReportFormatter
from expense_tracker.services.storage import ExpenseStorageInterface, StorageError


EXPENSE_ADDED = "Expense added."
EXPENSE_DELETED = "The following expense has been deleted:"
ALL_DELETED = "All expenses have been deleted."


def not_found_message(expense_id) -> str:
    shown = "" if expense_id is None else expense_id
    return f"There is no expense with the id '{shown}'."


class ExpenseRepository:
    """
    Runs expense operations against a storage backend and prints reports.

    Every public method returns an OperationResult.
    """

    def __init__(
        self,
        storage: ExpenseStorageInterface,
        output: Callable[[str], None] = print,
        audit_logger: Optional[AuditLogger] = None,
        formatter: Optional[ReportFormatter] = None,
        today: Callable[[], date] = date.today,
    ):
        """
        Initialize the repository.

        Args:
            storage: Where expenses are kept
            output: Sink for report lines (stdout by default)
            audit_logger: Receives one event per significant action.
                         If None, nothing is audited.
            formatter: Report renderer
            today: Clock used to date new expenses
        """
        self._storage = storage
        self._output = output
        self._audit_logger = audit_logger
        self._formatter = formatter or ReportFormatter()
        self._today = today

    def _emit(self, lines: Iterable[str]) -> None:
        for line in lines:
            self._output(line)

    def _audit(self, event: AuditEvent) -> None:
        if self._audit_logger:
            self._audit_logger.log(event)

    def _run(
        self,
        operation: Operation,
        action: Callable[[], OperationResult],
    ) -> OperationResult:
        """Run one unit of work, turning storage failures into a result."""
        try:
            return action()
        except StorageError as e:
            self._audit(AuditEventBuilder.storage_error(operation.value, e))
            return OperationResult.failure(operation, e)
        finally:
            self._storage.close()

    # =========================================================================
    # OPERATIONS
    # =========================================================================

    def ensure_schema(self) -> OperationResult:
        """Create the expenses table if it is missing."""
        def action() -> OperationResult:
            self._storage.ensure_schema()
            return OperationResult(operation=Operation.ENSURE_SCHEMA)

        return self._run(Operation.ENSURE_SCHEMA, action)

    def list(self) -> OperationResult:
        """Print every expense, oldest first."""
        def action() -> OperationResult:
            expenses = self._storage.list_expenses()
            self._emit(self._formatter.render(expenses))
            self._audit(AuditEventBuilder.expenses_listed(len(expenses)))
            return OperationResult(operation=Operation.LIST, expenses=expenses)

        return self._run(Operation.LIST, action)

    def add(self, amount: str, memo: str) -> OperationResult:
        """
        Record a new expense dated today.

        The amount is handed to storage as given; a non-positive or
        malformed amount fails at insertion.
        """
        def action() -> OperationResult:
            expense = self._storage.add_expense(amount, memo, self._today())
            self._emit([EXPENSE_ADDED, self._formatter.render_row(expense)])
            self._audit(AuditEventBuilder.expense_added(expense.id, expense.amount))
            return OperationResult(
                operation=Operation.ADD,
                expenses=[expense],
                message=EXPENSE_ADDED,
            )

        return self._run(Operation.ADD, action)

    def search(self, pattern: Optional[str]) -> OperationResult:
        """Print expenses whose memo contains pattern, ignoring case."""
        pattern = pattern or ""

        def action() -> OperationResult:
            expenses = self._storage.search_expenses(pattern)
            self._emit(self._formatter.render(expenses))
            self._audit(AuditEventBuilder.expenses_searched(pattern, len(expenses)))
            return OperationResult(operation=Operation.SEARCH, expenses=expenses)

        return self._run(Operation.SEARCH, action)

    def delete_by_id(self, expense_id) -> OperationResult:
        """
        Delete one expense.

        A missing id is reported to the user but is not a failure.
        """
        def action() -> OperationResult:
            deleted = self._storage.delete_expense(expense_id)

            if deleted is None:
                message = not_found_message(expense_id)
                self._emit([message])
                self._audit(AuditEventBuilder.expense_not_found(expense_id))
                return OperationResult(
                    operation=Operation.DELETE,
                    message=message,
                    not_found=True,
                )

            self._emit([EXPENSE_DELETED])
            self._emit(self._formatter.render([deleted]))
            self._audit(AuditEventBuilder.expense_deleted(deleted.id, deleted.amount))
            return OperationResult(
                operation=Operation.DELETE,
                expenses=[deleted],
                message=EXPENSE_DELETED,
            )

        return self._run(Operation.DELETE, action)

    def delete_all(self) -> OperationResult:
        """Delete every expense and restart ids at 1. Irreversible."""
        def action() -> OperationResult:
            deleted_count = self._storage.delete_all_expenses()
            self._emit([ALL_DELETED])
            self._audit(AuditEventBuilder.expenses_cleared(deleted_count))
            return OperationResult(operation=Operation.CLEAR, message=ALL_DELETED)

        return self._run(Operation.CLEAR, action)
