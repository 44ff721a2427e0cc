"""
Command Dispatcher

Maps the command-line vocabulary onto exactly one repository operation:

    list                 print all expenses, oldest first
    add AMOUNT MEMO      record a new expense dated today
    search QUERY         print expenses whose memo contains QUERY
    delete ID            remove the expense with that id
    clear                delete everything (asks for confirmation)

Anything else prints the help text.

DESIGN DECISION: Only this layer knows about exit codes. Usage errors,
declined confirmations and missing ids exit 0; a failed repository
operation prints "Error: <message>" and exits 1.
"""

import sys
from typing import Callable, Optional, Sequence

from expense_tracker.audit import AuditLogger, configure_logging
from expense_tracker.config import get_settings
from expense_tracker.models.audit import AuditEventBuilder
from expense_tracker.models.expense import OperationResult
from expense_tracker.reports import ReportFormatter
from expense_tracker.repository import ExpenseRepository
from expense_tracker.services.storage import SQLExpenseStorage


EXIT_OK = 0
EXIT_FAILURE = 1

HELP_TEXT = """An expense recording system

Commands:

add AMOUNT MEMO - record a new expense
clear - delete all expenses
list - list all expenses
delete NUMBER - remove expense with id NUMBER
search QUERY - list expenses with a matching memo field"""

ADD_USAGE = "Usage error: add requires both an AMOUNT and a MEMO."
CLEAR_PROMPT = "Are you sure you want to delete all expenses? (y/n) "


class UsageError(Exception):
    """Required command-line arguments are missing."""
    pass


def _token(tokens: Sequence[str], index: int) -> Optional[str]:
    return tokens[index] if len(tokens) > index else None


class CommandDispatcher:
    """
    Translates an argument vector into one repository call.

    Flow:
    1. Token 0 picks the command
    2. Arguments are checked (add only)
    3. clear asks the user to confirm
    4. The repository runs the operation
    5. The result becomes an exit code
    """

    def __init__(
        self,
        repository: ExpenseRepository,
        prompt: Callable[[str], str] = input,
        output: Callable[[str], None] = print,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._repository = repository
        self._prompt = prompt
        self._output = output
        self._audit_logger = audit_logger

    def dispatch(self, tokens: Sequence[str]) -> int:
        """
        Run the command named by tokens[0].

        Returns the process exit code.
        """
        command = _token(tokens, 0)

        try:
            if command == "list":
                result = self._repository.list()
            elif command == "add":
                result = self._add(tokens)
            elif command == "search":
                result = self._repository.search(_token(tokens, 1))
            elif command == "delete":
                result = self._repository.delete_by_id(_token(tokens, 1))
            elif command == "clear":
                result = self._clear()
            else:
                self._output(HELP_TEXT)
                return EXIT_OK
        except UsageError as e:
            self._output(str(e))
            if self._audit_logger:
                self._audit_logger.log(AuditEventBuilder.usage_error(command, str(e)))
            return EXIT_OK

        return self._exit_code(result)

    def _add(self, tokens: Sequence[str]) -> OperationResult:
        amount = _token(tokens, 1)
        memo = _token(tokens, 2)
        if not amount or not memo:
            raise UsageError(ADD_USAGE)
        return self._repository.add(amount, memo)

    def _clear(self) -> Optional[OperationResult]:
        answer = self._confirm()
        if answer is None or answer.lower() != "y":
            if self._audit_logger:
                self._audit_logger.log(AuditEventBuilder.clear_declined(answer))
            return None
        return self._repository.delete_all()

    def _confirm(self) -> Optional[str]:
        """Ask before deleting everything. None when input is closed."""
        try:
            return self._prompt(CLEAR_PROMPT)
        except EOFError:
            return None

    def _exit_code(self, result: Optional[OperationResult]) -> int:
        if result is None or result.success:
            return EXIT_OK
        self._output(f"Error: {result.error_message}")
        return EXIT_FAILURE


def create_dispatcher() -> CommandDispatcher:
    """
    Build the dispatcher from environment configuration.

    Settings are resolved once here and passed down explicitly.
    """
    settings = get_settings()
    app_settings = settings.app
    configure_logging(app_settings.log_level, app_settings.log_format)

    audit_logger = AuditLogger()
    repository = ExpenseRepository(
        SQLExpenseStorage(settings.database),
        audit_logger=audit_logger,
        formatter=ReportFormatter(app_settings.date_format),
    )
    return CommandDispatcher(repository, audit_logger=audit_logger)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Console entry point."""
    if argv is None:
        argv = sys.argv[1:]

    try:
        dispatcher = create_dispatcher()
    except ValueError as e:
        print(f"Error: invalid configuration: {e}")
        return EXIT_FAILURE

    return dispatcher.dispatch(argv)


if __name__ == "__main__":
    sys.exit(main())
