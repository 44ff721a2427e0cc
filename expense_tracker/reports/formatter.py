"""
Report Rendering

Turns a sequence of expenses into the text printed by list, search and
delete:

    There are 2 expenses.
      1 | 10/18/2026 |        12.50 | groceries
      2 | 10/18/2026 |         5.00 | coffee
    --------------------------------------------------
    Total      17.50

The total is an exact Decimal sum of the amounts shown.
"""

from decimal import Decimal
from typing import Iterable

from expense_tracker.models.expense import Expense


NO_EXPENSES = "There are no expenses."
SEPARATOR = "-" * 50
DEFAULT_DATE_FORMAT = "%m/%d/%Y"

ID_WIDTH = 3
DATE_WIDTH = 10
AMOUNT_WIDTH = 12
TOTAL_WIDTH = 10


def count_line(count: int) -> str:
    if count == 0:
        return NO_EXPENSES
    if count == 1:
        return "There is 1 expense."
    return f"There are {count} expenses."


def total_of(expenses: Iterable[Expense]) -> Decimal:
    return sum((expense.amount for expense in expenses), Decimal("0.00"))


class ReportFormatter:
    """Renders expenses as fixed-width report lines."""

    def __init__(self, date_format: str = DEFAULT_DATE_FORMAT):
        self._date_format = date_format

    def render_row(self, expense: Expense) -> str:
        created_on = expense.created_on.strftime(self._date_format)
        amount = f"{expense.amount:.2f}"
        return " | ".join([
            f"{expense.id:>{ID_WIDTH}}",
            f"{created_on:>{DATE_WIDTH}}",
            f"{amount:>{AMOUNT_WIDTH}}",
            expense.memo,
        ])

    def render_total(self, total: Decimal) -> str:
        return f"Total {total:>{TOTAL_WIDTH}.2f}"

    def render(self, expenses: Iterable[Expense]) -> list[str]:
        """
        Render a full report.

        An empty sequence renders as the single "no expenses" line.
        """
        expenses = list(expenses)
        if not expenses:
            return [NO_EXPENSES]

        lines = [count_line(len(expenses))]
        lines.extend(self.render_row(expense) for expense in expenses)
        lines.append(SEPARATOR)
        lines.append(self.render_total(total_of(expenses)))
        return lines
