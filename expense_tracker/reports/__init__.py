"""Report rendering package."""

from expense_tracker.reports.formatter import (
    NO_EXPENSES,
    SEPARATOR,
    ReportFormatter,
    count_line,
    total_of,
)

__all__ = ["NO_EXPENSES", "SEPARATOR", "ReportFormatter", "count_line", "total_of"]
