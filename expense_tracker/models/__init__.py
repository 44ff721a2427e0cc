"""
Data Models Package

This package contains all Pydantic models used in the Expense Tracker.
"""

from expense_tracker.models.expense import (
    Expense,
    Operation,
    OperationResult,
)
from expense_tracker.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Expense models
    "Expense",
    "Operation",
    "OperationResult",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
