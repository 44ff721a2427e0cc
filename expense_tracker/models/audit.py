"""
Audit Models for Expense Tracker

Every significant action in the system is logged for audit purposes.
This provides:
1. Traceability of destructive operations (delete, clear)
2. Debugging information when the database misbehaves
3. A record of what each invocation did

DESIGN DECISION: Audit events are written to the structured log only.
They are never stored in the expenses database.
"""

from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Reads
    EXPENSES_LISTED = "expenses_listed"
    EXPENSES_SEARCHED = "expenses_searched"

    # Writes
    EXPENSE_ADDED = "expense_added"
    EXPENSE_DELETED = "expense_deleted"
    EXPENSE_NOT_FOUND = "expense_not_found"
    EXPENSES_CLEARED = "expenses_cleared"

    # User interaction
    CLEAR_DECLINED = "clear_declined"
    USAGE_ERROR = "usage_error"

    # System events
    STORAGE_ERROR = "storage_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class AuditEvent(BaseModel):
    """
    A single audit event.

    Every significant action creates one of these.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context
    entity_id: Optional[int] = Field(
        default=None,
        description="Id of the expense this event relates to"
    )
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="Ties together every event of one invocation"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    error_type: Optional[str] = None
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_id": self.entity_id,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_type": self.error_type,
            "error_message": self.error_message,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.expense_added(expense_id, amount, correlation_id)
        event = AuditEventBuilder.storage_error("add", error, correlation_id)
    """

    @staticmethod
    def expenses_listed(
        count: int,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSES_LISTED,
            severity=AuditSeverity.DEBUG,
            correlation_id=correlation_id,
            description=f"Listed {count} expense(s)",
            details={"count": count},
        )

    @staticmethod
    def expenses_searched(
        pattern: str,
        count: int,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSES_SEARCHED,
            severity=AuditSeverity.DEBUG,
            correlation_id=correlation_id,
            description=f"Search matched {count} expense(s)",
            details={"pattern": pattern, "count": count},
        )

    @staticmethod
    def expense_added(
        expense_id: int,
        amount: Decimal,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_ADDED,
            entity_id=expense_id,
            correlation_id=correlation_id,
            description=f"Expense {expense_id} added",
            details={"amount": str(amount)},
        )

    @staticmethod
    def expense_deleted(
        expense_id: int,
        amount: Decimal,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_DELETED,
            entity_id=expense_id,
            correlation_id=correlation_id,
            description=f"Expense {expense_id} deleted",
            details={"amount": str(amount)},
        )

    @staticmethod
    def expense_not_found(
        requested_id: Any,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_NOT_FOUND,
            severity=AuditSeverity.WARNING,
            correlation_id=correlation_id,
            description="Delete requested for a missing expense",
            details={"requested_id": requested_id},
        )

    @staticmethod
    def expenses_cleared(
        deleted_count: int,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSES_CLEARED,
            severity=AuditSeverity.WARNING,
            correlation_id=correlation_id,
            description=f"All {deleted_count} expense(s) deleted, id sequence reset",
            details={"deleted_count": deleted_count},
        )

    @staticmethod
    def clear_declined(
        answer: Optional[str],
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CLEAR_DECLINED,
            correlation_id=correlation_id,
            description="User declined to delete all expenses",
            details={"answer": answer},
        )

    @staticmethod
    def usage_error(
        command: str,
        message: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.USAGE_ERROR,
            severity=AuditSeverity.WARNING,
            correlation_id=correlation_id,
            description=message,
            details={"command": command},
        )

    @staticmethod
    def storage_error(
        operation: str,
        error: Exception,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORAGE_ERROR,
            severity=AuditSeverity.ERROR,
            correlation_id=correlation_id,
            description=f"Storage failure during {operation}",
            details={"operation": operation},
            error_type=type(error).__name__,
            error_message=str(error),
        )
