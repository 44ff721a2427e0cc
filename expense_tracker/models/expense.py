"""
Core Data Models for Expense Tracker

These models define the schemas for data flowing between storage,
the repository and the report formatter.

DESIGN DECISION: The database is the authority on what a valid expense
is (positive amount, non-empty memo). These models mirror those rules so
a row read back from storage is always a well-formed Expense, but the
add path never pre-validates: bad input fails at insertion time.
"""

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# ENUMS
# =============================================================================

class Operation(str, Enum):
    """Operations the repository exposes."""
    ENSURE_SCHEMA = "ensure_schema"
    LIST = "list"
    ADD = "add"
    SEARCH = "search"
    DELETE = "delete"
    CLEAR = "clear"


# =============================================================================
# EXPENSE
# =============================================================================

class Expense(BaseModel):
    """
    A single recorded expense.

    Immutable once created: there is no update operation, only deletion.
    """
    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: int = Field(
        ...,
        ge=1,
        description="Server-assigned identity"
    )
    amount: Decimal = Field(
        ...,
        gt=0,
        decimal_places=2,
        description="Amount spent, two fractional digits"
    )
    memo: str = Field(
        ...,
        min_length=1,
        description="What the money was spent on"
    )
    created_on: date = Field(
        ...,
        description="Local date the expense was recorded"
    )


# =============================================================================
# OPERATION RESULT
# =============================================================================

class OperationResult(BaseModel):
    """
    Outcome of one repository operation.

    The repository never terminates the process. It reports what happened
    here and lets the command dispatcher decide on the exit status.
    """

    operation: Operation
    success: bool = True

    expenses: list[Expense] = Field(
        default_factory=list,
        description="Expenses shown, added or deleted by the operation"
    )
    message: Optional[str] = Field(
        default=None,
        description="Informational line printed to the user"
    )
    not_found: bool = Field(
        default=False,
        description="Delete target was missing (a soft outcome, not an error)"
    )

    error_type: Optional[str] = None
    error_message: Optional[str] = None

    @classmethod
    def failure(cls, operation: Operation, error: Exception) -> "OperationResult":
        return cls(
            operation=operation,
            success=False,
            error_type=type(error).__name__,
            error_message=str(error),
        )
