"""
Audit Logger

DESIGN DECISION: Every significant action in the system is logged.
This provides:
1. Traceability of deletes and clears
2. Debugging capability when the database fails
3. A per-invocation trail tied together by a correlation id

Logs go to stderr through the stdlib logging module so they never mix
with the report printed on stdout.
"""

import logging
import sys
from typing import Optional
from uuid import UUID, uuid4

import structlog

from expense_tracker.models.audit import AuditEvent, AuditSeverity


def _processors(renderer) -> list:
    return [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        renderer,
    ]


# Configure structlog for local logging
structlog.configure(
    processors=_processors(structlog.processors.JSONRenderer()),
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(level: str = "WARNING", log_format: str = "json") -> None:
    """
    Route structured logs to stderr at the given level.

    Called once at startup with values from AppSettings.
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, level.upper(), logging.WARNING),
        force=True,
    )

    if log_format == "console":
        renderer = structlog.dev.ConsoleRenderer(colors=False)
    else:
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=_processors(renderer),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


class AuditLogger:
    """
    Central audit logging service.

    Writes each event to the structured log at the event's severity.
    """

    def __init__(self, correlation_id: Optional[UUID] = None):
        """
        Initialize audit logger.

        Args:
            correlation_id: Id stamped on every event that does not carry
                one already. A fresh id is created if None.
        """
        self.correlation_id = correlation_id or create_correlation_id()
        self._logger = structlog.get_logger("expense_tracker.audit")

    def log(self, event: AuditEvent) -> AuditEvent:
        """
        Log an audit event and return it (with the correlation id filled in).
        """
        if event.correlation_id is None:
            event = event.model_copy(update={"correlation_id": self.correlation_id})

        log_dict = event.to_log_dict()

        if event.severity == AuditSeverity.ERROR:
            self._logger.error("audit_event", **log_dict)
        elif event.severity == AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        elif event.severity == AuditSeverity.DEBUG:
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        return event


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use one correlation ID per command invocation.
    """
    return uuid4()
