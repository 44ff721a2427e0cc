"""
Shared fixtures.

Every test gets its own SQLite file under pytest's tmp_path, so tests
never touch a real expenses database.
"""

from datetime import date

import pytest

from expense_tracker.audit import AuditLogger
from expense_tracker.config import DatabaseSettings, get_settings
from expense_tracker.repository import ExpenseRepository
from expense_tracker.services.storage import SQLExpenseStorage


TODAY = date(2026, 10, 18)


class RecordingAuditLogger(AuditLogger):
    """AuditLogger that also keeps every event it logged."""

    def __init__(self):
        super().__init__()
        self.events = []

    def log(self, event):
        event = super().log(event)
        self.events.append(event)
        return event

    @property
    def event_types(self) -> list[str]:
        return [event.event_type.value for event in self.events]


@pytest.fixture
def db_url(tmp_path) -> str:
    return f"sqlite:///{tmp_path / 'expenses.db'}"


@pytest.fixture
def db_settings(db_url) -> DatabaseSettings:
    return DatabaseSettings(url=db_url, connect_timeout=5)


@pytest.fixture
def storage(db_settings):
    storage = SQLExpenseStorage(db_settings)
    yield storage
    storage.close()


@pytest.fixture
def output() -> list:
    """Collects printed lines; pass output.append as the sink."""
    return []


@pytest.fixture
def audit_logger() -> RecordingAuditLogger:
    return RecordingAuditLogger()


@pytest.fixture
def today() -> date:
    return TODAY


@pytest.fixture
def repository(storage, output, audit_logger, today) -> ExpenseRepository:
    return ExpenseRepository(
        storage,
        output=output.append,
        audit_logger=audit_logger,
        today=lambda: today,
    )


@pytest.fixture
def clean_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
