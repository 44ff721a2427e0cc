"""
SQL Storage Implementation

DESIGN DECISION: Expenses live in one relational table accessed through
SQLAlchemy, so the same code runs against a local SQLite file or a
PostgreSQL/MySQL server picked by the database URL.

The table carries the data invariants as constraints:
- amount is NUMERIC(10, 2) and must be greater than zero
- memo and created_on are NOT NULL, memo must not be empty
- id auto-increments and is never reused (AUTOINCREMENT on SQLite)

Nothing is validated before insertion. A bad amount or memo is rejected
by the store and surfaces as ConstraintViolationError.

TRADEOFFS:
- The engine is disposed after every command; connection pooling buys
  nothing for a one-shot CLI.
- Restarting the id sequence is dialect specific (see _reset_sequence).
"""

from contextlib import contextmanager
from datetime import date
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Iterator, Optional

import structlog
from sqlalchemy import (
    CheckConstraint,
    Column,
    Date,
    Integer,
    Numeric,
    Text,
    create_engine,
    delete,
    event,
    func,
    select,
    text,
)
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import (
    ArgumentError,
    DataError,
    IntegrityError,
    InterfaceError,
    NoSuchModuleError,
    OperationalError,
    SQLAlchemyError,
)
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from expense_tracker.config.settings import DatabaseSettings
from expense_tracker.models.expense import Expense
from expense_tracker.services.storage.interface import (
    ConstraintViolationError,
    ExpenseStorageInterface,
    StorageConnectionError,
    StorageError,
)


EXPENSES_TABLE = "expenses"
CENT = Decimal("0.01")
# NUMERIC(10, 2) holds at most 8 integer digits.
MAX_AMOUNT_EXPONENT = 7
MAX_ID = 2**31 - 1

Base = declarative_base()

logger = structlog.get_logger(__name__)


class ExpenseRecord(Base):
    __tablename__ = EXPENSES_TABLE
    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_expenses_amount_positive"),
        CheckConstraint("memo <> ''", name="ck_expenses_memo_not_empty"),
        {"sqlite_autoincrement": True},
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    amount = Column(Numeric(10, 2), nullable=False)
    memo = Column(Text, nullable=False)
    created_on = Column(Date, nullable=False, default=date.today)


def _connect_args(backend: str, timeout: int) -> dict:
    """DBAPI keyword arguments that bound the time spent connecting."""
    if backend == "sqlite":
        return {"timeout": timeout}
    if backend in ("postgresql", "mysql", "mariadb"):
        return {"connect_timeout": timeout}
    return {}


def _parse_amount(amount) -> Decimal:
    """
    Parse an amount the way a NUMERIC(10, 2) column would.

    Rounds half-up to cents and rejects values wider than the column,
    which SQLite would otherwise store as a lossy REAL. Positivity is left
    to the CHECK constraint.
    """
    try:
        value = Decimal(str(amount).strip())
        if not value.is_finite():
            raise InvalidOperation(amount)
        value = value.quantize(CENT, rounding=ROUND_HALF_UP)
    except (InvalidOperation, ValueError):
        raise ConstraintViolationError(f"invalid amount: {amount!r}")

    if value and value.adjusted() > MAX_AMOUNT_EXPONENT:
        raise ConstraintViolationError(f"amount out of range: {amount!r}")
    return value


def _casefold(value: Optional[str]) -> Optional[str]:
    return value.casefold() if value is not None else None


def _register_casefold(dbapi_connection, connection_record) -> None:
    """SQLite lower() only folds ASCII; expose Python casefold instead."""
    dbapi_connection.create_function("casefold", 1, _casefold, deterministic=True)


def _parse_id(expense_id) -> Optional[int]:
    """Integer id, or None when the input cannot name any row."""
    try:
        value = int(str(expense_id).strip())
    except (TypeError, ValueError):
        return None
    if not 1 <= value <= MAX_ID:
        return None
    return value


def _error_message(error: SQLAlchemyError) -> str:
    orig = getattr(error, "orig", None)
    return str(orig) if orig is not None else str(error)


@contextmanager
def _translate_errors() -> Iterator[None]:
    """Re-raise SQLAlchemy failures as storage errors."""
    try:
        yield
    except (IntegrityError, DataError) as e:
        raise ConstraintViolationError(_error_message(e)) from e
    except (OperationalError, InterfaceError) as e:
        raise StorageConnectionError(_error_message(e)) from e
    except SQLAlchemyError as e:
        raise StorageError(_error_message(e)) from e


class SQLExpenseStorage(ExpenseStorageInterface):
    """
    SQLAlchemy implementation of expense storage.

    One row per expense in the `expenses` table.
    """

    def __init__(self, settings: DatabaseSettings):
        self._settings = settings
        self._engine: Optional[Engine] = None
        self._session_factory: Optional[sessionmaker] = None
        self._schema_ready = False

    @property
    def engine(self) -> Engine:
        """The engine, created on first use."""
        if self._engine is None:
            self._engine = self._create_engine()
            self._session_factory = sessionmaker(
                bind=self._engine,
                autoflush=False,
                expire_on_commit=False,
            )
        return self._engine

    def _create_engine(self) -> Engine:
        try:
            url = make_url(self._settings.url)
            engine = create_engine(
                url,
                echo=self._settings.echo,
                connect_args=_connect_args(
                    url.get_backend_name(), self._settings.connect_timeout
                ),
            )
        except (ArgumentError, NoSuchModuleError, ImportError) as e:
            raise StorageConnectionError(f"Invalid database configuration: {e}") from e

        if engine.dialect.name == "sqlite":
            event.listen(engine, "connect", _register_casefold)
        return engine

    @contextmanager
    def _session(self) -> Iterator[Session]:
        """
        One transaction: schema check, then the caller's statements.

        The schema is checked once per engine. Commits on success, rolls
        back on any exception.
        """
        if not self._schema_ready:
            self.ensure_schema()
        session = self._session_factory()
        try:
            with _translate_errors(), session.begin():
                yield session
        finally:
            session.close()

    def ensure_schema(self) -> None:
        with _translate_errors():
            Base.metadata.create_all(bind=self.engine)
        self._schema_ready = True

    def add_expense(self, amount: str, memo: str, created_on: date) -> Expense:
        with self._session() as session:
            record = ExpenseRecord(
                amount=_parse_amount(amount),
                memo=memo,
                created_on=created_on,
            )
            session.add(record)
            session.flush()
            expense = Expense.model_validate(record)

        logger.debug("expense_inserted", expense_id=expense.id)
        return expense

    def list_expenses(self) -> list[Expense]:
        with self._session() as session:
            records = session.scalars(
                select(ExpenseRecord).order_by(ExpenseRecord.created_on, ExpenseRecord.id)
            ).all()
            return [Expense.model_validate(record) for record in records]

    def search_expenses(self, pattern: Optional[str]) -> list[Expense]:
        query = select(ExpenseRecord)
        if pattern:
            query = query.where(self._memo_contains(pattern))
        query = query.order_by(ExpenseRecord.created_on, ExpenseRecord.id)

        with self._session() as session:
            return [Expense.model_validate(record) for record in session.scalars(query).all()]

    def _memo_contains(self, pattern: str):
        """Case-insensitive literal substring match on memo."""
        if self.engine.dialect.name == "sqlite":
            folded = func.casefold(ExpenseRecord.memo, type_=Text)
            return folded.contains(pattern.casefold(), autoescape=True)
        return ExpenseRecord.memo.icontains(pattern, autoescape=True)

    def delete_expense(self, expense_id) -> Optional[Expense]:
        pk = _parse_id(expense_id)
        if pk is None:
            return None

        with self._session() as session:
            record = session.get(ExpenseRecord, pk, with_for_update=True)
            if record is None:
                return None
            expense = Expense.model_validate(record)
            session.delete(record)

        return expense

    def delete_all_expenses(self) -> int:
        with self._session() as session:
            deleted = session.execute(delete(ExpenseRecord)).rowcount
            self._reset_sequence(session)

        return deleted

    def _reset_sequence(self, session: Session) -> None:
        """Restart id assignment at 1."""
        dialect = session.get_bind().dialect.name

        if dialect == "sqlite":
            session.execute(
                text("DELETE FROM sqlite_sequence WHERE name = :name"),
                {"name": EXPENSES_TABLE},
            )
        elif dialect == "postgresql":
            session.execute(
                text("SELECT setval(pg_get_serial_sequence(:name, 'id'), 1, false)"),
                {"name": EXPENSES_TABLE},
            )
        elif dialect in ("mysql", "mariadb"):
            # Implicitly commits the delete above; MySQL has no transactional DDL.
            session.execute(text(f"ALTER TABLE {EXPENSES_TABLE} AUTO_INCREMENT = 1"))
        else:
            logger.warning("sequence_reset_unsupported", dialect=dialect)

    def close(self) -> None:
        if self._engine is not None:
            self._engine.dispose()
        self._engine = None
        self._session_factory = None
        self._schema_ready = False
