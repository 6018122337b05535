"""
Conexión a base de datos (Storage Driver Wrapper)

Thin wrapper around one SQLAlchemy connection:
- parameterized execution through text() with :named binds
- begin/commit/rollback, autocommit when no transaction is open
- connection retry with exponential backoff
- driver exceptions translated into core.exceptions kinds

PostgreSQL URLs go through psycopg2; SQLite is used for local runs and tests.

Author: TM3
Updated: 2025-11-20
"""
import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy import create_engine, inspect, text
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import (
    DataError,
    DisconnectionError,
    IntegrityError,
    InterfaceError,
    OperationalError,
    ProgrammingError,
    SQLAlchemyError,
)
from sqlalchemy.pool import StaticPool

from .exceptions import (
    ConflictError,
    InvalidQueryError,
    StorageError,
    UnavailableError,
)

logger = logging.getLogger(__name__)

# Seconds before a PostgreSQL connection attempt is abandoned
CONNECTION_TIMEOUT = 10

# sqlite3 reports schema/syntax problems as OperationalError
_SQLITE_INVALID_MARKERS = ("no such table", "no such column", "syntax error", "has no column")


@dataclass
class QueryResult:
    """Rows (as plain dicts) and counters returned by Connection.execute"""

    rows: List[Dict[str, Any]] = field(default_factory=list)
    rowcount: int = -1
    lastrowid: Optional[Any] = None

    def first(self) -> Optional[Dict[str, Any]]:
        return self.rows[0] if self.rows else None

    def scalar(self) -> Any:
        row = self.first()
        if not row:
            return None
        return next(iter(row.values()))


def _is_memory_sqlite(database_url: str) -> bool:
    url = make_url(database_url)
    return url.database in (None, "", ":memory:") or "mode=memory" in database_url


def create_db_engine(database_url: str, echo: bool = False) -> Engine:
    """
    Create the SQLAlchemy engine for a database URL

    In-memory SQLite uses StaticPool so every checkout sees the same
    database (and can be shared with the FastAPI test client thread).
    """
    if database_url.startswith("sqlite"):
        kwargs: Dict[str, Any] = {"connect_args": {"check_same_thread": False}}
        if _is_memory_sqlite(database_url):
            kwargs["poolclass"] = StaticPool
        else:
            Path(make_url(database_url).database).parent.mkdir(parents=True, exist_ok=True)
        return create_engine(database_url, echo=echo, **kwargs)

    connect_args = {}
    if database_url.startswith("postgresql"):
        connect_args["connect_timeout"] = CONNECTION_TIMEOUT

    return create_engine(
        database_url,
        echo=echo,
        pool_pre_ping=True,  # Verificar conexión antes de usar
        connect_args=connect_args,
    )


def translate_error(error: SQLAlchemyError) -> StorageError:
    """Map a SQLAlchemy/DBAPI error onto the storage error kinds"""
    message = str(getattr(error, "orig", None) or error)

    if isinstance(error, IntegrityError):
        return ConflictError(message)
    if isinstance(error, OperationalError):
        if any(marker in message.lower() for marker in _SQLITE_INVALID_MARKERS):
            return InvalidQueryError(message)
        return UnavailableError(message)
    if isinstance(error, (InterfaceError, DisconnectionError)):
        return UnavailableError(message)
    if isinstance(error, (ProgrammingError, DataError)):
        return InvalidQueryError(message)
    return StorageError(message)


class Connection:
    """
    Single database connection shared by every repository built on it

    No pooling on top of SQLAlchemy: one connection is enough for the
    one-request-at-a-time model.

    Usage:
        with Connection("sqlite:///./database/invoices.db") as conn:
            result = conn.execute("SELECT * FROM invoices WHERE id = :id", {"id": 1})
            row = result.first()
    """

    def __init__(
        self,
        database_url: str,
        *,
        max_retries: int = 3,
        retry_delay: float = 1.0,
        echo: bool = False,
        engine: Optional[Engine] = None,
    ):
        if not database_url and engine is None:
            raise StorageError("DATABASE_URL not configured", kind="invalid")

        self.database_url = database_url
        self._engine = engine or create_db_engine(database_url, echo=echo)
        self._max_retries = max(1, max_retries)
        self._retry_delay = retry_delay
        self._conn = None
        self._transaction = None

    @classmethod
    def from_settings(cls, settings) -> "Connection":
        return cls(
            settings.DATABASE_URL,
            max_retries=settings.DB_CONNECT_RETRIES,
            retry_delay=settings.DB_RETRY_DELAY,
            echo=settings.DB_ECHO,
        )

    @property
    def engine(self) -> Engine:
        return self._engine

    @property
    def dialect_name(self) -> str:
        return self._engine.dialect.name

    @property
    def supports_returning(self) -> bool:
        """Whether INSERT ... RETURNING can be used (PostgreSQL, SQLite >= 3.35)"""
        return bool(getattr(self._engine.dialect, "insert_returning", False))

    @property
    def in_transaction(self) -> bool:
        return self._transaction is not None and self._transaction.is_active

    def connect(self):
        """
        Get the underlying SQLAlchemy connection, opening it with retry logic

        Retries only on OperationalError (network/SSL drops); anything else
        fails immediately.

        Raises:
            UnavailableError: If all retry attempts fail
        """
        if self._conn is not None and not self._conn.closed:
            return self._conn

        last_error = None

        for attempt in range(1, self._max_retries + 1):
            try:
                logger.debug(f"Database connection attempt {attempt}/{self._max_retries}")
                self._conn = self._engine.connect()
                logger.debug(f"Database connection successful on attempt {attempt}")
                return self._conn

            except OperationalError as e:
                last_error = e
                logger.warning(f"Connection error on attempt {attempt}/{self._max_retries}: {e}")

                # Don't retry on last attempt
                if attempt < self._max_retries:
                    delay = self._retry_delay * (2 ** (attempt - 1))
                    logger.info(f"Retrying in {delay:.2f} seconds...")
                    time.sleep(delay)

        logger.error(f"All {self._max_retries} connection attempts failed")
        raise UnavailableError(
            f"Could not connect to database after {self._max_retries} attempts: {last_error}"
        ) from last_error

    def execute(self, query: str, params: Optional[Mapping[str, Any]] = None) -> QueryResult:
        """
        Execute a parameterized statement

        Args:
            query: SQL with :name placeholders
            params: Values for the placeholders

        Returns:
            QueryResult with rows already fetched as dicts
        """
        conn = self.connect()
        logger.debug(f"SQL: {' '.join(query.split())} | params={dict(params or {})}")

        try:
            result = conn.execute(text(query), dict(params or {}))

            if result.returns_rows:
                rows = [dict(row) for row in result.mappings().all()]
                query_result = QueryResult(rows=rows, rowcount=result.rowcount)
            else:
                query_result = QueryResult(rowcount=result.rowcount, lastrowid=result.lastrowid)

            if self._transaction is None:
                conn.commit()

            return query_result

        except SQLAlchemyError as e:
            if self._transaction is None:
                conn.rollback()
            raise translate_error(e) from e

    def begin(self) -> bool:
        """Open an explicit transaction; False if one is already open"""
        conn = self.connect()

        if self.in_transaction:
            logger.warning("Transaction already in progress")
            return False

        # Close any transaction SQLAlchemy autobegan outside execute()
        if conn.in_transaction():
            conn.commit()

        self._transaction = conn.begin()
        return True

    def commit(self) -> bool:
        if not self.in_transaction:
            return False

        try:
            self._transaction.commit()
        except SQLAlchemyError as e:
            raise translate_error(e) from e
        finally:
            self._transaction = None

        return True

    def rollback(self) -> bool:
        if not self.in_transaction:
            return False

        try:
            self._transaction.rollback()
        except SQLAlchemyError as e:
            raise translate_error(e) from e
        finally:
            self._transaction = None

        return True

    def create_schema(self, metadata) -> None:
        """Create every table of a SQLAlchemy MetaData that does not exist yet"""
        conn = self.connect()
        try:
            metadata.create_all(conn)
            if self._transaction is None:
                conn.commit()
        except SQLAlchemyError as e:
            raise translate_error(e) from e

    def table_names(self) -> List[str]:
        return inspect(self.connect()).get_table_names()

    def ping(self) -> bool:
        """Test the connection with a simple query"""
        return self.execute("SELECT 1").scalar() == 1

    def close(self) -> None:
        if self._conn is None:
            return

        if self.in_transaction:
            self.rollback()

        self._conn.close()
        self._conn = None

    def __enter__(self) -> "Connection":
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
