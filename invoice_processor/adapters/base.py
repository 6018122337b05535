"""
Database adapter base class

All storage backends expose the same record-level CRUD contract so that
repositories never depend on a specific database vendor. Records are
plain dicts; "not found" is signalled by None, never by an exception.

Author: TM3
Date: 2025-11-20
"""
import re
from abc import ABC, abstractmethod
from contextlib import contextmanager
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, Iterator, List, Mapping, Optional

from invoice_processor.core.exceptions import InvalidQueryError

Record = Dict[str, Any]

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def check_identifier(name: str) -> str:
    """Reject table/field names that are not plain identifiers"""
    if not isinstance(name, str) or not _IDENTIFIER.match(name):
        raise InvalidQueryError(f"Invalid identifier: {name!r}")
    return name


def page_offset(page: int, per_page: int) -> int:
    """Offset for a 1-indexed page; pages below 1 are treated as page 1"""
    return (max(page, 1) - 1) * per_page


def to_json_value(value: Any) -> Any:
    """Decimal -> float, date/datetime -> ISO string; everything else unchanged"""
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return value


class DatabaseAdapter(ABC):
    """
    Uniform CRUD contract implemented once per backend

    Ordering: find_all / find_by_field / find_all_by_field return records
    ordered by id ascending on every backend, so pagination is stable.
    """

    @abstractmethod
    def find_by_id(self, table: str, record_id: Any) -> Optional[Record]:
        """Single record by primary key, or None"""

    @abstractmethod
    def find_all(self, table: str, page: int = 1, per_page: int = 20) -> List[Record]:
        """One page of records; offset = (page - 1) * per_page"""

    @abstractmethod
    def insert(self, table: str, data: Mapping[str, Any]) -> Any:
        """Insert a record and return the id assigned by the backend"""

    @abstractmethod
    def update(self, table: str, record_id: Any, data: Mapping[str, Any]) -> bool:
        """Update a record; False when nothing matched"""

    @abstractmethod
    def delete(self, table: str, record_id: Any) -> bool:
        """Delete a record; False when nothing matched"""

    @abstractmethod
    def find_by_field(self, table: str, field: str, value: Any) -> Optional[Record]:
        """First record (lowest id) whose field equals value, or None"""

    @abstractmethod
    def find_all_by_field(self, table: str, field: str, value: Any) -> List[Record]:
        """Every record whose field equals value"""

    @abstractmethod
    def count(self, table: str) -> int:
        """Number of records in a table/collection"""

    @abstractmethod
    def execute(self, query: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        """Escape hatch for raw backend access; the returned handle is backend specific"""

    @abstractmethod
    def begin_transaction(self) -> bool:
        ...

    @abstractmethod
    def commit(self) -> bool:
        ...

    @abstractmethod
    def rollback(self) -> bool:
        ...

    @property
    @abstractmethod
    def in_transaction(self) -> bool:
        ...

    def close(self) -> None:
        """Release backend resources (no-op by default)"""

    @contextmanager
    def transaction(self) -> Iterator["DatabaseAdapter"]:
        """
        Transaction envelope: commit on success, rollback on any exception

        Nested use joins the transaction that is already open.
        """
        if self.in_transaction:
            yield self
            return

        self.begin_transaction()
        try:
            yield self
        except BaseException:
            self.rollback()
            raise
        self.commit()
