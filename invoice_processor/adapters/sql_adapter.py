"""
SQL Adapter - DatabaseAdapter over a SQL row store

Builds parameterized SQL for the CRUD contract and runs it through the
shared core.database.Connection. Works with PostgreSQL (psycopg2) and
SQLite; MySQL-style backends without RETURNING fall back to lastrowid.

Author: TM3
Date: 2025-11-20
"""
import logging
from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Mapping, Optional

from invoice_processor.core.database import Connection, QueryResult
from invoice_processor.core.exceptions import InvalidQueryError

from .base import DatabaseAdapter, Record, check_identifier, page_offset

logger = logging.getLogger(__name__)


class SqlAdapter(DatabaseAdapter):
    """
    DatabaseAdapter for relational backends

    All repositories built from one SqlAdapter share its Connection.
    """

    def __init__(self, connection: Connection):
        self.connection = connection

    def _bind(self, data: Mapping[str, Any]) -> Dict[str, Any]:
        """sqlite3 cannot bind Decimal and has no native DATE type"""
        if self.connection.dialect_name != "sqlite":
            return dict(data)

        params = {}
        for key, value in data.items():
            if isinstance(value, Decimal):
                value = float(value)
            elif isinstance(value, date):
                value = value.isoformat()
            params[key] = value
        return params

    def find_by_id(self, table: str, record_id: Any) -> Optional[Record]:
        table = check_identifier(table)
        result = self.connection.execute(
            f"SELECT * FROM {table} WHERE id = :id",
            {"id": record_id},
        )
        return result.first()

    def find_all(self, table: str, page: int = 1, per_page: int = 20) -> List[Record]:
        table = check_identifier(table)
        if per_page < 1:
            return []

        result = self.connection.execute(
            f"SELECT * FROM {table} ORDER BY id LIMIT :limit OFFSET :offset",
            {"limit": per_page, "offset": page_offset(page, per_page)},
        )
        return result.rows

    def insert(self, table: str, data: Mapping[str, Any]) -> Any:
        table = check_identifier(table)
        if not data:
            raise InvalidQueryError(f"Cannot insert an empty record into {table}")

        columns = [check_identifier(column) for column in data.keys()]
        placeholders = ", ".join(f":{column}" for column in columns)
        sql = f"INSERT INTO {table} ({', '.join(columns)}) VALUES ({placeholders})"

        if self.connection.supports_returning:
            result = self.connection.execute(f"{sql} RETURNING id", self._bind(data))
            new_id = result.scalar()
        else:
            result = self.connection.execute(sql, self._bind(data))
            new_id = result.lastrowid

        logger.debug(f"Inserted {table} id={new_id}")
        return new_id

    def update(self, table: str, record_id: Any, data: Mapping[str, Any]) -> bool:
        table = check_identifier(table)
        if not data:
            return False

        columns = [check_identifier(column) for column in data.keys()]
        if "id" in columns:
            raise InvalidQueryError("The id column cannot be updated")

        set_clause = ", ".join(f"{column} = :{column}" for column in columns)
        params = self._bind(data)
        params["id"] = record_id

        result = self.connection.execute(
            f"UPDATE {table} SET {set_clause} WHERE id = :id",
            params,
        )
        return result.rowcount > 0

    def delete(self, table: str, record_id: Any) -> bool:
        table = check_identifier(table)
        result = self.connection.execute(
            f"DELETE FROM {table} WHERE id = :id",
            {"id": record_id},
        )
        return result.rowcount > 0

    def find_by_field(self, table: str, field: str, value: Any) -> Optional[Record]:
        table = check_identifier(table)
        field = check_identifier(field)
        result = self.connection.execute(
            f"SELECT * FROM {table} WHERE {field} = :value ORDER BY id LIMIT 1",
            self._bind({"value": value}),
        )
        return result.first()

    def find_all_by_field(self, table: str, field: str, value: Any) -> List[Record]:
        table = check_identifier(table)
        field = check_identifier(field)
        result = self.connection.execute(
            f"SELECT * FROM {table} WHERE {field} = :value ORDER BY id",
            self._bind({"value": value}),
        )
        return result.rows

    def count(self, table: str) -> int:
        table = check_identifier(table)
        result = self.connection.execute(f"SELECT COUNT(*) AS total FROM {table}")
        return int(result.scalar() or 0)

    def execute(self, query: str, params: Optional[Mapping[str, Any]] = None) -> QueryResult:
        return self.connection.execute(query, self._bind(params or {}))

    def begin_transaction(self) -> bool:
        return self.connection.begin()

    def commit(self) -> bool:
        return self.connection.commit()

    def rollback(self) -> bool:
        return self.connection.rollback()

    @property
    def in_transaction(self) -> bool:
        return self.connection.in_transaction

    def close(self) -> None:
        self.connection.close()
