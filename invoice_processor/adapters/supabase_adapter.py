"""
Supabase Adapter - DatabaseAdapter over the Supabase (PostgREST) record API

Tables are addressed as JSON record collections through the Supabase
client; there is no SQL at this level. Transactions are not available
over PostgREST, so begin/commit/rollback only track the envelope and
always succeed (reduced guarantee compared with SqlAdapter).

Author: TM3
Date: 2025-11-21
"""
import logging
from typing import Any, Dict, List, Mapping, Optional

import httpx
from postgrest.exceptions import APIError
from supabase import Client, create_client

from invoice_processor.core.exceptions import (
    ConfigurationError,
    ConflictError,
    InvalidQueryError,
    StorageError,
    UnavailableError,
)

from .base import DatabaseAdapter, Record, check_identifier, page_offset, to_json_value

logger = logging.getLogger(__name__)

# unique_violation, foreign_key_violation
_CONFLICT_CODES = {"23505", "23503"}


def translate_api_error(error: Exception) -> StorageError:
    """Map PostgREST/HTTP failures onto the storage error kinds"""
    if isinstance(error, APIError):
        if str(error.code) in _CONFLICT_CODES:
            return ConflictError(error.message or str(error))
        return InvalidQueryError(error.message or str(error))
    if isinstance(error, httpx.HTTPError):
        return UnavailableError(str(error))
    return StorageError(str(error))


def create_supabase_client(settings) -> Client:
    """Supabase client from settings; both URL and service role key are required"""
    if not settings.SUPABASE_URL or not settings.SUPABASE_SERVICE_ROLE_KEY:
        raise ConfigurationError(
            "SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY must be set for the supabase backend"
        )
    return create_client(settings.SUPABASE_URL, settings.SUPABASE_SERVICE_ROLE_KEY)


class SupabaseAdapter(DatabaseAdapter):
    """
    DatabaseAdapter for the Supabase record API

    Usage:
        adapter = SupabaseAdapter(create_client(url, key))
        invoice = adapter.find_by_id("invoices", 1)
    """

    def __init__(self, client: Client):
        self.client = client
        self._in_transaction = False

    def _run(self, request) -> List[Record]:
        """Execute a PostgREST request builder and return its rows"""
        try:
            response = request.execute()
        except (APIError, httpx.HTTPError) as e:
            raise translate_api_error(e) from e
        return [dict(row) for row in (response.data or [])]

    @staticmethod
    def _serialize(data: Mapping[str, Any]) -> Dict[str, Any]:
        return {key: to_json_value(value) for key, value in data.items()}

    def find_by_id(self, table: str, record_id: Any) -> Optional[Record]:
        table = check_identifier(table)
        rows = self._run(
            self.client.table(table).select("*").eq("id", record_id).limit(1)
        )
        return rows[0] if rows else None

    def find_all(self, table: str, page: int = 1, per_page: int = 20) -> List[Record]:
        table = check_identifier(table)
        if per_page < 1:
            return []

        start = page_offset(page, per_page)
        return self._run(
            self.client.table(table).select("*").order("id").range(start, start + per_page - 1)
        )

    def insert(self, table: str, data: Mapping[str, Any]) -> Any:
        table = check_identifier(table)
        if not data:
            raise InvalidQueryError(f"Cannot insert an empty record into {table}")

        rows = self._run(self.client.table(table).insert(self._serialize(data)))
        if not rows:
            raise StorageError(f"Insert into {table} returned no record")

        logger.debug(f"Inserted {table} id={rows[0].get('id')}")
        return rows[0].get("id")

    def update(self, table: str, record_id: Any, data: Mapping[str, Any]) -> bool:
        table = check_identifier(table)
        if not data:
            return False

        rows = self._run(
            self.client.table(table).update(self._serialize(data)).eq("id", record_id)
        )
        return len(rows) > 0

    def delete(self, table: str, record_id: Any) -> bool:
        table = check_identifier(table)
        rows = self._run(self.client.table(table).delete().eq("id", record_id))
        return len(rows) > 0

    def find_by_field(self, table: str, field: str, value: Any) -> Optional[Record]:
        table = check_identifier(table)
        field = check_identifier(field)
        rows = self._run(
            self.client.table(table)
            .select("*")
            .eq(field, to_json_value(value))
            .order("id")
            .limit(1)
        )
        return rows[0] if rows else None

    def find_all_by_field(self, table: str, field: str, value: Any) -> List[Record]:
        table = check_identifier(table)
        field = check_identifier(field)
        return self._run(
            self.client.table(table).select("*").eq(field, to_json_value(value)).order("id")
        )

    def count(self, table: str) -> int:
        table = check_identifier(table)
        try:
            response = self.client.table(table).select("id", count="exact").limit(1).execute()
        except (APIError, httpx.HTTPError) as e:
            raise translate_api_error(e) from e
        return int(response.count or 0)

    def execute(self, query: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        """Return the request builder for collection `query`; params are unused"""
        return self.client.table(check_identifier(query))

    def begin_transaction(self) -> bool:
        self._in_transaction = True
        return True

    def commit(self) -> bool:
        self._in_transaction = False
        return True

    def rollback(self) -> bool:
        if self._in_transaction:
            logger.warning("Rollback requested on supabase backend; writes already applied are kept")
        self._in_transaction = False
        return True

    @property
    def in_transaction(self) -> bool:
        return self._in_transaction
