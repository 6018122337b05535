"""
Database Adapters

One CRUD contract (DatabaseAdapter), one implementation per backend:
- SqlAdapter: SQL row stores (PostgreSQL via psycopg2, SQLite)
- SupabaseAdapter: Supabase/PostgREST record API

create_adapter() picks the implementation from settings.DATABASE_BACKEND.

Author: TM3
Date: 2025-11-20
"""
import logging

from invoice_processor.core.config import DatabaseBackend
from invoice_processor.core.database import Connection
from invoice_processor.core.exceptions import ConfigurationError

from .base import DatabaseAdapter, Record
from .sql_adapter import SqlAdapter
from .supabase_adapter import SupabaseAdapter, create_supabase_client

logger = logging.getLogger(__name__)


def create_adapter(settings) -> DatabaseAdapter:
    """Build the adapter for the configured backend"""
    try:
        backend = DatabaseBackend(settings.DATABASE_BACKEND)
    except ValueError as e:
        raise ConfigurationError(f"Unsupported database backend: {settings.DATABASE_BACKEND}") from e

    if backend == DatabaseBackend.SUPABASE:
        logger.info("Using Supabase backend")
        return SupabaseAdapter(create_supabase_client(settings))

    logger.info(f"Using SQL backend ({settings.DATABASE_URL.split('://')[0]})")
    return SqlAdapter(Connection.from_settings(settings))


__all__ = [
    "DatabaseAdapter",
    "Record",
    "SqlAdapter",
    "SupabaseAdapter",
    "create_adapter",
]
