"""
Declarative base shared by all table models
"""
import logging

from sqlalchemy.orm import declarative_base

logger = logging.getLogger(__name__)

# Base para modelos
Base = declarative_base()

TABLES = ("customers", "products", "invoices", "invoice_items")


def create_schema(connection) -> list:
    """
    Create missing tables and indexes on a core.database.Connection

    Returns:
        Names of the application tables present after creation
    """
    # Register the models on Base.metadata before create_all
    from . import invoice  # noqa: F401

    connection.create_schema(Base.metadata)
    present = [table for table in TABLES if table in connection.table_names()]
    logger.info(f"Schema ready: {', '.join(present)}")
    return present
