"""
Modelos de base de datos

SQLAlchemy tables for the SQL backends. The adapters query these tables
with plain SQL; the models exist so the schema can be created with
create_schema().
"""
from .base import Base, create_schema
from .invoice import Customer, Product, Invoice, InvoiceItem

__all__ = [
    "Base",
    "create_schema",
    "Customer",
    "Product",
    "Invoice",
    "InvoiceItem",
]
