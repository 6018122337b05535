"""
Repository Layer - Data Access

Repositories translate between domain models and adapter records.
They never see SQL or PostgREST details; swapping the backend only
changes the adapter they are built with.

Author: TM3
Date: 2025-11-21
"""
from invoice_processor.repositories.base import AdapterRepository, NamedRepository
from invoice_processor.repositories.customer_repository import CustomerRepository
from invoice_processor.repositories.product_repository import ProductRepository
from invoice_processor.repositories.invoice_repository import InvoiceRepository

__all__ = [
    'AdapterRepository',
    'NamedRepository',
    'CustomerRepository',
    'ProductRepository',
    'InvoiceRepository'
]
