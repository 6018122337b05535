"""
Domain Layer - Business Entities

Pydantic models for customers, products, invoices and import rows.
Repositories return these models; services and the API consume them.

Author: TM3
Date: 2025-11-20
"""
from invoice_processor.domain.customer import Customer, CustomerCreate, Product, ProductCreate
from invoice_processor.domain.imports import ImportResult, ImportRow, convert_excel_date
from invoice_processor.domain.invoice import (
    Invoice,
    InvoiceCreate,
    InvoiceItem,
    InvoiceItemCreate,
    InvoiceItemView,
    money,
    resolve_unit_price,
    to_decimal,
)

__all__ = [
    'Customer',
    'CustomerCreate',
    'Product',
    'ProductCreate',
    'Invoice',
    'InvoiceCreate',
    'InvoiceItem',
    'InvoiceItemCreate',
    'InvoiceItemView',
    'ImportRow',
    'ImportResult',
    'convert_excel_date',
    'money',
    'resolve_unit_price',
    'to_decimal',
]
