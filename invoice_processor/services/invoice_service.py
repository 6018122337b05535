"""
Invoice Service
Facade used by the API routers and the CLI

Author: TM3
Date: 2025-11-22
"""
import logging
from typing import Any, Dict, List, Mapping

from invoice_processor.core.exceptions import InvoiceNotFoundError, NotFoundError
from invoice_processor.domain.imports import ImportResult
from invoice_processor.domain.invoice import Invoice
from invoice_processor.importers.base import PathLike
from invoice_processor.repositories import (
    CustomerRepository,
    InvoiceRepository,
    ProductRepository,
)

from .export_service import ExportService
from .import_service import ImportService

logger = logging.getLogger(__name__)


class InvoiceService:

    def __init__(
        self,
        invoices: InvoiceRepository,
        customers: CustomerRepository,
        products: ProductRepository,
        import_service: ImportService,
        export_service: ExportService,
    ):
        self.invoices = invoices
        self.customers = customers
        self.products = products
        self.import_service = import_service
        self.export_service = export_service

    def get_paginated_invoices(self, page: int = 1, per_page: int = 20) -> List[Invoice]:
        return self.invoices.paginate(page, per_page)

    def get_invoice_details(self, invoice_id: Any) -> Dict[str, Any]:
        """
        Invoice with its customer and named items

        Returns:
            {"invoice": ..., "customer": ... or None, "items": [...]}

        Raises:
            InvoiceNotFoundError: If the invoice does not exist
        """
        invoice = self.invoices.find_by_id(invoice_id)
        if invoice is None:
            raise InvoiceNotFoundError(invoice_id)

        customer = self.customers.find_by_id(invoice.customer_id)
        return {
            "invoice": invoice.to_dict(include_items=False),
            "customer": customer.to_dict() if customer else None,
            "items": [item.to_dict() for item in self.invoices.get_items(invoice_id)],
        }

    def create_invoice(self, data: Mapping[str, Any]) -> Invoice:
        """
        Create an invoice without items

        Raises:
            NotFoundError: If the customer does not exist
        """
        customer_id = data.get("customer_id")
        if self.customers.find_by_id(customer_id) is None:
            raise NotFoundError(f"Customer not found: {customer_id}")

        invoice_id = self.invoices.create(data)
        logger.info(f"Created invoice {invoice_id} for customer {customer_id}")
        return self.invoices.find_by_id(invoice_id)

    def add_item(self, invoice_id: Any, data: Mapping[str, Any]) -> Invoice:
        """
        Add an item and return the updated invoice

        Raises:
            NotFoundError: If the product does not exist
            InvoiceNotFoundError: If the invoice does not exist
        """
        product_id = data.get("product_id")
        if self.products.find_by_id(product_id) is None:
            raise NotFoundError(f"Product not found: {product_id}")

        if not self.invoices.add_item(invoice_id, data):
            raise InvoiceNotFoundError(invoice_id)
        return self.invoices.find_by_id(invoice_id)

    def import_from_file(self, path: PathLike) -> ImportResult:
        return self.import_service.import_file(path)

    def export_invoices(self, fmt: str = "json") -> str:
        return self.export_service.export(fmt)
