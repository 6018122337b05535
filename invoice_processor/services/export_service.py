"""
Export Service
Assembles every invoice with its customer and items and renders it with
the exporter registered for the requested format.

Author: TM3
Date: 2025-11-22
"""
import logging
from typing import Any, Dict, List

from invoice_processor.core.exceptions import UnsupportedFormatError
from invoice_processor.exporters import Exporter, InvoiceDocument, JsonExporter, XmlExporter
from invoice_processor.repositories import CustomerRepository, InvoiceRepository

logger = logging.getLogger(__name__)


class ExportService:

    def __init__(
        self,
        invoices: InvoiceRepository,
        customers: CustomerRepository,
        page_size: int = 200,
    ):
        self.invoices = invoices
        self.customers = customers
        self.page_size = max(1, page_size)
        self._strategies: Dict[str, Exporter] = {
            "json": JsonExporter(),
            "xml": XmlExporter(),
        }

    def register_strategy(self, fmt: str, exporter: Exporter) -> None:
        self._strategies[fmt.lower()] = exporter

    @property
    def formats(self) -> List[str]:
        return sorted(self._strategies)

    def strategy(self, fmt: str) -> Exporter:
        exporter = self._strategies.get((fmt or "").lower())
        if exporter is None:
            raise UnsupportedFormatError(
                f"Unsupported export format '{fmt}'. Supported: {', '.join(self.formats)}"
            )
        return exporter

    def content_type(self, fmt: str) -> str:
        return self.strategy(fmt).content_type

    def file_extension(self, fmt: str) -> str:
        return self.strategy(fmt).file_extension

    def collect(self) -> List[InvoiceDocument]:
        """
        Every invoice as an export document, walking all pages by id

        Items come from the page load; customers and product names are
        looked up once per id.
        """
        documents = []
        customers: Dict[Any, Dict[str, Any]] = {}
        product_names: Dict[Any, str] = {}
        page = 1

        while True:
            batch = self.invoices.find_all(page, self.page_size)

            for invoice in batch:
                if invoice.customer_id not in customers:
                    customer = self.customers.find_by_id(invoice.customer_id)
                    customers[invoice.customer_id] = (
                        customer.to_dict() if customer
                        else {"id": invoice.customer_id, "name": None, "address": None}
                    )

                documents.append({
                    "id": invoice.id,
                    "date": invoice.date.isoformat(),
                    "grand_total": float(invoice.grand_total),
                    "customer": customers[invoice.customer_id],
                    "items": [
                        {
                            "product_name": item.product_name,
                            "quantity": item.quantity,
                            "unit_price": float(item.unit_price),
                            "total": float(item.total),
                        }
                        for item in self.invoices.item_views(invoice.items, product_names)
                    ],
                })

            if len(batch) < self.page_size:
                break
            page += 1

        return documents

    def export(self, fmt: str) -> str:
        """
        Render every invoice in the given format

        Raises:
            UnsupportedFormatError: Unknown format
        """
        exporter = self.strategy(fmt)
        documents = self.collect()
        logger.info(f"Exporting {len(documents)} invoices as {fmt.lower()}")
        return exporter.render(documents)
