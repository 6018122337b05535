"""
Composition root

Builds the whole object graph from one Settings instance:
Settings -> adapter -> repositories -> services. The API lifespan and
the CLI call build_services() once and pass the result around.
"""
import logging
from dataclasses import dataclass
from typing import Optional

from invoice_processor.adapters import DatabaseAdapter, SqlAdapter, create_adapter
from invoice_processor.core.config import Settings
from invoice_processor.importers import ReaderRegistry
from invoice_processor.models import create_schema
from invoice_processor.repositories import (
    CustomerRepository,
    InvoiceRepository,
    ProductRepository,
)
from invoice_processor.services import ExportService, ImportService, InvoiceService

logger = logging.getLogger(__name__)


@dataclass
class Services:
    settings: Settings
    adapter: DatabaseAdapter
    customers: CustomerRepository
    products: ProductRepository
    invoices: InvoiceRepository
    import_service: ImportService
    export_service: ExportService
    invoice_service: InvoiceService

    def setup_schema(self) -> list:
        """Create the tables on SQL backends; Supabase tables are managed in the dashboard"""
        if not isinstance(self.adapter, SqlAdapter):
            logger.info("Schema setup skipped: backend manages its own tables")
            return []
        return create_schema(self.adapter.connection)

    def close(self) -> None:
        self.adapter.close()


def build_services(settings: Settings, adapter: Optional[DatabaseAdapter] = None) -> Services:
    """
    Wire every repository and service on one shared adapter

    Args:
        settings: Application settings
        adapter: Pre-built adapter (tests); created from settings when omitted
    """
    adapter = adapter or create_adapter(settings)

    customers = CustomerRepository(adapter)
    products = ProductRepository(adapter)
    invoices = InvoiceRepository(adapter)

    import_service = ImportService(
        adapter, customers, products, invoices, readers=ReaderRegistry.default()
    )
    export_service = ExportService(invoices, customers, page_size=settings.EXPORT_PAGE_SIZE)
    invoice_service = InvoiceService(
        invoices, customers, products, import_service, export_service
    )

    return Services(
        settings=settings,
        adapter=adapter,
        customers=customers,
        products=products,
        invoices=invoices,
        import_service=import_service,
        export_service=export_service,
        invoice_service=invoice_service,
    )
