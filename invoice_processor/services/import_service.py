"""
Import Service
Turns flat spreadsheet rows into customers, products, invoices and items

Contiguous rows sharing an invoice key form one invoice group. Each group
(customer resolve, product resolves, invoice + items) is written in one
transaction, so a failing group leaves no trace while the groups before
it stay committed.

Author: TM3
Date: 2025-11-22
"""
import logging
from typing import Any, Iterable, List, Mapping, Optional, Union

from invoice_processor.adapters.base import DatabaseAdapter
from invoice_processor.core.exceptions import InvoiceImportError
from invoice_processor.domain.imports import (
    ImportResult,
    ImportRow,
    canonical_key,
    normalize_invoice_key,
)
from invoice_processor.domain.invoice import Invoice, InvoiceItem
from invoice_processor.importers import ReaderRegistry
from invoice_processor.importers.base import PathLike
from invoice_processor.repositories import (
    CustomerRepository,
    InvoiceRepository,
    ProductRepository,
)

logger = logging.getLogger(__name__)

RowInput = Union[ImportRow, Mapping[str, Any]]


class ImportService:
    """
    Import pipeline

    Usage:
        service = ImportService(adapter, customers, products, invoices)
        result = service.import_file("data.xlsx")
        print(result.invoices, result.items)
    """

    def __init__(
        self,
        adapter: DatabaseAdapter,
        customers: CustomerRepository,
        products: ProductRepository,
        invoices: InvoiceRepository,
        readers: Optional[ReaderRegistry] = None,
    ):
        self.adapter = adapter
        self.customers = customers
        self.products = products
        self.invoices = invoices
        self.readers = readers or ReaderRegistry.default()

    def import_file(self, path: PathLike) -> ImportResult:
        """
        Read a file with the reader for its extension and import its rows

        Raises:
            UnsupportedFormatError: No reader for the extension
            SpreadsheetReadError: The file could not be read
            InvoiceImportError: A group failed (partial_result attached)
        """
        logger.info(f"Starting import of {path}")
        records = self.readers.read(path)
        return self.import_rows(records)

    def import_rows(self, rows: Iterable[RowInput]) -> ImportResult:
        """
        Import rows in input order

        A key that comes back after a different one starts a new invoice;
        groups are never merged. The pending group is written as soon as a
        row with another key shows up, before that row is normalized, so a
        bad row never takes the previous invoice down with it.
        """
        result = ImportResult()
        group: List[ImportRow] = []

        for position, raw in enumerate(rows, start=1):
            if group and self._invoice_key(raw) != group[0].invoice:
                self._import_group(group, result)
                group = []

            group.append(self._normalize(raw, position, result))

        if group:
            self._import_group(group, result)

        if result.invoices == 0:
            logger.warning("Import finished without any rows")
        else:
            logger.info(
                f"Import complete: {result.invoices} invoices, {result.customers} customers "
                f"({result.customers_created} new), {result.products} products "
                f"({result.products_created} new), {result.items} items"
            )
        return result

    @staticmethod
    def _invoice_key(raw: RowInput) -> str:
        """Grouping key of a raw row, read without normalizing the rest of it"""
        if isinstance(raw, ImportRow):
            return raw.invoice
        if not isinstance(raw, Mapping):
            return ""
        for key, value in raw.items():
            if canonical_key(key) == "invoice":
                return normalize_invoice_key(value)
        return ""

    @staticmethod
    def _normalize(raw: RowInput, position: int, result: ImportResult) -> ImportRow:
        if isinstance(raw, ImportRow):
            if raw.row_index is None:
                return raw.model_copy(update={"row_index": position})
            return raw

        try:
            return ImportRow.from_record(raw, row_index=position)
        except Exception as e:
            logger.error(f"Row {position} could not be read: {e}")
            raise InvoiceImportError(
                f"Import failed at row {position}: {str(e)}",
                row_index=position,
                partial_result=result.model_copy(),
            ) from e

    def _import_group(self, rows: List[ImportRow], result: ImportResult) -> None:
        """Write one invoice group atomically and add its counts to result"""
        first = rows[0]
        current = first
        products = 0
        products_created = 0

        try:
            with self.adapter.transaction():
                customer, customer_created = self.customers.get_or_create(
                    first.customer_name, first.customer_address
                )
                invoice = Invoice(
                    date=first.invoice_date,
                    customer_id=customer.id,
                    grand_total=first.grand_total,
                )

                for row in rows:
                    current = row
                    product, created = self.products.get_or_create(row.product_name, row.price)
                    products += 1
                    products_created += int(created)

                    invoice.add_item(InvoiceItem(
                        product_id=product.id,
                        quantity=row.quantity,
                        total=row.total,
                    ))

                self.invoices.save(invoice)

        except Exception as e:
            logger.error(f"Invoice {first.invoice!r} failed at row {current.row_index}: {e}")
            raise InvoiceImportError(
                f"Import failed at row {current.row_index} (invoice {first.invoice!r}): {str(e)}",
                row_index=current.row_index,
                invoice_key=first.invoice,
                partial_result=result.model_copy(),
            ) from e

        logger.debug(f"Imported invoice {first.invoice!r} as id={invoice.id} ({len(rows)} items)")
        result.invoices += 1
        result.customers += 1
        result.customers_created += int(customer_created)
        result.products += products
        result.products_created += products_created
        result.items += invoice.item_count
