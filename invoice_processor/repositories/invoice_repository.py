"""
Invoice Repository - Data Access Layer for Invoices

Handles invoices together with their items (composition): loading an
invoice loads its items, saving cascades them and deleting removes them
first.

Author: TM3
Date: 2025-11-21
"""
import logging
from decimal import Decimal
from typing import Any, Dict, List, Mapping, Optional

from invoice_processor.adapters.base import DatabaseAdapter, Record
from invoice_processor.core.exceptions import InvalidEntityError
from invoice_processor.domain.imports import convert_excel_date
from invoice_processor.domain.invoice import (
    Invoice,
    InvoiceItem,
    InvoiceItemView,
    money,
    resolve_unit_price,
    to_decimal,
)

from .base import AdapterRepository

logger = logging.getLogger(__name__)

UNKNOWN_PRODUCT = "Unknown Product"


class InvoiceRepository(AdapterRepository[Invoice]):
    """
    Repository for Invoice data access

    Invoices are stored in `invoices` (date column: invoice_date) and
    their lines in `invoice_items`; product names for get_items() come
    from `products`.
    """

    table = "invoices"
    entity_class = Invoice

    def __init__(
        self,
        adapter: DatabaseAdapter,
        table: Optional[str] = None,
        items_table: str = "invoice_items",
        products_table: str = "products",
    ):
        super().__init__(adapter, table)
        self.items_table = items_table
        self.products_table = products_table

    # ------------------------------------------------------------------
    # Mapping
    # ------------------------------------------------------------------

    def _to_entity(self, record: Record) -> Invoice:
        return Invoice(
            id=record.get("id"),
            date=record.get("invoice_date") or record.get("date"),
            customer_id=record.get("customer_id"),
            grand_total=money(record.get("grand_total")),
            items=self._load_items(record.get("id")),
        )

    def _to_record(self, invoice: Invoice) -> Dict[str, Any]:
        return {
            "invoice_date": invoice.date,
            "customer_id": invoice.customer_id,
            "grand_total": invoice.grand_total,
        }

    @staticmethod
    def _item_to_record(item: InvoiceItem) -> Dict[str, Any]:
        return {
            "invoice_id": item.invoice_id,
            "product_id": item.product_id,
            "quantity": item.quantity,
            "unit_price": item.unit_price,
            "total": item.total,
        }

    @staticmethod
    def _record_to_item(record: Record) -> InvoiceItem:
        return InvoiceItem(
            id=record.get("id"),
            invoice_id=record.get("invoice_id"),
            product_id=record.get("product_id"),
            quantity=int(to_decimal(record.get("quantity"))),
            unit_price=resolve_unit_price(record),
            total=money(record.get("total")),
        )

    def _item_records(self, invoice_id: Any) -> List[Record]:
        if invoice_id is None:
            return []
        return self.adapter.find_all_by_field(self.items_table, "invoice_id", invoice_id)

    def _load_items(self, invoice_id: Any) -> List[InvoiceItem]:
        return [self._record_to_item(record) for record in self._item_records(invoice_id)]

    # ------------------------------------------------------------------
    # CRUD
    # ------------------------------------------------------------------

    def save(self, invoice: Invoice) -> Invoice:
        """
        Insert or update an invoice and cascade its items

        The invoice row and every item are written in one transaction
        (joined if the caller already opened one). On update, stored items
        that are no longer in invoice.items are deleted.
        """
        if not isinstance(invoice, Invoice):
            raise InvalidEntityError(
                f"InvoiceRepository can only save Invoice, got {type(invoice).__name__}"
            )

        with self.adapter.transaction():
            is_update = invoice.id is not None
            super().save(invoice)

            if is_update:
                kept = {item.id for item in invoice.items if item.id is not None}
                for record in self._item_records(invoice.id):
                    if record["id"] not in kept:
                        self.adapter.delete(self.items_table, record["id"])

            for item in invoice.items:
                item.invoice_id = invoice.id
                record = self._item_to_record(item)
                if item.id is None:
                    item.id = self.adapter.insert(self.items_table, record)
                else:
                    self.adapter.update(self.items_table, item.id, record)

        logger.debug(f"Saved invoice id={invoice.id} with {invoice.item_count} items")
        return invoice

    def delete(self, invoice_id: Any) -> bool:
        """Delete an invoice and its items; False if the invoice did not exist"""
        with self.adapter.transaction():
            for record in self._item_records(invoice_id):
                self.adapter.delete(self.items_table, record["id"])
            return self.adapter.delete(self.table, invoice_id)

    def paginate(self, page: int = 1, per_page: int = 20) -> List[Invoice]:
        return self.find_all(page, per_page)

    def create(self, data: Mapping[str, Any]) -> Any:
        """
        Insert an invoice row directly from a mapping (no items)

        Args:
            data: customer_id, date (or invoice_date) and grand_total

        Returns:
            Generated invoice id
        """
        raw_date = data.get("invoice_date", data.get("date"))
        record = {
            "invoice_date": convert_excel_date(raw_date),
            "customer_id": data.get("customer_id"),
            "grand_total": money(data.get("grand_total")),
        }
        return self.adapter.insert(self.table, record)

    # ------------------------------------------------------------------
    # Items
    # ------------------------------------------------------------------

    def _product_name(self, product_id: Any, names: Dict[Any, str]) -> str:
        if product_id not in names:
            product = None
            if product_id is not None:
                product = self.adapter.find_by_id(self.products_table, product_id)
            names[product_id] = (product or {}).get("name") or UNKNOWN_PRODUCT
        return names[product_id]

    def get_items(self, invoice_id: Any) -> List[InvoiceItemView]:
        """
        Items of an invoice joined with their product names

        unit_price priority: stored unit_price -> price -> total / quantity -> 0.
        Items whose product no longer exists are named "Unknown Product".
        """
        return self.item_views(self._load_items(invoice_id))

    def item_views(
        self, items: List[InvoiceItem], names: Optional[Dict[Any, str]] = None
    ) -> List[InvoiceItemView]:
        """
        Views of items already loaded (e.g. Invoice.items)

        Only product names are read from storage. `names` caches them
        by product id and can be shared across invoices.
        """
        names = {} if names is None else names
        return [
            InvoiceItemView(
                id=item.id,
                product_id=item.product_id,
                product_name=self._product_name(item.product_id, names),
                quantity=item.quantity,
                unit_price=item.unit_price,
                total=money(item.total),
            )
            for item in items
        ]

    def add_item(self, invoice_id: Any, item_data: Mapping[str, Any]) -> bool:
        """
        Add an item to an existing invoice and raise its grand_total

        Atomic: the invoice is loaded first and nothing is written when it
        does not exist. grand_total grows by quantity * unit_price.

        Args:
            item_data: product_id, quantity, price (or unit_price), optional total

        Returns:
            False if the invoice does not exist
        """
        with self.adapter.transaction():
            invoice = self.adapter.find_by_id(self.table, invoice_id)
            if invoice is None:
                logger.warning(f"add_item: invoice {invoice_id} not found, nothing written")
                return False

            quantity = int(to_decimal(item_data.get("quantity")))
            price = item_data.get("price")
            if price is None:
                price = item_data.get("unit_price")
            unit_price = money(price)
            line_amount = money(unit_price * Decimal(quantity))

            total = item_data.get("total")
            self.adapter.insert(self.items_table, {
                "invoice_id": invoice_id,
                "product_id": item_data.get("product_id"),
                "quantity": quantity,
                "unit_price": unit_price,
                "total": money(total) if total is not None else line_amount,
            })

            grand_total = money(to_decimal(invoice.get("grand_total")) + line_amount)
            self.adapter.update(self.table, invoice_id, {"grand_total": grand_total})

        logger.info(f"Added item to invoice {invoice_id}, grand_total={grand_total}")
        return True
