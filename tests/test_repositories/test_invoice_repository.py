"""
Unit tests for InvoiceRepository

Author: TM3
Date: 2025-11-22
"""
from datetime import date
from decimal import Decimal

import pytest

from invoice_processor.core.exceptions import ConflictError, InvalidEntityError
from invoice_processor.domain import Customer, Invoice, InvoiceItem, Product


@pytest.fixture
def customer(customer_repo):
    return customer_repo.save(Customer(name="Acme Corp", address="1 Main St"))


@pytest.fixture
def widget(product_repo):
    return product_repo.save(Product(name="Widget", price=Decimal("10.50")))


@pytest.fixture
def gadget(product_repo):
    return product_repo.save(Product(name="Gadget", price=Decimal("20.00")))


@pytest.fixture
def saved_invoice(invoice_repo, customer, widget, gadget):
    invoice = Invoice(date=date(2020, 1, 1), customer_id=customer.id, grand_total=Decimal("41.00"))
    invoice.add_item(InvoiceItem(product_id=widget.id, quantity=2, total=Decimal("21.00")))
    invoice.add_item(InvoiceItem(product_id=gadget.id, quantity=1, total=Decimal("20.00")))
    return invoice_repo.save(invoice)


class TestSave:
    """Invoices are saved together with their items"""

    def test_save_assigns_ids_to_invoice_and_items(self, saved_invoice):
        assert saved_invoice.id is not None
        assert all(item.id is not None for item in saved_invoice.items)
        assert all(item.invoice_id == saved_invoice.id for item in saved_invoice.items)

    def test_round_trip(self, invoice_repo, saved_invoice):
        loaded = invoice_repo.find_by_id(saved_invoice.id)

        assert loaded.to_dict() == saved_invoice.to_dict()
        assert loaded.date == date(2020, 1, 1)
        assert loaded.item_count == 2

    def test_unit_price_is_derived_from_total(self, saved_invoice):
        assert saved_invoice.items[0].unit_price == Decimal("10.50")

    def test_update_cascades_to_items(self, invoice_repo, saved_invoice):
        saved_invoice.grand_total = Decimal("50.00")
        saved_invoice.items[1].quantity = 2
        saved_invoice.items[1].total = Decimal("29.00")

        invoice_repo.save(saved_invoice)
        loaded = invoice_repo.find_by_id(saved_invoice.id)

        assert loaded.grand_total == Decimal("50.00")
        assert loaded.items[1].quantity == 2
        assert loaded.items[1].total == Decimal("29.00")
        assert invoice_repo.adapter.count("invoice_items") == 2

    def test_removed_item_is_deleted_on_update(self, invoice_repo, saved_invoice):
        # Arrange
        removed = saved_invoice.items.pop(0)

        # Act
        invoice_repo.save(saved_invoice)
        loaded = invoice_repo.find_by_id(saved_invoice.id)

        # Assert: only the remaining item comes back
        assert [item.id for item in loaded.items] == [saved_invoice.items[0].id]
        assert removed.id not in [item.id for item in loaded.items]
        assert invoice_repo.adapter.count("invoice_items") == 1

    def test_update_with_new_and_removed_items(self, invoice_repo, saved_invoice, widget):
        saved_invoice.items = [InvoiceItem(product_id=widget.id, quantity=5, total=Decimal("50.00"))]

        invoice_repo.save(saved_invoice)
        loaded = invoice_repo.find_by_id(saved_invoice.id)

        assert loaded.item_count == 1
        assert loaded.items[0].quantity == 5
        assert invoice_repo.adapter.count("invoice_items") == 1

    def test_failed_item_rolls_back_the_invoice(self, invoice_repo, adapter, customer):
        # Arrange: second item references no product (NOT NULL violation)
        invoice = Invoice(date=date(2020, 1, 1), customer_id=customer.id)
        invoice.add_item(InvoiceItem(product_id=1, quantity=1, total=Decimal("1")))
        invoice.add_item(InvoiceItem.model_construct(
            product_id=None, quantity=1, unit_price=Decimal("1"), total=Decimal("1")
        ))

        # Act
        with pytest.raises(ConflictError):
            invoice_repo.save(invoice)

        # Assert
        assert adapter.count("invoices") == 0
        assert adapter.count("invoice_items") == 0

    def test_save_rejects_other_entities(self, invoice_repo, customer):
        with pytest.raises(InvalidEntityError):
            invoice_repo.save(customer)


class TestReads:

    def test_find_by_id_missing(self, invoice_repo):
        assert invoice_repo.find_by_id(999) is None

    def test_paginate_loads_items(self, invoice_repo, saved_invoice, customer):
        second = invoice_repo.save(Invoice(date=date(2020, 1, 2), customer_id=customer.id))

        page = invoice_repo.paginate(1, 10)

        assert [invoice.id for invoice in page] == [saved_invoice.id, second.id]
        assert page[0].item_count == 2
        assert page[1].items == []

    def test_pages_do_not_overlap(self, invoice_repo, customer):
        ids = [
            invoice_repo.save(Invoice(date=date(2020, 1, day), customer_id=customer.id)).id
            for day in range(1, 6)
        ]

        seen = [inv.id for page in (1, 2, 3) for inv in invoice_repo.find_all(page, 2)]

        assert seen == ids


class TestDelete:

    def test_delete_removes_items(self, invoice_repo, adapter, saved_invoice):
        assert invoice_repo.delete(saved_invoice.id) is True

        assert invoice_repo.find_by_id(saved_invoice.id) is None
        assert adapter.count("invoice_items") == 0

    def test_delete_missing(self, invoice_repo):
        assert invoice_repo.delete(999) is False


class TestGetItems:

    def test_items_carry_product_names(self, invoice_repo, saved_invoice):
        items = invoice_repo.get_items(saved_invoice.id)

        assert [item.product_name for item in items] == ["Widget", "Gadget"]
        assert items[0].quantity == 2
        assert items[0].total == Decimal("21.00")

    def test_unit_price_falls_back_to_total_over_quantity(self, invoice_repo, adapter, customer, widget):
        # Arrange: item row stored without unit_price
        invoice_id = invoice_repo.create({"customer_id": customer.id, "date": "2020-01-01"})
        adapter.insert("invoice_items", {
            "invoice_id": invoice_id,
            "product_id": widget.id,
            "quantity": 2,
            "unit_price": None,
            "total": Decimal("21.00"),
        })

        # Act
        items = invoice_repo.get_items(invoice_id)

        # Assert
        assert items[0].unit_price == Decimal("10.50")

    def test_missing_product_is_unknown(self, invoice_repo, adapter, customer):
        invoice_id = invoice_repo.create({"customer_id": customer.id, "date": "2020-01-01"})
        adapter.insert("invoice_items", {
            "invoice_id": invoice_id,
            "product_id": 999,
            "quantity": 1,
            "unit_price": Decimal("5.00"),
            "total": Decimal("5.00"),
        })

        items = invoice_repo.get_items(invoice_id)

        assert items[0].product_name == "Unknown Product"

    def test_invoice_without_items(self, invoice_repo):
        assert invoice_repo.get_items(999) == []

    def test_item_views_use_loaded_items(self, invoice_repo, saved_invoice):
        names = {}

        views = invoice_repo.item_views(saved_invoice.items, names)

        assert [view.product_name for view in views] == ["Widget", "Gadget"]
        assert views[0].unit_price == Decimal("10.50")
        assert set(names.values()) == {"Widget", "Gadget"}


class TestAddItem:
    """add_item inserts the item and raises grand_total atomically"""

    def test_grand_total_grows_by_quantity_times_price(self, invoice_repo, customer, widget):
        # Arrange
        invoice_id = invoice_repo.create({
            "customer_id": customer.id,
            "date": date(2020, 1, 1),
            "grand_total": Decimal("100.00"),
        })

        # Act
        added = invoice_repo.add_item(invoice_id, {
            "product_id": widget.id, "quantity": 3, "price": Decimal("2.00"),
        })

        # Assert
        assert added is True
        invoice = invoice_repo.find_by_id(invoice_id)
        assert invoice.grand_total == Decimal("106.00")
        assert invoice.items[0].unit_price == Decimal("2.00")
        assert invoice.items[0].total == Decimal("6.00")

    def test_unit_price_key_is_accepted(self, invoice_repo, customer, widget):
        invoice_id = invoice_repo.create({"customer_id": customer.id, "date": "2020-01-01"})

        invoice_repo.add_item(invoice_id, {"product_id": widget.id, "quantity": 2, "unit_price": "1.25"})

        assert invoice_repo.find_by_id(invoice_id).grand_total == Decimal("2.50")

    def test_missing_invoice_writes_nothing(self, invoice_repo, adapter, widget):
        added = invoice_repo.add_item(999, {"product_id": widget.id, "quantity": 1, "price": 1})

        assert added is False
        assert adapter.count("invoice_items") == 0

    def test_failed_insert_leaves_total_unchanged(self, invoice_repo, adapter, customer):
        invoice_id = invoice_repo.create({
            "customer_id": customer.id, "date": "2020-01-01", "grand_total": 100,
        })

        with pytest.raises(ConflictError):
            invoice_repo.add_item(invoice_id, {"product_id": None, "quantity": 1, "price": 5})

        assert invoice_repo.find_by_id(invoice_id).grand_total == Decimal("100.00")
        assert adapter.count("invoice_items") == 0


class TestCreate:

    def test_create_accepts_date_text(self, invoice_repo, customer):
        invoice_id = invoice_repo.create({
            "customer_id": customer.id, "date": "2024-03-01", "grand_total": "12.5",
        })

        invoice = invoice_repo.find_by_id(invoice_id)

        assert invoice.date == date(2024, 3, 1)
        assert invoice.grand_total == Decimal("12.50")
        assert invoice.items == []

    def test_create_accepts_serial_date(self, invoice_repo, customer):
        invoice_id = invoice_repo.create({"customer_id": customer.id, "invoice_date": 43831})

        assert invoice_repo.find_by_id(invoice_id).date == date(2020, 1, 1)
