"""
Product Repository - Data Access Layer for Products

Author: TM3
Date: 2025-11-21
"""
from decimal import Decimal
from typing import Any, Dict, Tuple

from invoice_processor.domain.customer import Product
from invoice_processor.domain.invoice import money, to_decimal

from .base import NamedRepository


class ProductRepository(NamedRepository[Product]):
    """
    Repository for Product data access

    Price is first-write-wins: find_or_create with a different price for
    a known name returns the stored product unchanged.
    """

    table = "products"
    entity_class = Product

    def _to_entity(self, record: Dict[str, Any]) -> Product:
        return Product(
            id=record.get("id"),
            name=record.get("name") or "",
            price=money(record.get("price")),
        )

    def get_or_create(self, name: str, price: Any = Decimal("0")) -> Tuple[Product, bool]:
        return self._get_or_create(name, lambda: Product(name=name, price=to_decimal(price)))

    def find_or_create(self, name: str, price: Any = Decimal("0")) -> Product:
        product, _ = self.get_or_create(name, price)
        return product
