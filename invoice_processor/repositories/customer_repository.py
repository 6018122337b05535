"""
Customer Repository - Data Access Layer for Customers

Author: TM3
Date: 2025-11-21
"""
from typing import Any, Dict, Tuple

from invoice_processor.domain.customer import Customer

from .base import NamedRepository


class CustomerRepository(NamedRepository[Customer]):
    """
    Repository for Customer data access

    Customers are matched by name only; the address of an existing
    customer is never overwritten by find-or-create.
    """

    table = "customers"
    entity_class = Customer

    def _to_entity(self, record: Dict[str, Any]) -> Customer:
        return Customer(
            id=record.get("id"),
            name=record.get("name") or "",
            address=record.get("address") or "",
        )

    def get_or_create(self, name: str, address: str = "") -> Tuple[Customer, bool]:
        return self._get_or_create(name, lambda: Customer(name=name, address=address))

    def find_or_create(self, name: str, address: str = "") -> Customer:
        """
        Customer with this name, created with `address` if none exists

        Calling it twice with the same name returns the same id.
        """
        customer, _ = self.get_or_create(name, address)
        return customer
