"""
Invoice Domain Models

Represents invoices and their line items. An invoice owns its items;
items reference products without owning them.

Author: TM3
Date: 2025-11-20
"""
import datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

CENTS = Decimal("0.01")


def to_decimal(value: Any) -> Decimal:
    """Coerce numbers/strings to Decimal; None, blanks and garbage become 0"""
    if isinstance(value, Decimal):
        return value if value.is_finite() else Decimal("0")
    if value is None or value == "":
        return Decimal("0")
    try:
        # str() so that floats like 10.1 do not carry binary noise
        result = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return Decimal("0")
    # NaN (pandas blank cell) and infinities
    if not result.is_finite():
        return Decimal("0")
    return result


def money(value: Any) -> Decimal:
    """Round an amount to cents"""
    return to_decimal(value).quantize(CENTS, rounding=ROUND_HALF_UP)


def resolve_unit_price(record: Mapping[str, Any]) -> Decimal:
    """
    Unit price of a stored item record

    Priority: explicit unit_price -> price -> total / quantity -> 0
    """
    for key in ("unit_price", "price"):
        value = record.get(key)
        if value is not None and value != "":
            return money(value)

    quantity = to_decimal(record.get("quantity"))
    if record.get("total") is not None and quantity > 0:
        return money(to_decimal(record["total"]) / quantity)

    return money(0)


class InvoiceItem(BaseModel):
    """
    Invoice Item domain model - one line of an invoice

    Fields:
        id: Item ID (None until persisted)
        invoice_id: Parent invoice ID (set when the invoice is saved)
        product_id: Referenced product
        quantity: Units sold
        unit_price: Price per unit; derived as total / quantity when omitted
        total: Line total
    """

    id: Optional[int] = Field(None, description="Invoice item ID")
    invoice_id: Optional[int] = Field(None, description="Parent invoice ID")
    product_id: int = Field(..., description="Product ID")
    quantity: int = Field(0, description="Quantity sold", ge=0)
    unit_price: Optional[Decimal] = Field(None, description="Price per unit", ge=0)
    total: Decimal = Field(Decimal("0"), description="Line total")

    model_config = ConfigDict(
        from_attributes=True,
        json_encoders={Decimal: float}
    )

    @model_validator(mode="after")
    def _derive_unit_price(self) -> "InvoiceItem":
        if self.unit_price is None:
            self.unit_price = resolve_unit_price(
                {"quantity": self.quantity, "total": self.total}
            )
        return self

    def to_dict(self) -> dict:
        """Convert to dictionary with Decimal to float conversion"""
        data = self.model_dump()
        for field in ["unit_price", "total"]:
            if data.get(field) is not None:
                data[field] = float(data[field])
        return data


class InvoiceItemView(BaseModel):
    """Item joined with its product name, as returned by get_items()"""

    id: Optional[int] = None
    product_id: Optional[int] = None
    product_name: str = "Unknown Product"
    quantity: int = 0
    unit_price: Decimal = Decimal("0")
    total: Decimal = Decimal("0")

    def to_dict(self) -> dict:
        data = self.model_dump()
        data["unit_price"] = float(data["unit_price"])
        data["total"] = float(data["total"])
        return data


class Invoice(BaseModel):
    """
    Invoice domain model

    grand_total is supplied by the caller (import source or API) and is
    not recomputed from the items.
    """

    id: Optional[int] = Field(None, description="Invoice ID")
    date: datetime.date = Field(..., description="Invoice date")
    customer_id: int = Field(..., description="Customer ID")
    grand_total: Decimal = Field(Decimal("0"), description="Invoice grand total")

    # Composition: items are saved and deleted with the invoice
    items: List[InvoiceItem] = Field(default_factory=list, description="Invoice items")

    model_config = ConfigDict(
        from_attributes=True,
        json_encoders={
            Decimal: float,
            datetime.date: lambda v: v.isoformat()
        }
    )

    def add_item(self, item: InvoiceItem) -> None:
        self.items.append(item)

    @property
    def item_count(self) -> int:
        """Number of lines in the invoice"""
        return len(self.items)

    @property
    def items_total(self) -> Decimal:
        """Sum of the line totals (may differ from grand_total)"""
        return sum((item.total for item in self.items), Decimal("0"))

    def to_dict(self, include_items: bool = True) -> dict:
        """
        Convert to dictionary

        Decimal -> float and date -> ISO string for JSON compatibility
        """
        data = self.model_dump(exclude={"items"})
        data["date"] = self.date.isoformat()
        data["grand_total"] = float(self.grand_total)
        data["item_count"] = self.item_count
        if include_items:
            data["items"] = [item.to_dict() for item in self.items]
        return data


class InvoiceCreate(BaseModel):
    """Schema for creating an invoice through the API"""
    customer_id: int
    date: datetime.date
    grand_total: Decimal = Decimal("0")


class InvoiceItemCreate(BaseModel):
    """Schema for adding an item to an existing invoice"""
    product_id: int
    quantity: int = Field(..., ge=0)
    price: Optional[Decimal] = Field(None, ge=0)
    total: Optional[Decimal] = None
