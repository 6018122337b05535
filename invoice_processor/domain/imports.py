"""
Import Domain Models

ImportRow is the flat row shape every reader produces; ImportResult is
the summary returned by the import pipeline.

Row normalization degrades silently: absent strings become "", absent
or unparseable numbers become 0. Only dates are strict, because an
invoice cannot be stored without one.

Author: TM3
Date: 2025-11-21
"""
import datetime
import math
import re
from decimal import Decimal
from typing import Any, Dict, Mapping, Optional

from dateutil import parser as date_parser
from pydantic import BaseModel

from .invoice import to_decimal

# Day 0 of the spreadsheet serial date system (1900 leap-year bug included)
EXCEL_EPOCH = datetime.date(1899, 12, 30)
# Serial of 9999-12-31, the last date a spreadsheet can hold
MAX_EXCEL_SERIAL = 2958465

_NUMERIC = re.compile(r"^-?\d+(\.\d+)?$")
_INTEGRAL_TEXT = re.compile(r"^-?\d+\.0+$")

# Header variants seen in customer spreadsheets -> canonical field
HEADER_ALIASES: Dict[str, str] = {
    "invoice": "invoice",
    "invoice_no": "invoice",
    "invoice_number": "invoice",
    "invoice_date": "invoice_date",
    "date": "invoice_date",
    "customer_name": "customer_name",
    "name": "customer_name",
    "customer_address": "customer_address",
    "address": "customer_address",
    "product_name": "product_name",
    "product": "product_name",
    "quantity": "quantity",
    "qyantity": "quantity",  # misspelt header in historical exports
    "qty": "quantity",
    "price": "price",
    "unit_price": "price",
    "total": "total",
    "grand_total": "grand_total",
}

REQUIRED_HEADERS = (
    "invoice_date",
    "customer_name",
    "customer_address",
    "product_name",
    "quantity",
    "price",
)


def normalize_header(header: Any) -> str:
    """'Customer Name ' -> 'customer_name'"""
    if header is None:
        return ""
    text = str(header).strip().lower()
    text = re.sub(r"[^a-z0-9_]", "_", text)
    text = re.sub(r"_+", "_", text)
    return text.strip("_")


def canonical_key(header: Any) -> str:
    """Normalized header mapped through HEADER_ALIASES (unknown headers pass through)"""
    normalized = normalize_header(header)
    return HEADER_ALIASES.get(normalized, normalized)


def convert_excel_date(value: Any, today: Optional[datetime.date] = None) -> datetime.date:
    """
    Convert a spreadsheet date cell to a calendar date

    - serial numbers (int/float/numeric text): 1899-12-30 + N days, for
      N up to MAX_EXCEL_SERIAL; longer digit strings such as "20200101"
      are parsed as text
    - datetime/date values: their date
    - other text: parsed with dateutil
    - empty (None, blank text, NaN): today

    Raises:
        ValueError: If the text cannot be parsed as a date
    """
    if isinstance(value, datetime.datetime):
        return value.date()
    if isinstance(value, datetime.date):
        return value
    if value is None or (isinstance(value, str) and not value.strip()):
        return today or datetime.date.today()
    if isinstance(value, float) and math.isnan(value):
        return today or datetime.date.today()
    if isinstance(value, (int, float, Decimal)) and not isinstance(value, bool):
        if not math.isfinite(value) or abs(value) > MAX_EXCEL_SERIAL:
            raise ValueError(f"Unrecognized invoice date: {value!r}")
        return EXCEL_EPOCH + datetime.timedelta(days=int(value))

    text = str(value).strip()
    if _NUMERIC.match(text) and abs(float(text)) <= MAX_EXCEL_SERIAL:
        return EXCEL_EPOCH + datetime.timedelta(days=int(float(text)))

    try:
        return date_parser.parse(text).date()
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Unrecognized invoice date: {value!r}") from e


def normalize_invoice_key(value: Any) -> str:
    """Grouping key as text; 7, 7.0 and '7.0' all become '7'"""
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, Decimal) and value == value.to_integral_value():
        return str(int(value))

    text = str(value).strip()
    if _INTEGRAL_TEXT.match(text):
        return text.split(".")[0]
    return text


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


class ImportRow(BaseModel):
    """
    One flat import row

    Fields:
        invoice: Grouping key; contiguous rows with the same key form one invoice
        invoice_date: Calendar date of the invoice
        customer_name / customer_address: Customer natural key and address
        product_name / price: Product natural key and unit price
        quantity / total: Line quantity and line total
        grand_total: Invoice total as given by the source
        row_index: 1-based position in the source (for error reports)
    """

    invoice: str = ""
    invoice_date: datetime.date
    customer_name: str = ""
    customer_address: str = ""
    product_name: str = ""
    quantity: int = 0
    price: Decimal = Decimal("0")
    total: Decimal = Decimal("0")
    grand_total: Decimal = Decimal("0")
    row_index: Optional[int] = None

    @classmethod
    def from_record(cls, record: Mapping[str, Any], row_index: Optional[int] = None) -> "ImportRow":
        """
        Build a row from a raw mapping (reader output, CSV dict, test data)

        Keys are normalized and aliased, so 'Customer Name', 'customer_name'
        and 'name' are all accepted.
        """
        data: Dict[str, Any] = {}
        for key, value in record.items():
            canonical = canonical_key(key)
            # First occurrence wins when two headers alias the same field
            if canonical and canonical not in data:
                data[canonical] = value

        return cls(
            invoice=normalize_invoice_key(data.get("invoice")),
            invoice_date=convert_excel_date(data.get("invoice_date")),
            customer_name=_text(data.get("customer_name")),
            customer_address=_text(data.get("customer_address")),
            product_name=_text(data.get("product_name")),
            quantity=int(to_decimal(data.get("quantity"))),
            price=to_decimal(data.get("price")),
            total=to_decimal(data.get("total")),
            grand_total=to_decimal(data.get("grand_total")),
            row_index=row_index,
        )


class ImportResult(BaseModel):
    """
    Counts reported by the import pipeline

    customers/products count resolutions (found or created); the *_created
    fields count only new records.
    """

    invoices: int = 0
    customers: int = 0
    products: int = 0
    items: int = 0
    customers_created: int = 0
    products_created: int = 0

    def to_dict(self) -> dict:
        return self.model_dump()
