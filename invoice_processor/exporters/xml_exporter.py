"""
XML exporter

Layout:
    <invoices>
      <invoice>
        <id/><date/><grand_total/>
        <customer><id/><name/><address/></customer>
        <items>
          <item><product_name/><quantity/><unit_price/><total/></item>
        </items>
      </invoice>
    </invoices>
"""
import xml.etree.ElementTree as ET
from typing import Any, List, Mapping

from .base import Exporter, InvoiceDocument

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>'

CUSTOMER_FIELDS = ("id", "name", "address")
ITEM_FIELDS = ("product_name", "quantity", "unit_price", "total")


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def _add_fields(parent: ET.Element, data: Mapping[str, Any], fields) -> None:
    for field in fields:
        ET.SubElement(parent, field).text = _text(data.get(field))


class XmlExporter(Exporter):

    content_type = "application/xml"
    file_extension = ".xml"

    def build_tree(self, invoices: List[InvoiceDocument]) -> ET.Element:
        root = ET.Element("invoices")

        for invoice in invoices:
            node = ET.SubElement(root, "invoice")
            _add_fields(node, invoice, ("id", "date", "grand_total"))

            customer = ET.SubElement(node, "customer")
            _add_fields(customer, invoice.get("customer") or {}, CUSTOMER_FIELDS)

            items = ET.SubElement(node, "items")
            for item in invoice.get("items") or []:
                _add_fields(ET.SubElement(items, "item"), item, ITEM_FIELDS)

        return root

    def render(self, invoices: List[InvoiceDocument]) -> str:
        root = self.build_tree(invoices)
        ET.indent(root, space="    ")
        return f"{XML_DECLARATION}\n{ET.tostring(root, encoding='unicode')}\n"
