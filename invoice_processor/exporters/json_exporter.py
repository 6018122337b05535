"""
JSON exporter - pretty printed, non-ASCII characters kept as is
"""
import json
from typing import List

from .base import Exporter, InvoiceDocument


class JsonExporter(Exporter):

    content_type = "application/json"
    file_extension = ".json"

    def render(self, invoices: List[InvoiceDocument]) -> str:
        return json.dumps(invoices, indent=4, ensure_ascii=False, default=str)
