"""
Export strategy base class

Exporters render already-assembled invoice documents (plain dicts, see
ExportService) to text. They never touch storage.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, List

InvoiceDocument = Dict[str, Any]


class Exporter(ABC):

    content_type: str = "text/plain"
    file_extension: str = ".txt"

    @abstractmethod
    def render(self, invoices: List[InvoiceDocument]) -> str:
        """Serialize every invoice document into one payload"""
