"""
Export strategies (JSON, XML)
"""
from .base import Exporter, InvoiceDocument
from .json_exporter import JsonExporter
from .xml_exporter import XmlExporter

__all__ = ["Exporter", "InvoiceDocument", "JsonExporter", "XmlExporter"]
