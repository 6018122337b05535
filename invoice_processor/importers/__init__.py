"""
Import readers

Each reader turns one file format into raw row mappings for the
import pipeline; ReaderRegistry selects the reader by file extension.
"""
from .base import RowReader, check_headers
from .csv_reader import CsvReader
from .registry import ReaderRegistry
from .spreadsheet_reader import LegacyExcelReader, OpenDocumentReader, SpreadsheetReader

__all__ = [
    "RowReader",
    "check_headers",
    "CsvReader",
    "LegacyExcelReader",
    "OpenDocumentReader",
    "ReaderRegistry",
    "SpreadsheetReader",
]
