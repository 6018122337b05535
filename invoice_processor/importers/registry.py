"""
Reader registry - picks the import reader for a file by its extension
"""
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from invoice_processor.core.exceptions import UnsupportedFormatError

from .base import PathLike, RowReader
from .csv_reader import CsvReader
from .spreadsheet_reader import LegacyExcelReader, OpenDocumentReader, SpreadsheetReader

logger = logging.getLogger(__name__)


class ReaderRegistry:
    """
    Ordered list of readers; the first one that can handle a path wins

    Usage:
        registry = ReaderRegistry.default()
        rows = registry.read("invoices.xlsx")
    """

    def __init__(self, readers: Optional[List[RowReader]] = None):
        self._readers: List[RowReader] = list(readers or [])

    @classmethod
    def default(cls) -> "ReaderRegistry":
        return cls([SpreadsheetReader(), LegacyExcelReader(), OpenDocumentReader(), CsvReader()])

    def register(self, reader: RowReader) -> None:
        """Add a reader; it takes precedence over the ones already registered"""
        self._readers.insert(0, reader)

    @property
    def supported_extensions(self) -> List[str]:
        extensions = []
        for reader in self._readers:
            extensions.extend(ext for ext in reader.extensions if ext not in extensions)
        return extensions

    def reader_for(self, path: PathLike) -> RowReader:
        for reader in self._readers:
            if reader.can_handle(path):
                return reader

        raise UnsupportedFormatError(
            f"Unsupported file type '{Path(path).suffix}'. "
            f"Supported: {', '.join(self.supported_extensions)}"
        )

    def read(self, path: PathLike) -> List[Dict[str, Any]]:
        reader = self.reader_for(path)
        logger.debug(f"Reading {path} with {type(reader).__name__}")
        return reader.read(path)
