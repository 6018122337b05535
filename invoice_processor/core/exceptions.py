"""
Exception hierarchy for the invoice processor

Storage failures from any backend are translated into a small set of
kinds (not_found, conflict, unavailable, invalid) so that services and
the API never depend on driver-specific exception classes. The original
driver exception is always kept as __cause__.

Author: TM3
Date: 2025-11-20
"""
from typing import Any, Optional


class InvoiceProcessorError(Exception):
    """Root of every error raised by this package"""


class ConfigurationError(InvoiceProcessorError):
    """Settings are missing or inconsistent"""


class StorageError(InvoiceProcessorError):
    """
    Backend failure (SQL driver, Supabase/PostgREST)

    Attributes:
        kind: One of not_found, conflict, unavailable, invalid, storage
    """

    kind = "storage"

    def __init__(self, message: str, kind: Optional[str] = None):
        super().__init__(message)
        if kind:
            self.kind = kind


class NotFoundError(StorageError):
    kind = "not_found"


class InvoiceNotFoundError(NotFoundError):
    def __init__(self, invoice_id: Any):
        super().__init__(f"Invoice not found: {invoice_id}")
        self.invoice_id = invoice_id


class ConflictError(StorageError):
    kind = "conflict"


class UnavailableError(StorageError):
    kind = "unavailable"


class InvalidQueryError(StorageError):
    kind = "invalid"


class InvalidEntityError(InvoiceProcessorError, TypeError):
    """A repository was asked to save an entity of the wrong type"""


class UnsupportedFormatError(InvoiceProcessorError, ValueError):
    """No import reader / export strategy for the requested format"""


class InvoiceImportError(InvoiceProcessorError):
    """
    Import failure reported to the caller as a single error

    Attributes:
        row_index: 1-based index of the data row being processed (None when
            the failure happened before any row, e.g. while reading the file)
        invoice_key: Invoice grouping key of the failing group
        partial_result: ImportResult for the groups committed before the failure
    """

    def __init__(
        self,
        message: str,
        row_index: Optional[int] = None,
        invoice_key: Optional[str] = None,
        partial_result: Any = None,
    ):
        super().__init__(message)
        self.row_index = row_index
        self.invoice_key = invoice_key
        self.partial_result = partial_result


class SpreadsheetReadError(InvoiceImportError):
    """The reader could not turn the file into rows"""
