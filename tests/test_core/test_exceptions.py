"""
Unit tests for the exception hierarchy
"""
from invoice_processor.core.exceptions import (
    ConflictError,
    InvalidEntityError,
    InvalidQueryError,
    InvoiceImportError,
    InvoiceNotFoundError,
    InvoiceProcessorError,
    NotFoundError,
    SpreadsheetReadError,
    StorageError,
    UnavailableError,
    UnsupportedFormatError,
)


class TestStorageErrorKinds:
    """Every backend failure carries one of a few kinds"""

    def test_each_subclass_has_its_kind(self):
        assert NotFoundError("x").kind == "not_found"
        assert ConflictError("x").kind == "conflict"
        assert UnavailableError("x").kind == "unavailable"
        assert InvalidQueryError("x").kind == "invalid"
        assert StorageError("x").kind == "storage"

    def test_kind_can_be_given_explicitly(self):
        assert StorageError("bad url", kind="invalid").kind == "invalid"

    def test_all_storage_errors_share_the_root(self):
        for error_class in (NotFoundError, ConflictError, UnavailableError, InvalidQueryError):
            assert issubclass(error_class, StorageError)
            assert issubclass(error_class, InvoiceProcessorError)


class TestDomainErrors:

    def test_invoice_not_found_message(self):
        error = InvoiceNotFoundError(42)

        assert isinstance(error, NotFoundError)
        assert error.invoice_id == 42
        assert str(error) == "Invoice not found: 42"

    def test_invalid_entity_is_a_type_error(self):
        assert issubclass(InvalidEntityError, TypeError)

    def test_unsupported_format_is_a_value_error(self):
        assert issubclass(UnsupportedFormatError, ValueError)

    def test_import_error_keeps_context(self):
        error = InvoiceImportError("boom", row_index=3, invoice_key="7", partial_result={"invoices": 1})

        assert str(error) == "boom"
        assert error.row_index == 3
        assert error.invoice_key == "7"
        assert error.partial_result == {"invoices": 1}

    def test_spreadsheet_read_error_is_an_import_error(self):
        error = SpreadsheetReadError("missing columns")

        assert isinstance(error, InvoiceImportError)
        assert error.row_index is None
        assert error.partial_result is None
