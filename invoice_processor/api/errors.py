"""
Error -> HTTP status mapping shared by every router
"""
import logging

from fastapi import HTTPException

from invoice_processor.core.exceptions import (
    ConflictError,
    InvoiceImportError,
    NotFoundError,
    UnavailableError,
    UnsupportedFormatError,
)

logger = logging.getLogger(__name__)


def http_error(error: Exception, action: str) -> HTTPException:
    """
    Build the HTTPException for a failure while `action` ("fetching invoices")

    404 not found, 400 bad import/format, 409 conflict, 503 backend down,
    500 anything else.
    """
    if isinstance(error, NotFoundError):
        return HTTPException(status_code=404, detail=str(error))
    if isinstance(error, (InvoiceImportError, UnsupportedFormatError)):
        return HTTPException(status_code=400, detail=str(error))
    if isinstance(error, ConflictError):
        return HTTPException(status_code=409, detail=f"Conflict {action}: {str(error)}")
    if isinstance(error, UnavailableError):
        return HTTPException(status_code=503, detail=f"Database unavailable {action}: {str(error)}")

    logger.exception(f"Error {action}")
    return HTTPException(status_code=500, detail=f"Error {action}: {str(error)}")
