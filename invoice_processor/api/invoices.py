"""
Invoices API Endpoints
List, show and create invoices and add items to them

Author: TM3
Date: 2025-11-22
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query

from invoice_processor.bootstrap import Services
from invoice_processor.domain.invoice import InvoiceCreate, InvoiceItemCreate

from .deps import get_services, resolve_per_page
from .errors import http_error

router = APIRouter()


@router.get("/")
async def get_invoices(
    page: int = Query(1, ge=1),
    per_page: Optional[int] = Query(None, ge=1, description="Defaults to DEFAULT_PAGE_SIZE"),
    services: Services = Depends(get_services)
):
    """
    Get one page of invoices ordered by id

    Returns invoices with their items
    """
    try:
        per_page = resolve_per_page(per_page, services.settings)
        invoices = services.invoice_service.get_paginated_invoices(page, per_page)

        return {
            "status": "success",
            "page": page,
            "per_page": per_page,
            "count": len(invoices),
            "data": [invoice.to_dict() for invoice in invoices]
        }

    except Exception as e:
        raise http_error(e, "fetching invoices")


@router.get("/{invoice_id}")
async def get_invoice(invoice_id: int, services: Services = Depends(get_services)):
    """
    Get a single invoice with its customer and named items
    """
    try:
        details = services.invoice_service.get_invoice_details(invoice_id)
        return {
            "status": "success",
            "data": details
        }

    except Exception as e:
        raise http_error(e, f"fetching invoice {invoice_id}")


@router.post("/", status_code=201)
async def create_invoice(body: InvoiceCreate, services: Services = Depends(get_services)):
    try:
        invoice = services.invoice_service.create_invoice(body.model_dump())
        return {
            "status": "success",
            "data": invoice.to_dict()
        }

    except Exception as e:
        raise http_error(e, "creating invoice")


@router.post("/{invoice_id}/items", status_code=201)
async def add_invoice_item(
    invoice_id: int,
    body: InvoiceItemCreate,
    services: Services = Depends(get_services)
):
    """
    Add an item to an invoice

    grand_total grows by quantity * price.
    """
    try:
        invoice = services.invoice_service.add_item(invoice_id, body.model_dump())
        return {
            "status": "success",
            "data": invoice.to_dict()
        }

    except Exception as e:
        raise http_error(e, f"adding item to invoice {invoice_id}")
