"""
FastAPI dependencies

The services are built once in the app lifespan and stored on
app.state; tests replace get_services through dependency_overrides.
"""
from typing import Optional

from fastapi import Request

from invoice_processor.bootstrap import Services
from invoice_processor.core.config import Settings


def get_services(request: Request) -> Services:
    return request.app.state.services


def resolve_per_page(per_page: Optional[int], settings: Settings) -> int:
    """Requested page size, defaulted and capped by settings"""
    if per_page is None:
        return settings.DEFAULT_PAGE_SIZE
    return min(per_page, settings.MAX_PAGE_SIZE)
