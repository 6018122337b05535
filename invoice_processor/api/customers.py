"""
Customers API Endpoints
"""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from invoice_processor.bootstrap import Services
from invoice_processor.domain.customer import Customer, CustomerCreate

from .deps import get_services, resolve_per_page
from .errors import http_error

router = APIRouter()


@router.get("/")
async def get_customers(
    page: int = Query(1, ge=1),
    per_page: Optional[int] = Query(None, ge=1),
    services: Services = Depends(get_services)
):
    try:
        per_page = resolve_per_page(per_page, services.settings)
        customers = services.customers.find_all(page, per_page)

        return {
            "status": "success",
            "page": page,
            "per_page": per_page,
            "count": len(customers),
            "data": [customer.to_dict() for customer in customers]
        }

    except Exception as e:
        raise http_error(e, "fetching customers")


@router.get("/{customer_id}")
async def get_customer(customer_id: int, services: Services = Depends(get_services)):
    try:
        customer = services.customers.find_by_id(customer_id)
    except Exception as e:
        raise http_error(e, f"fetching customer {customer_id}")

    if not customer:
        raise HTTPException(status_code=404, detail=f"Customer {customer_id} not found")

    return {
        "status": "success",
        "data": customer.to_dict()
    }


@router.post("/", status_code=201)
async def create_customer(body: CustomerCreate, services: Services = Depends(get_services)):
    try:
        customer = services.customers.save(Customer(**body.model_dump()))
        return {
            "status": "success",
            "data": customer.to_dict()
        }

    except Exception as e:
        raise http_error(e, "creating customer")
