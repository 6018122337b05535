"""
Products API Endpoints
"""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from invoice_processor.bootstrap import Services
from invoice_processor.domain.customer import Product, ProductCreate

from .deps import get_services, resolve_per_page
from .errors import http_error

router = APIRouter()


@router.get("/")
async def get_products(
    page: int = Query(1, ge=1),
    per_page: Optional[int] = Query(None, ge=1),
    services: Services = Depends(get_services)
):
    try:
        per_page = resolve_per_page(per_page, services.settings)
        products = services.products.find_all(page, per_page)

        return {
            "status": "success",
            "page": page,
            "per_page": per_page,
            "count": len(products),
            "data": [product.to_dict() for product in products]
        }

    except Exception as e:
        raise http_error(e, "fetching products")


@router.get("/{product_id}")
async def get_product(product_id: int, services: Services = Depends(get_services)):
    try:
        product = services.products.find_by_id(product_id)
    except Exception as e:
        raise http_error(e, f"fetching product {product_id}")

    if not product:
        raise HTTPException(status_code=404, detail=f"Product {product_id} not found")

    return {
        "status": "success",
        "data": product.to_dict()
    }


@router.post("/", status_code=201)
async def create_product(body: ProductCreate, services: Services = Depends(get_services)):
    try:
        product = services.products.save(Product(**body.model_dump()))
        return {
            "status": "success",
            "data": product.to_dict()
        }

    except Exception as e:
        raise http_error(e, "creating product")
