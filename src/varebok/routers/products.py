"""Product listing and lookup endpoints."""

import asyncio

from fastapi import APIRouter, HTTPException, Query

import varebok.app as _app
from varebok.models import Product, ProductFilter
from varebok.services import products as product_service

router = APIRouter()


@router.get("", response_model=list[Product])
async def list_products(
    search: str | None = Query(None, description="Case-insensitive text to find in name or description"),
    marketplace: str | None = Query(None, description="Exact marketplace tag"),
) -> list[Product]:
    """List products, optionally filtered by search text and marketplace.

    Returns an empty list when nothing matches.
    """
    product_filter = ProductFilter(search=search, marketplace=marketplace)
    return await asyncio.to_thread(product_service.list_products, _app.get_catalog(), product_filter)


@router.get("/{product_id}", response_model=Product)
async def get_product(product_id: str) -> Product:
    """Look up a single product by identifier."""
    try:
        return await asyncio.to_thread(product_service.get_product, _app.get_catalog(), product_id)
    except product_service.ProductNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
