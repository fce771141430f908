"""Endpoints for the merged product catalog."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Response, status

from fakeshop.api.dependencies.catalog import get_product_service
from fakeshop.api.schemas.product import (
    ApiResponse,
    ErrorResponse,
    ProductCreate,
    ProductRead,
    StockUpdate,
)
from fakeshop.services.catalog_product import CatalogProduct
from fakeshop.services.products import ProductService

logger = logging.getLogger(__name__)

router = APIRouter()

NOT_FOUND = {404: {"model": ErrorResponse, "description": "Product not found"}}
UPSTREAM_DOWN = {
    503: {"model": ErrorResponse, "description": "External catalog unavailable"}
}
INVALID = {400: {"model": ErrorResponse, "description": "Invalid input"}}


def _wrap(data):
    return {"data": data, "success": True, "timestamp": datetime.now(timezone.utc)}


def _read(product: CatalogProduct) -> ProductRead:
    return ProductRead.model_validate(product)


@router.get(
    "",
    summary="Get all products",
    response_model=ApiResponse[list[ProductRead]],
    responses=UPSTREAM_DOWN,
)
async def list_products(
    service: ProductService = Depends(get_product_service),
) -> dict:
    """Return local and external products merged into one list.

    External-only products carry synthesized stock that changes per call.
    """
    products = await service.list_all()
    return _wrap([_read(p) for p in products])


@router.get(
    "/{product_id}",
    summary="Get a product by ID",
    response_model=ApiResponse[ProductRead],
    responses={**NOT_FOUND, **INVALID},
)
async def get_product(
    product_id: int,
    service: ProductService = Depends(get_product_service),
) -> dict:
    return _wrap(_read(await service.get_one(product_id)))


@router.post(
    "",
    summary="Create a new product",
    status_code=status.HTTP_201_CREATED,
    response_model=ApiResponse[ProductRead],
    responses={**INVALID, **UPSTREAM_DOWN},
)
async def create_product(
    payload: ProductCreate,
    service: ProductService = Depends(get_product_service),
) -> dict:
    """Persist a local product under a newly allocated id."""
    product = await service.create(payload.to_new_product())
    return _wrap(_read(product))


@router.put(
    "/{product_id}/stock",
    summary="Update product stock",
    response_model=ApiResponse[ProductRead],
    responses={**NOT_FOUND, **INVALID},
)
async def update_stock(
    product_id: int,
    payload: StockUpdate,
    service: ProductService = Depends(get_product_service),
) -> dict:
    """Set the stock of a product.

    Updating an external-only product copies it into the local database first.
    """
    product = await service.update_stock(product_id, payload.stock)
    return _wrap(_read(product))


@router.delete(
    "/{product_id}",
    summary="Delete a product",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses=NOT_FOUND,
)
async def delete_product(
    product_id: int,
    service: ProductService = Depends(get_product_service),
) -> Response:
    """Remove a product from the local database; external items cannot be deleted."""
    await service.remove(product_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
