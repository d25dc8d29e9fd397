from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query

from aquacrm.core.modules.product.models import Product, ProductCreate, ProductType, ProductUpdate
from aquacrm.web.deps import AppDep
from aquacrm.web.openapi import ErrorResponse

router = APIRouter(tags=["products"])


@router.get(
    "/products",
    summary="List catalog",
    description="Get products and services, newest first. Use `type` to list only products or only services.",
    operation_id="listProducts",
    responses={200: {"description": "Catalog entries"}},
)
async def list_products(
    app: AppDep, type: Annotated[ProductType | None, Query(description="Catalog entry type")] = None
) -> list[Product]:
    return await app.get_products(type)


@router.get(
    "/products/{product_id}",
    summary="Get catalog entry",
    operation_id="getProduct",
    responses={
        200: {"description": "Catalog entry"},
        404: {"model": ErrorResponse, "description": "Product not found"},
    },
)
async def get_product(product_id: UUID, app: AppDep) -> Product:
    return await app.get_product(product_id)


@router.post(
    "/products",
    summary="Create catalog entry",
    operation_id="createProduct",
    status_code=201,
    responses={
        201: {"description": "Product created successfully"},
        400: {"model": ErrorResponse, "description": "SKU already exists"},
    },
)
async def create_product(request: ProductCreate, app: AppDep) -> Product:
    return await app.create_product(request)


@router.patch(
    "/products/{product_id}",
    summary="Update catalog entry",
    operation_id="updateProduct",
    responses={
        200: {"description": "Product updated successfully"},
        400: {"model": ErrorResponse, "description": "SKU already exists"},
        404: {"model": ErrorResponse, "description": "Product not found"},
    },
)
async def update_product(product_id: UUID, request: ProductUpdate, app: AppDep) -> Product:
    return await app.update_product(product_id, request)


@router.delete(
    "/products/{product_id}",
    summary="Delete catalog entry",
    operation_id="deleteProduct",
    status_code=204,
    responses={
        204: {"description": "Product deleted successfully"},
        404: {"model": ErrorResponse, "description": "Product not found"},
    },
)
async def delete_product(product_id: UUID, app: AppDep) -> None:
    await app.delete_product(product_id)
