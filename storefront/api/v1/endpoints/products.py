"""
Catalog endpoints.

- GET operations are public.
- POST / PUT / DELETE require the admin role.
"""

from __future__ import annotations

from decimal import Decimal

from fastapi import APIRouter, Depends, Query

from storefront.api.v1.deps import get_catalog, require_admin
from storefront.models.product import Product
from storefront.schemas.product import (ProductCreate, ProductFilter, ProductRead, ProductUpdate,
                                        SortKey)
from storefront.schemas.token import Identity
from storefront.services.catalog import CatalogStore

router = APIRouter(prefix="/products", tags=["products"])


@router.get("", response_model=list[ProductRead])
async def list_products(
    category: str | None = None,
    brand: str | None = None,
    search: str | None = None,
    min_price: Decimal | None = Query(default=None, alias="minPrice", ge=0),
    max_price: Decimal | None = Query(default=None, alias="maxPrice", ge=0),
    sort: SortKey | None = None,
    catalog: CatalogStore = Depends(get_catalog),
) -> list[Product]:
    filters = ProductFilter(
        category=category,
        brand=brand,
        search=search,
        min_price=min_price,
        max_price=max_price,
        sort=sort,
    )
    return list(await catalog.list(filters))


@router.get("/categories", response_model=list[str])
async def list_categories(catalog: CatalogStore = Depends(get_catalog)) -> list[str]:
    return await catalog.categories()


@router.get("/brands", response_model=list[str])
async def list_brands(catalog: CatalogStore = Depends(get_catalog)) -> list[str]:
    return await catalog.brands()


@router.get("/{product_id}", response_model=ProductRead)
async def get_product(
    product_id: str,
    catalog: CatalogStore = Depends(get_catalog),
) -> Product:
    return await catalog.get(product_id)


@router.post("", response_model=ProductRead, status_code=201)
async def create_product(
    body: ProductCreate,
    catalog: CatalogStore = Depends(get_catalog),
    admin: Identity = Depends(require_admin),
) -> Product:
    return await catalog.create(body, admin)


@router.put("/{product_id}", response_model=ProductRead)
async def update_product(
    product_id: str,
    body: ProductUpdate,
    catalog: CatalogStore = Depends(get_catalog),
    admin: Identity = Depends(require_admin),
) -> Product:
    return await catalog.update(product_id, body, admin)


@router.delete("/{product_id}", response_model=ProductRead)
async def delete_product(
    product_id: str,
    catalog: CatalogStore = Depends(get_catalog),
    admin: Identity = Depends(require_admin),
) -> Product:
    """Remove a product and return the deleted record."""
    return await catalog.delete(product_id, admin)
