"""
Product lookup, filtered listing and admin-only mutation.

Reads are open to anyone.  ``create`` / ``update`` / ``delete`` take the acting
identity and reject non-admins before touching the store.  Concurrent updates
are not serialised: the last writer wins.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

import pydantic

from storefront.core.auth import require_role
from storefront.core.exceptions import NotFound, ValidationError, format_validation_errors
from storefront.db.repositories import ProductRepository
from storefront.models.product import Product
from storefront.models.user import ROLE_ADMIN
from storefront.schemas.product import ProductCreate, ProductFilter, ProductUpdate
from storefront.schemas.token import Identity

logger = logging.getLogger(__name__)


def _coerce(schema: type[pydantic.BaseModel], data: Any) -> Any:
    """Accept a parsed schema or a raw mapping; raise ValidationError on bad input."""
    if isinstance(data, schema):
        return data
    try:
        return schema.model_validate(data)
    except pydantic.ValidationError as exc:
        raise ValidationError(details=format_validation_errors(exc.errors())) from exc


class CatalogStore:
    def __init__(self, products: ProductRepository) -> None:
        self.products = products

    async def list(self, filters: ProductFilter | Mapping[str, Any] | None = None) -> Sequence[Product]:
        criteria = _coerce(ProductFilter, filters or {})
        if (
            criteria.min_price is not None
            and criteria.max_price is not None
            and criteria.min_price > criteria.max_price
        ):
            raise ValidationError(details=["min_price: must not exceed max_price"])
        return await self.products.find(**criteria.model_dump())

    async def get(self, product_id: str) -> Product:
        product = await self.products.get(product_id)
        if product is None:
            raise NotFound("Product not found")
        return product

    async def categories(self) -> list[str]:
        return await self.products.distinct_values("category")

    async def brands(self) -> list[str]:
        return await self.products.distinct_values("brand")

    async def create(self, data: ProductCreate | Mapping[str, Any], actor: Identity) -> Product:
        require_role(actor, ROLE_ADMIN)
        body = _coerce(ProductCreate, data)
        product = await self.products.add(Product(**body.model_dump()))
        logger.info("Product %s created by %s", product.id, actor.email)
        return product

    async def update(
        self,
        product_id: str,
        patch: ProductUpdate | Mapping[str, Any],
        actor: Identity,
    ) -> Product:
        require_role(actor, ROLE_ADMIN)
        body = _coerce(ProductUpdate, patch)
        product = await self.get(product_id)
        changes = body.model_dump(exclude_unset=True)
        # A null price/stock/name keeps the stored value
        for field in ("name", "price", "stock"):
            if field in changes and changes[field] is None:
                del changes[field]
        product = await self.products.update(product, changes)
        logger.info("Product %s updated by %s: %s", product_id, actor.email, sorted(changes))
        return product

    async def delete(self, product_id: str, actor: Identity) -> Product:
        require_role(actor, ROLE_ADMIN)
        product = await self.get(product_id)
        await self.products.delete(product)
        logger.info("Product %s deleted by %s", product_id, actor.email)
        return product
