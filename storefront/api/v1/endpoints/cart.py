"""
Quotes a client-held cart against the live catalog.

Nothing is stored: the cart is rebuilt from the request on every call and
quantities are clamped to current stock exactly as the client cart does.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from storefront.api.v1.deps import get_catalog
from storefront.schemas.order import CartLineRead, CartQuoteRequest, CartQuoteResponse
from storefront.services.cart import Cart
from storefront.services.catalog import CatalogStore

router = APIRouter(prefix="/cart", tags=["cart"])
logger = logging.getLogger(__name__)


@router.post("/quote", response_model=CartQuoteResponse)
async def quote_cart(
    body: CartQuoteRequest,
    catalog: CatalogStore = Depends(get_catalog),
) -> CartQuoteResponse:
    products = await catalog.products.get_many([line.product_id for line in body.items])
    cart = Cart()
    unknown = []
    for line in body.items:
        product = products.get(line.product_id)
        if product is None:
            unknown.append(line.product_id)
            continue
        cart.add_or_increment(product, line.quantity)

    if unknown:
        logger.info("Quote skipped unknown products: %s", unknown)
    return CartQuoteResponse(
        items=[
            CartLineRead(
                id=line.id,
                name=line.name,
                price=line.price,
                quantity=line.quantity,
                stock=line.stock,
                line_total=line.line_total,
            )
            for line in cart
        ],
        count=cart.count(),
        subtotal=cart.total(),
        tax=cart.tax(),
        total=cart.total_with_tax(),
        unknown_products=unknown,
    )
