"""Pydantic schemas for orders and cart quotes."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from storefront.schemas.common import Count, Money, NonNegativeMoney


class OrderItem(BaseModel):
    id: str
    name: str
    price: NonNegativeMoney
    quantity: Count


class SubmittedLine(BaseModel):
    """A cart line as the client sent it; price and quantity are checked later."""

    id: str
    name: str = ""
    price: Any = None
    quantity: Any = None


class OrderCreate(BaseModel):
    """Cart snapshot sent at checkout.

    ``total`` is what the client displayed: the subtotal, or the subtotal
    plus tax.  When omitted the order total is the computed subtotal.
    Quantities, prices and totals are checked by the order service so bad
    values surface as ``InvalidOrder``.
    """

    items: list[SubmittedLine]
    total: Any = None


class OrderRead(BaseModel):
    id: str
    user_id: str
    items: list[OrderItem]
    subtotal: Money
    total: Money
    created_at: datetime | None = None

    model_config = {"from_attributes": True}


class CartQuoteLine(BaseModel):
    product_id: str
    quantity: Count = Field(default=1, ge=1)


class CartQuoteRequest(BaseModel):
    items: list[CartQuoteLine]


class CartLineRead(BaseModel):
    id: str
    name: str
    price: Money
    quantity: int
    stock: int
    line_total: Money


class CartQuoteResponse(BaseModel):
    items: list[CartLineRead]
    count: int
    subtotal: Money
    tax: Money
    total: Money
    unknown_products: list[str] = []
