"""
Validates a cart snapshot and appends an immutable order.

Stock is advisory: submission may check quantities against the live
catalog, but never deducts or reserves units, so two checkouts can both
succeed against the last unit.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Mapping
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any

import pydantic

from storefront.core.config import settings
from storefront.core.exceptions import (EmptyCart, InvalidOrder, Unauthenticated,
                                        format_validation_errors)
from storefront.core.pricing import flat_tax, round_money, subtotal, to_decimal
from storefront.db.repositories import OrderRepository, ProductRepository
from storefront.models.order import Order
from storefront.schemas.order import OrderCreate, OrderItem
from storefront.schemas.token import Identity
from storefront.services.cart import Cart

logger = logging.getLogger(__name__)


def _parse_submission(cart: Cart | OrderCreate | Mapping[str, Any]) -> tuple[list[Any], Any]:
    if isinstance(cart, Cart):
        return cart.snapshot(), cart.total()
    if isinstance(cart, OrderCreate):
        return [line.model_dump() for line in cart.items], cart.total
    items = cart.get("items")
    if items is not None and not isinstance(items, list):
        raise InvalidOrder(details=["items: must be a list"])
    return list(items or []), cart.get("total")


def _validate_items(raw_items: list[Any]) -> list[OrderItem]:
    items: list[OrderItem] = []
    problems: list[str] = []
    for index, raw in enumerate(raw_items):
        try:
            item = raw if isinstance(raw, OrderItem) else OrderItem.model_validate(raw)
        except pydantic.ValidationError as exc:
            problems.extend(
                f"items[{index}].{msg}" for msg in format_validation_errors(exc.errors())
            )
            continue
        if item.quantity <= 0:
            problems.append(f"items[{index}].quantity: must be a positive integer")
            continue
        items.append(item)
    if problems:
        raise InvalidOrder(details=problems)
    return items


def _validate_total(raw_total: Any, computed: Decimal) -> Decimal:
    """Accept the displayed total only if it is the subtotal, with or without tax."""
    if raw_total is None:
        return computed
    try:
        total = to_decimal(raw_total)
    except ValueError as exc:
        raise InvalidOrder(details=["total: must be a number"]) from exc
    if total < 0:
        raise InvalidOrder(details=["total: must not be negative"])
    total = round_money(total)
    with_tax = round_money(computed + flat_tax(computed))
    if total not in (computed, with_tax):
        raise InvalidOrder(
            details=[f"total: {total} does not match subtotal {computed} or {with_tax} with tax"]
        )
    return total


class OrderIntake:
    def __init__(
        self,
        orders: OrderRepository,
        products: ProductRepository | None = None,
        stock_check: bool | None = None,
    ) -> None:
        self.orders = orders
        self.products = products
        self.stock_check = settings.ORDER_STOCK_CHECK if stock_check is None else stock_check

    async def _price_from_catalog(self, items: list[OrderItem]) -> list[OrderItem]:
        """Check stock and replace client names and prices with the live ones."""
        if not self.stock_check or self.products is None:
            return items
        current = await self.products.get_many([item.id for item in items])
        priced = []
        problems = []
        for item in items:
            product = current.get(item.id)
            if product is None:
                problems.append(f"{item.id}: unknown product")
                continue
            if item.quantity > product.stock:
                problems.append(
                    f"{item.id}: requested {item.quantity}, only {product.stock} in stock"
                )
                continue
            price = round_money(to_decimal(product.price))
            if price != item.price:
                logger.info("Repriced %s from %s to %s", item.id, item.price, price)
            priced.append(item.model_copy(update={"name": product.name, "price": price}))
        if problems:
            raise InvalidOrder(details=problems)
        return priced

    async def submit(
        self,
        cart: Cart | OrderCreate | Mapping[str, Any],
        actor: Identity | None,
    ) -> Order:
        """Record an order for *actor* from a cart or a submitted snapshot.

        With the catalog check on, every line is priced from the live
        catalog and the client's total must match the resulting subtotal,
        with or without tax.
        """
        if actor is None:
            raise Unauthenticated()

        raw_items, raw_total = _parse_submission(cart)
        if not raw_items:
            raise EmptyCart()
        items = await self._price_from_catalog(_validate_items(raw_items))

        computed = subtotal((item.price, item.quantity) for item in items)
        total = _validate_total(raw_total, computed)

        # Plain values only, detached from any cart or catalog row
        snapshot = [
            {
                "id": item.id,
                "name": item.name,
                "price": str(item.price),
                "quantity": item.quantity,
            }
            for item in items
        ]
        order = await self.orders.add(
            Order(
                id=str(uuid.uuid4()),
                user_id=actor.id,
                items=snapshot,
                subtotal=computed,
                total=total,
                created_at=datetime.now(timezone.utc),
            )
        )
        logger.info(
            "Order %s submitted by %s: %d lines, total %s",
            order.id,
            actor.email,
            len(snapshot),
            order.total,
        )
        return order

    async def list(self, user_id: str | None = None) -> list[Order]:
        return list(await self.orders.list(user_id=user_id))
