"""
Client-held cart: a mapping of product id to reserved quantity.

A :class:`Cart` is owned by a single session and mutated sequentially, so it
carries no locking.  Every line keeps a copy of the product fields it needs
(name, price, stock) taken when the product was last added, and quantities
are clamped so no line ever exceeds that stock.  Observers registered with
:meth:`Cart.subscribe` are called after each mutation that changes state.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator, Mapping
from dataclasses import asdict, dataclass
from decimal import Decimal
from typing import Any

from storefront.core.exceptions import InvalidQuantity
from storefront.core.pricing import flat_tax, line_total, round_money, subtotal, to_decimal

logger = logging.getLogger(__name__)

Listener = Callable[["Cart"], None]


@dataclass
class CartLine:
    id: str
    name: str
    price: Decimal
    stock: int
    quantity: int
    image: str | None = None

    @property
    def line_total(self) -> Decimal:
        return line_total(self.price, self.quantity)


def _field(product: Any, name: str, default: Any = None) -> Any:
    if isinstance(product, Mapping):
        return product.get(name, default)
    return getattr(product, name, default)


def _line_from_product(product: Any, quantity: int) -> CartLine:
    product_id = _field(product, "id")
    if product_id is None:
        raise ValueError("Product has no id")
    stock = _field(product, "stock", 0) or 0
    return CartLine(
        id=str(product_id),
        name=_field(product, "name", ""),
        price=round_money(to_decimal(_field(product, "price", 0))),
        stock=max(int(stock), 0),
        quantity=quantity,
        image=_field(product, "image"),
    )


def _check_quantity(quantity: Any) -> int:
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise InvalidQuantity(f"Quantity must be a positive integer, got {quantity!r}")
    return quantity


class Cart:
    def __init__(self, tax_rate: Decimal | None = None) -> None:
        self._lines: dict[str, CartLine] = {}
        self._listeners: list[Listener] = []
        self.tax_rate = tax_rate

    # ── Observers ───────────────────────────────────────────────────
    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register *listener*; returns a callable that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _commit(self, before: dict[str, tuple]) -> None:
        if before != self._state():
            for listener in list(self._listeners):
                listener(self)

    def _state(self) -> dict[str, tuple]:
        return {pid: (line.quantity, line.price, line.stock) for pid, line in self._lines.items()}

    # ── Mutations ───────────────────────────────────────────────────
    def add_or_increment(self, product: Any, quantity: int = 1) -> int:
        """Add *quantity* units of *product*, clamped to its stock.

        Returns the resulting line quantity (0 when the product is out of
        stock and therefore not in the cart).
        """
        quantity = _check_quantity(quantity)
        if quantity <= 0:
            raise InvalidQuantity()

        before = self._state()
        fresh = _line_from_product(product, 0)
        current = self._lines.get(fresh.id)
        wanted = quantity + (current.quantity if current else 0)
        fresh.quantity = min(wanted, fresh.stock)

        if fresh.quantity <= 0:
            self._lines.pop(fresh.id, None)
        elif current is not None:
            # Refresh the copy in place to keep line order stable
            current.name, current.price, current.stock = fresh.name, fresh.price, fresh.stock
            current.image, current.quantity = fresh.image, fresh.quantity
        else:
            self._lines[fresh.id] = fresh

        if fresh.quantity < wanted:
            logger.debug("Clamped %s from %d to stock %d", fresh.id, wanted, fresh.stock)
        self._commit(before)
        return fresh.quantity

    def set_quantity(self, product_id: str, quantity: int) -> int:
        """Set a line's quantity; ``<= 0`` removes it, otherwise clamp to ``[1, stock]``.

        Unknown product ids are ignored.
        """
        quantity = _check_quantity(quantity)
        line = self._lines.get(str(product_id))
        if line is None:
            return 0
        before = self._state()
        clamped = min(max(quantity, 1), line.stock) if quantity > 0 else 0
        if clamped <= 0:
            del self._lines[line.id]
        else:
            line.quantity = clamped
        self._commit(before)
        return clamped

    def remove(self, product_id: str) -> None:
        before = self._state()
        self._lines.pop(str(product_id), None)
        self._commit(before)

    def clear(self) -> None:
        before = self._state()
        self._lines.clear()
        self._commit(before)

    # ── Queries ─────────────────────────────────────────────────────
    @property
    def lines(self) -> list[CartLine]:
        return list(self._lines.values())

    def get(self, product_id: str) -> CartLine | None:
        return self._lines.get(str(product_id))

    def total(self) -> Decimal:
        """Sum of ``price * quantity`` over all lines, in cents."""
        return subtotal((line.price, line.quantity) for line in self._lines.values())

    def tax(self) -> Decimal:
        return flat_tax(self.total(), self.tax_rate)

    def total_with_tax(self) -> Decimal:
        return round_money(self.total() + self.tax())

    def count(self) -> int:
        return sum(line.quantity for line in self._lines.values())

    def is_empty(self) -> bool:
        return not self._lines

    def snapshot(self) -> list[dict]:
        """Independent copies of each line's id, name, price and quantity."""
        return [
            {"id": line.id, "name": line.name, "price": line.price, "quantity": line.quantity}
            for line in self._lines.values()
        ]

    # ── Client-local persistence shape ──────────────────────────────
    def to_dict(self) -> dict:
        return {"items": [{**asdict(line), "price": str(line.price)} for line in self._lines.values()]}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], tax_rate: Decimal | None = None) -> Cart:
        """Rebuild a cart from :meth:`to_dict` output, skipping unusable lines."""
        cart = cls(tax_rate=tax_rate)
        for item in data.get("items") or []:
            if not isinstance(item, Mapping):
                logger.warning("Skipping malformed cart item %r", item)
                continue
            try:
                cart.add_or_increment(item, item.get("quantity", 1))
            except (InvalidQuantity, ValueError, TypeError):
                logger.warning("Skipping malformed cart item %r", item)
        return cart

    def __len__(self) -> int:
        return len(self._lines)

    def __contains__(self, product_id: object) -> bool:
        return str(product_id) in self._lines

    def __iter__(self) -> Iterator[CartLine]:
        return iter(self.lines)
