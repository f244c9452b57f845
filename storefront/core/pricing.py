"""Money arithmetic on :class:`~decimal.Decimal`, rounded to cents."""

from __future__ import annotations

from collections.abc import Iterable
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from storefront.core.config import settings

CENT = Decimal("0.01")


def to_decimal(value: object) -> Decimal:
    """Convert a number or numeric string to Decimal without float noise.

    Floats go through ``str`` so ``9.99`` becomes ``Decimal("9.99")``.
    Raises ``ValueError`` for anything that is not a finite number.
    """
    if isinstance(value, bool):
        raise ValueError(f"Not a number: {value!r}")
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, (int, float, str)):
        try:
            result = Decimal(str(value).strip())
        except InvalidOperation as exc:
            raise ValueError(f"Not a number: {value!r}") from exc
    else:
        raise ValueError(f"Not a number: {value!r}")
    if not result.is_finite():
        raise ValueError(f"Not a finite number: {value!r}")
    return result


def round_money(amount: Decimal) -> Decimal:
    """Round to cents, half away from zero."""
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def line_total(price: Decimal, quantity: int) -> Decimal:
    return round_money(to_decimal(price) * quantity)


def subtotal(lines: Iterable[tuple[Decimal, int]]) -> Decimal:
    """Sum of ``price * quantity``; exact, so accumulation order is irrelevant."""
    return round_money(sum((to_decimal(p) * q for p, q in lines), Decimal("0")))


def flat_tax(amount: Decimal, rate: Decimal | None = None) -> Decimal:
    """Flat surcharge on *amount*; never applied to an already-taxed figure."""
    rate = settings.TAX_RATE if rate is None else rate
    return round_money(amount * rate)
