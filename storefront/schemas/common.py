"""Shared schema types."""

from __future__ import annotations

from decimal import Decimal
from typing import Annotated, Any

from pydantic import AfterValidator, BaseModel, BeforeValidator, Field, PlainSerializer

from storefront.core.pricing import round_money

_as_json_number = PlainSerializer(float, return_type=float, when_used="json")


def _reject_bool(v: Any) -> Any:
    if isinstance(v, bool):
        raise ValueError("must be a number, not a boolean")
    return v


# Decimal internally, rounded to cents, plain JSON number on the wire
Money = Annotated[Decimal, BeforeValidator(_reject_bool), AfterValidator(round_money), _as_json_number]
NonNegativeMoney = Annotated[
    Decimal, Field(ge=0), BeforeValidator(_reject_bool), AfterValidator(round_money), _as_json_number
]
# Whole units; numeric strings parse, booleans do not
Count = Annotated[int, BeforeValidator(_reject_bool)]


class HealthResponse(BaseModel):
    status: str
    database: bool
    sample_catalog: bool
