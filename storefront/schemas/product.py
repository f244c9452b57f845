"""Pydantic schemas for catalog products."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from storefront.schemas.common import Count, Money, NonNegativeMoney

SortKey = Literal["name", "price-low", "price-high", "newest"]


def _strip_optional(v: str | None) -> str | None:
    if v is None:
        return None
    v = v.strip()
    return v or None


class ProductCreate(BaseModel):
    name: str
    price: NonNegativeMoney
    category: str | None = None
    brand: str | None = None
    model: str | None = None
    description: str | None = None
    image: str | None = None
    stock: Count = Field(default=0, ge=0)

    @field_validator("name")
    @classmethod
    def _name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Name must not be empty")
        return v

    @field_validator("category", "brand", "model", "description", "image")
    @classmethod
    def _optional_text(cls, v: str | None) -> str | None:
        return _strip_optional(v)


class ProductUpdate(BaseModel):
    """Partial update; omitted or null numeric fields keep their value."""

    name: str | None = None
    price: NonNegativeMoney | None = None
    category: str | None = None
    brand: str | None = None
    model: str | None = None
    description: str | None = None
    image: str | None = None
    stock: Count | None = Field(default=None, ge=0)

    @field_validator("name")
    @classmethod
    def _name(cls, v: str | None) -> str | None:
        if v is None:
            return None
        v = v.strip()
        if not v:
            raise ValueError("Name must not be empty")
        return v

    @field_validator("category", "brand", "model", "description", "image")
    @classmethod
    def _optional_text(cls, v: str | None) -> str | None:
        return _strip_optional(v)


class ProductRead(BaseModel):
    id: str
    name: str
    price: Money
    category: str | None = None
    brand: str | None = None
    model: str | None = None
    description: str | None = None
    image: str | None = None
    stock: int
    created_at: datetime | None = None

    model_config = {"from_attributes": True}


class ProductFilter(BaseModel):
    """Listing filter; every criterion is optional."""

    category: str | None = None
    brand: str | None = None
    search: str | None = None
    min_price: Decimal | None = Field(default=None, ge=0)
    max_price: Decimal | None = Field(default=None, ge=0)
    sort: SortKey | None = None
