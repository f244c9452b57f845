"""
Product model: catalog records managed by admins.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import CheckConstraint, Column, DateTime, Integer, Numeric, String, Text

from storefront.db.base import Base


class Product(Base):
    __tablename__ = "products"
    __table_args__ = (
        CheckConstraint("price >= 0", name="ck_products_price_non_negative"),
        CheckConstraint("stock >= 0", name="ck_products_stock_non_negative"),
    )

    id: str = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))  # type: ignore[assignment]
    name: str = Column(String(200), nullable=False, index=True)  # type: ignore[assignment]
    price: Decimal = Column(Numeric(10, 2, asdecimal=True), nullable=False)  # type: ignore[assignment]
    category: str | None = Column(String(100), nullable=True, index=True)  # type: ignore[assignment]
    brand: str | None = Column(String(100), nullable=True)  # type: ignore[assignment]
    model: str | None = Column(String(100), nullable=True)  # type: ignore[assignment]
    description: str | None = Column(Text, nullable=True)  # type: ignore[assignment]
    image: str | None = Column(String(500), nullable=True)  # type: ignore[assignment]
    stock: int = Column(Integer, nullable=False, default=0, server_default="0")  # type: ignore[assignment]
    created_at: datetime = Column(  # type: ignore[assignment]
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        index=True,
    )
