"""
Order model: append-only record of a checkout.

``items`` is a JSON snapshot of each line (id, name, price, quantity) taken
at submission time; later catalog edits never touch it.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import JSON, Column, DateTime, ForeignKey, Numeric, String

from storefront.db.base import Base


class Order(Base):
    __tablename__ = "orders"

    id: str = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))  # type: ignore[assignment]
    user_id: str = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)  # type: ignore[assignment]
    items: list = Column(JSON, nullable=False)  # type: ignore[assignment]
    subtotal: Decimal = Column(Numeric(12, 2, asdecimal=True), nullable=False)  # type: ignore[assignment]
    total: Decimal = Column(Numeric(12, 2, asdecimal=True), nullable=False)  # type: ignore[assignment]
    created_at: datetime = Column(  # type: ignore[assignment]
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        index=True,
    )
