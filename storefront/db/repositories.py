"""
Repositories: the only code that issues queries.

Each repository wraps an :class:`AsyncSession` and exposes find-by-filter,
find-by-id, insert, update-by-id and delete-by-id.  Services depend on these
rather than on the session so tests can run against in-memory SQLite.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from decimal import Decimal
from typing import Any

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.models.order import Order
from storefront.models.product import Product
from storefront.models.user import User


def _like(term: str) -> str:
    # Escape LIKE metacharacters to prevent wildcard injection
    safe = term.replace("\\", "\\\\").replace("%", r"\%").replace("_", r"\_")
    return f"%{safe}%"


class UserRepository:
    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get(self, user_id: str) -> User | None:
        return await self.db.get(User, user_id)

    async def get_by_email(self, email: str) -> User | None:
        result = await self.db.execute(
            select(User).where(func.lower(User.email) == email.strip().lower())
        )
        return result.scalar_one_or_none()

    async def list(self) -> Sequence[User]:
        result = await self.db.execute(select(User).order_by(User.created_at))
        return result.scalars().all()

    async def add(self, user: User) -> User:
        self.db.add(user)
        await self.db.commit()
        await self.db.refresh(user)
        return user

    async def update(self, user: User, values: Mapping[str, Any]) -> User:
        for field, value in values.items():
            setattr(user, field, value)
        await self.db.commit()
        await self.db.refresh(user)
        return user


class ProductRepository:
    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get(self, product_id: str) -> Product | None:
        return await self.db.get(Product, product_id)

    async def get_many(self, product_ids: Sequence[str]) -> dict[str, Product]:
        if not product_ids:
            return {}
        result = await self.db.execute(select(Product).where(Product.id.in_(set(product_ids))))
        return {p.id: p for p in result.scalars().all()}

    async def find(
        self,
        *,
        category: str | None = None,
        brand: str | None = None,
        search: str | None = None,
        min_price: Decimal | None = None,
        max_price: Decimal | None = None,
        sort: str | None = None,
    ) -> Sequence[Product]:
        """Filtered listing; text criteria are case-insensitive substrings."""
        query = select(Product)
        if category:
            query = query.where(Product.category.ilike(_like(category), escape="\\"))
        if brand:
            query = query.where(Product.brand.ilike(_like(brand), escape="\\"))
        if search:
            pattern = _like(search)
            query = query.where(
                or_(
                    Product.name.ilike(pattern, escape="\\"),
                    Product.brand.ilike(pattern, escape="\\"),
                    Product.model.ilike(pattern, escape="\\"),
                    Product.category.ilike(pattern, escape="\\"),
                )
            )
        if min_price is not None:
            query = query.where(Product.price >= min_price)
        if max_price is not None:
            query = query.where(Product.price <= max_price)

        if sort == "name":
            query = query.order_by(func.lower(Product.name))
        elif sort == "price-low":
            query = query.order_by(Product.price.asc())
        elif sort == "price-high":
            query = query.order_by(Product.price.desc())
        elif sort == "newest":
            query = query.order_by(Product.created_at.desc())
        else:
            query = query.order_by(Product.created_at.asc())

        result = await self.db.execute(query)
        return result.scalars().all()

    async def distinct_values(self, column_name: str) -> list[str]:
        column = getattr(Product, column_name)
        result = await self.db.execute(
            select(column).where(column.is_not(None), column != "").distinct()
        )
        return sorted(result.scalars().all())

    async def count(self) -> int:
        result = await self.db.execute(select(func.count(Product.id)))
        return int(result.scalar_one())

    async def add(self, product: Product) -> Product:
        self.db.add(product)
        await self.db.commit()
        await self.db.refresh(product)
        return product

    async def update(self, product: Product, values: Mapping[str, Any]) -> Product:
        for field, value in values.items():
            setattr(product, field, value)
        await self.db.commit()
        await self.db.refresh(product)
        return product

    async def delete(self, product: Product) -> Product:
        await self.db.delete(product)
        await self.db.commit()
        return product


class OrderRepository:
    """Append-only: orders are inserted and read, never changed."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get(self, order_id: str) -> Order | None:
        return await self.db.get(Order, order_id)

    async def list(self, user_id: str | None = None) -> Sequence[Order]:
        query = select(Order).order_by(Order.created_at.desc())
        if user_id is not None:
            query = query.where(Order.user_id == user_id)
        result = await self.db.execute(query)
        return result.scalars().all()

    async def add(self, order: Order) -> Order:
        self.db.add(order)
        await self.db.commit()
        await self.db.refresh(order)
        return order
