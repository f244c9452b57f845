"""
FastAPI dependencies — auth guards, database session and services.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from typing import Optional

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.core.auth import authenticate, require_role
from storefront.core.config import settings
from storefront.db.repositories import OrderRepository, ProductRepository, UserRepository
from storefront.db.session import async_session_factory
from storefront.models.user import ROLE_ADMIN
from storefront.schemas.token import Identity
from storefront.services.catalog import CatalogStore
from storefront.services.orders import OrderIntake

# auto_error=False so a missing header surfaces as MissingToken, not a bare 401
oauth2_scheme = OAuth2PasswordBearer(
    tokenUrl=f"{settings.API_PREFIX}/auth/login", auto_error=False
)


# ── Database session ────────────────────────────────────────────────
async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with async_session_factory() as session:
        try:
            yield session
        finally:
            await session.close()


# ── Repositories & services ─────────────────────────────────────────
async def get_user_repository(db: AsyncSession = Depends(get_db)) -> UserRepository:
    return UserRepository(db)


async def get_catalog(db: AsyncSession = Depends(get_db)) -> CatalogStore:
    return CatalogStore(ProductRepository(db))


async def get_order_intake(db: AsyncSession = Depends(get_db)) -> OrderIntake:
    return OrderIntake(OrderRepository(db), ProductRepository(db))


# ── Auth dependencies ───────────────────────────────────────────────
async def get_current_identity(
    token: Optional[str] = Depends(oauth2_scheme),
) -> Identity:
    """Verify the bearer token; the identity comes from its claims alone."""
    return authenticate(token)


async def require_admin(
    identity: Identity = Depends(get_current_identity),
) -> Identity:
    """Only allow admin role to proceed."""
    require_role(identity, ROLE_ADMIN)
    return identity
