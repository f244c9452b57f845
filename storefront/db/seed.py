"""
Startup seeding — default admin account and the optional sample catalog.

The sample catalog is the named, non-authoritative dataset used for demos
and degraded setups; it is only loaded when ``SEED_SAMPLE_CATALOG`` is on.
"""

from __future__ import annotations

import logging
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from storefront.core.config import settings
from storefront.core.security import get_password_hash
from storefront.db.repositories import ProductRepository, UserRepository
from storefront.models.product import Product
from storefront.models.user import ROLE_ADMIN, User

logger = logging.getLogger(__name__)

SAMPLE_PRODUCTS = [
    {
        "name": "Pioneer DJ DDJ-400 Controller",
        "price": Decimal("299.99"),
        "category": "Controllers",
        "brand": "Pioneer DJ",
        "model": "DDJ-400",
        "description": "Professional 2-channel DJ controller with Rekordbox integration",
        "image": "https://images.unsplash.com/photo-1511379938547-c1f69419868d?w=400&h=300&fit=crop",
        "stock": 15,
    },
    {
        "name": "Technics SL-1200MK7 Turntable",
        "price": Decimal("999.99"),
        "category": "Turntables",
        "brand": "Technics",
        "model": "SL-1200MK7",
        "description": "Classic direct drive turntable with high-torque motor",
        "image": "https://images.unsplash.com/photo-1493225457124-a3eb161ffa5f?w=400&h=300&fit=crop",
        "stock": 8,
    },
    {
        "name": "Shure SM7B Microphone",
        "price": Decimal("399.99"),
        "category": "Microphones",
        "brand": "Shure",
        "model": "SM7B",
        "description": "Dynamic microphone with excellent sound quality for vocals",
        "image": "https://images.unsplash.com/photo-1589003077984-894e1322bea9?w=400&h=300&fit=crop",
        "stock": 12,
    },
]


async def seed_admin(session: AsyncSession) -> User | None:
    """Create the default admin on first run; returns it when created."""
    users = UserRepository(session)
    if await users.get_by_email(settings.FIRST_ADMIN_EMAIL) is not None:
        return None
    admin = await users.add(
        User(
            name=settings.FIRST_ADMIN_NAME,
            email=settings.FIRST_ADMIN_EMAIL.strip().lower(),
            hashed_password=get_password_hash(settings.FIRST_ADMIN_PASSWORD),
            role=ROLE_ADMIN,
        )
    )
    logger.info(
        "Default admin created: %s (password: <redacted>)",
        settings.FIRST_ADMIN_EMAIL,
    )
    return admin


async def seed_sample_catalog(session: AsyncSession) -> int:
    """Load :data:`SAMPLE_PRODUCTS` into an empty catalog."""
    products = ProductRepository(session)
    if await products.count() > 0:
        return 0
    for data in SAMPLE_PRODUCTS:
        await products.add(Product(**data))
    logger.info("Sample catalog seeded with %d products", len(SAMPLE_PRODUCTS))
    return len(SAMPLE_PRODUCTS)
