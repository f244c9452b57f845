"""
Storefront API — application entry point.

This is the **only** file that assembles the app.  All business logic
lives in the `services/`, `db/` and `core/` packages.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from storefront.api.v1.api import api_router
from storefront.api.v1.endpoints.auth import limiter
from storefront.core.config import settings
from storefront.core.exceptions import register_exception_handlers
from storefront.db.base import Base
from storefront.db.seed import seed_admin, seed_sample_catalog
from storefront.db.session import async_session_factory, engine

# Ensure all models are imported so metadata.create_all can see them
from storefront.models.order import Order  # noqa: F401
from storefront.models.product import Product  # noqa: F401
from storefront.models.user import User  # noqa: F401

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)
logger = logging.getLogger(__name__)


# ── Lifespan ────────────────────────────────────────────────────────
@asynccontextmanager
async def lifespan(_app: FastAPI):
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables initialised")

    async with async_session_factory() as session:
        await seed_admin(session)
        if settings.SEED_SAMPLE_CATALOG:
            await seed_sample_catalog(session)

    logger.info(
        "Storefront v%s started (catalog mode: %s)",
        settings.VERSION,
        "sample" if settings.SEED_SAMPLE_CATALOG else "live",
    )
    yield
    await engine.dispose()
    logger.info("Shutdown complete")


# ── App factory ─────────────────────────────────────────────────────
def create_app() -> FastAPI:
    application = FastAPI(
        title=settings.PROJECT_NAME,
        description="Storefront catalog, auth and checkout API",
        version=settings.VERSION,
        openapi_url=f"{settings.API_PREFIX}/openapi.json",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # slowapi looks the limiter up on app state
    application.state.limiter = limiter

    # Global exception handlers (prevent stack-trace leakage)
    register_exception_handlers(application)

    application.include_router(api_router, prefix=settings.API_PREFIX)
    return application


app = create_app()
