"""
Public health check.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.api.v1.deps import get_db
from storefront.core.config import settings
from storefront.schemas.common import HealthResponse

router = APIRouter(tags=["health"])
logger = logging.getLogger(__name__)


@router.get("/health", response_model=HealthResponse)
async def health(db: AsyncSession = Depends(get_db)) -> HealthResponse:
    """Report DB connectivity and whether the sample catalog is in use."""
    database = True
    try:
        await db.execute(select(1))
    except Exception as e:
        logger.error("Health check DB failure: %s", e)
        database = False
    return HealthResponse(
        status="ok" if database else "degraded",
        database=database,
        sample_catalog=settings.SEED_SAMPLE_CATALOG,
    )
