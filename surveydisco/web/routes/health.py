"""Health check API routes.

Provides endpoints for monitoring application health and connectivity.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from surveydisco.db.connection import get_db

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/health", tags=["Health"])


@router.get("", status_code=status.HTTP_200_OK)
async def health_check(db: AsyncSession = Depends(get_db)):
    """Check application health.

    Verifies database connectivity.
    """
    try:
        await db.execute(text("SELECT 1"))
        database = "connected"
    except (SQLAlchemyError, OSError) as e:
        logger.error("health_database_unreachable: %s", e)
        database = "disconnected"

    return {"status": "OK", "service": "SurveyDisco.ai", "database": database}
