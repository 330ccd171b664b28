"""
Service health check endpoint.
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel.ext.asyncio.session import AsyncSession

from src.depends import get_session
from src.domain.clock import utcnow

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/health", summary="Service health check")
async def health_check(session: AsyncSession = Depends(get_session)):
    """
    Returns:
    - Service status ("ok" or "degraded")
    - Database connectivity
    """
    result = {
        "status": "ok",
        "timestamp": utcnow().isoformat(),
        "database": "unknown",
    }

    try:
        await session.execute(text("SELECT 1"))
        result["database"] = "ok"
    except SQLAlchemyError as e:
        logger.error("Health check database failure: %s", e)
        result["database"] = "error"
        result["status"] = "degraded"

    return result
