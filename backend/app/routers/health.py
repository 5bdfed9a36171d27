"""
Health Check Endpoints

Provides health check endpoints for monitoring and orchestration.

Endpoints:
- GET /api/health - Basic health check
- GET /api/health/detailed - Health with storage backend check
"""

import logging

from fastapi import APIRouter

from app.config import settings
from app.db.redis import get_redis

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/health", tags=["health"])


@router.get("")
async def health_check():
    """
    Basic health check.

    Returns a simple status response indicating the API is running.
    """
    return {
        "status": "healthy",
        "service": settings.APP_NAME,
    }


@router.get("/detailed")
async def detailed_health_check():
    """
    Detailed health check with storage status.

    Redis is only checked when it is the configured storage backend.
    """
    health = {
        "status": "healthy",
        "service": settings.APP_NAME,
        "dependencies": {"storage": {"backend": settings.STORAGE_BACKEND}},
    }

    if settings.uses_redis:
        try:
            redis = await get_redis()
            await redis.ping()
            health["dependencies"]["storage"]["status"] = "healthy"
        except Exception as e:
            logger.warning(f"Redis health check failed: {e}")
            health["dependencies"]["storage"]["status"] = "unhealthy"
            health["dependencies"]["storage"]["error"] = str(e)
            health["status"] = "degraded"
    else:
        health["dependencies"]["storage"]["status"] = "healthy"

    return health
