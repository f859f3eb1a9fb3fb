"""Liveness and readiness endpoints."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, HTTPException, status
from redis.exceptions import RedisError
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from catalog_import.db.session import engine
from catalog_import.services.progress_tracker import get_redis

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/health", tags=["health"])

SERVICE_NAME = "catalog-import-api"


@router.get("/live", summary="Liveness probe")
async def live() -> dict[str, str]:
    """Indicates the API process is running."""
    return {"status": "ok", "service": SERVICE_NAME}


@router.get("/ready", summary="Readiness probe")
async def ready() -> dict[str, Any]:
    """Check the database and Redis.

    Redis only carries progress snapshots and the job queue, so an outage
    there is reported but does not fail readiness; previews and synchronous
    imports still work.
    """
    checks: dict[str, Any] = {"status": "ok", "service": SERVICE_NAME, "checks": {}}

    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1")).fetchone()
        checks["checks"]["database"] = {
            "status": "healthy",
            "message": "Database connection successful",
        }
    except SQLAlchemyError as e:
        logger.error(f"Database health check failed: {e}", exc_info=True)
        checks["checks"]["database"] = {
            "status": "unhealthy",
            "message": f"Database connection failed: {e}",
        }
        checks["status"] = "unhealthy"

    try:
        get_redis().ping()
        checks["checks"]["redis"] = {
            "status": "healthy",
            "message": "Redis connection successful",
        }
    except RedisError as e:
        logger.warning(f"Redis health check failed: {e}")
        checks["checks"]["redis"] = {
            "status": "unhealthy",
            "message": f"Redis connection failed: {e}",
        }

    if checks["status"] != "ok":
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=checks,
        )
    return checks
