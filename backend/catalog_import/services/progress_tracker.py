"""Publish background import progress snapshots to Redis."""

from __future__ import annotations

import json
import logging
from datetime import timedelta
from functools import lru_cache
from typing import Any

from redis import Redis
from redis.exceptions import RedisError

from catalog_import.api.schemas.catalog_import import ImportResult
from catalog_import.core.config import get_settings
from catalog_import.utils.redis_client import create_redis_client

logger = logging.getLogger(__name__)

PROGRESS_PREFIX = "jobs:progress:"
PROGRESS_TTL = timedelta(hours=24)


@lru_cache
def get_redis() -> Redis:
    return create_redis_client(get_settings().redis_url, decode_responses=True)


def _key(job_id: str) -> str:
    return f"{PROGRESS_PREFIX}{job_id}"


def publish_progress(
    job_id: str,
    progress: float,
    message: str | None = None,
    *,
    status: str | None = None,
    meta: dict[str, Any] | None = None,
) -> None:
    """Store the latest snapshot; Redis being down never fails an import."""
    payload = {
        "job_id": job_id,
        "progress": max(0.0, min(progress, 1.0)),
        "message": message,
        "status": status,
        "meta": meta or {},
    }
    try:
        get_redis().set(
            _key(job_id),
            json.dumps(payload),
            ex=int(PROGRESS_TTL.total_seconds()),
        )
    except RedisError as e:
        logger.warning(f"Could not publish progress for job {job_id}: {e}")


def publish_group_progress(job_id: str, processed: int, total: int, result: ImportResult) -> None:
    """Progress callback for the executor: one snapshot per imported group."""
    publish_progress(
        job_id,
        processed / total if total else 1.0,
        message=f"Imported {processed}/{total} products",
        status="running",
        meta={
            "processed": processed,
            "total": total,
            "products_created": result.products_created,
            "products_updated": result.products_updated,
            "failed": result.failed,
        },
    )


def fetch_progress(job_id: str) -> dict[str, Any]:
    """Return the latest snapshot, or {} when none is available."""
    try:
        raw = get_redis().get(_key(job_id))
    except RedisError:
        return {}
    if not raw:
        return {}
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return {}
