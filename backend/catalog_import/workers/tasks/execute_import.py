"""Celery task running an approved catalog import in the background."""

from __future__ import annotations

import logging
from typing import Any

from catalog_import.db.session import get_fresh_session
from catalog_import.services.import_jobs import run_import_job
from catalog_import.workers.celery_app import celery_app

logger = logging.getLogger(__name__)


@celery_app.task(bind=True, name="catalog_import.workers.tasks.execute_import")
def execute_import_task(self, job_id: str, groups_payload: list[dict[str, Any]]) -> dict[str, Any] | None:
    """Import the submitted product groups and return the ImportResult as JSON."""
    logger.info(f"Starting catalog import job {job_id} ({len(groups_payload)} products)")
    session = get_fresh_session()
    try:
        result = run_import_job(session, job_id, groups_payload)
        return result.model_dump(mode="json") if result is not None else None
    finally:
        session.close()
