"""Background execution of approved catalog imports."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any

from sqlalchemy.orm import Session

from catalog_import.api.schemas.catalog_import import ImportResult, ProductGroup
from catalog_import.db.models.import_job import ImportJob
from catalog_import.services.catalog_store import SqlAlchemyCatalogStore
from catalog_import.services.import_executor import CatalogImportExecutor
from catalog_import.services.progress_tracker import publish_group_progress, publish_progress

logger = logging.getLogger(__name__)


def create_import_job(db: Session, total_groups: int) -> ImportJob:
    job = ImportJob(status="pending", total_groups=total_groups, processed_groups=0)
    db.add(job)
    db.flush()
    return job


def run_import_job(
    db: Session,
    job_id: str,
    groups_payload: list[dict[str, Any]],
    *,
    publish: Callable[..., None] = publish_progress,
    publish_group: Callable[[str, int, int, ImportResult], None] = publish_group_progress,
) -> ImportResult | None:
    """Execute an import for a queued job and record its outcome on the job row.

    Returns None when the job no longer exists. Per-group failures are part
    of the returned result; only failures outside the executor mark the job
    as failed.
    """
    job: ImportJob | None = db.get(ImportJob, job_id)
    if job is None:
        logger.warning(f"Import job {job_id} not found, nothing to run")
        return None

    try:
        groups = [ProductGroup.model_validate(payload) for payload in groups_payload]

        job.status = "running"
        job.started_at = datetime.now(timezone.utc)
        job.total_groups = len(groups)
        db.commit()

        def on_group(processed: int, total: int, result: ImportResult) -> None:
            job.processed_groups = processed
            db.commit()
            publish_group(job_id, processed, total, result)

        result = CatalogImportExecutor(SqlAlchemyCatalogStore(db), on_group).execute(groups)

        job = db.get(ImportJob, job_id)
        job.status = "completed"
        job.processed_groups = len(groups)
        job.meta = result.model_dump(mode="json")
        job.finished_at = datetime.now(timezone.utc)
        db.commit()

        publish(
            job_id,
            1.0,
            message="Import complete",
            status="completed",
            meta=job.meta,
        )
        return result
    except Exception as exc:
        logger.error(f"Import job {job_id} failed: {exc}", exc_info=True)
        db.rollback()
        job = db.get(ImportJob, job_id)
        job.status = "failed"
        job.error_message = str(exc)
        job.finished_at = datetime.now(timezone.utc)
        db.commit()
        publish(job_id, 0.0, message="Import failed", status="failed", meta={"error": str(exc)})
        raise
