"""Shared helpers for shaping job responses."""
from __future__ import annotations

from catalog_import.api.schemas.job import JobStatus
from catalog_import.db.models.import_job import ImportJob


def serialize_job(job: ImportJob, progress_payload: dict | None) -> JobStatus:
    """Combine DB state + cached progress snapshot into a response schema."""
    progress_payload = progress_payload or {}

    calculated_progress = progress_payload.get("progress")
    if calculated_progress is None:
        if job.status == "completed":
            calculated_progress = 1.0
        elif job.total_groups:
            calculated_progress = (job.processed_groups or 0) / job.total_groups

    message = progress_payload.get("message")
    if not message:
        total_display = job.total_groups if job.total_groups else "?"
        message = f"Imported {job.processed_groups or 0}/{total_display} products"

    return JobStatus(
        id=job.id,
        status=progress_payload.get("status") or job.status,
        progress=calculated_progress,
        message=message,
        total_groups=job.total_groups,
        processed_groups=job.processed_groups,
        error_message=job.error_message,
        started_at=job.started_at or job.created_at,
        finished_at=job.finished_at,
        meta=job.meta or progress_payload.get("meta") or {},
    )
