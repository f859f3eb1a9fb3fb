"""Background catalog import job tracking endpoints."""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from catalog_import.api.dependencies.db import get_session
from catalog_import.api.routers.job_helpers import serialize_job
from catalog_import.api.schemas.job import JobStatus
from catalog_import.db.models.import_job import ImportJob
from catalog_import.services.progress_tracker import fetch_progress

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get(
    "/",
    summary="List catalog import jobs",
    response_model=list[JobStatus],
)
async def list_jobs(
    limit: int = Query(50, ge=1, le=500, description="Maximum number of jobs to return"),
    job_status: str | None = Query(
        None, alias="status", description="Filter by status (pending, running, completed, failed)"
    ),
    db: Session = Depends(get_session),
) -> list[JobStatus]:
    """Newest jobs first, each merged with its latest progress snapshot."""
    try:
        query = select(ImportJob)
        if job_status:
            query = query.where(ImportJob.status == job_status)
        query = query.order_by(ImportJob.created_at.desc()).limit(limit)

        jobs = db.scalars(query).all()
        return [serialize_job(job, fetch_progress(job.id)) for job in jobs]
    except SQLAlchemyError as e:
        logger.error(f"Database error listing import jobs: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve jobs",
        ) from e


@router.get(
    "/{job_id}",
    summary="Fetch job metadata and latest progress",
    response_model=JobStatus,
)
async def get_job(
    job_id: str,
    db: Session = Depends(get_session),
) -> JobStatus:
    """Expose job state (and the final ImportResult once done) for polling."""
    job = db.get(ImportJob, job_id)
    if not job:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Job not found")
    return serialize_job(job, fetch_progress(job_id))
