"""Endpoints for previewing and executing bulk catalog imports."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, File, HTTPException, Response, UploadFile, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from catalog_import.api.dependencies.db import get_catalog_store, get_session
from catalog_import.api.routers.job_helpers import serialize_job
from catalog_import.api.schemas.catalog_import import (
    ExecuteImportRequest,
    ImportResult,
    PreviewResult,
)
from catalog_import.api.schemas.job import JobStatus
from catalog_import.core.config import get_settings
from catalog_import.services.catalog_preview import preview_import
from catalog_import.services.catalog_store import SqlAlchemyCatalogStore
from catalog_import.services.catalog_template import generate_template
from catalog_import.services.import_executor import execute_import
from catalog_import.services.import_jobs import create_import_job
from catalog_import.services.progress_tracker import publish_progress
from catalog_import.workers.tasks.execute_import import execute_import_task

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get(
    "/template",
    summary="Download a catalog CSV template",
    response_class=Response,
)
async def download_template() -> Response:
    """Header row plus two example variant rows of one product."""
    return Response(
        content=generate_template(),
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="catalog-import-template.csv"'},
    )


@router.post(
    "/preview",
    summary="Validate a catalog CSV without writing anything",
    response_model=PreviewResult,
)
async def preview_catalog_import(
    file: UploadFile = File(...),
    store: SqlAlchemyCatalogStore = Depends(get_catalog_store),
) -> PreviewResult:
    """Parse, normalize, validate and group the upload for human review."""
    if not file.filename:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Filename is required",
        )
    if not file.filename.lower().endswith(".csv"):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Only CSV uploads are supported",
        )

    max_bytes = get_settings().max_upload_bytes
    data = await file.read(max_bytes + 1)
    if not data:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Uploaded file is empty",
        )
    if len(data) > max_bytes:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"File exceeds the {max_bytes} byte upload limit",
        )

    try:
        result = preview_import(data, store)
    except SQLAlchemyError as exc:
        logger.error(f"Database error during catalog preview: {exc}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to check the catalog against existing products",
        ) from exc
    except Exception as exc:
        logger.error(f"Unexpected error previewing {file.filename}: {exc}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred",
        ) from exc

    logger.info(
        f"Previewed {file.filename}: {result.total_products} products, "
        f"{len(result.blocking_errors)} blocking findings"
    )
    return result


@router.post(
    "/execute",
    summary="Import previewed product groups",
    response_model=ImportResult,
)
async def execute_catalog_import(
    payload: ExecuteImportRequest,
    store: SqlAlchemyCatalogStore = Depends(get_catalog_store),
) -> ImportResult:
    """Create or update every group without blocking findings.

    Per-product failures are reported in the result, never as an HTTP error.
    """
    try:
        return execute_import(payload.product_groups, store)
    except Exception as exc:
        logger.error(f"Unexpected error executing catalog import: {exc}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred",
        ) from exc


@router.post(
    "/jobs",
    summary="Import previewed product groups in the background",
    status_code=status.HTTP_202_ACCEPTED,
    response_model=JobStatus,
)
async def enqueue_catalog_import(
    payload: ExecuteImportRequest,
    db: Session = Depends(get_session),
) -> JobStatus:
    """Queue the import on a worker and return a job to poll."""
    try:
        job = create_import_job(db, total_groups=len(payload.product_groups))
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error(f"Database error creating import job: {exc}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create import job",
        ) from exc

    try:
        publish_progress(job.id, 0.0, "Queued", status="pending", meta={})
        execute_import_task.apply_async(
            args=(job.id, [group.model_dump(mode="json") for group in payload.product_groups]),
            queue="imports",
        )
    except Exception as exc:
        logger.error(f"Error enqueueing import job {job.id}: {exc}", exc_info=True)
        job.status = "failed"
        job.error_message = f"Failed to enqueue: {exc}"
        db.commit()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to start import process",
        ) from exc

    logger.info(f"Queued import job {job.id} for {len(payload.product_groups)} products")
    return serialize_job(job, progress_payload={"progress": 0.0, "status": "pending"})
