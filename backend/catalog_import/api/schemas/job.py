"""Background import job status payloads."""

from datetime import datetime
from pydantic import BaseModel, Field


class JobStatus(BaseModel):
    id: str
    type: str = Field("catalog_import", description="Job kind")
    status: str = Field(..., description="pending|running|failed|completed")
    progress: float | None = Field(None, description="0-1 range for UI progress bars")
    message: str | None = None
    total_groups: int | None = None
    processed_groups: int | None = None
    error_message: str | None = None
    started_at: datetime | None = None
    finished_at: datetime | None = None
    meta: dict | None = None
