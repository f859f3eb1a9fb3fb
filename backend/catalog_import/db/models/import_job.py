"""Track background catalog import runs."""

import uuid

from sqlalchemy import Column, Integer, String, Text
from sqlalchemy.sql import func
from sqlalchemy.types import DateTime

from catalog_import.db.base import Base
from catalog_import.db.models.catalog import JSONType


class ImportJob(Base):
    __tablename__ = "import_jobs"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    status = Column(String(32), nullable=False, default="pending")
    total_groups = Column(Integer, default=0)
    processed_groups = Column(Integer, default=0)
    error_message = Column(Text)
    # Final ImportResult payload once the run finishes
    meta = Column(JSONType)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    started_at = Column(DateTime(timezone=True))
    finished_at = Column(DateTime(timezone=True))
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
