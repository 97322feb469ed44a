"""
app/api/dependencies.py

Shared FastAPI dependencies for ingestion endpoints.
"""

from __future__ import annotations

from fastapi import Depends, File, UploadFile
from sqlalchemy.orm import Session

from app.config import IngestionSettings, get_ingestion_settings
from app.domain.ingestion import UploadedFile
from app.errors import ConfigurationError
from app.repositories.scheduled_ingestion_repository import ScheduledIngestionRepository
from app.services.run_tracker import IngestionRunTracker
from app.services.scheduled_ingestion_service import ScheduledIngestionService
from db.repositories.ingestion_run_repository import IngestionRunRepository
from db.session import get_db


async def get_uploaded_file(
    file: UploadFile | None = File(default=None),
    settings: IngestionSettings = Depends(get_ingestion_settings),
) -> UploadedFile | None:
    """
    Read the multipart ``file`` part, if any, into memory.

    At most ``max_upload_bytes + 1`` bytes are read, so an oversize upload
    is rejected without buffering it. Type and emptiness checks happen in
    the ingestion service so that every rejection is reported the same way.
    """

    if file is None:
        return None
    limit = settings.max_upload_bytes
    try:
        content = await file.read(limit + 1)
    finally:
        await file.close()
    if len(content) > limit:
        raise ConfigurationError(f"Uploaded file exceeds the {limit} byte size limit.")
    return UploadedFile(
        file_name=(file.filename or "").strip(),
        content=content,
        content_type=file.content_type,
    )


def get_ingestion_run_tracker(db: Session = Depends(get_db)) -> IngestionRunTracker:
    return IngestionRunTracker(
        repository=IngestionRunRepository(db),
        stored_error_limit=get_ingestion_settings().stored_error_limit,
    )


def get_scheduled_ingestion_service(db: Session = Depends(get_db)) -> ScheduledIngestionService:
    return ScheduledIngestionService(ScheduledIngestionRepository(db))
