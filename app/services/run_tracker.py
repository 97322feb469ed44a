"""
app/services/run_tracker.py

Audit trail for ingestion invocations.

One IngestionRun row is written per completed run, after persistence. Runs
that fail on parsing or persistence leave no row; the failure is reported
to the caller instead.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Sequence

from app.domain.ingestion import DataType, IngestionRunStatus, RowValidationError
from db.models.ingestion_run import IngestionRun
from db.repositories.ingestion_run_repository import IngestionRunStore
from db.repositories.types import StoredFileMetadata

logger = logging.getLogger(__name__)

DEFAULT_STORED_ERROR_LIMIT = 100
DEFAULT_HISTORY_LIMIT = 50
MAX_HISTORY_LIMIT = 500


def run_status(error_count: int) -> str:
    if error_count == 0:
        return IngestionRunStatus.COMPLETED
    return IngestionRunStatus.COMPLETED_WITH_ERRORS


class IngestionRunTracker:
    """
    Sole writer of ingestion_runs rows.
    """

    def __init__(
        self,
        *,
        repository: IngestionRunStore,
        stored_error_limit: int = DEFAULT_STORED_ERROR_LIMIT,
    ) -> None:
        self._repository = repository
        self._stored_error_limit = max(1, stored_error_limit)

    def record_run(
        self,
        *,
        file_meta: StoredFileMetadata,
        data_type: DataType,
        source_system: str,
        source_label: str,
        valid_count: int,
        error_count: int,
        errors: Sequence[RowValidationError],
        processed_count: int | None = None,
        run_id: uuid.UUID | None = None,
    ) -> IngestionRun:
        status = run_status(error_count)
        run = IngestionRun(
            id=run_id or uuid.uuid4(),
            filename=file_meta.file_name,
            file_path=file_meta.storage_path,
            data_type=data_type.value,
            source=source_label,
            mapping_type=source_system,
            record_count=valid_count,
            processed_count=valid_count if processed_count is None else processed_count,
            error_count=error_count,
            status=status,
            metadata_json={
                "fileSize": file_meta.file_size_bytes,
                "mimeType": file_meta.mime_type,
                "errors": [error.to_dict() for error in errors[: self._stored_error_limit]],
            },
        )
        run = self._repository.add(run)
        logger.info(
            "Recorded ingestion run id=%s file=%r data_type=%s status=%s records=%d errors=%d",
            run.id,
            run.filename,
            run.data_type,
            run.status,
            run.record_count,
            run.error_count,
        )
        return run

    def get_run(self, run_id: uuid.UUID) -> IngestionRun | None:
        return self._repository.get(run_id)

    def list_runs(
        self,
        *,
        limit: int = DEFAULT_HISTORY_LIMIT,
        offset: int = 0,
        data_type: DataType | None = None,
        status: str | None = None,
    ) -> list[IngestionRun]:
        """
        Return runs newest first, optionally filtered by data type and status.
        """

        return self._repository.list_runs(
            limit=min(max(1, limit), MAX_HISTORY_LIMIT),
            offset=max(0, offset),
            data_type=data_type.value if data_type is not None else None,
            status=status,
        )
