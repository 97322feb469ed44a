"""
app/services/ingestion_service.py

Service layer for file ingestion workflow orchestration.

One call runs the whole pipeline sequentially:

    upload checks -> file storage -> parse -> map -> validate
        -> batch persist -> audit row -> commit

ConfigurationError and ParseError abort before anything is written.
Row-level validation errors never abort; they are counted, logged, and
reported. PersistenceError aborts the rest of the run without undoing
batches that were already committed (unless atomic runs are enabled).
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable, Sequence
from functools import lru_cache

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.config import IngestionSettings, get_ingestion_settings
from app.domain.ingestion import (
    IngestionRequest,
    IngestionResult,
    PersistResult,
    RowValidationError,
    UploadedFile,
)
from app.errors import PersistenceError
from app.mappers.column_mapper import ColumnMapper
from app.parsers.file_parser import FileParser
from app.registry.mapping_registry import MappingRegistry, default_mapping_registry
from app.registry.schema_registry import SchemaRegistry, default_schema_registry
from app.repositories.snapshot_repository import SnapshotRepository, SnapshotStore
from app.services.batch_persister import BatchPersister
from app.services.run_tracker import IngestionRunTracker
from app.validators.record_validator import RecordValidator
from app.validators.upload_validator import validate_upload
from db.repositories.errors import FileStorageError
from db.repositories.ingestion_run_repository import IngestionRunRepository, IngestionRunStore
from db.repositories.storage import FileStorageBackend, LocalFileStorage
from db.repositories.types import StoredFileMetadata

logger = logging.getLogger(__name__)


class IngestionService:
    """
    Coordinates parsing, mapping, validation, persistence and auditing.
    """

    def __init__(
        self,
        *,
        settings: IngestionSettings,
        schema_registry: SchemaRegistry | None = None,
        mapping_registry: MappingRegistry | None = None,
        parser: FileParser | None = None,
        file_storage: FileStorageBackend | None = None,
        snapshot_store_factory: Callable[[Session], SnapshotStore] = SnapshotRepository,
        run_repository_factory: Callable[[Session], IngestionRunStore] = IngestionRunRepository,
    ) -> None:
        self._settings = settings
        self._schema_registry = schema_registry or default_schema_registry()
        self._mapping_registry = mapping_registry or default_mapping_registry(
            settings.mapping_overrides_path
        )
        self._parser = parser or FileParser()
        self._mapper = ColumnMapper(
            mapping_registry=self._mapping_registry,
            schema_registry=self._schema_registry,
        )
        self._validator = RecordValidator(
            schema_registry=self._schema_registry,
            strict_numeric=settings.strict_numeric,
        )
        self._file_storage = file_storage or LocalFileStorage(settings.upload_dir)
        self._snapshot_store_factory = snapshot_store_factory
        self._run_repository_factory = run_repository_factory

    @property
    def schema_registry(self) -> SchemaRegistry:
        return self._schema_registry

    @property
    def mapping_registry(self) -> MappingRegistry:
        return self._mapping_registry

    def ingest(
        self,
        *,
        db: Session,
        upload: UploadedFile | None,
        request: IngestionRequest,
    ) -> IngestionResult:
        """
        Run one ingestion and return its summary.

        Args:
            db:      Active SQLAlchemy session (caller owns lifecycle).
            upload:  Uploaded file, or None when the client sent no file.
            request: Target data type, source system and source label.
        """

        upload = validate_upload(upload, max_bytes=self._settings.max_upload_bytes)
        data_type = request.data_type
        self._schema_registry.get(data_type)

        stored_file = self._store_file(upload, partition=data_type.value)

        raw_records = self._parser.parse(
            upload.content,
            file_name=upload.file_name,
            content_type=upload.content_type,
        )
        canonical_records = self._mapper.map(raw_records, request.source_system, data_type)
        valid_records, errors = self._validator.validate(canonical_records, data_type)
        self._log_validation_errors(errors)
        logger.info(
            "Validated file=%r data_type=%s source_system=%s valid=%d rejected=%d",
            upload.file_name,
            data_type.value,
            request.source_system,
            len(valid_records),
            len(errors),
        )

        run_id = uuid.uuid4()
        store = self._snapshot_store_factory(db)
        persister = BatchPersister(
            store=store,
            batch_size=self._settings.batch_size,
            atomic=self._settings.atomic_runs,
        )
        persist_result = persister.persist(valid_records, data_type, run_id)

        tracker = IngestionRunTracker(
            repository=self._run_repository_factory(db),
            stored_error_limit=self._settings.stored_error_limit,
        )
        try:
            run = tracker.record_run(
                run_id=run_id,
                file_meta=stored_file,
                data_type=data_type,
                source_system=request.source_system,
                source_label=request.source_label,
                valid_count=len(valid_records),
                processed_count=persist_result.processed,
                error_count=len(errors),
                errors=errors,
            )
            store.commit()
        except SQLAlchemyError as exc:
            store.rollback()
            raise self._audit_failure(exc, persist_result) from exc

        return IngestionResult(
            ingestion_id=run.id,
            records_processed=persist_result.processed,
            records_with_errors=len(errors),
            errors=list(errors[: self._settings.response_error_limit]),
            status=run.status,
        )

    def _store_file(self, upload: UploadedFile, *, partition: str) -> StoredFileMetadata:
        try:
            return self._file_storage.save(
                file_name=upload.file_name,
                content=upload.content,
                content_type=upload.content_type,
                partition=partition,
            )
        except FileStorageError as exc:
            raise PersistenceError(f"Unable to store uploaded file: {exc}") from exc

    def _audit_failure(self, exc: SQLAlchemyError, persist_result: PersistResult) -> PersistenceError:
        atomic = self._settings.atomic_runs
        logger.error("Failed to record ingestion run: %s", exc)
        return PersistenceError(
            f"Failed to record ingestion run: {exc}",
            batches_committed=0 if atomic else persist_result.batches_written,
            records_committed=0 if atomic else persist_result.processed,
        )

    def _log_validation_errors(self, errors: Sequence[RowValidationError]) -> None:
        if not self._settings.log_validation_errors:
            return
        for error in errors[: self._settings.stored_error_limit]:
            logger.warning(
                "Ingestion validation error row=%s message=%s",
                error.row_index,
                error.message,
            )
        if len(errors) > self._settings.stored_error_limit:
            logger.warning(
                "%d further validation errors not logged",
                len(errors) - self._settings.stored_error_limit,
            )


@lru_cache(maxsize=1)
def get_ingestion_service() -> IngestionService:
    """
    Build and cache the ingestion service with env-driven settings.
    """

    return IngestionService(settings=get_ingestion_settings())
