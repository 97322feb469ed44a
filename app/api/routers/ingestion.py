"""
app/api/routers/ingestion.py

File ingestion HTTP endpoints.
"""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Form, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.api.dependencies import (
    get_ingestion_run_tracker,
    get_scheduled_ingestion_service,
    get_uploaded_file,
)
from app.domain.ingestion import DataType, IngestionRequest, UploadedFile, normalize_source_system
from app.schemas.ingestion import (
    IngestionRunResponse,
    IngestionUploadResponse,
    MappingsResponse,
    ScheduledIngestionCreatedResponse,
    ScheduledIngestionRequest,
    ScheduledIngestionResponse,
    ScheduledIngestionToggleRequest,
    ValidationErrorResponse,
)
from app.services.ingestion_service import IngestionService, get_ingestion_service
from app.services.run_tracker import IngestionRunTracker
from app.services.scheduled_ingestion_service import ScheduledIngestionService
from db.session import get_db

router = APIRouter(prefix="/api/ingestion", tags=["ingestion"])


@router.post("/upload", response_model=IngestionUploadResponse)
def upload_file(
    upload: UploadedFile | None = Depends(get_uploaded_file),
    data_type: str = Form(default=DataType.INVENTORY_SNAPSHOT.value, alias="dataType"),
    mapping_type: str = Form(default="generic", alias="mappingType"),
    source: str = Form(default="manual"),
    db: Session = Depends(get_db),
    ingestion_service: IngestionService = Depends(get_ingestion_service),
) -> IngestionUploadResponse:
    """
    Ingest one uploaded export into the snapshot tables.
    """

    request = IngestionRequest(
        data_type=DataType.parse(data_type),
        source_system=normalize_source_system(mapping_type),
        source_label=source.strip() or "manual",
    )
    result = ingestion_service.ingest(db=db, upload=upload, request=request)

    return IngestionUploadResponse(
        ingestion_id=result.ingestion_id,
        records_processed=result.records_processed,
        records_with_errors=result.records_with_errors,
        errors=[
            ValidationErrorResponse(row_index=error.row_index, message=error.message)
            for error in result.errors
        ],
    )


@router.get("/history", response_model=list[IngestionRunResponse])
def get_history(
    limit: int = Query(default=50, ge=1, le=500, description="Max runs returned"),
    offset: int = Query(default=0, ge=0),
    data_type: str | None = Query(default=None, alias="dataType"),
    status_filter: str | None = Query(default=None, alias="status"),
    tracker: IngestionRunTracker = Depends(get_ingestion_run_tracker),
) -> list[IngestionRunResponse]:
    runs = tracker.list_runs(
        limit=limit,
        offset=offset,
        data_type=DataType.parse(data_type) if data_type else None,
        status=status_filter.strip().upper() if status_filter else None,
    )
    return [IngestionRunResponse.model_validate(run) for run in runs]


@router.get("/mappings", response_model=MappingsResponse)
def get_mappings(
    ingestion_service: IngestionService = Depends(get_ingestion_service),
) -> MappingsResponse:
    return MappingsResponse(
        data_types={member.name: member.value for member in DataType},
        mappings=ingestion_service.mapping_registry.as_dict(),
        schemas=ingestion_service.schema_registry.as_dict(),
    )


@router.post("/schedule", response_model=ScheduledIngestionCreatedResponse)
def create_schedule(
    payload: ScheduledIngestionRequest,
    service: ScheduledIngestionService = Depends(get_scheduled_ingestion_service),
) -> ScheduledIngestionCreatedResponse:
    scheduled = service.create_schedule(
        name=payload.name,
        source=payload.source,
        connection_config=payload.connection_config,
        schedule=payload.schedule,
        data_type=DataType.parse(payload.data_type),
        mapping_type=payload.mapping_type,
    )
    return ScheduledIngestionCreatedResponse(job=ScheduledIngestionResponse.model_validate(scheduled))


@router.get("/schedule", response_model=list[ScheduledIngestionResponse])
def list_schedules(
    active_only: bool = Query(default=False, alias="activeOnly"),
    service: ScheduledIngestionService = Depends(get_scheduled_ingestion_service),
) -> list[ScheduledIngestionResponse]:
    return [
        ScheduledIngestionResponse.model_validate(item)
        for item in service.list_schedules(active_only=active_only)
    ]


@router.patch("/schedule/{schedule_id}", response_model=ScheduledIngestionResponse)
def toggle_schedule(
    schedule_id: UUID,
    payload: ScheduledIngestionToggleRequest,
    service: ScheduledIngestionService = Depends(get_scheduled_ingestion_service),
) -> ScheduledIngestionResponse:
    scheduled = service.set_active(schedule_id, is_active=payload.is_active)
    if scheduled is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Scheduled ingestion not found: {schedule_id}",
        )
    return ScheduledIngestionResponse.model_validate(scheduled)
