"""
app/schemas/ingestion.py

Request and response schemas for ingestion endpoints.

Wire names are camelCase; Python attributes stay snake_case.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ValidationErrorResponse(CamelModel):
    """
    One rejected row.
    """

    row_index: int = Field(..., ge=1)
    message: str


class IngestionUploadResponse(CamelModel):
    """
    API response model for a completed upload.
    """

    success: bool = True
    ingestion_id: UUID
    records_processed: int = Field(..., ge=0)
    records_with_errors: int = Field(..., ge=0)
    errors: list[ValidationErrorResponse] = Field(default_factory=list)


class IngestionRunResponse(CamelModel):
    id: UUID
    filename: str
    file_path: str | None = None
    data_type: str
    source: str
    mapping_type: str
    record_count: int
    processed_count: int
    error_count: int
    status: str
    # ORM attribute is metadata_json; "metadata" is taken by the declarative base.
    metadata_json: dict[str, Any] | None = Field(
        default=None,
        validation_alias=AliasChoices("metadata_json", "metadata"),
        serialization_alias="metadata",
    )
    created_at: datetime | None = None


class MappingsResponse(CamelModel):
    data_types: dict[str, str]
    mappings: dict[str, dict[str, dict[str, str]]]
    schemas: dict[str, dict[str, list[str]]]


class ScheduledIngestionRequest(CamelModel):
    name: str = Field(..., min_length=1, max_length=120)
    source: str = Field(..., min_length=1, max_length=120)
    connection_config: dict[str, Any] = Field(default_factory=dict)
    schedule: str = Field(..., min_length=1, max_length=120)
    data_type: str = "inventory_snapshot"
    mapping_type: str = "generic"


class ScheduledIngestionResponse(CamelModel):
    id: UUID
    name: str
    source: str
    connection_config: str
    schedule: str
    data_type: str
    mapping_type: str
    is_active: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ScheduledIngestionCreatedResponse(CamelModel):
    success: bool = True
    job: ScheduledIngestionResponse


class ScheduledIngestionToggleRequest(CamelModel):
    is_active: bool
