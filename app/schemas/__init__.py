"""
app/schemas package marker.
"""

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

__all__ = [
    "IngestionRunResponse",
    "IngestionUploadResponse",
    "MappingsResponse",
    "ScheduledIngestionCreatedResponse",
    "ScheduledIngestionRequest",
    "ScheduledIngestionResponse",
    "ScheduledIngestionToggleRequest",
    "ValidationErrorResponse",
]
