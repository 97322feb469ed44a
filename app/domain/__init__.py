"""
app/domain package marker.
"""

from app.domain.ingestion import (
    CanonicalRecord,
    DataType,
    IngestionRequest,
    IngestionResult,
    IngestionRunStatus,
    PersistResult,
    RowValidationError,
    UploadedFile,
)

__all__ = [
    "CanonicalRecord",
    "DataType",
    "IngestionRequest",
    "IngestionResult",
    "IngestionRunStatus",
    "PersistResult",
    "RowValidationError",
    "UploadedFile",
]
