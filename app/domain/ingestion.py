"""
app/domain/ingestion.py

Domain types shared by the ingestion pipeline stages.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union

from app.errors import ConfigurationError

RawRecord = dict[str, str]
FieldValue = Union[str, float]

GENERIC_SOURCE = "generic"


class DataType(str, Enum):
    INVENTORY_SNAPSHOT = "inventory_snapshot"
    TRANSACTION_HISTORY = "transaction_history"
    ADJUSTMENT_LOG = "adjustment_log"
    CYCLE_COUNT_RESULTS = "cycle_count_results"
    LOCATION_MASTER = "location_master"
    SKU_MASTER = "sku_master"
    ORDER_HISTORY = "order_history"
    LABOR_LOG = "labor_log"

    @classmethod
    def parse(cls, value: str | DataType) -> DataType:
        """
        Resolve a wire value into a DataType or raise ConfigurationError.
        """

        if isinstance(value, cls):
            return value
        normalized = (value or "").strip().lower()
        try:
            return cls(normalized)
        except ValueError:
            allowed = ", ".join(member.value for member in cls)
            raise ConfigurationError(
                f"Unsupported dataType '{value}'. Allowed values: {allowed}."
            ) from None


class IngestionRunStatus:
    COMPLETED = "COMPLETED"
    COMPLETED_WITH_ERRORS = "COMPLETED_WITH_ERRORS"


def normalize_source_system(value: str | None) -> str:
    normalized = (value or "").strip().lower()
    return normalized or GENERIC_SOURCE


@dataclass
class CanonicalRecord:
    """
    One record in canonical shape.

    ``fields`` holds canonical field names; ``extra_fields`` keeps every
    other source column under its original name. ``defaulted_fields``
    names numeric fields whose source value was blank or unparseable and
    was replaced with ``0.0``; it is not part of the payload.
    """

    fields: dict[str, FieldValue] = field(default_factory=dict)
    extra_fields: dict[str, str] = field(default_factory=dict)
    defaulted_fields: set[str] = field(default_factory=set, compare=False)

    def is_supplied(self, name: str) -> bool:
        return name in self.fields and name not in self.defaulted_fields

    def get(self, name: str, default: Any = None) -> Any:
        return self.fields.get(name, default)

    def to_payload(self) -> dict[str, Any]:
        return {
            "fields": dict(self.fields),
            "extra_fields": dict(self.extra_fields),
        }


@dataclass(frozen=True)
class RowValidationError:
    """
    One rejected record. ``row_index`` is the 1-based position of the
    record in the source file.
    """

    row_index: int
    message: str

    def to_dict(self) -> dict[str, Any]:
        return {"rowIndex": self.row_index, "message": self.message}


@dataclass(frozen=True)
class UploadedFile:
    """
    Uploaded file contents plus the client-declared metadata.
    """

    file_name: str
    content: bytes
    content_type: str | None = None


@dataclass(frozen=True)
class IngestionRequest:
    data_type: DataType
    source_system: str = GENERIC_SOURCE
    source_label: str = "manual"


@dataclass(frozen=True)
class PersistResult:
    """
    Outcome of writing one run's valid records.
    """

    processed: int
    submitted: int
    batches_written: int = 0

    @property
    def duplicates_skipped(self) -> int:
        return max(0, self.submitted - self.processed)


@dataclass(frozen=True)
class IngestionResult:
    """
    End-of-run summary returned to the API layer.
    """

    ingestion_id: uuid.UUID
    records_processed: int
    records_with_errors: int
    errors: list[RowValidationError] = field(default_factory=list)
    status: str = IngestionRunStatus.COMPLETED
