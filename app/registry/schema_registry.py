"""
app/registry/schema_registry.py

Canonical field sets and required fields per data type.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Mapping

from app.domain.ingestion import DataType
from app.errors import ConfigurationError

NUMERIC_FIELDS: tuple[str, ...] = (
    "quantityOnHand",
    "quantityAllocated",
    "quantityAvailable",
    "quantity",
    "countedQty",
    "systemQty",
    "adjustmentQty",
)


@dataclass(frozen=True)
class DataTypeSchema:
    """
    Canonical shape of one data type.
    """

    data_type: DataType
    canonical_fields: tuple[str, ...]
    required_fields: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        unknown = [name for name in self.required_fields if name not in self.canonical_fields]
        if unknown:
            raise ConfigurationError(
                f"Required fields {unknown} are not canonical fields of {self.data_type.value}."
            )


DEFAULT_SCHEMAS: tuple[DataTypeSchema, ...] = (
    DataTypeSchema(
        data_type=DataType.INVENTORY_SNAPSHOT,
        canonical_fields=(
            "sku",
            "locationCode",
            "quantityOnHand",
            "quantityAllocated",
            "quantityAvailable",
            "lotNumber",
            "expirationDate",
            "snapshotDate",
        ),
        required_fields=("sku", "locationCode", "quantityOnHand"),
    ),
    DataTypeSchema(
        data_type=DataType.TRANSACTION_HISTORY,
        canonical_fields=(
            "transactionId",
            "type",
            "sku",
            "fromLocation",
            "toLocation",
            "quantity",
            "userId",
            "transactionDate",
        ),
        required_fields=("type", "sku", "quantity", "transactionDate"),
    ),
    DataTypeSchema(
        data_type=DataType.ADJUSTMENT_LOG,
        canonical_fields=(
            "sku",
            "locationCode",
            "adjustmentQty",
            "reason",
            "reasonCode",
            "userId",
            "adjustmentDate",
        ),
        required_fields=("sku", "locationCode", "adjustmentQty", "reason"),
    ),
    DataTypeSchema(
        data_type=DataType.CYCLE_COUNT_RESULTS,
        canonical_fields=(
            "sku",
            "locationCode",
            "systemQty",
            "countedQty",
            "counterId",
            "userId",
            "countDate",
        ),
        required_fields=("sku", "locationCode", "countedQty", "systemQty"),
    ),
    DataTypeSchema(
        data_type=DataType.LOCATION_MASTER,
        canonical_fields=("locationCode", "zone", "aisle", "bay", "level", "locationType", "capacity"),
        required_fields=("locationCode", "zone"),
    ),
    DataTypeSchema(
        data_type=DataType.SKU_MASTER,
        canonical_fields=("sku", "description", "category", "unitOfMeasure", "weight"),
        required_fields=("sku", "description"),
    ),
    DataTypeSchema(
        data_type=DataType.ORDER_HISTORY,
        canonical_fields=("orderId", "sku", "quantity", "orderDate", "status", "customerId"),
    ),
    DataTypeSchema(
        data_type=DataType.LABOR_LOG,
        canonical_fields=("userId", "taskType", "startTime", "endTime", "unitsHandled"),
    ),
)


class SchemaRegistry:
    """
    Read-only lookup of data type schemas.
    """

    def __init__(
        self,
        schemas: Iterable[DataTypeSchema],
        *,
        numeric_fields: Iterable[str] = NUMERIC_FIELDS,
    ) -> None:
        self._schemas: dict[DataType, DataTypeSchema] = {
            schema.data_type: schema for schema in schemas
        }
        self._numeric_fields = tuple(numeric_fields)

    def get(self, data_type: DataType) -> DataTypeSchema:
        schema = self._schemas.get(data_type)
        if schema is None:
            raise ConfigurationError(f"No schema registered for dataType '{data_type.value}'.")
        return schema

    def required_fields(self, data_type: DataType) -> tuple[str, ...]:
        return self.get(data_type).required_fields

    def canonical_fields(self, data_type: DataType) -> tuple[str, ...]:
        return self.get(data_type).canonical_fields

    @property
    def numeric_fields(self) -> tuple[str, ...]:
        return self._numeric_fields

    def data_types(self) -> tuple[DataType, ...]:
        return tuple(self._schemas)

    def as_dict(self) -> dict[str, Mapping[str, Any]]:
        return {
            data_type.value: {
                "canonicalFields": list(schema.canonical_fields),
                "requiredFields": list(schema.required_fields),
            }
            for data_type, schema in self._schemas.items()
        }


def default_schema_registry() -> SchemaRegistry:
    return SchemaRegistry(DEFAULT_SCHEMAS)
