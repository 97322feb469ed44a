"""
app/registry/mapping_registry.py

Per-(source system, data type) column rename tables.

Lookups are exact and case-sensitive on the source column name. A source
system without a table for the requested data type falls back to the
``generic`` table; with no generic table either, the mapping is empty and
every column passes through under its original name.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

from app.domain.ingestion import GENERIC_SOURCE, DataType, normalize_source_system
from app.errors import ConfigurationError

logger = logging.getLogger(__name__)

ColumnMapping = Mapping[str, str]
MappingTable = Mapping[str, Mapping[DataType, ColumnMapping]]

_EMPTY_MAPPING: ColumnMapping = MappingProxyType({})

DEFAULT_COLUMN_MAPPINGS: dict[str, dict[DataType, dict[str, str]]] = {
    "manhattan": {
        DataType.INVENTORY_SNAPSHOT: {
            "SKU": "sku",
            "Location ID": "locationCode",
            "On Hand Qty": "quantityOnHand",
            "Allocated Qty": "quantityAllocated",
            "Available Qty": "quantityAvailable",
            "Lot Number": "lotNumber",
            "Expiration Date": "expirationDate",
        },
        DataType.TRANSACTION_HISTORY: {
            "Transaction ID": "transactionId",
            "Transaction Type": "type",
            "SKU": "sku",
            "From Location": "fromLocation",
            "To Location": "toLocation",
            "Quantity": "quantity",
            "User ID": "userId",
            "Transaction Date": "transactionDate",
        },
    },
    "sap": {
        DataType.INVENTORY_SNAPSHOT: {
            "MATNR": "sku",
            "LGPLA": "locationCode",
            "VERME": "quantityOnHand",
            "EINME": "quantityAllocated",
            "CHARG": "lotNumber",
            "VFDAT": "expirationDate",
        },
    },
    GENERIC_SOURCE: {
        DataType.INVENTORY_SNAPSHOT: {
            "sku": "sku",
            "location": "locationCode",
            "quantity": "quantityOnHand",
            "allocated": "quantityAllocated",
            "available": "quantityAvailable",
            "lot": "lotNumber",
        },
        DataType.TRANSACTION_HISTORY: {
            "transaction_id": "transactionId",
            "transaction_type": "type",
            "sku": "sku",
            "from_location": "fromLocation",
            "to_location": "toLocation",
            "quantity": "quantity",
            "user_id": "userId",
            "transaction_date": "transactionDate",
        },
        DataType.ADJUSTMENT_LOG: {
            "sku": "sku",
            "location": "locationCode",
            "adjustment_qty": "adjustmentQty",
            "reason": "reason",
            "reason_code": "reasonCode",
            "user_id": "userId",
            "adjustment_date": "adjustmentDate",
        },
        DataType.CYCLE_COUNT_RESULTS: {
            "sku": "sku",
            "location": "locationCode",
            "system_qty": "systemQty",
            "counted_qty": "countedQty",
            "counter_id": "counterId",
            "user_id": "userId",
            "count_date": "countDate",
        },
    },
}


class MappingRegistry:
    """
    Immutable registry of column mappings.
    """

    def __init__(self, table: MappingTable) -> None:
        frozen: dict[str, dict[DataType, ColumnMapping]] = {}
        for source, by_type in table.items():
            source_key = normalize_source_system(source)
            frozen[source_key] = {
                DataType.parse(data_type): MappingProxyType(dict(mapping))
                for data_type, mapping in by_type.items()
            }
        self._table = frozen

    def resolve(self, source_system: str | None, data_type: DataType) -> ColumnMapping:
        """
        Return the mapping for the pair, falling back to generic, then empty.
        """

        source_key = normalize_source_system(source_system)
        mapping = self._table.get(source_key, {}).get(data_type)
        if mapping is not None:
            return mapping

        if source_key != GENERIC_SOURCE:
            logger.debug(
                "No %s mapping for source=%r; falling back to %r",
                data_type.value,
                source_key,
                GENERIC_SOURCE,
            )
        return self._table.get(GENERIC_SOURCE, {}).get(data_type, _EMPTY_MAPPING)

    def sources(self) -> tuple[str, ...]:
        return tuple(self._table)

    def with_overrides(self, overrides: MappingTable) -> MappingRegistry:
        """
        Return a new registry where each overridden pair replaces the default.
        """

        merged: dict[str, dict[DataType, ColumnMapping]] = {
            source: dict(by_type) for source, by_type in self._table.items()
        }
        for source, by_type in overrides.items():
            target = merged.setdefault(normalize_source_system(source), {})
            for data_type, mapping in by_type.items():
                target[DataType.parse(data_type)] = mapping
        return MappingRegistry(merged)

    def as_dict(self) -> dict[str, dict[str, dict[str, str]]]:
        return {
            source: {data_type.value: dict(mapping) for data_type, mapping in by_type.items()}
            for source, by_type in self._table.items()
        }


def load_mapping_overrides(path: str | Path) -> dict[str, dict[str, dict[str, str]]]:
    """
    Read a ``{source: {dataType: {column: field}}}`` JSON document.
    """

    try:
        document: Any = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigurationError(f"Cannot load mapping overrides from {path}: {exc}") from exc

    if not isinstance(document, dict):
        raise ConfigurationError("Mapping overrides must be a JSON object keyed by source system.")

    overrides: dict[str, dict[str, dict[str, str]]] = {}
    for source, by_type in document.items():
        if not isinstance(by_type, dict):
            raise ConfigurationError(f"Mapping overrides for '{source}' must be an object.")
        overrides[source] = {}
        for data_type, mapping in by_type.items():
            if not isinstance(mapping, dict) or not all(
                isinstance(key, str) and isinstance(value, str) for key, value in mapping.items()
            ):
                raise ConfigurationError(
                    f"Mapping '{source}.{data_type}' must map column names to field names."
                )
            overrides[source][data_type] = dict(mapping)
    return overrides


def default_mapping_registry(overrides_path: str | Path | None = None) -> MappingRegistry:
    registry = MappingRegistry(DEFAULT_COLUMN_MAPPINGS)
    if overrides_path:
        registry = registry.with_overrides(load_mapping_overrides(overrides_path))
        logger.info("Loaded column mapping overrides from %s", overrides_path)
    return registry
