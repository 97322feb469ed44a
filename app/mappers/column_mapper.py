"""
app/mappers/column_mapper.py

Rewrites raw record keys into canonical field names.
"""

from __future__ import annotations

from typing import Sequence

from app.domain.ingestion import CanonicalRecord, DataType, RawRecord
from app.registry.mapping_registry import ColumnMapping, MappingRegistry
from app.registry.schema_registry import SchemaRegistry


class ColumnMapper:
    """
    Applies the registered column mapping for a source system.

    No source column is ever dropped. Mapped columns land in
    ``CanonicalRecord.fields`` under their target name. Unmapped columns
    whose name already is a canonical field of the data type land there
    too, unless the mapping set that field; all remaining columns are kept
    in ``extra_fields`` under their original name.
    """

    def __init__(
        self,
        *,
        mapping_registry: MappingRegistry,
        schema_registry: SchemaRegistry,
    ) -> None:
        self._mapping_registry = mapping_registry
        self._schema_registry = schema_registry

    def resolve(self, source_system: str | None, data_type: DataType) -> ColumnMapping:
        return self._mapping_registry.resolve(source_system, data_type)

    def map(
        self,
        raw_records: Sequence[RawRecord],
        source_system: str | None,
        data_type: DataType,
    ) -> list[CanonicalRecord]:
        mapping = self.resolve(source_system, data_type)
        canonical_fields = frozenset(self._schema_registry.canonical_fields(data_type))
        return [
            self.map_record(raw_record, mapping=mapping, canonical_fields=canonical_fields)
            for raw_record in raw_records
        ]

    @staticmethod
    def map_record(
        raw_record: RawRecord,
        *,
        mapping: ColumnMapping,
        canonical_fields: frozenset[str],
    ) -> CanonicalRecord:
        record = CanonicalRecord()

        for source_column, target_field in mapping.items():
            if source_column in raw_record:
                record.fields[target_field] = raw_record[source_column]

        for column, value in raw_record.items():
            if column in mapping:
                continue
            if column in canonical_fields and column not in record.fields:
                record.fields[column] = value
            else:
                record.extra_fields[column] = value

        return record
