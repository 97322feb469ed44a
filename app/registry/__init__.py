"""
app/registry package marker.
"""

from app.registry.mapping_registry import (
    DEFAULT_COLUMN_MAPPINGS,
    ColumnMapping,
    MappingRegistry,
    default_mapping_registry,
    load_mapping_overrides,
)
from app.registry.schema_registry import (
    NUMERIC_FIELDS,
    DataTypeSchema,
    SchemaRegistry,
    default_schema_registry,
)

__all__ = [
    "DEFAULT_COLUMN_MAPPINGS",
    "NUMERIC_FIELDS",
    "ColumnMapping",
    "DataTypeSchema",
    "MappingRegistry",
    "SchemaRegistry",
    "default_mapping_registry",
    "default_schema_registry",
    "load_mapping_overrides",
]
