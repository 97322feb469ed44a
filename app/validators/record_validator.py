"""
app/validators/record_validator.py

Required-field checks and numeric coercion for canonical records.
"""

from __future__ import annotations

import math
from typing import Any, Sequence

from app.domain.ingestion import CanonicalRecord, DataType, RowValidationError
from app.registry.schema_registry import SchemaRegistry


class RecordValidator:
    """
    Splits canonical records into valid records and row errors.

    A record missing any required field is rejected. Designated numeric
    fields on accepted records are coerced to float; blank and unparseable
    values become ``0.0`` and are listed in ``defaulted_fields``. With
    ``strict_numeric`` set, a non-blank value that does not parse rejects
    the record instead.
    """

    def __init__(
        self,
        *,
        schema_registry: SchemaRegistry,
        strict_numeric: bool = False,
    ) -> None:
        self._schema_registry = schema_registry
        self._strict_numeric = strict_numeric

    def validate(
        self,
        records: Sequence[CanonicalRecord],
        data_type: DataType,
    ) -> tuple[list[CanonicalRecord], list[RowValidationError]]:
        required = self._schema_registry.required_fields(data_type)
        numeric_fields = self._schema_registry.numeric_fields

        valid: list[CanonicalRecord] = []
        errors: list[RowValidationError] = []

        for position, record in enumerate(records):
            row_index = position + 1
            missing = [name for name in required if self._is_blank(record.fields.get(name))]
            if missing:
                errors.append(
                    RowValidationError(
                        row_index=row_index,
                        message=f"Missing required fields: {', '.join(missing)}",
                    )
                )
                continue

            invalid_numeric = self._coerce_numeric_fields(record, numeric_fields)
            if invalid_numeric and self._strict_numeric:
                errors.append(
                    RowValidationError(
                        row_index=row_index,
                        message=f"Invalid numeric value for fields: {', '.join(invalid_numeric)}",
                    )
                )
                continue

            valid.append(record)

        return valid, errors

    def _coerce_numeric_fields(
        self,
        record: CanonicalRecord,
        numeric_fields: Sequence[str],
    ) -> list[str]:
        invalid: list[str] = []
        for name in numeric_fields:
            if name not in record.fields:
                continue
            value = record.fields[name]
            parsed = parse_number(value)
            if parsed is None:
                # Blank cells are absent data; only non-blank garbage counts as invalid.
                if not self._is_blank(value):
                    invalid.append(name)
                record.defaulted_fields.add(name)
                parsed = 0.0
            record.fields[name] = parsed
        return invalid

    @staticmethod
    def _is_blank(value: Any) -> bool:
        if value is None:
            return True
        return str(value).strip() == ""


def parse_number(value: Any) -> float | None:
    """
    Parse a finite float, or return None.
    """

    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        raw = str(value).strip() if value is not None else ""
        if not raw:
            return None
        try:
            number = float(raw)
        except ValueError:
            return None
    return number if math.isfinite(number) else None
