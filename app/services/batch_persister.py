"""
app/services/batch_persister.py

Writes validated canonical records to their snapshot tables.

Handlers are registered per DataType. Types without a dedicated table are
accepted by the pass-through handler, which reports every record as
processed without writing anything.

Records are written in fixed-size batches with insert-ignore-duplicate
semantics on ``record_fingerprint``, so re-ingesting the same file adds no
rows. By default each batch is committed on its own: when a batch fails,
the batches before it stay committed. With ``atomic=True`` nothing is
committed here; the caller commits once the whole run has been written.
"""

from __future__ import annotations

import hashlib
import json
import logging
import uuid
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from sqlalchemy.exc import SQLAlchemyError

from app.domain.ingestion import CanonicalRecord, DataType, PersistResult
from app.errors import PersistenceError
from app.repositories.snapshot_repository import SnapshotStore
from app.validators.record_validator import parse_number
from db.base import Base
from db.models.snapshots import (
    AdjustmentSnapshot,
    CycleCountSnapshot,
    InventorySnapshot,
    TransactionSnapshot,
)

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 1000

TIMESTAMP_FORMATS: tuple[str, ...] = (
    "%Y-%m-%d",
    "%Y/%m/%d",
    "%m/%d/%Y",
    "%Y%m%d",
    "%Y-%m-%d %H:%M:%S",
    "%Y/%m/%d %H:%M:%S",
    "%m/%d/%Y %H:%M:%S",
)

RowBuilder = Callable[[CanonicalRecord, datetime], dict[str, Any]]


@dataclass(frozen=True)
class SnapshotHandler:
    """
    Target table and row builder for one data type.

    ``model`` is None for the pass-through handler.
    """

    model: type[Base] | None
    build_row: RowBuilder | None = None


PASS_THROUGH_HANDLER = SnapshotHandler(model=None)


# ---------------------------------------------------------------------------
# Value helpers
# ---------------------------------------------------------------------------


def parse_timestamp(value: Any) -> datetime | None:
    """
    Parse ISO-8601 or one of the common export date formats; None otherwise.
    """

    if value is None:
        return None
    raw = str(value).strip()
    if not raw:
        return None

    normalized = raw[:-1] + "+00:00" if raw.endswith("Z") else raw
    try:
        parsed = datetime.fromisoformat(normalized)
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed
    except ValueError:
        pass

    for fmt in TIMESTAMP_FORMATS:
        try:
            return datetime.strptime(raw, fmt).replace(tzinfo=timezone.utc)
        except ValueError:
            continue
    return None


def compute_variance(counted_qty: float, system_qty: float) -> tuple[float, float]:
    """
    Return (variance, variance percent); percent is 0 when system_qty is 0.
    """

    variance = counted_qty - system_qty
    if system_qty == 0:
        return variance, 0.0
    return variance, (variance / system_qty) * 100


def compute_fingerprint(data_type: DataType, record: CanonicalRecord) -> str:
    document = {"dataType": data_type.value, **record.to_payload()}
    encoded = json.dumps(document, sort_keys=True, default=str, separators=(",", ":"))
    return hashlib.sha256(encoded.encode("utf-8")).hexdigest()


def _number(record: CanonicalRecord, name: str) -> float:
    parsed = parse_number(record.fields.get(name))
    return parsed if parsed is not None else 0.0


def _text(record: CanonicalRecord, name: str) -> str | None:
    value = record.fields.get(name)
    if value is None:
        return None
    text = str(value).strip()
    return text or None


# ---------------------------------------------------------------------------
# Row builders
# ---------------------------------------------------------------------------


def build_inventory_row(record: CanonicalRecord, processed_at: datetime) -> dict[str, Any]:
    on_hand = _number(record, "quantityOnHand")
    allocated = _number(record, "quantityAllocated")
    if record.is_supplied("quantityAvailable"):
        available = _number(record, "quantityAvailable")
    else:
        available = on_hand - allocated

    return {
        "sku": _text(record, "sku"),
        "location_code": _text(record, "locationCode"),
        "quantity_on_hand": on_hand,
        "quantity_allocated": allocated,
        "quantity_available": available,
        "lot_number": _text(record, "lotNumber"),
        "expiration_date": parse_timestamp(record.fields.get("expirationDate")),
        "snapshot_date": parse_timestamp(record.fields.get("snapshotDate")) or processed_at,
    }


def build_transaction_row(record: CanonicalRecord, processed_at: datetime) -> dict[str, Any]:
    return {
        "external_transaction_id": _text(record, "transactionId"),
        "type": _text(record, "type"),
        "sku": _text(record, "sku"),
        "from_location": _text(record, "fromLocation"),
        "to_location": _text(record, "toLocation"),
        "quantity": _number(record, "quantity"),
        "user_id": _text(record, "userId"),
        "transaction_date": parse_timestamp(record.fields.get("transactionDate")) or processed_at,
    }


def build_adjustment_row(record: CanonicalRecord, processed_at: datetime) -> dict[str, Any]:
    return {
        "sku": _text(record, "sku"),
        "location_code": _text(record, "locationCode"),
        "adjustment_qty": _number(record, "adjustmentQty"),
        "reason": _text(record, "reason"),
        "reason_code": _text(record, "reasonCode"),
        "user_id": _text(record, "userId"),
        "adjustment_date": parse_timestamp(record.fields.get("adjustmentDate")) or processed_at,
    }


def build_cycle_count_row(record: CanonicalRecord, processed_at: datetime) -> dict[str, Any]:
    system_qty = _number(record, "systemQty")
    counted_qty = _number(record, "countedQty")
    variance, variance_percent = compute_variance(counted_qty, system_qty)
    return {
        "sku": _text(record, "sku"),
        "location_code": _text(record, "locationCode"),
        "system_qty": system_qty,
        "counted_qty": counted_qty,
        "variance": variance,
        "variance_percent": variance_percent,
        "counter_id": _text(record, "counterId") or _text(record, "userId"),
        "count_date": parse_timestamp(record.fields.get("countDate")) or processed_at,
    }


DEFAULT_HANDLERS: Mapping[DataType, SnapshotHandler] = {
    DataType.INVENTORY_SNAPSHOT: SnapshotHandler(InventorySnapshot, build_inventory_row),
    DataType.TRANSACTION_HISTORY: SnapshotHandler(TransactionSnapshot, build_transaction_row),
    DataType.ADJUSTMENT_LOG: SnapshotHandler(AdjustmentSnapshot, build_adjustment_row),
    DataType.CYCLE_COUNT_RESULTS: SnapshotHandler(CycleCountSnapshot, build_cycle_count_row),
}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ---------------------------------------------------------------------------
# Persister
# ---------------------------------------------------------------------------


class BatchPersister:
    """
    Chunked, duplicate-safe writer for one run's valid records.
    """

    def __init__(
        self,
        *,
        store: SnapshotStore,
        batch_size: int = DEFAULT_BATCH_SIZE,
        atomic: bool = False,
        handlers: Mapping[DataType, SnapshotHandler] | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._store = store
        self._batch_size = max(1, batch_size)
        self._atomic = atomic
        self._handlers = dict(DEFAULT_HANDLERS if handlers is None else handlers)
        self._clock = clock

    def handler_for(self, data_type: DataType) -> SnapshotHandler:
        return self._handlers.get(data_type, PASS_THROUGH_HANDLER)

    def persist(
        self,
        records: Sequence[CanonicalRecord],
        data_type: DataType,
        run_id: uuid.UUID,
    ) -> PersistResult:
        handler = self.handler_for(data_type)
        if handler.model is None or handler.build_row is None:
            logger.info(
                "No snapshot table for data_type=%s; %d records accepted without writing",
                data_type.value,
                len(records),
            )
            return PersistResult(processed=len(records), submitted=len(records))

        processed_at = self._clock()
        processed = 0
        batches_written = 0

        for start in range(0, len(records), self._batch_size):
            chunk = records[start : start + self._batch_size]
            payloads = [
                self._build_payload(handler.build_row, record, data_type, run_id, processed_at)
                for record in chunk
            ]
            try:
                inserted = self._store.insert_ignoring_duplicates(handler.model, payloads)
                if not self._atomic:
                    self._store.commit()
            except SQLAlchemyError as exc:
                self._store.rollback()
                batches_committed = 0 if self._atomic else batches_written
                records_committed = 0 if self._atomic else processed
                logger.error(
                    "Batch write failed data_type=%s run_id=%s batch=%d "
                    "batches_committed=%d records_committed=%d: %s",
                    data_type.value,
                    run_id,
                    batches_written + 1,
                    batches_committed,
                    records_committed,
                    exc,
                )
                raise PersistenceError(
                    f"Failed to persist {data_type.value} batch {batches_written + 1}: {exc}",
                    batches_committed=batches_committed,
                    records_committed=records_committed,
                ) from exc

            processed += inserted
            batches_written += 1
            logger.debug(
                "Wrote batch %d data_type=%s inserted=%d submitted=%d",
                batches_written,
                data_type.value,
                inserted,
                len(payloads),
            )

        result = PersistResult(
            processed=processed,
            submitted=len(records),
            batches_written=batches_written,
        )
        logger.info(
            "Persisted data_type=%s run_id=%s processed=%d duplicates_skipped=%d batches=%d",
            data_type.value,
            run_id,
            result.processed,
            result.duplicates_skipped,
            result.batches_written,
        )
        return result

    @staticmethod
    def _build_payload(
        build_row: RowBuilder,
        record: CanonicalRecord,
        data_type: DataType,
        run_id: uuid.UUID,
        processed_at: datetime,
    ) -> dict[str, Any]:
        payload = build_row(record, processed_at)
        payload["ingestion_id"] = run_id
        payload["record_fingerprint"] = compute_fingerprint(data_type, record)
        payload["raw_data"] = record.to_payload()
        return payload
