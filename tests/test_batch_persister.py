from __future__ import annotations

import uuid
from datetime import datetime, timezone

import pytest

from app.domain.ingestion import CanonicalRecord, DataType
from app.errors import PersistenceError
from app.services.batch_persister import (
    BatchPersister,
    build_cycle_count_row,
    build_inventory_row,
    compute_fingerprint,
    compute_variance,
    parse_timestamp,
)
from db.models.snapshots import CycleCountSnapshot, InventorySnapshot, TransactionSnapshot
from tests.fakes import FakeSnapshotStore

FIXED_NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


def _inventory_records(count: int) -> list[CanonicalRecord]:
    return [
        CanonicalRecord(
            fields={"sku": f"SKU-{index}", "locationCode": "L1", "quantityOnHand": float(index)}
        )
        for index in range(count)
    ]


def _persister(store: FakeSnapshotStore, **kwargs: object) -> BatchPersister:
    return BatchPersister(store=store, clock=lambda: FIXED_NOW, **kwargs)  # type: ignore[arg-type]


def test_writes_in_batches_of_configured_size() -> None:
    store = FakeSnapshotStore()

    result = _persister(store).persist(_inventory_records(2500), DataType.INVENTORY_SNAPSHOT, uuid.uuid4())

    assert result.processed == 2500
    assert result.batches_written == 3
    assert store.insert_calls == 3
    assert store.commit_calls == 3
    assert len(store.rows(InventorySnapshot)) == 2500


def test_reingesting_same_records_adds_nothing() -> None:
    store = FakeSnapshotStore()
    persister = _persister(store)
    records = _inventory_records(10)

    first = persister.persist(records, DataType.INVENTORY_SNAPSHOT, uuid.uuid4())
    second = persister.persist(records, DataType.INVENTORY_SNAPSHOT, uuid.uuid4())

    assert first.processed == 10
    assert second.processed == 0
    assert second.duplicates_skipped == 10
    assert len(store.rows(InventorySnapshot)) == 10


def test_rows_carry_run_id_and_raw_payload() -> None:
    store = FakeSnapshotStore()
    run_id = uuid.uuid4()
    record = CanonicalRecord(
        fields={"sku": "A1", "locationCode": "L1", "quantityOnHand": 5.0},
        extra_fields={"Warehouse": "DC-3"},
    )

    _persister(store).persist([record], DataType.INVENTORY_SNAPSHOT, run_id)

    [row] = store.rows(InventorySnapshot)
    assert row["ingestion_id"] == run_id
    assert row["raw_data"]["extra_fields"] == {"Warehouse": "DC-3"}
    assert row["record_fingerprint"] == compute_fingerprint(DataType.INVENTORY_SNAPSHOT, record)
    assert row["snapshot_date"] == FIXED_NOW


def test_quantity_available_is_derived_when_absent() -> None:
    derived = build_inventory_row(
        CanonicalRecord(fields={"sku": "A", "locationCode": "L", "quantityOnHand": 10.0, "quantityAllocated": 3.0}),
        FIXED_NOW,
    )
    supplied = build_inventory_row(
        CanonicalRecord(
            fields={
                "sku": "A",
                "locationCode": "L",
                "quantityOnHand": 10.0,
                "quantityAllocated": 3.0,
                "quantityAvailable": 4.0,
            }
        ),
        FIXED_NOW,
    )

    assert derived["quantity_available"] == 7.0
    assert supplied["quantity_available"] == 4.0


def test_defaulted_quantity_available_is_derived() -> None:
    record = CanonicalRecord(
        fields={
            "sku": "A",
            "locationCode": "L",
            "quantityOnHand": 48.0,
            "quantityAllocated": 8.0,
            "quantityAvailable": 0.0,
        },
        defaulted_fields={"quantityAvailable"},
    )

    row = build_inventory_row(record, FIXED_NOW)

    assert row["quantity_available"] == 40.0


@pytest.mark.parametrize(
    ("counted", "system", "expected"),
    [
        (90.0, 100.0, (-10.0, -10.0)),
        (5.0, 0.0, (5.0, 0.0)),
        (100.0, 100.0, (0.0, 0.0)),
    ],
)
def test_compute_variance(counted: float, system: float, expected: tuple[float, float]) -> None:
    assert compute_variance(counted, system) == pytest.approx(expected)


def test_cycle_count_row_includes_variance_and_count_date() -> None:
    row = build_cycle_count_row(
        CanonicalRecord(
            fields={
                "sku": "A1",
                "locationCode": "L1",
                "systemQty": 100.0,
                "countedQty": 90.0,
                "countDate": "2026-02-14",
            }
        ),
        FIXED_NOW,
    )

    assert row["variance"] == -10.0
    assert row["variance_percent"] == pytest.approx(-10.0)
    assert row["count_date"] == datetime(2026, 2, 14, tzinfo=timezone.utc)


def test_transaction_date_falls_back_to_processing_time() -> None:
    store = FakeSnapshotStore()
    record = CanonicalRecord(
        fields={"type": "PICK", "sku": "A1", "quantity": 2.0, "transactionDate": "not a date"}
    )

    _persister(store).persist([record], DataType.TRANSACTION_HISTORY, uuid.uuid4())

    [row] = store.rows(TransactionSnapshot)
    assert row["transaction_date"] == FIXED_NOW


def test_identical_transaction_rows_share_a_fingerprint() -> None:
    store = FakeSnapshotStore()

    def pick(user_id: str | None = None) -> CanonicalRecord:
        fields = {"type": "PICK", "sku": "A1", "quantity": 2.0}
        if user_id is not None:
            fields["userId"] = user_id
        return CanonicalRecord(fields=fields)

    result = _persister(store).persist(
        [pick(), pick(), pick("u7")],
        DataType.TRANSACTION_HISTORY,
        uuid.uuid4(),
    )

    assert result.processed == 2
    assert result.duplicates_skipped == 1
    assert len(store.rows(TransactionSnapshot)) == 2


def test_types_without_table_pass_through() -> None:
    store = FakeSnapshotStore()

    result = _persister(store).persist(
        [CanonicalRecord(fields={"locationCode": "L1", "zone": "A"})] * 3,
        DataType.LOCATION_MASTER,
        uuid.uuid4(),
    )

    assert result.processed == 3
    assert store.insert_calls == 0


def test_failure_mid_run_keeps_earlier_batches() -> None:
    store = FakeSnapshotStore(fail_on_call=2)

    with pytest.raises(PersistenceError) as excinfo:
        _persister(store, batch_size=1000).persist(
            _inventory_records(2500), DataType.INVENTORY_SNAPSHOT, uuid.uuid4()
        )

    assert excinfo.value.batches_committed == 1
    assert excinfo.value.records_committed == 1000
    assert len(store.rows(InventorySnapshot)) == 1000
    assert store.rollback_calls == 1


def test_atomic_mode_leaves_commit_to_caller() -> None:
    store = FakeSnapshotStore()

    result = _persister(store, batch_size=2, atomic=True).persist(
        _inventory_records(5), DataType.INVENTORY_SNAPSHOT, uuid.uuid4()
    )

    assert result.processed == 5
    assert store.commit_calls == 0
    assert store.rows(InventorySnapshot) == []


def test_atomic_failure_reports_nothing_committed() -> None:
    store = FakeSnapshotStore(fail_on_call=3)

    with pytest.raises(PersistenceError) as excinfo:
        _persister(store, batch_size=2, atomic=True).persist(
            _inventory_records(6), DataType.INVENTORY_SNAPSHOT, uuid.uuid4()
        )

    assert excinfo.value.batches_committed == 0
    assert excinfo.value.records_committed == 0
    assert store.rows(InventorySnapshot) == []


def test_empty_input_writes_nothing() -> None:
    store = FakeSnapshotStore()

    result = _persister(store).persist([], DataType.CYCLE_COUNT_RESULTS, uuid.uuid4())

    assert result.processed == 0
    assert result.batches_written == 0
    assert store.rows(CycleCountSnapshot) == []


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("2026-02-14", datetime(2026, 2, 14, tzinfo=timezone.utc)),
        ("2026-02-14T08:30:00Z", datetime(2026, 2, 14, 8, 30, tzinfo=timezone.utc)),
        ("02/14/2026", datetime(2026, 2, 14, tzinfo=timezone.utc)),
        ("20260214", datetime(2026, 2, 14, tzinfo=timezone.utc)),
        ("", None),
        ("yesterday", None),
    ],
)
def test_parse_timestamp(raw: str, expected: datetime | None) -> None:
    assert parse_timestamp(raw) == expected
