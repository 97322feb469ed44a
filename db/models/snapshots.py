"""
db/models/snapshots.py

Typed tables for the ingested data types that have a dedicated handler.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Float, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base, SnapshotRecordMixin


class InventorySnapshot(SnapshotRecordMixin, Base):
    __tablename__ = "inventory_snapshots"

    sku: Mapped[str] = mapped_column(String(120), nullable=False)
    location_code: Mapped[str] = mapped_column(String(120), nullable=False)
    quantity_on_hand: Mapped[float] = mapped_column(Float, nullable=False)
    quantity_allocated: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    quantity_available: Mapped[float] = mapped_column(Float, nullable=False)
    lot_number: Mapped[str | None] = mapped_column(String(120), nullable=True)
    expiration_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    snapshot_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        UniqueConstraint("record_fingerprint", name="uq_inventory_snapshots_fingerprint"),
        Index("ix_inventory_snapshots_sku_location", "sku", "location_code"),
        Index("ix_inventory_snapshots_snapshot_date", "snapshot_date"),
    )


class TransactionSnapshot(SnapshotRecordMixin, Base):
    __tablename__ = "transaction_snapshots"

    external_transaction_id: Mapped[str | None] = mapped_column(String(120), nullable=True)
    type: Mapped[str] = mapped_column(String(50), nullable=False)
    sku: Mapped[str] = mapped_column(String(120), nullable=False)
    from_location: Mapped[str | None] = mapped_column(String(120), nullable=True)
    to_location: Mapped[str | None] = mapped_column(String(120), nullable=True)
    quantity: Mapped[float] = mapped_column(Float, nullable=False)
    user_id: Mapped[str | None] = mapped_column(String(120), nullable=True)
    transaction_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        UniqueConstraint("record_fingerprint", name="uq_transaction_snapshots_fingerprint"),
        Index("ix_transaction_snapshots_sku", "sku"),
        Index("ix_transaction_snapshots_transaction_date", "transaction_date"),
    )


class AdjustmentSnapshot(SnapshotRecordMixin, Base):
    __tablename__ = "adjustment_snapshots"

    sku: Mapped[str] = mapped_column(String(120), nullable=False)
    location_code: Mapped[str] = mapped_column(String(120), nullable=False)
    adjustment_qty: Mapped[float] = mapped_column(Float, nullable=False)
    reason: Mapped[str] = mapped_column(String(255), nullable=False)
    reason_code: Mapped[str | None] = mapped_column(String(50), nullable=True)
    user_id: Mapped[str | None] = mapped_column(String(120), nullable=True)
    adjustment_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        UniqueConstraint("record_fingerprint", name="uq_adjustment_snapshots_fingerprint"),
        Index("ix_adjustment_snapshots_sku_location", "sku", "location_code"),
        Index("ix_adjustment_snapshots_adjustment_date", "adjustment_date"),
    )


class CycleCountSnapshot(SnapshotRecordMixin, Base):
    __tablename__ = "cycle_count_snapshots"

    sku: Mapped[str] = mapped_column(String(120), nullable=False)
    location_code: Mapped[str] = mapped_column(String(120), nullable=False)
    system_qty: Mapped[float] = mapped_column(Float, nullable=False)
    counted_qty: Mapped[float] = mapped_column(Float, nullable=False)
    variance: Mapped[float] = mapped_column(Float, nullable=False)
    variance_percent: Mapped[float] = mapped_column(Float, nullable=False)
    counter_id: Mapped[str | None] = mapped_column(String(120), nullable=True)
    count_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        UniqueConstraint("record_fingerprint", name="uq_cycle_count_snapshots_fingerprint"),
        Index("ix_cycle_count_snapshots_sku_location", "sku", "location_code"),
        Index("ix_cycle_count_snapshots_count_date", "count_date"),
    )
