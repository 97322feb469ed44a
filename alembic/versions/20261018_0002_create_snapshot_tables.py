"""create inventory, transaction, adjustment and cycle count snapshot tables

Revision ID: 20261018_0002
Revises: 20261018_0001
Create Date: 2026-10-18 09:30:00
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = "20261018_0002"
down_revision = "20261018_0001"
branch_labels = None
depends_on = None


def _snapshot_columns() -> list[sa.Column]:
    return [
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("ingestion_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("record_fingerprint", sa.String(length=64), nullable=False),
        sa.Column("raw_data", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "inventory_snapshots",
        *_snapshot_columns(),
        sa.Column("sku", sa.String(length=120), nullable=False),
        sa.Column("location_code", sa.String(length=120), nullable=False),
        sa.Column("quantity_on_hand", sa.Float(), nullable=False),
        sa.Column("quantity_allocated", sa.Float(), nullable=False),
        sa.Column("quantity_available", sa.Float(), nullable=False),
        sa.Column("lot_number", sa.String(length=120), nullable=True),
        sa.Column("expiration_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("snapshot_date", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("record_fingerprint", name="uq_inventory_snapshots_fingerprint"),
    )
    op.create_index("ix_inventory_snapshots_ingestion_id", "inventory_snapshots", ["ingestion_id"], unique=False)
    op.create_index(
        "ix_inventory_snapshots_sku_location",
        "inventory_snapshots",
        ["sku", "location_code"],
        unique=False,
    )
    op.create_index("ix_inventory_snapshots_snapshot_date", "inventory_snapshots", ["snapshot_date"], unique=False)

    op.create_table(
        "transaction_snapshots",
        *_snapshot_columns(),
        sa.Column("external_transaction_id", sa.String(length=120), nullable=True),
        sa.Column("type", sa.String(length=50), nullable=False),
        sa.Column("sku", sa.String(length=120), nullable=False),
        sa.Column("from_location", sa.String(length=120), nullable=True),
        sa.Column("to_location", sa.String(length=120), nullable=True),
        sa.Column("quantity", sa.Float(), nullable=False),
        sa.Column("user_id", sa.String(length=120), nullable=True),
        sa.Column("transaction_date", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("record_fingerprint", name="uq_transaction_snapshots_fingerprint"),
    )
    op.create_index("ix_transaction_snapshots_ingestion_id", "transaction_snapshots", ["ingestion_id"], unique=False)
    op.create_index("ix_transaction_snapshots_sku", "transaction_snapshots", ["sku"], unique=False)
    op.create_index(
        "ix_transaction_snapshots_transaction_date",
        "transaction_snapshots",
        ["transaction_date"],
        unique=False,
    )

    op.create_table(
        "adjustment_snapshots",
        *_snapshot_columns(),
        sa.Column("sku", sa.String(length=120), nullable=False),
        sa.Column("location_code", sa.String(length=120), nullable=False),
        sa.Column("adjustment_qty", sa.Float(), nullable=False),
        sa.Column("reason", sa.String(length=255), nullable=False),
        sa.Column("reason_code", sa.String(length=50), nullable=True),
        sa.Column("user_id", sa.String(length=120), nullable=True),
        sa.Column("adjustment_date", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("record_fingerprint", name="uq_adjustment_snapshots_fingerprint"),
    )
    op.create_index("ix_adjustment_snapshots_ingestion_id", "adjustment_snapshots", ["ingestion_id"], unique=False)
    op.create_index(
        "ix_adjustment_snapshots_sku_location",
        "adjustment_snapshots",
        ["sku", "location_code"],
        unique=False,
    )
    op.create_index(
        "ix_adjustment_snapshots_adjustment_date",
        "adjustment_snapshots",
        ["adjustment_date"],
        unique=False,
    )

    op.create_table(
        "cycle_count_snapshots",
        *_snapshot_columns(),
        sa.Column("sku", sa.String(length=120), nullable=False),
        sa.Column("location_code", sa.String(length=120), nullable=False),
        sa.Column("system_qty", sa.Float(), nullable=False),
        sa.Column("counted_qty", sa.Float(), nullable=False),
        sa.Column("variance", sa.Float(), nullable=False),
        sa.Column("variance_percent", sa.Float(), nullable=False),
        sa.Column("counter_id", sa.String(length=120), nullable=True),
        sa.Column("count_date", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("record_fingerprint", name="uq_cycle_count_snapshots_fingerprint"),
    )
    op.create_index("ix_cycle_count_snapshots_ingestion_id", "cycle_count_snapshots", ["ingestion_id"], unique=False)
    op.create_index(
        "ix_cycle_count_snapshots_sku_location",
        "cycle_count_snapshots",
        ["sku", "location_code"],
        unique=False,
    )
    op.create_index("ix_cycle_count_snapshots_count_date", "cycle_count_snapshots", ["count_date"], unique=False)


def downgrade() -> None:
    for table in (
        "cycle_count_snapshots",
        "adjustment_snapshots",
        "transaction_snapshots",
        "inventory_snapshots",
    ):
        op.drop_table(table)
