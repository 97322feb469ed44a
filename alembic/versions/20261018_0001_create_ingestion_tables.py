"""create ingestion_runs and scheduled_ingestions tables

Revision ID: 20261018_0001
Revises:
Create Date: 2026-10-18 09:00:00
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = "20261018_0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "ingestion_runs",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("filename", sa.String(length=255), nullable=False),
        sa.Column("file_path", sa.String(length=1024), nullable=True),
        sa.Column("data_type", sa.String(length=50), nullable=False),
        sa.Column("source", sa.String(length=120), nullable=False),
        sa.Column("mapping_type", sa.String(length=50), nullable=False),
        sa.Column("record_count", sa.Integer(), nullable=False),
        sa.Column("processed_count", sa.Integer(), nullable=False),
        sa.Column("error_count", sa.Integer(), nullable=False),
        sa.Column("status", sa.String(length=32), nullable=False),
        sa.Column("metadata", postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_ingestion_runs_created_at", "ingestion_runs", ["created_at"], unique=False)
    op.create_index("ix_ingestion_runs_data_type", "ingestion_runs", ["data_type"], unique=False)
    op.create_index("ix_ingestion_runs_status", "ingestion_runs", ["status"], unique=False)
    op.create_index(
        "ix_ingestion_runs_data_type_status",
        "ingestion_runs",
        ["data_type", "status"],
        unique=False,
    )

    op.create_table(
        "scheduled_ingestions",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("name", sa.String(length=120), nullable=False),
        sa.Column("source", sa.String(length=120), nullable=False),
        sa.Column("connection_config", sa.Text(), nullable=False),
        sa.Column("schedule", sa.String(length=120), nullable=False),
        sa.Column("data_type", sa.String(length=50), nullable=False),
        sa.Column("mapping_type", sa.String(length=50), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_scheduled_ingestions_is_active", "scheduled_ingestions", ["is_active"], unique=False)
    op.create_index("ix_scheduled_ingestions_data_type", "scheduled_ingestions", ["data_type"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_scheduled_ingestions_data_type", table_name="scheduled_ingestions")
    op.drop_index("ix_scheduled_ingestions_is_active", table_name="scheduled_ingestions")
    op.drop_table("scheduled_ingestions")

    op.drop_index("ix_ingestion_runs_data_type_status", table_name="ingestion_runs")
    op.drop_index("ix_ingestion_runs_status", table_name="ingestion_runs")
    op.drop_index("ix_ingestion_runs_data_type", table_name="ingestion_runs")
    op.drop_index("ix_ingestion_runs_created_at", table_name="ingestion_runs")
    op.drop_table("ingestion_runs")
