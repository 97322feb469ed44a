"""
db/models/ingestion_run.py

Audit row written once per ingestion invocation.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any

from sqlalchemy import DateTime, Index, Integer, String, func
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base


class IngestionRun(Base):
    __tablename__ = "ingestion_runs"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    filename: Mapped[str] = mapped_column(String(255), nullable=False)
    file_path: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    data_type: Mapped[str] = mapped_column(String(50), nullable=False)
    source: Mapped[str] = mapped_column(
        String(120),
        nullable=False,
        comment="Free-text source label supplied by the uploader",
    )
    mapping_type: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        comment="Source system whose column mapping was applied",
    )
    record_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    processed_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    error_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    status: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        comment="COMPLETED, COMPLETED_WITH_ERRORS",
    )
    metadata_json: Mapped[dict[str, Any] | None] = mapped_column(
        "metadata",
        JSONB,
        nullable=True,
        comment="fileSize, mimeType, errors (first 100)",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    __table_args__ = (
        Index("ix_ingestion_runs_data_type", "data_type"),
        Index("ix_ingestion_runs_status", "status"),
        Index("ix_ingestion_runs_created_at", "created_at"),
        Index("ix_ingestion_runs_data_type_status", "data_type", "status"),
    )
