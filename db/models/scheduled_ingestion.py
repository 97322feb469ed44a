"""
db/models/scheduled_ingestion.py

Recurring pull definitions. Execution belongs to an external scheduler.
"""

from __future__ import annotations

import uuid

from sqlalchemy import Boolean, Index, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base, TimestampMixin


class ScheduledIngestion(Base, TimestampMixin):
    __tablename__ = "scheduled_ingestions"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    source: Mapped[str] = mapped_column(String(120), nullable=False)
    connection_config: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="JSON-serialized connection settings, opaque to ingestion",
    )
    schedule: Mapped[str] = mapped_column(
        String(120),
        nullable=False,
        comment="Cron-like expression interpreted by the scheduler",
    )
    data_type: Mapped[str] = mapped_column(String(50), nullable=False)
    mapping_type: Mapped[str] = mapped_column(String(50), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    __table_args__ = (
        Index("ix_scheduled_ingestions_is_active", "is_active"),
        Index("ix_scheduled_ingestions_data_type", "data_type"),
    )
