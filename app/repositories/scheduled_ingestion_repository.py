"""
app/repositories/scheduled_ingestion_repository.py

Persistence helpers for recurring ingestion definitions.
"""

from __future__ import annotations

import uuid

from sqlalchemy import select
from sqlalchemy.orm import Session

from db.models.scheduled_ingestion import ScheduledIngestion


class ScheduledIngestionRepository:
    def __init__(self, session: Session) -> None:
        self._session = session

    def add(self, scheduled: ScheduledIngestion) -> ScheduledIngestion:
        self._session.add(scheduled)
        self._session.flush()
        self._session.refresh(scheduled)
        return scheduled

    def get(self, scheduled_id: uuid.UUID) -> ScheduledIngestion | None:
        return self._session.get(ScheduledIngestion, scheduled_id)

    def list_all(self, *, active_only: bool = False) -> list[ScheduledIngestion]:
        stmt = select(ScheduledIngestion)
        if active_only:
            stmt = stmt.where(ScheduledIngestion.is_active.is_(True))
        stmt = stmt.order_by(ScheduledIngestion.created_at.desc())
        return list(self._session.execute(stmt).scalars().all())

    def commit(self) -> None:
        self._session.commit()

    def rollback(self) -> None:
        self._session.rollback()
