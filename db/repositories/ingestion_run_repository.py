"""
Repository for ingestion run audit rows.
"""

from __future__ import annotations

import uuid
from typing import Protocol

from sqlalchemy import Select, select
from sqlalchemy.orm import Session

from db.models.ingestion_run import IngestionRun


class IngestionRunStore(Protocol):
    def add(self, run: IngestionRun) -> IngestionRun:
        ...

    def get(self, run_id: uuid.UUID) -> IngestionRun | None:
        ...

    def list_runs(
        self,
        *,
        limit: int,
        offset: int,
        data_type: str | None = None,
        status: str | None = None,
    ) -> list[IngestionRun]:
        ...


class IngestionRunRepository:
    def __init__(self, session: Session) -> None:
        self._session = session

    def add(self, run: IngestionRun) -> IngestionRun:
        self._session.add(run)
        self._session.flush()
        self._session.refresh(run)
        return run

    def get(self, run_id: uuid.UUID) -> IngestionRun | None:
        return self._session.get(IngestionRun, run_id)

    def list_runs(
        self,
        *,
        limit: int,
        offset: int,
        data_type: str | None = None,
        status: str | None = None,
    ) -> list[IngestionRun]:
        stmt: Select[tuple[IngestionRun]] = select(IngestionRun)

        if data_type:
            stmt = stmt.where(IngestionRun.data_type == data_type)
        if status:
            stmt = stmt.where(IngestionRun.status == status)

        stmt = (
            stmt.order_by(IngestionRun.created_at.desc(), IngestionRun.id.desc())
            .offset(max(0, offset))
            .limit(max(1, limit))
        )
        return list(self._session.scalars(stmt).all())
