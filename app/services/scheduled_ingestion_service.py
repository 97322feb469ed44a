"""
app/services/scheduled_ingestion_service.py

Create and toggle recurring ingestion definitions.

Only the definition lives here; running it on schedule is the job of an
external scheduler, which reads active rows and interprets ``schedule``.
"""

from __future__ import annotations

import json
import logging
import uuid
from typing import Any, Protocol

from sqlalchemy.exc import SQLAlchemyError

from app.domain.ingestion import DataType, normalize_source_system
from app.errors import ConfigurationError, PersistenceError
from db.models.scheduled_ingestion import ScheduledIngestion

logger = logging.getLogger(__name__)


class ScheduledIngestionStore(Protocol):
    def add(self, scheduled: ScheduledIngestion) -> ScheduledIngestion:
        ...

    def get(self, scheduled_id: uuid.UUID) -> ScheduledIngestion | None:
        ...

    def list_all(self, *, active_only: bool = False) -> list[ScheduledIngestion]:
        ...

    def commit(self) -> None:
        ...

    def rollback(self) -> None:
        ...


class ScheduledIngestionService:
    def __init__(self, repository: ScheduledIngestionStore) -> None:
        self._repository = repository

    def create_schedule(
        self,
        *,
        name: str,
        source: str,
        connection_config: dict[str, Any] | None,
        schedule: str,
        data_type: DataType,
        mapping_type: str | None,
    ) -> ScheduledIngestion:
        if not name.strip():
            raise ConfigurationError("name is required.")
        if not schedule.strip():
            raise ConfigurationError("schedule is required.")

        scheduled = ScheduledIngestion(
            id=uuid.uuid4(),
            name=name.strip(),
            source=source.strip(),
            connection_config=json.dumps(connection_config or {}, sort_keys=True),
            schedule=schedule.strip(),
            data_type=data_type.value,
            mapping_type=normalize_source_system(mapping_type),
            is_active=True,
        )
        try:
            scheduled = self._repository.add(scheduled)
            self._repository.commit()
        except SQLAlchemyError as exc:
            self._repository.rollback()
            raise PersistenceError(f"Failed to create scheduled ingestion: {exc}") from exc

        logger.info(
            "Created scheduled ingestion id=%s name=%r data_type=%s schedule=%r",
            scheduled.id,
            scheduled.name,
            scheduled.data_type,
            scheduled.schedule,
        )
        return scheduled

    def list_schedules(self, *, active_only: bool = False) -> list[ScheduledIngestion]:
        return self._repository.list_all(active_only=active_only)

    def set_active(self, scheduled_id: uuid.UUID, *, is_active: bool) -> ScheduledIngestion | None:
        scheduled = self._repository.get(scheduled_id)
        if scheduled is None:
            return None
        scheduled.is_active = is_active
        try:
            self._repository.commit()
        except SQLAlchemyError as exc:
            self._repository.rollback()
            raise PersistenceError(f"Failed to update scheduled ingestion: {exc}") from exc
        logger.info("Scheduled ingestion id=%s is_active=%s", scheduled_id, is_active)
        return scheduled
