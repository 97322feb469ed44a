"""
In-memory stand-ins for the database-backed stores used by the pipeline.
"""

from __future__ import annotations

import hashlib
import uuid
from collections import defaultdict
from datetime import datetime, timedelta, timezone
from typing import Any, Sequence

from sqlalchemy.exc import SQLAlchemyError

from db.models.ingestion_run import IngestionRun
from db.models.scheduled_ingestion import ScheduledIngestion
from db.repositories.types import StoredFileMetadata


class FakeSession:
    """Placeholder passed where a SQLAlchemy session is expected."""

    def commit(self) -> None:
        pass

    def rollback(self) -> None:
        pass

    def close(self) -> None:
        pass


class FakeSnapshotStore:
    """
    Mimics insert-ignore-duplicate on record_fingerprint with a
    commit/rollback boundary.
    """

    def __init__(self, *, fail_on_call: int | None = None) -> None:
        self.committed: dict[type, dict[str, dict[str, Any]]] = defaultdict(dict)
        self.pending: dict[type, dict[str, dict[str, Any]]] = defaultdict(dict)
        self.insert_calls = 0
        self.commit_calls = 0
        self.rollback_calls = 0
        self._fail_on_call = fail_on_call

    def insert_ignoring_duplicates(self, model: type, payloads: Sequence[dict[str, Any]]) -> int:
        self.insert_calls += 1
        if self._fail_on_call is not None and self.insert_calls == self._fail_on_call:
            raise SQLAlchemyError("simulated write failure")

        inserted = 0
        for payload in payloads:
            fingerprint = payload["record_fingerprint"]
            if fingerprint in self.committed[model] or fingerprint in self.pending[model]:
                continue
            self.pending[model][fingerprint] = dict(payload)
            inserted += 1
        return inserted

    def commit(self) -> None:
        self.commit_calls += 1
        for model, rows in self.pending.items():
            self.committed[model].update(rows)
        self.pending.clear()

    def rollback(self) -> None:
        self.rollback_calls += 1
        self.pending.clear()

    def rows(self, model: type) -> list[dict[str, Any]]:
        return list(self.committed[model].values())


class FakeIngestionRunRepository:
    def __init__(self) -> None:
        self.runs: dict[uuid.UUID, IngestionRun] = {}
        self._clock = datetime(2026, 1, 1, tzinfo=timezone.utc)

    def add(self, run: IngestionRun) -> IngestionRun:
        if run.id is None:
            run.id = uuid.uuid4()
        if run.created_at is None:
            self._clock += timedelta(seconds=1)
            run.created_at = self._clock
        self.runs[run.id] = run
        return run

    def get(self, run_id: uuid.UUID) -> IngestionRun | None:
        return self.runs.get(run_id)

    def list_runs(
        self,
        *,
        limit: int,
        offset: int,
        data_type: str | None = None,
        status: str | None = None,
    ) -> list[IngestionRun]:
        runs = [
            run
            for run in self.runs.values()
            if (data_type is None or run.data_type == data_type)
            and (status is None or run.status == status)
        ]
        runs.sort(key=lambda run: run.created_at, reverse=True)
        return runs[offset : offset + limit]


class FakeScheduledIngestionRepository:
    def __init__(self) -> None:
        self.items: dict[uuid.UUID, ScheduledIngestion] = {}
        self.commit_calls = 0

    def add(self, scheduled: ScheduledIngestion) -> ScheduledIngestion:
        now = datetime.now(timezone.utc)
        scheduled.created_at = scheduled.created_at or now
        scheduled.updated_at = scheduled.updated_at or now
        self.items[scheduled.id] = scheduled
        return scheduled

    def get(self, scheduled_id: uuid.UUID) -> ScheduledIngestion | None:
        return self.items.get(scheduled_id)

    def list_all(self, *, active_only: bool = False) -> list[ScheduledIngestion]:
        return [item for item in self.items.values() if item.is_active or not active_only]

    def commit(self) -> None:
        self.commit_calls += 1

    def rollback(self) -> None:
        pass


class FakeFileStorage:
    def __init__(self) -> None:
        self.saved: list[StoredFileMetadata] = []

    def save(
        self,
        *,
        file_name: str,
        content: bytes,
        content_type: str | None = None,
        partition: str = "unsorted",
    ) -> StoredFileMetadata:
        metadata = StoredFileMetadata(
            file_name=file_name,
            storage_path=f"{partition}/2026/01/{len(self.saved)}_{file_name}",
            partition=partition,
            mime_type=content_type,
            file_size_bytes=len(content),
            checksum=hashlib.sha256(content).hexdigest(),
            stored_at=datetime(2026, 1, 1, tzinfo=timezone.utc),
        )
        self.saved.append(metadata)
        return metadata
