"""
app/repositories/snapshot_repository.py

Bulk insert-ignore-duplicate writes for snapshot tables.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Protocol

from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.orm import Session

from db.base import Base


class SnapshotStore(Protocol):
    """
    Destination store used by the batch persister.
    """

    def insert_ignoring_duplicates(
        self,
        model: type[Base],
        payloads: Sequence[dict[str, Any]],
    ) -> int:
        """Insert rows, skip those conflicting on the fingerprint, return rows written."""
        ...

    def commit(self) -> None:
        ...

    def rollback(self) -> None:
        ...


class SnapshotRepository:
    """
    PostgreSQL implementation of SnapshotStore.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def insert_ignoring_duplicates(
        self,
        model: type[Base],
        payloads: Sequence[dict[str, Any]],
    ) -> int:
        if not payloads:
            return 0

        deduped = self._deduplicate_payloads(payloads)
        stmt = (
            insert(model)
            .values(deduped)
            .on_conflict_do_nothing(index_elements=["record_fingerprint"])
            .returning(model.id)
        )
        return len(self._session.scalars(stmt).all())

    def commit(self) -> None:
        self._session.commit()

    def rollback(self) -> None:
        self._session.rollback()

    @staticmethod
    def _deduplicate_payloads(
        payloads: Sequence[dict[str, Any]],
    ) -> list[dict[str, Any]]:
        seen: set[str] = set()
        deduped: list[dict[str, Any]] = []
        for payload in payloads:
            fingerprint = payload["record_fingerprint"]
            if fingerprint in seen:
                continue
            seen.add(fingerprint)
            deduped.append(payload)
        return deduped
