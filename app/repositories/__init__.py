"""
app/repositories package marker.
"""

from app.repositories.scheduled_ingestion_repository import ScheduledIngestionRepository
from app.repositories.snapshot_repository import SnapshotRepository, SnapshotStore

__all__ = [
    "ScheduledIngestionRepository",
    "SnapshotRepository",
    "SnapshotStore",
]
