"""
Model package exports.

Import all SQLAlchemy models here so metadata registration and Alembic
autogeneration work without extra imports.
"""

from db.models.ingestion_run import IngestionRun
from db.models.scheduled_ingestion import ScheduledIngestion
from db.models.snapshots import (
    AdjustmentSnapshot,
    CycleCountSnapshot,
    InventorySnapshot,
    TransactionSnapshot,
)

__all__ = [
    "AdjustmentSnapshot",
    "CycleCountSnapshot",
    "IngestionRun",
    "InventorySnapshot",
    "ScheduledIngestion",
    "TransactionSnapshot",
]
