"""
app/services package marker.
"""

from app.services.batch_persister import BatchPersister
from app.services.ingestion_service import IngestionService, get_ingestion_service
from app.services.run_tracker import IngestionRunTracker
from app.services.scheduled_ingestion_service import ScheduledIngestionService

__all__ = [
    "BatchPersister",
    "IngestionRunTracker",
    "IngestionService",
    "ScheduledIngestionService",
    "get_ingestion_service",
]
