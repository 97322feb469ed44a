"""
Repository layer exports.
"""

from db.repositories.errors import FileStorageError
from db.repositories.ingestion_run_repository import IngestionRunRepository, IngestionRunStore
from db.repositories.storage import FileStorageBackend, LocalFileStorage
from db.repositories.types import StoredFileMetadata

__all__ = [
    "FileStorageBackend",
    "FileStorageError",
    "IngestionRunRepository",
    "IngestionRunStore",
    "LocalFileStorage",
    "StoredFileMetadata",
]
