"""
Value types returned by the upload storage backend.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class StoredFileMetadata:
    """
    Where an upload was kept and what it contained.

    ``storage_path`` is relative to the backend root and always uses
    forward slashes; ``partition`` is its first segment.
    """

    file_name: str
    storage_path: str
    partition: str
    mime_type: str | None
    file_size_bytes: int
    checksum: str
    stored_at: datetime
