"""
Errors raised by the upload storage backend.
"""

from __future__ import annotations


class FileStorageError(Exception):
    """
    Raised when an uploaded file cannot be written to storage.

    ``path`` is the storage-relative target, when one was already chosen.
    """

    def __init__(self, message: str, *, path: str | None = None) -> None:
        super().__init__(message if path is None else f"{message} ({path})")
        self.path = path
