"""
app/validators/upload_validator.py

Upload checks applied before any parsing starts.
"""

from __future__ import annotations

from pathlib import Path

from app.domain.ingestion import UploadedFile
from app.errors import ConfigurationError

ALLOWED_EXTENSIONS = {".csv", ".xlsx", ".xls", ".json"}


def validate_upload(upload: UploadedFile | None, *, max_bytes: int) -> UploadedFile:
    """
    Reject missing, empty, oversize or unsupported uploads.
    """

    if upload is None or not (upload.file_name or "").strip():
        raise ConfigurationError("No file uploaded")

    extension = Path(upload.file_name).suffix.lower()
    if extension not in ALLOWED_EXTENSIONS:
        raise ConfigurationError(
            f"File type {extension or '(none)'} not supported. "
            f"Use: {', '.join(sorted(ALLOWED_EXTENSIONS))}"
        )

    if not upload.content:
        raise ConfigurationError("Uploaded file content is empty.")

    if len(upload.content) > max_bytes:
        raise ConfigurationError(
            f"Uploaded file exceeds the {max_bytes} byte size limit."
        )

    return upload
