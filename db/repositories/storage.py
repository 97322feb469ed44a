"""
Local storage for uploaded ingestion files.

Each upload is kept under ``<root>/<partition>/<YYYY>/<MM>/<hex>_<name>``,
where the partition is the target data type. Files are written to a
temporary sibling first and moved into place, so a reader never sees a
partial upload.
"""

from __future__ import annotations

import hashlib
import os
import re
import tempfile
import uuid
from datetime import datetime, timezone
from mimetypes import guess_type
from pathlib import Path, PurePosixPath
from typing import Protocol

from db.repositories.errors import FileStorageError
from db.repositories.types import StoredFileMetadata

DEFAULT_PARTITION = "unsorted"

_UNSAFE_SEGMENT = re.compile(r"[^A-Za-z0-9._-]+")


class FileStorageBackend(Protocol):
    def save(
        self,
        *,
        file_name: str,
        content: bytes,
        content_type: str | None = None,
        partition: str = DEFAULT_PARTITION,
    ) -> StoredFileMetadata:
        ...


def _safe_file_name(file_name: str) -> str:
    name = PurePosixPath(file_name.replace("\\", "/")).name.strip()
    if not name or name in {".", ".."}:
        raise FileStorageError(f"Invalid file name {file_name!r}.")
    return name


def _safe_segment(value: str) -> str:
    segment = _UNSAFE_SEGMENT.sub("_", value.strip()).strip("._")
    return segment or DEFAULT_PARTITION


class LocalFileStorage:
    def __init__(self, root_dir: str | Path = "data/uploads/ingestion") -> None:
        self._root_dir = Path(root_dir)

    @property
    def root_dir(self) -> Path:
        return self._root_dir

    def resolve(self, storage_path: str) -> Path:
        """
        Absolute location of a stored file; rejects paths outside the root.
        """

        relative = PurePosixPath(storage_path)
        if relative.is_absolute() or ".." in relative.parts:
            raise FileStorageError("Storage path escapes the upload root.", path=storage_path)
        return self._root_dir.joinpath(*relative.parts)

    def save(
        self,
        *,
        file_name: str,
        content: bytes,
        content_type: str | None = None,
        partition: str = DEFAULT_PARTITION,
    ) -> StoredFileMetadata:
        name = _safe_file_name(file_name)
        bucket = _safe_segment(partition)
        stored_at = datetime.now(timezone.utc)
        relative = PurePosixPath(
            bucket,
            f"{stored_at:%Y}",
            f"{stored_at:%m}",
            f"{uuid.uuid4().hex}_{name}",
        )
        target = self.resolve(relative.as_posix())

        tmp_name: str | None = None
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                dir=target.parent,
                prefix=".upload-",
                delete=False,
            ) as handle:
                tmp_name = handle.name
                handle.write(content)
            os.replace(tmp_name, target)
            tmp_name = None
        except OSError as exc:
            raise FileStorageError("Failed to write uploaded file.", path=relative.as_posix()) from exc
        finally:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)

        return StoredFileMetadata(
            file_name=name,
            storage_path=relative.as_posix(),
            partition=bucket,
            mime_type=content_type or guess_type(name)[0],
            file_size_bytes=len(content),
            checksum=hashlib.sha256(content).hexdigest(),
            stored_at=stored_at,
        )
