"""
app/errors.py

Exception taxonomy for the ingestion pipeline.

Row-level validation problems are not exceptions; they are collected as
``RowValidationError`` values (see ``app.domain.ingestion``) and reported
alongside a completed run.
"""

from __future__ import annotations


class IngestionError(Exception):
    """
    Base exception for fatal ingestion failures.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, object]:
        return {"message": self.message}


class ConfigurationError(IngestionError):
    """
    Raised before parsing when the request cannot be processed at all
    (unsupported file type, oversize upload, unknown data type).
    """


class ParseError(IngestionError):
    """
    Raised when an uploaded file cannot be decoded into records.
    """

    def __init__(self, message: str, *, line: int | None = None) -> None:
        if line is not None:
            message = f"{message} (line {line})"
        super().__init__(message)
        self.line = line

    def to_dict(self) -> dict[str, object]:
        return {"message": self.message, "line": self.line}


class PersistenceError(IngestionError):
    """
    Raised when a batch write fails.

    Batches committed before the failure are not rolled back; the counters
    tell the caller how much of the run reached the store.
    """

    def __init__(
        self,
        message: str,
        *,
        batches_committed: int = 0,
        records_committed: int = 0,
    ) -> None:
        super().__init__(message)
        self.batches_committed = batches_committed
        self.records_committed = records_committed

    def to_dict(self) -> dict[str, object]:
        return {
            "message": self.message,
            "batches_committed": self.batches_committed,
            "records_committed": self.records_committed,
        }
